"""
Top-level package for the Course Catalog API.

All functionality lives in submodules under ``app``.
"""

__all__ = []
