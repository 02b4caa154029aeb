"""
Application package initializer.

The catalog is organised into logical pieces: ``core`` holds the
configuration, logging, error kinds and the database gateway,
``schemas`` the pydantic result and input shapes, and ``services`` the
business rules for courses, enrollments and read-only queries.
"""

from .main import CourseCatalog, create_catalog  # noqa: F401
