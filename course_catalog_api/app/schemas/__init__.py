"""
Pydantic schema definitions for service input and results.

Schemas are separated from the database layout to decouple the
projections returned to callers from persistence.
"""
