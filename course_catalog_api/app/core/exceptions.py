"""
Error kinds raised by the catalog services and the database gateway.

Not-found errors also derive from ``ValueError`` so that callers which
map ``ValueError`` to a 404 response keep working unchanged.
"""


class CatalogError(Exception):
    """Base class for all catalog errors."""


class NotFoundError(CatalogError, ValueError):
    """A referenced record does not exist."""

    entity = "Record"

    def __init__(self, key) -> None:
        self.key = key
        super().__init__(f"{self.entity} {key} not found")

    def __reduce__(self):
        return (type(self), (self.key,))


class CourseNotFoundError(NotFoundError):
    entity = "Course"


class TemplateNotFoundError(NotFoundError):
    entity = "Course template"


class StudentNotFoundError(NotFoundError):
    entity = "Student"


class StoreUnavailableError(CatalogError):
    """The database could not be reached or refused the operation."""


class InvariantViolationError(CatalogError):
    """Stored data contradicts an invariant (e.g. duplicate course id)."""
