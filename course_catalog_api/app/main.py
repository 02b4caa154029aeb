"""
Main entrypoint for the Course Catalog.

``create_catalog`` performs the one-time setup (logging, database
migrations) and wires the services around a single ``Database``
gateway.  The gateway is passed to every service explicitly; nothing
is kept in module-level state apart from the default ``settings``::

    catalog = create_catalog("/var/lib/catalog/catalog.db")
    courses = await catalog.courses.get_courses_by_semester("20153")
"""

from dataclasses import dataclass
from typing import Optional

from .core.config import Settings, settings as default_settings
from .core.db import Database, init_db
from .core.logging_config import setup_logging
from .services.course_service import CourseService
from .services.enrollment_service import EnrollmentService
from .services.query_service import QueryService


@dataclass
class CourseCatalog:
    """The services of one catalog, sharing one database gateway."""

    database: Database
    queries: QueryService
    courses: CourseService
    enrollments: EnrollmentService


def create_catalog(database_url: Optional[str] = None, settings: Optional[Settings] = None) -> CourseCatalog:
    """Create a fully configured catalog.

    Parameters
    ----------
    database_url : Optional[str]
        Path of the SQLite database.  Defaults to ``settings.database_url``.
    settings : Optional[Settings]
        Settings to use instead of the ones read from the environment.
    """
    settings = settings or default_settings
    setup_logging(settings)

    database = Database(database_url or settings.database_url, timeout=settings.db_timeout)
    init_db(database)

    queries = QueryService(database, default_semester=settings.default_semester)
    return CourseCatalog(
        database=database,
        queries=queries,
        courses=CourseService(database, queries),
        enrollments=EnrollmentService(database, queries),
    )
