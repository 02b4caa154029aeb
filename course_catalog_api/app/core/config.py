"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields, so the
catalog can be used in tests without any environment set up.  Override
them via environment variables in a real deployment.
"""

import os
from dataclasses import dataclass


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")

    # Path to the SQLite database.  Relative paths are resolved against
    # the project root by the ``db`` module.
    database_url: str = os.getenv("DATABASE_URL", "course_catalog.db")

    # Seconds a connection waits for the write lock before the store is
    # reported as unavailable.
    db_timeout: float = float(os.getenv("DB_TIMEOUT", "5.0"))

    # Semester code used when a semester filter is empty or blank.
    default_semester: str = os.getenv("DEFAULT_SEMESTER", "20153")


# Instantiate settings once so other modules can import it.  Environment
# variables must be set before this module is imported.
settings = Settings()
