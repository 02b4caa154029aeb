"""Pytest configuration and fixtures.

Every test gets its own SQLite file in ``tmp_path`` with all migrations
applied.  Course templates and students are reference data that the
catalog never creates, so the fixtures insert them with plain SQL.
"""

import sqlite3
import pytest

from course_catalog_api.app.core.config import Settings
from course_catalog_api.app.main import create_catalog


TEMPLATES = [
    (1, "CS101", "Intro", "Introduction to programming"),
    (2, "T-514-VEFT", "Web services", "Building web services"),
]

STUDENTS = [
    (1, "1111111111", "Ann"),
    (2, "2222222222", "Bob"),
    (3, "3333333333", "Cara"),
]


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "catalog.db"


@pytest.fixture
def test_settings():
    return Settings(log_level="WARNING", log_file="", default_semester="20153", db_timeout=5.0)


@pytest.fixture
def catalog(db_path, test_settings):
    """A migrated, empty catalog with templates and students seeded."""
    catalog = create_catalog(str(db_path), settings=test_settings)
    conn = sqlite3.connect(db_path)
    try:
        conn.executemany(
            "INSERT INTO course_templates (id, template_id, name, description) VALUES (?, ?, ?, ?)",
            TEMPLATES,
        )
        conn.executemany("INSERT INTO students (id, ssn, name) VALUES (?, ?, ?)", STUDENTS)
        conn.commit()
    finally:
        conn.close()
    return catalog


@pytest.fixture
def raw_db(db_path):
    """Plain connection for inspecting or corrupting the store behind the services."""
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    yield conn
    conn.close()


@pytest.fixture
def snapshot(raw_db):
    """Return a function dumping the mutable tables for before/after comparisons."""

    def take():
        return {
            table: [tuple(row) for row in raw_db.execute(f"SELECT * FROM {table} ORDER BY id")]
            for table in ("courses", "student_enrollments")
        }

    return take
