"""
SQLite database gateway and simple migration system.

``Database`` is the single entry point the services use to reach the
store.  Each call to ``Database.transaction`` opens a fresh connection,
starts a transaction and yields a cursor; the transaction is committed
when the block exits normally and rolled back otherwise.  Write units
of work start with ``BEGIN IMMEDIATE`` so that read-modify-write
sequences (such as allocating the next course id) hold SQLite's write
lock from the first read until the commit.

SQLite failures are translated into the catalog's error kinds:
``IntegrityError`` becomes ``InvariantViolationError`` and any other
database error becomes ``StoreUnavailableError``.

The migration mechanism stores applied migration versions in the
``migrations`` table and executes new migrations in order.
"""

import logging
import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from .config import settings
from .exceptions import InvariantViolationError, StoreUnavailableError


logger = logging.getLogger(__name__)


MIGRATIONS: list[tuple[int, str]] = [
    # Migration 1: Initial schema
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS course_templates (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            template_id TEXT NOT NULL UNIQUE,
            name TEXT NOT NULL,
            description TEXT
        );

        -- Course ids are allocated by the application (MAX(id) + 1), so
        -- there is deliberately no AUTOINCREMENT here.
        CREATE TABLE IF NOT EXISTS courses (
            id INTEGER PRIMARY KEY,
            template_id INTEGER NOT NULL,
            semester TEXT NOT NULL,
            start_date DATE,
            end_date DATE,
            FOREIGN KEY(template_id) REFERENCES course_templates(id)
        );

        CREATE TABLE IF NOT EXISTS students (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            ssn TEXT NOT NULL UNIQUE,
            name TEXT NOT NULL
        );

        CREATE TABLE IF NOT EXISTS student_enrollments (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            student_id INTEGER NOT NULL,
            course_id INTEGER NOT NULL,
            FOREIGN KEY(student_id) REFERENCES students(id),
            FOREIGN KEY(course_id) REFERENCES courses(id)
        );
        """,
    ),
    # Migration 2: lookup indices for semester filters and enrollment counts
    (
        2,
        """
        CREATE INDEX IF NOT EXISTS idx_courses_semester ON courses(semester);
        CREATE INDEX IF NOT EXISTS idx_student_enrollments_course_id ON student_enrollments(course_id);
        """,
    ),
]


def get_database_path(db_url: Optional[str] = None) -> str:
    """Compute the path to the SQLite database file.

    If ``db_url`` (or ``settings.database_url``) is an absolute path,
    use it directly.  Otherwise resolve it relative to the project root.
    """
    db_url = db_url or settings.database_url
    if os.path.isabs(db_url):
        return db_url
    base_dir = Path(__file__).resolve().parent.parent.parent  # course_catalog_api/
    return str((base_dir / db_url).resolve())


class Database:
    """Transactional access to the course catalog tables.

    Instances hold no open connection; they only remember where the
    database lives, so one ``Database`` can be shared by any number of
    services and threads.
    """

    def __init__(self, database_url: Optional[str] = None, timeout: Optional[float] = None) -> None:
        self.path = get_database_path(database_url)
        self.timeout = settings.db_timeout if timeout is None else timeout

    def __repr__(self) -> str:
        return f"Database(path={self.path!r})"

    def connect(self) -> sqlite3.Connection:
        """Open a new connection in manual transaction mode.

        Rows are returned as ``sqlite3.Row`` so columns can be accessed
        by name, and foreign key enforcement is switched on.
        """
        try:
            conn = sqlite3.connect(self.path, timeout=self.timeout, isolation_level=None)
            conn.row_factory = sqlite3.Row
            conn.execute("PRAGMA foreign_keys = ON")
        except sqlite3.Error as exc:
            logger.exception("Cannot open database %s", self.path)
            raise StoreUnavailableError(f"Cannot open database {self.path}: {exc}") from exc
        return conn

    @contextmanager
    def transaction(self, write: bool = False) -> Iterator[sqlite3.Cursor]:
        """Run the enclosed block as one atomic unit of work.

        Parameters
        ----------
        write : bool
            Take the database write lock up front (``BEGIN IMMEDIATE``).
            Required for any block that reads data and then writes based
            on what it read.
        """
        conn = self.connect()
        try:
            cursor = conn.cursor()
            cursor.execute("BEGIN IMMEDIATE" if write else "BEGIN")
            yield cursor
            cursor.execute("COMMIT")
        except sqlite3.IntegrityError as exc:
            raise InvariantViolationError(str(exc)) from exc
        except sqlite3.ProgrammingError:
            raise
        except sqlite3.DatabaseError as exc:
            logger.exception("Database error on %s", self.path)
            raise StoreUnavailableError(str(exc)) from exc
        finally:
            if conn.in_transaction:
                conn.rollback()
            conn.close()


def init_db(database: Database) -> None:
    """Initialise the database and apply pending migrations.

    Each migration runs in its own transaction together with the
    insert of its version number, so a failed migration leaves the
    schema at the previous version.
    """
    conn = database.connect()
    try:
        conn.execute("CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)")
        row = conn.execute("SELECT MAX(version) AS version FROM migrations").fetchone()
        current_version = row["version"] if row and row["version"] is not None else 0

        for version, sql in MIGRATIONS:
            if version > current_version:
                logger.info("Applying migration %s to %s", version, database.path)
                conn.executescript(
                    f"BEGIN;\n{sql}\nINSERT INTO migrations (version) VALUES ({version});\nCOMMIT;"
                )
                current_version = version
    except sqlite3.DatabaseError as exc:
        logger.exception("Migration failed on %s", database.path)
        raise StoreUnavailableError(str(exc)) from exc
    finally:
        if conn.in_transaction:
            conn.rollback()
        conn.close()
