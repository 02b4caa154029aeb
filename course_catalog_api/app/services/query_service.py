"""
Read-only projections of courses and students.

The module-level helpers take an open cursor so that the mutating
services can project their results inside the same transaction that
performed the write.  They are the only place where database rows are
turned into ``CourseSummary``, ``CourseDetails`` and ``StudentSummary``
objects.  ``QueryService`` wraps them in their own read transactions
for callers that only want to look.
"""

import logging
import sqlite3
from typing import List, Optional

from ..core.config import settings
from ..core.db import Database
from ..core.exceptions import (
    CourseNotFoundError,
    InvariantViolationError,
    TemplateNotFoundError,
)
from ..schemas.course import CourseDetails, CourseSummary
from ..schemas.student import StudentSummary


logger = logging.getLogger(__name__)


_COURSE_SELECT = """
    SELECT c.id AS id,
           c.template_id AS template_ref,
           ct.id AS template_pk,
           ct.template_id AS template_id,
           ct.name AS name,
           ct.description AS description,
           c.semester AS semester,
           c.start_date AS start_date,
           c.end_date AS end_date
    FROM courses c
"""


def course_summary(row: sqlite3.Row) -> CourseSummary:
    return CourseSummary(
        id=row["id"],
        template_id=row["template_id"],
        name=row["name"],
        start_date=row["start_date"],
        end_date=row["end_date"],
    )


def course_details(row: sqlite3.Row, student_count: int = 0) -> CourseDetails:
    return CourseDetails(
        id=row["id"],
        template_id=row["template_id"],
        name=row["name"],
        description=row["description"],
        semester=row["semester"],
        start_date=row["start_date"],
        end_date=row["end_date"],
        student_count=student_count,
    )


def student_summary(row: sqlite3.Row) -> StudentSummary:
    return StudentSummary(ssn=row["ssn"], name=row["name"])


def course_exists(cursor: sqlite3.Cursor, course_id: int) -> bool:
    row = cursor.execute("SELECT 1 FROM courses WHERE id = ?", (course_id,)).fetchone()
    return row is not None


def count_students(cursor: sqlite3.Cursor, course_id: int) -> int:
    """Number of enrollment rows for a course (duplicates included)."""
    row = cursor.execute(
        "SELECT COUNT(*) AS total FROM student_enrollments WHERE course_id = ?",
        (course_id,),
    ).fetchone()
    return row["total"] if row else 0


def fetch_course_summaries(cursor: sqlite3.Cursor, semester: Optional[str] = None) -> List[CourseSummary]:
    """Return course summaries ordered by id, optionally for one semester."""
    query = _COURSE_SELECT + " JOIN course_templates ct ON c.template_id = ct.id"
    params: list = []
    if semester is not None:
        query += " WHERE c.semester = ?"
        params.append(semester)
    query += " ORDER BY c.id"
    rows = cursor.execute(query, tuple(params)).fetchall()
    return [course_summary(row) for row in rows]


def fetch_course_details(cursor: sqlite3.Cursor, course_id: int) -> CourseDetails:
    """Return the detailed projection of exactly one course.

    Raises ``CourseNotFoundError`` if there is no such course and
    ``TemplateNotFoundError`` if its template has disappeared.  More
    than one matching row means the id column is no longer unique,
    which is reported as ``InvariantViolationError``.
    """
    rows = cursor.execute(
        _COURSE_SELECT + " LEFT JOIN course_templates ct ON c.template_id = ct.id WHERE c.id = ?",
        (course_id,),
    ).fetchall()
    if not rows:
        raise CourseNotFoundError(course_id)
    if len(rows) > 1:
        raise InvariantViolationError(f"{len(rows)} courses share id {course_id}")
    row = rows[0]
    if row["template_pk"] is None:
        raise TemplateNotFoundError(row["template_ref"])
    return course_details(row, count_students(cursor, course_id))


def fetch_students_in_course(cursor: sqlite3.Cursor, course_id: int) -> List[StudentSummary]:
    """Return the students enrolled in a course, in enrollment order."""
    if not course_exists(cursor, course_id):
        raise CourseNotFoundError(course_id)
    rows = cursor.execute(
        """
        SELECT s.ssn AS ssn, s.name AS name
        FROM student_enrollments se
        JOIN students s ON se.student_id = s.id
        WHERE se.course_id = ?
        ORDER BY se.id
        """,
        (course_id,),
    ).fetchall()
    return [student_summary(row) for row in rows]


class QueryService:
    """Read-only access to courses and their students."""

    def __init__(self, database: Database, default_semester: Optional[str] = None) -> None:
        self.database = database
        self.default_semester = default_semester or settings.default_semester

    def resolve_semester(self, semester: Optional[str]) -> str:
        """Return ``semester``, or the default semester if it is blank."""
        if semester is None or not semester.strip():
            return self.default_semester
        return semester

    async def list_courses(self) -> List[CourseSummary]:
        with self.database.transaction() as cursor:
            return fetch_course_summaries(cursor)

    async def get_course_by_id(self, course_id: int) -> CourseDetails:
        with self.database.transaction() as cursor:
            try:
                return fetch_course_details(cursor, course_id)
            except CourseNotFoundError:
                logger.warning("Course %s not found", course_id)
                raise

    async def get_courses_by_semester(self, semester: Optional[str] = None) -> List[CourseSummary]:
        semester = self.resolve_semester(semester)
        with self.database.transaction() as cursor:
            return fetch_course_summaries(cursor, semester)

    async def get_students_in_course(self, course_id: int) -> List[StudentSummary]:
        with self.database.transaction() as cursor:
            return fetch_students_in_course(cursor, course_id)
