"""
Business logic for courses.

A course is a scheduled instance of a course template for one
semester.  ``CourseService`` creates, updates and deletes courses and
delegates all reads to ``QueryService`` so that every operation returns
the same projection shapes.

Course ids are allocated as ``MAX(id) + 1``.  The allocation and the
insert run in one ``BEGIN IMMEDIATE`` transaction, which makes
concurrent ``add_course`` calls queue on SQLite's write lock instead of
computing the same id.
"""

import logging
from typing import List, Optional

from ..core.db import Database
from ..core.exceptions import CourseNotFoundError, TemplateNotFoundError
from ..schemas.course import CourseCreate, CourseDetails, CourseSummary, CourseUpdate
from .query_service import QueryService, fetch_course_details


logger = logging.getLogger(__name__)


class CourseService:
    """Service for managing course instances."""

    def __init__(self, database: Database, queries: Optional[QueryService] = None) -> None:
        self.database = database
        self.queries = queries or QueryService(database)

    async def list_courses(self) -> List[CourseSummary]:
        """Return all courses ordered by id; an empty catalog gives ``[]``."""
        return await self.queries.list_courses()

    async def get_course_by_id(self, course_id: int) -> CourseDetails:
        """Return a single course.  Raises ``CourseNotFoundError``."""
        return await self.queries.get_course_by_id(course_id)

    async def get_courses_by_semester(self, semester: Optional[str] = None) -> List[CourseSummary]:
        """Return the courses taught during ``semester``.

        A missing or blank semester means the configured default
        semester, not "all semesters"; use ``list_courses`` for that.
        """
        return await self.queries.get_courses_by_semester(semester)

    async def add_course(self, data: CourseCreate) -> CourseDetails:
        """Create a course from the template with business code ``data.template_id``.

        Raises ``TemplateNotFoundError`` without touching the database
        if the template does not exist.
        """
        with self.database.transaction(write=True) as cursor:
            template = cursor.execute(
                "SELECT id FROM course_templates WHERE template_id = ?",
                (data.template_id,),
            ).fetchone()
            if template is None:
                logger.warning("Course template %s not found", data.template_id)
                raise TemplateNotFoundError(data.template_id)

            row = cursor.execute("SELECT COALESCE(MAX(id), 0) + 1 AS next_id FROM courses").fetchone()
            course_id = row["next_id"]
            cursor.execute(
                """
                INSERT INTO courses (id, template_id, semester, start_date, end_date)
                VALUES (?, ?, ?, ?, ?)
                """,
                (
                    course_id,
                    template["id"],
                    data.semester,
                    data.start_date.isoformat(),
                    data.end_date.isoformat(),
                ),
            )
            logger.info(
                "Created course %s from template %s for semester %s",
                course_id,
                data.template_id,
                data.semester,
            )
            return fetch_course_details(cursor, course_id)

    async def update_course(self, course_id: int, data: CourseUpdate) -> CourseDetails:
        """Change the start and end date of a course.

        Only the dates are editable; template fields belong to the
        template.  Raises ``CourseNotFoundError`` if the course does not
        exist and ``TemplateNotFoundError`` if its template is gone.
        The result includes the current number of enrolled students.
        """
        with self.database.transaction(write=True) as cursor:
            course = cursor.execute(
                "SELECT id, template_id FROM courses WHERE id = ?",
                (course_id,),
            ).fetchone()
            if course is None:
                logger.warning("Course %s not found", course_id)
                raise CourseNotFoundError(course_id)

            template = cursor.execute(
                "SELECT id FROM course_templates WHERE id = ?",
                (course["template_id"],),
            ).fetchone()
            if template is None:
                raise TemplateNotFoundError(course["template_id"])

            cursor.execute(
                "UPDATE courses SET start_date = ?, end_date = ? WHERE id = ?",
                (data.start_date.isoformat(), data.end_date.isoformat(), course_id),
            )
            logger.info("Updated dates of course %s", course_id)
            return fetch_course_details(cursor, course_id)

    async def delete_course(self, course_id: int) -> None:
        """Delete a course together with its enrollments.

        Enrollment rows for the course are removed in the same
        transaction so no enrollment ever points at a missing course.
        """
        with self.database.transaction(write=True) as cursor:
            exists = cursor.execute("SELECT id FROM courses WHERE id = ?", (course_id,)).fetchone()
            if not exists:
                logger.warning("Course %s not found", course_id)
                raise CourseNotFoundError(course_id)
            removed = cursor.execute(
                "DELETE FROM student_enrollments WHERE course_id = ?",
                (course_id,),
            ).rowcount
            cursor.execute("DELETE FROM courses WHERE id = ?", (course_id,))
            logger.info("Deleted course %s and %s enrollment(s)", course_id, removed)
