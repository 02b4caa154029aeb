"""
Business logic for student enrollments.

Students are reference data: they are looked up by SSN and never
created here.  Enrolling the same student twice in one course is
allowed and produces two enrollment rows.
"""

import logging
from typing import List, Optional

from ..core.db import Database
from ..core.exceptions import CourseNotFoundError, StudentNotFoundError
from ..schemas.course import CourseDetails
from ..schemas.student import EnrollmentCreate, StudentSummary
from .query_service import QueryService, course_exists, fetch_course_details


logger = logging.getLogger(__name__)


class EnrollmentService:
    """Service for the many-to-many relation between courses and students."""

    def __init__(self, database: Database, queries: Optional[QueryService] = None) -> None:
        self.database = database
        self.queries = queries or QueryService(database)

    async def get_students_in_course(self, course_id: int) -> List[StudentSummary]:
        """List the students in a course.  Raises ``CourseNotFoundError``."""
        return await self.queries.get_students_in_course(course_id)

    async def add_student_to_course(self, course_id: int, data: EnrollmentCreate) -> CourseDetails:
        """Enroll the student with SSN ``data.ssn`` in a course.

        Both the course and the student are checked before anything is
        written.  Returns the course with its updated student count.
        """
        with self.database.transaction(write=True) as cursor:
            if not course_exists(cursor, course_id):
                logger.warning("Course %s not found", course_id)
                raise CourseNotFoundError(course_id)

            student = cursor.execute(
                "SELECT id FROM students WHERE ssn = ?",
                (data.ssn,),
            ).fetchone()
            if student is None:
                logger.warning("Student %s not found", data.ssn)
                raise StudentNotFoundError(data.ssn)

            cursor.execute(
                "INSERT INTO student_enrollments (student_id, course_id) VALUES (?, ?)",
                (student["id"], course_id),
            )
            logger.info("Enrolled student %s in course %s", student["id"], course_id)
            return fetch_course_details(cursor, course_id)
