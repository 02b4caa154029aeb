"""
Pydantic models for course data.

``CourseSummary`` is the lightweight shape used by listings;
``CourseDetails`` extends it with the template description, the
semester and the number of enrolled students.  ``CourseCreate`` and
``CourseUpdate`` describe the input accepted by ``CourseService``.
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field


class CourseCreate(BaseModel):
    """Schema for creating a course from an existing template."""

    # Business code of the course template, not its database id.
    template_id: str = Field(..., examples=["T-514-VEFT"])
    semester: str = Field(..., examples=["20153"])
    start_date: date = Field(..., examples=["2015-08-17"])
    end_date: date = Field(..., examples=["2015-11-08"])


class CourseUpdate(BaseModel):
    """Schema for updating a course.

    Only the dates of a course can change; everything else comes from
    its template.
    """

    start_date: date
    end_date: date


class CourseSummary(BaseModel):
    id: int
    template_id: str
    name: str
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    model_config = {
        "from_attributes": True,
    }


class CourseDetails(CourseSummary):
    """Schema for a single course including template details."""

    description: Optional[str] = None
    semester: str
    student_count: int = 0
