"""
Pydantic models for students and enrollments.
"""

from pydantic import BaseModel, Field


class EnrollmentCreate(BaseModel):
    """Schema for enrolling an existing student, identified by SSN."""

    ssn: str = Field(..., examples=["1234567890"])


class StudentSummary(BaseModel):
    ssn: str
    name: str

    model_config = {
        "from_attributes": True,
    }
