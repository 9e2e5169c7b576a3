from datetime import datetime
from typing import Optional

from pydantic import Field

from app.core.schemas import CamelModel


class EnrollmentCreate(CamelModel):
    student_id: Optional[str] = Field(None, max_length=100, description="Transcript-service student id")


class EnrollmentResponse(CamelModel):
    id: int
    student_id: str
    section_id: int
    enrolled_at: datetime


class EnrollResult(CamelModel):
    success: bool = True
    message: str = "Student enrolled successfully"
    enrollment: EnrollmentResponse


class StudentSectionItem(CamelModel):
    """A section the student is enrolled in, denormalized with its teacher's name."""

    id: int
    section_code: str
    name: str
    teacher_name: Optional[str] = None
    teacher_id: Optional[int] = None
    enrolled_at: datetime
