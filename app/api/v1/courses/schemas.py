from datetime import datetime
from typing import Any, Optional

from pydantic import Field

from app.core.schemas import CamelModel
from app.core.validation import MAX_DB_INT


class CourseCreate(CamelModel):
    course_code: Optional[str] = Field(None, max_length=20, description="e.g. 24UC0022")
    course_name: Optional[str] = Field(None, max_length=200)
    section_id: Optional[int] = Field(None, ge=1, le=MAX_DB_INT, description="Section the course is taught in; omit for unassigned")
    teacher_id: Optional[int] = Field(None, ge=1, le=MAX_DB_INT, description="Instructor of record; honoured for admin callers only")
    # Never accepted: derived from the authenticated caller. Declared so its presence can be detected.
    created_by_id: Optional[Any] = None


class CourseResponse(CamelModel):
    id: int
    course_code: str
    course_name: str
    section_id: Optional[int] = None
    teacher_id: int
    created_by_id: str
    created_at: datetime
    updated_at: datetime


class CourseListItem(CamelModel):
    """Course joined with its teacher's and section's display names."""

    id: int
    course_code: str
    course_name: str
    section_id: Optional[int] = None
    section_name: Optional[str] = None
    teacher_id: int
    teacher_name: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class CourseDeleteResponse(CamelModel):
    success: bool = True
    message: str = "Course deleted successfully"
    deleted_course: CourseResponse
