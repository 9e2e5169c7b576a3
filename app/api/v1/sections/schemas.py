from datetime import datetime
from typing import List, Optional

from pydantic import Field

from app.core.schemas import CamelModel
from app.core.validation import MAX_DB_INT


class SectionCreate(CamelModel):
    section_code: Optional[str] = Field(None, max_length=20)
    name: Optional[str] = Field(None, max_length=200)
    teacher_id: Optional[int] = Field(None, ge=1, le=MAX_DB_INT, description="Owning teacher; honoured for admin callers only")


class SectionResponse(CamelModel):
    id: int
    section_code: str
    name: str
    teacher_id: int
    created_at: datetime


class SectionListItem(SectionResponse):
    teacher_name: Optional[str] = None
    student_count: int = Field(0, description="Enrollment rows in this section")


class SectionTeacherInfo(CamelModel):
    id: int
    name: str
    email: str


class RosterEntry(CamelModel):
    student_id: str
    enrolled_at: datetime


class SectionDetailResponse(CamelModel):
    id: int
    section_code: str
    name: str
    created_at: datetime
    teacher: Optional[SectionTeacherInfo] = None
    students: List[RosterEntry] = []


class SectionDeleteResponse(CamelModel):
    success: bool = True
    message: str = "Section deleted successfully"
    deleted_section: SectionResponse
    deleted_enrollments: int
    unassigned_courses: int = 0
