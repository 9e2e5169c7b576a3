from datetime import datetime
from typing import Any, List, Optional

from pydantic import Field

from app.core.schemas import CamelModel


class TeacherCreate(CamelModel):
    # Untyped so that missing, blank and non-string values all map to MISSING_* codes
    name: Any = None
    email: Any = None
    user_id: Optional[str] = Field(None, max_length=64, description="Login identity to link to this teacher")


class TeacherResponse(CamelModel):
    id: int
    name: str
    email: str
    user_id: Optional[str] = None
    created_at: datetime


class TeacherSectionItem(CamelModel):
    id: int
    section_code: str
    name: str
    created_at: datetime


class TeacherWithSectionsResponse(TeacherResponse):
    sections: List[TeacherSectionItem] = []
