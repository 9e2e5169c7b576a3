from typing import Optional

from pydantic import BaseModel

from app.core.enums import UserRole


class CurrentUser(BaseModel):
    """Identity resolved from the bearer credential for the duration of one request."""

    id: str
    name: str
    email: str
    role: UserRole
    teacher_id: Optional[int] = None
