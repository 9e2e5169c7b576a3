import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String

from app.db.session import Base


def _new_user_id() -> str:
    return uuid.uuid4().hex


class User(Base):
    """Login identity. Rows are created by the external auth service; this API only reads them."""

    __tablename__ = "user"

    id = Column(String(64), primary_key=True, default=_new_user_id)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True)
    # STUDENT, TEACHER or ADMIN; changed only by administrative action outside this API
    role = Column(String(20), nullable=True, default="STUDENT")
    # Set when a teacher record is created through the teacher-linked flow.
    # No FK: teacher.user_id already points back here.
    teacher_id = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)
