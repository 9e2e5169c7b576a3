"""Courses. teacher_id is the instructor of record; created_by_id is the user who created the row."""
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String

from app.db.session import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Course(Base):
    """Course row. A course without a section is unassigned. Hard-deleted, no dependents."""

    __tablename__ = "courses"

    id = Column(Integer, primary_key=True, autoincrement=True)
    course_code = Column(String(20), nullable=False, unique=True)
    course_name = Column(String(200), nullable=False)
    section_id = Column(Integer, ForeignKey("section.id", ondelete="SET NULL"), nullable=True, index=True)
    teacher_id = Column(Integer, ForeignKey("teacher.id"), nullable=False, index=True)
    created_by_id = Column(String(64), ForeignKey("user.id"), nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)
