"""Enrollment junction between an external student id and a section."""
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint

from app.db.session import Base


class StudentSection(Base):
    """student_id comes from the transcript service, so it has no foreign key."""

    __tablename__ = "student_section"
    __table_args__ = (
        # A student cannot be enrolled twice in the same section
        UniqueConstraint("student_id", "section_id", name="uq_student_section_student_section"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    student_id = Column(String(100), nullable=False, index=True)
    section_id = Column(Integer, ForeignKey("section.id"), nullable=False, index=True)
    enrolled_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)
