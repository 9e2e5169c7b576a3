"""Sections group enrolled students and courses under one owning teacher. section_code is globally unique."""
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String

from app.db.session import Base


class Section(Base):
    __tablename__ = "section"

    id = Column(Integer, primary_key=True, autoincrement=True)
    section_code = Column(String(20), nullable=False, unique=True)
    name = Column(String(200), nullable=False)
    teacher_id = Column(Integer, ForeignKey("teacher.id"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)
