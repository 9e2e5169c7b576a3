"""Instructor profile, distinct from the login identity (auth ``user`` row)."""
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String

from app.db.session import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Teacher(Base):
    """Teacher record. ``user_id`` is null for teachers without a login."""

    __tablename__ = "teacher"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    # Stored lower-cased and trimmed
    email = Column(String(255), nullable=False, unique=True)
    user_id = Column(String(64), ForeignKey("user.id"), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
