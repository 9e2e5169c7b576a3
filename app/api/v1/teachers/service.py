import logging
from typing import List, Optional

from fastapi import status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.rbac import is_admin
from app.auth.schemas import CurrentUser
from app.core.exceptions import ServiceError
from app.core.models import Section, Teacher, User
from app.core.validation import is_valid_email, normalize_email, require_text

from .schemas import TeacherCreate, TeacherResponse, TeacherSectionItem, TeacherWithSectionsResponse

logger = logging.getLogger(__name__)


async def _email_taken(db: AsyncSession, email: str) -> bool:
    existing = await db.execute(select(Teacher.id).where(Teacher.email == email).limit(1))
    return existing.scalar_one_or_none() is not None


async def create_teacher(db: AsyncSession, payload: TeacherCreate) -> TeacherResponse:
    name = require_text(
        payload.name, "MISSING_NAME", "Name is required and must be a non-empty string", max_length=255
    )
    raw_email = require_text(
        payload.email, "MISSING_EMAIL", "Email is required and must be a non-empty string", max_length=255
    )
    if not is_valid_email(raw_email):
        raise ServiceError("Invalid email format", status.HTTP_400_BAD_REQUEST, "INVALID_EMAIL_FORMAT")
    email = normalize_email(raw_email)

    if await _email_taken(db, email):
        raise ServiceError("A teacher with this email already exists", status.HTTP_400_BAD_REQUEST, "DUPLICATE_EMAIL")

    user: Optional[User] = None
    user_id = payload.user_id.strip() if payload.user_id and payload.user_id.strip() else None
    if user_id is not None:
        user = await db.get(User, user_id)
        if user is None:
            raise ServiceError("User not found", status.HTTP_400_BAD_REQUEST, "USER_NOT_FOUND")

    try:
        obj = Teacher(name=name, email=email, user_id=user_id)
        db.add(obj)
        await db.flush()  # to populate obj.id
        if user is not None:
            user.teacher_id = obj.id
        await db.commit()
        await db.refresh(obj)
    except IntegrityError:
        await db.rollback()
        raise ServiceError("A teacher with this email already exists", status.HTTP_400_BAD_REQUEST, "DUPLICATE_EMAIL")
    logger.info("Created teacher %s (user=%s)", obj.id, user_id)
    return TeacherResponse.model_validate(obj)


async def list_teachers(db: AsyncSession) -> List[TeacherResponse]:
    result = await db.execute(select(Teacher).order_by(Teacher.id))
    return [TeacherResponse.model_validate(t) for t in result.scalars().all()]


async def get_teacher_with_sections(
    db: AsyncSession,
    current_user: CurrentUser,
    teacher_id: int,
) -> Optional[TeacherWithSectionsResponse]:
    """Teacher plus owned sections, visible only to the linked user. Returns None for missing and foreign rows alike."""
    obj = await db.get(Teacher, teacher_id)
    if obj is None or obj.user_id != current_user.id:
        return None
    result = await db.execute(
        select(Section).where(Section.teacher_id == teacher_id).order_by(Section.id)
    )
    sections = [TeacherSectionItem.model_validate(s) for s in result.scalars().all()]
    return TeacherWithSectionsResponse(
        id=obj.id,
        name=obj.name,
        email=obj.email,
        user_id=obj.user_id,
        created_at=obj.created_at,
        sections=sections,
    )


async def get_teacher_for_user(db: AsyncSession, user_id: str) -> Optional[Teacher]:
    result = await db.execute(select(Teacher).where(Teacher.user_id == user_id).limit(1))
    return result.scalar_one_or_none()


async def resolve_owning_teacher(
    db: AsyncSession,
    current_user: CurrentUser,
    requested_teacher_id: Optional[int] = None,
) -> Teacher:
    """
    Teacher that will own a new course or section.

    Teachers always own what they create. Admins may name another teacher via
    ``requested_teacher_id``; otherwise they fall back to their own teacher record.
    """
    if is_admin(current_user.role) and requested_teacher_id is not None:
        teacher = await db.get(Teacher, requested_teacher_id)
        if teacher is None:
            raise ServiceError("Teacher not found", status.HTTP_400_BAD_REQUEST, "TEACHER_NOT_FOUND")
        return teacher
    teacher = await get_teacher_for_user(db, current_user.id)
    if teacher is None:
        raise ServiceError(
            "Teacher record not found for current user",
            status.HTTP_400_BAD_REQUEST,
            "TEACHER_NOT_FOUND",
        )
    return teacher
