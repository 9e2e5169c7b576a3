import logging
from typing import List, Optional

from fastapi import status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.schemas import CurrentUser
from app.core.exceptions import ServiceError
from app.core.models import Course, Section, Teacher
from app.core.validation import require_text

from app.api.v1.teachers import service as teacher_service

from .schemas import CourseCreate, CourseDeleteResponse, CourseListItem, CourseResponse

logger = logging.getLogger(__name__)


async def _course_code_taken(db: AsyncSession, course_code: str) -> bool:
    existing = await db.execute(select(Course.id).where(Course.course_code == course_code).limit(1))
    return existing.scalar_one_or_none() is not None


async def list_courses(
    db: AsyncSession,
    teacher_id: Optional[int] = None,
    section_id: Optional[int] = None,
) -> List[CourseListItem]:
    stmt = (
        select(
            Course.id,
            Course.course_code,
            Course.course_name,
            Course.section_id,
            Section.name.label("section_name"),
            Course.teacher_id,
            Teacher.name.label("teacher_name"),
            Course.created_at,
            Course.updated_at,
        )
        .select_from(Course)
        .outerjoin(Teacher, Course.teacher_id == Teacher.id)
        .outerjoin(Section, Course.section_id == Section.id)
    )
    if teacher_id is not None:
        stmt = stmt.where(Course.teacher_id == teacher_id)
    if section_id is not None:
        stmt = stmt.where(Course.section_id == section_id)
    stmt = stmt.order_by(Course.id)
    result = await db.execute(stmt)
    return [CourseListItem.model_validate(dict(row._mapping)) for row in result.all()]


async def create_course(
    db: AsyncSession,
    current_user: CurrentUser,
    payload: CourseCreate,
) -> CourseResponse:
    if "created_by_id" in payload.model_fields_set:
        raise ServiceError(
            "User ID cannot be provided in request body",
            status.HTTP_400_BAD_REQUEST,
            "USER_ID_NOT_ALLOWED",
        )
    course_code = require_text(payload.course_code, "MISSING_COURSE_CODE", "courseCode is required")
    course_name = require_text(payload.course_name, "MISSING_COURSE_NAME", "courseName is required")

    teacher = await teacher_service.resolve_owning_teacher(db, current_user, payload.teacher_id)

    if await _course_code_taken(db, course_code):
        raise ServiceError("Course code already exists", status.HTTP_400_BAD_REQUEST, "DUPLICATE_COURSE_CODE")

    if payload.section_id is not None:
        section = await db.get(Section, payload.section_id)
        if section is None:
            raise ServiceError("Section not found", status.HTTP_400_BAD_REQUEST, "SECTION_NOT_FOUND")

    try:
        obj = Course(
            course_code=course_code,
            course_name=course_name,
            section_id=payload.section_id,
            teacher_id=teacher.id,
            created_by_id=current_user.id,
        )
        db.add(obj)
        await db.commit()
        await db.refresh(obj)
    except IntegrityError:
        # Lost a race with a concurrent create of the same code
        await db.rollback()
        raise ServiceError("Course code already exists", status.HTTP_400_BAD_REQUEST, "DUPLICATE_COURSE_CODE")
    logger.info("Created course %s (%s) by user %s", obj.id, obj.course_code, current_user.id)
    return CourseResponse.model_validate(obj)


async def delete_course(db: AsyncSession, course_id: int) -> Optional[CourseDeleteResponse]:
    """Hard delete. Returns None when the course does not exist."""
    obj = await db.get(Course, course_id)
    if not obj:
        return None
    deleted = CourseResponse.model_validate(obj)
    await db.delete(obj)
    await db.commit()
    logger.info("Deleted course %s (%s)", deleted.id, deleted.course_code)
    return CourseDeleteResponse(deleted_course=deleted)
