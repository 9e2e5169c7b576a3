import logging
from typing import Dict, List, Optional

from fastapi import status
from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.schemas import CurrentUser
from app.core.exceptions import ServiceError
from app.core.models import Course, Section, StudentSection, Teacher
from app.core.validation import require_text

from app.api.v1.teachers import service as teacher_service

from .schemas import (
    RosterEntry,
    SectionCreate,
    SectionDeleteResponse,
    SectionDetailResponse,
    SectionListItem,
    SectionResponse,
    SectionTeacherInfo,
)

logger = logging.getLogger(__name__)


async def _section_code_taken(db: AsyncSession, section_code: str) -> bool:
    existing = await db.execute(select(Section.id).where(Section.section_code == section_code).limit(1))
    return existing.scalar_one_or_none() is not None


async def create_section(
    db: AsyncSession,
    current_user: CurrentUser,
    payload: SectionCreate,
) -> SectionResponse:
    section_code = require_text(payload.section_code, "MISSING_SECTION_CODE", "sectionCode is required")
    name = require_text(payload.name, "MISSING_NAME", "name is required")

    teacher = await teacher_service.resolve_owning_teacher(db, current_user, payload.teacher_id)

    if await _section_code_taken(db, section_code):
        raise ServiceError("Section code already exists", status.HTTP_400_BAD_REQUEST, "DUPLICATE_SECTION_CODE")

    try:
        obj = Section(section_code=section_code, name=name, teacher_id=teacher.id)
        db.add(obj)
        await db.commit()
        await db.refresh(obj)
    except IntegrityError:
        await db.rollback()
        raise ServiceError("Section code already exists", status.HTTP_400_BAD_REQUEST, "DUPLICATE_SECTION_CODE")
    logger.info("Created section %s (%s) for teacher %s", obj.id, obj.section_code, teacher.id)
    return SectionResponse.model_validate(obj)


async def _get_student_counts(db: AsyncSession, section_ids: List[int]) -> Dict[int, int]:
    """Return map section_id -> number of enrollment rows."""
    if not section_ids:
        return {}
    r = await db.execute(
        select(StudentSection.section_id, func.count(StudentSection.id).label("cnt"))
        .where(StudentSection.section_id.in_(section_ids))
        .group_by(StudentSection.section_id)
    )
    return {row.section_id: row.cnt for row in r.all()}


async def list_sections(
    db: AsyncSession,
    teacher_id: Optional[int] = None,
) -> List[SectionListItem]:
    stmt = (
        select(Section, Teacher.name.label("teacher_name"))
        .outerjoin(Teacher, Section.teacher_id == Teacher.id)
    )
    if teacher_id is not None:
        stmt = stmt.where(Section.teacher_id == teacher_id)
    stmt = stmt.order_by(Section.id)
    result = await db.execute(stmt)
    rows = result.all()
    counts = await _get_student_counts(db, [row.Section.id for row in rows])
    return [
        SectionListItem(
            id=row.Section.id,
            section_code=row.Section.section_code,
            name=row.Section.name,
            teacher_id=row.Section.teacher_id,
            teacher_name=row.teacher_name,
            student_count=counts.get(row.Section.id, 0),
            created_at=row.Section.created_at,
        )
        for row in rows
    ]


async def get_roster(db: AsyncSession, section_id: int) -> List[RosterEntry]:
    result = await db.execute(
        select(StudentSection)
        .where(StudentSection.section_id == section_id)
        .order_by(StudentSection.enrolled_at, StudentSection.id)
    )
    return [RosterEntry.model_validate(e) for e in result.scalars().all()]


async def get_section(db: AsyncSession, section_id: int) -> Optional[SectionDetailResponse]:
    obj = await db.get(Section, section_id)
    if not obj:
        return None
    teacher_info = None
    teacher = await db.get(Teacher, obj.teacher_id) if obj.teacher_id is not None else None
    if teacher is not None:
        teacher_info = SectionTeacherInfo.model_validate(teacher)
    return SectionDetailResponse(
        id=obj.id,
        section_code=obj.section_code,
        name=obj.name,
        created_at=obj.created_at,
        teacher=teacher_info,
        students=await get_roster(db, section_id),
    )


async def get_section_by_id(db: AsyncSession, section_id: int) -> Optional[Section]:
    return await db.get(Section, section_id)


async def delete_section(db: AsyncSession, section_id: int) -> Optional[SectionDeleteResponse]:
    """
    Delete a section and everything hanging off it in one transaction:
    enrollments are removed, courses in the section become unassigned, then the row goes.
    Returns None when the section does not exist.
    """
    obj = await db.get(Section, section_id)
    if not obj:
        return None
    deleted = SectionResponse.model_validate(obj)
    try:
        enrollments = await db.execute(
            delete(StudentSection)
            .where(StudentSection.section_id == section_id)
            .execution_options(synchronize_session="evaluate")
        )
        courses = await db.execute(
            update(Course)
            .where(Course.section_id == section_id)
            .values(section_id=None)
            .execution_options(synchronize_session="evaluate")
        )
        await db.delete(obj)
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    logger.info(
        "Deleted section %s (%s): %s enrollments removed, %s courses unassigned",
        deleted.id,
        deleted.section_code,
        enrollments.rowcount,
        courses.rowcount,
    )
    return SectionDeleteResponse(
        deleted_section=deleted,
        deleted_enrollments=enrollments.rowcount,
        unassigned_courses=courses.rowcount,
    )
