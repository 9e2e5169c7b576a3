import logging
from typing import List

from fastapi import status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ServiceError
from app.core.models import Section, StudentSection, Teacher
from app.core.schemas import MessageResponse
from app.core.validation import require_text

from app.api.v1.sections import service as section_service
from app.api.v1.sections.schemas import RosterEntry

from .schemas import EnrollmentCreate, EnrollmentResponse, EnrollResult, StudentSectionItem

logger = logging.getLogger(__name__)


async def _find_enrollment(db: AsyncSession, section_id: int, student_id: str):
    result = await db.execute(
        select(StudentSection)
        .where(
            StudentSection.section_id == section_id,
            StudentSection.student_id == student_id,
        )
        .limit(1)
    )
    return result.scalar_one_or_none()


async def enroll_student(db: AsyncSession, section_id: int, payload: EnrollmentCreate) -> EnrollResult:
    student_id = require_text(payload.student_id, "MISSING_STUDENT_ID", "Student ID is required")

    if await section_service.get_section_by_id(db, section_id) is None:
        raise ServiceError("Section not found", status.HTTP_404_NOT_FOUND, "SECTION_NOT_FOUND")

    if await _find_enrollment(db, section_id, student_id) is not None:
        raise ServiceError(
            "Student is already enrolled in this section",
            status.HTTP_400_BAD_REQUEST,
            "ALREADY_ENROLLED",
        )

    try:
        obj = StudentSection(student_id=student_id, section_id=section_id)
        db.add(obj)
        await db.commit()
        await db.refresh(obj)
    except IntegrityError:
        await db.rollback()
        raise ServiceError(
            "Student is already enrolled in this section",
            status.HTTP_400_BAD_REQUEST,
            "ALREADY_ENROLLED",
        )
    logger.info("Enrolled student %s in section %s", student_id, section_id)
    return EnrollResult(enrollment=EnrollmentResponse.model_validate(obj))


async def list_roster(db: AsyncSession, section_id: int) -> List[RosterEntry]:
    """Roster of a section. An unknown section simply has no students."""
    return await section_service.get_roster(db, section_id)


async def unenroll_student(db: AsyncSession, section_id: int, student_id: str) -> MessageResponse:
    obj = await _find_enrollment(db, section_id, student_id)
    if obj is None:
        raise ServiceError("Enrollment not found", status.HTTP_404_NOT_FOUND, "ENROLLMENT_NOT_FOUND")
    await db.delete(obj)
    await db.commit()
    logger.info("Removed student %s from section %s", student_id, section_id)
    return MessageResponse(message="Student removed from section successfully")


async def list_sections_for_student(db: AsyncSession, student_id: str) -> List[StudentSectionItem]:
    """
    Sections a student is enrolled in. The inner join on section drops
    enrollments whose section no longer exists; a missing teacher leaves
    teacher_name empty.
    """
    stmt = (
        select(
            Section.id,
            Section.section_code,
            Section.name,
            Teacher.name.label("teacher_name"),
            Section.teacher_id,
            StudentSection.enrolled_at,
        )
        .select_from(StudentSection)
        .join(Section, StudentSection.section_id == Section.id)
        .outerjoin(Teacher, Section.teacher_id == Teacher.id)
        .where(StudentSection.student_id == student_id)
        .order_by(StudentSection.enrolled_at, StudentSection.id)
    )
    result = await db.execute(stmt)
    return [StudentSectionItem.model_validate(dict(row._mapping)) for row in result.all()]
