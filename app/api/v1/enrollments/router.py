from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.sections.schemas import RosterEntry
from app.core.schemas import MessageResponse
from app.core.validation import parse_int_param, require_text
from app.db.session import get_db

from .schemas import EnrollmentCreate, EnrollResult, StudentSectionItem
from . import service

router = APIRouter(prefix="/api/v1", tags=["enrollments"])


def _section_id(raw: str) -> int:
    return parse_int_param(raw, "INVALID_SECTION_ID", "Valid section ID is required")


@router.post(
    "/sections/{section_id}/students",
    response_model=EnrollResult,
    status_code=status.HTTP_201_CREATED,
)
async def enroll_student(
    section_id: str,
    payload: EnrollmentCreate,
    db: AsyncSession = Depends(get_db),
) -> EnrollResult:
    return await service.enroll_student(db, _section_id(section_id), payload)


@router.get("/sections/{section_id}/students", response_model=List[RosterEntry])
async def list_roster(
    section_id: str,
    db: AsyncSession = Depends(get_db),
) -> List[RosterEntry]:
    return await service.list_roster(db, _section_id(section_id))


@router.delete("/sections/{section_id}/students/{student_id}", response_model=MessageResponse)
async def unenroll_student(
    section_id: str,
    student_id: str,
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    parsed_section_id = _section_id(section_id)
    parsed_student_id = require_text(student_id, "INVALID_STUDENT_ID", "Valid student ID is required")
    return await service.unenroll_student(db, parsed_section_id, parsed_student_id)


@router.get("/students/{student_id}/sections", response_model=List[StudentSectionItem])
async def list_student_sections(
    student_id: str,
    db: AsyncSession = Depends(get_db),
) -> List[StudentSectionItem]:
    parsed_student_id = require_text(student_id, "MISSING_STUDENT_ID", "Student ID is required")
    return await service.list_sections_for_student(db, parsed_student_id)
