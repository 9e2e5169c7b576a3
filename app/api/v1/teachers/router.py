from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import get_current_user
from app.auth.schemas import CurrentUser
from app.core.exceptions import ServiceError
from app.core.validation import parse_int_param
from app.db.session import get_db

from .schemas import TeacherCreate, TeacherResponse, TeacherWithSectionsResponse
from . import service

router = APIRouter(prefix="/api/v1/teachers", tags=["teachers"])


@router.post(
    "",
    response_model=TeacherResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_teacher(
    payload: TeacherCreate,
    db: AsyncSession = Depends(get_db),
) -> TeacherResponse:
    return await service.create_teacher(db, payload)


@router.get("", response_model=List[TeacherResponse])
async def list_teachers(db: AsyncSession = Depends(get_db)) -> List[TeacherResponse]:
    return await service.list_teachers(db)


@router.get("/{teacher_id}", response_model=TeacherWithSectionsResponse)
async def get_teacher(
    teacher_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> TeacherWithSectionsResponse:
    """Owner-only. Someone else's teacher row is reported as not found, same as a missing one."""
    parsed_id = parse_int_param(teacher_id, "INVALID_ID", "Valid teacher ID is required")
    obj = await service.get_teacher_with_sections(db, current_user, parsed_id)
    if not obj:
        raise ServiceError("Teacher not found", status.HTTP_404_NOT_FOUND, "TEACHER_NOT_FOUND")
    return obj
