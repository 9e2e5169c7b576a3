from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.rbac import require_admin, require_creator
from app.auth.schemas import CurrentUser
from app.core.exceptions import ServiceError
from app.core.validation import parse_int_param, parse_optional_int_filter
from app.db.session import get_db

from .schemas import SectionCreate, SectionDeleteResponse, SectionDetailResponse, SectionListItem, SectionResponse
from . import service

router = APIRouter(prefix="/api/v1/sections", tags=["sections"])


@router.post(
    "",
    response_model=SectionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_section(
    payload: SectionCreate,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_creator("sections")),
) -> SectionResponse:
    return await service.create_section(db, current_user, payload)


@router.get("", response_model=List[SectionListItem])
async def list_sections(
    teacher_id: Optional[str] = Query(None, alias="teacherId", description="Filter by owning teacher"),
    db: AsyncSession = Depends(get_db),
) -> List[SectionListItem]:
    parsed_teacher_id = parse_optional_int_filter(teacher_id, "INVALID_TEACHER_ID", "Invalid teacherId parameter")
    return await service.list_sections(db, teacher_id=parsed_teacher_id)


@router.get("/{section_id}", response_model=SectionDetailResponse)
async def get_section(
    section_id: str,
    db: AsyncSession = Depends(get_db),
) -> SectionDetailResponse:
    parsed_id = parse_int_param(section_id, "INVALID_ID", "Valid section ID is required")
    obj = await service.get_section(db, parsed_id)
    if not obj:
        raise ServiceError("Section not found", status.HTTP_404_NOT_FOUND, "SECTION_NOT_FOUND")
    return obj


@router.delete(
    "/{section_id}",
    response_model=SectionDeleteResponse,
    dependencies=[Depends(require_admin("sections"))],
)
async def delete_section(
    section_id: str,
    db: AsyncSession = Depends(get_db),
) -> SectionDeleteResponse:
    parsed_id = parse_int_param(section_id, "INVALID_ID", "Valid section ID is required")
    deleted = await service.delete_section(db, parsed_id)
    if not deleted:
        raise ServiceError("Section not found", status.HTTP_404_NOT_FOUND, "SECTION_NOT_FOUND")
    return deleted
