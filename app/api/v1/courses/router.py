from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.rbac import require_admin, require_creator
from app.auth.schemas import CurrentUser
from app.core.exceptions import ServiceError
from app.core.validation import parse_int_param, parse_optional_int_filter
from app.db.session import get_db

from .schemas import CourseCreate, CourseDeleteResponse, CourseListItem, CourseResponse
from . import service

router = APIRouter(prefix="/api/v1/courses", tags=["courses"])


@router.get("", response_model=List[CourseListItem])
async def list_courses(
    teacher_id: Optional[str] = Query(None, alias="teacherId", description="Filter by instructor"),
    section_id: Optional[str] = Query(None, alias="sectionId", description="Filter by section"),
    db: AsyncSession = Depends(get_db),
) -> List[CourseListItem]:
    return await service.list_courses(
        db,
        teacher_id=parse_optional_int_filter(teacher_id, "INVALID_TEACHER_ID", "Invalid teacherId parameter"),
        section_id=parse_optional_int_filter(section_id, "INVALID_SECTION_ID", "Invalid sectionId parameter"),
    )


@router.post(
    "",
    response_model=CourseResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_course(
    payload: CourseCreate,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_creator("courses")),
) -> CourseResponse:
    return await service.create_course(db, current_user, payload)


@router.delete(
    "/{course_id}",
    response_model=CourseDeleteResponse,
    dependencies=[Depends(require_admin("courses"))],
)
async def delete_course(
    course_id: str,
    db: AsyncSession = Depends(get_db),
) -> CourseDeleteResponse:
    parsed_id = parse_int_param(course_id, "INVALID_ID", "Valid ID is required")
    deleted = await service.delete_course(db, parsed_id)
    if not deleted:
        raise ServiceError("Course not found", status.HTTP_404_NOT_FOUND, "COURSE_NOT_FOUND")
    return deleted
