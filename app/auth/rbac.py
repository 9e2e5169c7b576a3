"""Role-based access control.

All role checks go through the predicates below so that the policy can be
audited in one place: teachers and admins create, only admins delete.
"""
import logging
from typing import Optional, Union

from fastapi import Depends, status

from app.auth.dependencies import get_current_user
from app.auth.schemas import CurrentUser
from app.core.enums import UserRole
from app.core.exceptions import ServiceError

logger = logging.getLogger(__name__)

RoleLike = Optional[Union[UserRole, str]]


def _as_role(role: RoleLike) -> Optional[UserRole]:
    if role is None:
        return None
    try:
        return UserRole(role)
    except ValueError:
        return None


def is_admin(role: RoleLike) -> bool:
    return _as_role(role) is UserRole.ADMIN


def is_teacher_or_admin(role: RoleLike) -> bool:
    return _as_role(role) in (UserRole.TEACHER, UserRole.ADMIN)


def can_create_courses(role: RoleLike) -> bool:
    """Teachers and admins can create courses and sections."""
    return is_teacher_or_admin(role)


def can_delete_courses(role: RoleLike) -> bool:
    """Only admins can delete courses and sections."""
    return is_admin(role)


def role_display_name(role: RoleLike) -> str:
    return {
        UserRole.ADMIN: "Administrator",
        UserRole.TEACHER: "Teacher",
        UserRole.STUDENT: "Student",
    }.get(_as_role(role), "Unknown")


def require_creator(resource: str):
    """
    Dependency factory: caller must be allowed to create ``resource``.

    Example:
        Depends(require_creator("courses"))
    """

    async def _checker(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if not can_create_courses(current_user.role):
            logger.warning("User %s (%s) denied create on %s", current_user.id, role_display_name(current_user.role), resource)
            raise ServiceError(
                f"Only teachers and administrators can create {resource}",
                status.HTTP_403_FORBIDDEN,
                "UNAUTHORIZED_ROLE",
            )
        return current_user

    return _checker


def require_admin(resource: str):
    """Dependency factory: caller must be an admin to delete ``resource``. Runs before any existence check."""

    async def _checker(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if not can_delete_courses(current_user.role):
            logger.warning("User %s (%s) denied delete on %s", current_user.id, role_display_name(current_user.role), resource)
            raise ServiceError(
                f"Only administrators can delete {resource}",
                status.HTTP_403_FORBIDDEN,
                "UNAUTHORIZED_ROLE",
            )
        return current_user

    return _checker
