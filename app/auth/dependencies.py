import logging
from typing import Optional

from fastapi import Depends, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.models import User
from app.auth.schemas import CurrentUser
from app.auth.security import decode_access_token
from app.core.enums import UserRole
from app.core.exceptions import ServiceError
from app.db.session import get_db

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> Optional[CurrentUser]:
    """Resolve the caller from the bearer credential. No caching: every request is resolved on its own.

    Returns None when the header is absent, the token does not verify, or the
    user it names no longer exists.
    """
    if credentials is None or not credentials.credentials:
        return None
    user_id = decode_access_token(credentials.credentials)
    if user_id is None:
        logger.debug("Rejected bearer token that failed verification")
        return None

    user = await db.get(User, user_id)
    if user is None:
        return None

    return CurrentUser(
        id=user.id,
        name=user.name,
        email=user.email,
        role=UserRole.parse(user.role),
        teacher_id=user.teacher_id,
    )


async def get_current_user(
    current_user: Optional[CurrentUser] = Depends(get_optional_user),
) -> CurrentUser:
    if current_user is None:
        raise ServiceError(
            "Authentication required",
            status.HTTP_401_UNAUTHORIZED,
            "AUTHENTICATION_REQUIRED",
        )
    return current_user
