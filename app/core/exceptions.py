from typing import Optional

from fastapi import status


class ServiceError(Exception):
    """Base exception for service layer errors.

    ``code`` is the machine-readable error code returned to clients next to the
    human-readable message (e.g. ``DUPLICATE_COURSE_CODE``).
    """

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        code: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code

    def to_body(self) -> dict:
        body = {"error": self.message}
        if self.code:
            body["code"] = self.code
        return body
