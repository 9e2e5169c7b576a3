"""Request validation helpers shared by the resource endpoints.

Path and query parameters arrive as raw strings so that malformed ids are
reported with the resource's own error code instead of a generic 422.
"""
import re
from typing import Any, Optional

from fastapi import status

from app.core.exceptions import ServiceError

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
INT_PATTERN = re.compile(r"^-?[0-9]+$")

# Integer primary keys are 32-bit INTEGER columns
MIN_DB_INT = -(2**31)
MAX_DB_INT = 2**31 - 1


def parse_int_param(value: Optional[str], code: str, message: str) -> int:
    """Parse a plain ASCII integer id that fits an INTEGER column; raise a 400 ServiceError with ``code`` otherwise."""
    if value is None:
        raise ServiceError(message, status.HTTP_400_BAD_REQUEST, code)
    text = str(value).strip()
    if not INT_PATTERN.match(text):
        raise ServiceError(message, status.HTTP_400_BAD_REQUEST, code)
    parsed = int(text)
    if not MIN_DB_INT <= parsed <= MAX_DB_INT:
        raise ServiceError(message, status.HTTP_400_BAD_REQUEST, code)
    return parsed


def parse_optional_int_filter(value: Optional[str], code: str, message: str) -> Optional[int]:
    """Query filters: absent or blank means no filter, anything else must be an integer."""
    if value is None or not value.strip():
        return None
    return parse_int_param(value, code, message)


def require_text(value: Any, code: str, message: str, max_length: Optional[int] = None) -> str:
    """
    Return the trimmed value. Missing, blank and non-string values raise a 400
    ServiceError with ``code``; over-long ones are INVALID_REQUEST.
    """
    if not isinstance(value, str) or not value.strip():
        raise ServiceError(message, status.HTTP_400_BAD_REQUEST, code)
    text = value.strip()
    if max_length is not None and len(text) > max_length:
        raise ServiceError(
            f"Value must be at most {max_length} characters",
            status.HTTP_400_BAD_REQUEST,
            "INVALID_REQUEST",
        )
    return text


def is_valid_email(value: str) -> bool:
    return bool(EMAIL_PATTERN.match(value.strip()))


def normalize_email(value: str) -> str:
    return value.strip().lower()
