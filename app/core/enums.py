from enum import Enum


class UserRole(str, Enum):
    STUDENT = "STUDENT"
    TEACHER = "TEACHER"
    ADMIN = "ADMIN"

    @classmethod
    def parse(cls, value) -> "UserRole":
        """Unknown or empty role strings resolve to STUDENT (the default for new users)."""
        try:
            return cls(value)
        except ValueError:
            return cls.STUDENT
