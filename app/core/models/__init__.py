from app.auth.models import User
from app.core.models.course import Course
from app.core.models.section_model import Section
from app.core.models.student_section import StudentSection
from app.core.models.teacher import Teacher

__all__ = [
    "Course",
    "Section",
    "StudentSection",
    "Teacher",
    "User",
]
