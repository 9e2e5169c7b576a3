"""
Seed script for a demo dataset: users, teachers, sections, enrollments and courses.

Run after schema_check:
  python -m app.db.seed_demo

Idempotent: rows are looked up by their unique key (user id, teacher email,
section code, course code, student/section pair) and only inserted when missing.
Prints a bearer token per demo user so the API can be exercised right away.
"""
import asyncio
from typing import Dict

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.security import create_access_token
from app.core.models import Course, Section, StudentSection, Teacher, User
from app.db.session import AsyncSessionLocal

DEMO_USERS = [
    {"id": "admin_001", "name": "Admin User", "email": "admin@university.edu", "role": "ADMIN"},
    {"id": "teacher_alice", "name": "Alice Teacher", "email": "alice.teacher@university.edu", "role": "TEACHER"},
    {"id": "teacher_bob", "name": "Bob Teacher", "email": "bob.teacher@university.edu", "role": "TEACHER"},
    {"id": "teacher_carol", "name": "Carol Teacher", "email": "carol.teacher@university.edu", "role": "TEACHER"},
    {"id": "S001", "name": "John Doe", "email": "john.doe@student.edu", "role": "STUDENT"},
    {"id": "S002", "name": "Jane Smith", "email": "jane.smith@student.edu", "role": "STUDENT"},
    {"id": "S003", "name": "Mike Johnson", "email": "mike.johnson@student.edu", "role": "STUDENT"},
]

# Carol has a login but no teacher record
DEMO_TEACHERS = [
    {"name": "Alice Teacher", "email": "alice.teacher@university.edu", "user_id": "teacher_alice"},
    {"name": "Bob Teacher", "email": "bob.teacher@university.edu", "user_id": "teacher_bob"},
]

DEMO_SECTIONS = [
    {"section_code": "S1", "name": "Math101", "teacher_email": "alice.teacher@university.edu"},
    {"section_code": "S2", "name": "Physics201", "teacher_email": "alice.teacher@university.edu"},
    {"section_code": "S3", "name": "Biology301", "teacher_email": "bob.teacher@university.edu"},
]

DEMO_ENROLLMENTS = [("S001", "S1"), ("S002", "S1"), ("S003", "S3")]

DEMO_COURSES = [
    ("CS101", "Introduction to Programming", "teacher_alice", None),
    ("CS201", "Data Structures and Algorithms", "teacher_alice", "S1"),
    ("MATH101", "Calculus I", "teacher_alice", "S1"),
    ("MATH201", "Linear Algebra", "teacher_alice", "S2"),
    ("PHYS101", "Physics I: Mechanics", "teacher_bob", "S2"),
    ("PHYS201", "Physics II: Electricity & Magnetism", "teacher_bob", None),
    ("BIO101", "General Biology", "teacher_bob", "S3"),
    ("CHEM101", "General Chemistry", "teacher_bob", "S3"),
    ("ENG101", "English Composition", "teacher_alice", None),
    ("HIST101", "World History", "teacher_alice", None),
]


async def seed_demo(db: AsyncSession) -> None:
    # 1. Users (normally created by the auth service)
    for data in DEMO_USERS:
        if await db.get(User, data["id"]) is None:
            db.add(User(**data))
            print("Created user:", data["id"])
    await db.flush()

    # 2. Teachers linked to their users
    teachers_by_user: Dict[str, Teacher] = {}
    teachers_by_email: Dict[str, Teacher] = {}
    for data in DEMO_TEACHERS:
        result = await db.execute(select(Teacher).where(Teacher.email == data["email"]))
        teacher = result.scalar_one_or_none()
        if teacher is None:
            teacher = Teacher(**data)
            db.add(teacher)
            await db.flush()
            print("Created teacher:", data["email"])
        user = await db.get(User, data["user_id"])
        user.teacher_id = teacher.id
        teachers_by_user[data["user_id"]] = teacher
        teachers_by_email[data["email"]] = teacher

    # 3. Sections
    sections: Dict[str, Section] = {}
    for data in DEMO_SECTIONS:
        result = await db.execute(select(Section).where(Section.section_code == data["section_code"]))
        section = result.scalar_one_or_none()
        if section is None:
            section = Section(
                section_code=data["section_code"],
                name=data["name"],
                teacher_id=teachers_by_email[data["teacher_email"]].id,
            )
            db.add(section)
            await db.flush()
            print("Created section:", data["section_code"])
        sections[data["section_code"]] = section

    # 4. Enrollments
    for student_id, section_code in DEMO_ENROLLMENTS:
        section_id = sections[section_code].id
        result = await db.execute(
            select(StudentSection.id).where(
                StudentSection.student_id == student_id,
                StudentSection.section_id == section_id,
            )
        )
        if result.scalar_one_or_none() is None:
            db.add(StudentSection(student_id=student_id, section_id=section_id))
            print(f"Enrolled {student_id} in {section_code}")

    # 5. Courses
    for code, name, creator_id, section_code in DEMO_COURSES:
        result = await db.execute(select(Course.id).where(Course.course_code == code))
        if result.scalar_one_or_none() is None:
            db.add(
                Course(
                    course_code=code,
                    course_name=name,
                    teacher_id=teachers_by_user[creator_id].id,
                    created_by_id=creator_id,
                    section_id=sections[section_code].id if section_code else None,
                )
            )
            print("Created course:", code)

    await db.commit()
    print("Demo seed done.")


async def main() -> None:
    async with AsyncSessionLocal() as db:
        try:
            await seed_demo(db)
        except Exception as e:
            await db.rollback()
            print("Error:", e)
            raise
    for data in DEMO_USERS:
        token = create_access_token(subject={"sub": data["id"]}, expires_minutes=60 * 24)
        print(f"{data['id']} ({data['role']}): Bearer {token}")


if __name__ == "__main__":
    asyncio.run(main())
