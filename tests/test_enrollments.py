import pytest
from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.models import Section, StudentSection

from conftest import make_teacher


@pytest.fixture()
async def section(db_session: AsyncSession) -> Section:
    teacher = await make_teacher(db_session, "Bob Teacher", "bob.teacher@university.edu")
    obj = Section(section_code="S3", name="Biology301", teacher_id=teacher.id)
    db_session.add(obj)
    await db_session.commit()
    return obj


@pytest.mark.asyncio
async def test_enroll_and_roster(client: AsyncClient, section: Section) -> None:
    response = await client.post(f"/api/v1/sections/{section.id}/students", json={"studentId": " S003 "})
    assert response.status_code == 201
    data = response.json()
    assert data["success"] is True
    assert data["enrollment"]["studentId"] == "S003"
    assert data["enrollment"]["sectionId"] == section.id
    assert data["enrollment"]["enrolledAt"]

    roster = await client.get(f"/api/v1/sections/{section.id}/students")
    assert roster.status_code == 200
    assert [r["studentId"] for r in roster.json()] == ["S003"]


@pytest.mark.asyncio
async def test_enroll_twice_then_unenroll_and_reenroll(client: AsyncClient, section: Section) -> None:
    url = f"/api/v1/sections/{section.id}/students"
    assert (await client.post(url, json={"studentId": "S001"})).status_code == 201

    duplicate = await client.post(url, json={"studentId": "S001"})
    assert duplicate.status_code == 400
    assert duplicate.json()["code"] == "ALREADY_ENROLLED"

    removed = await client.delete(f"{url}/S001")
    assert removed.status_code == 200
    assert removed.json()["success"] is True

    assert (await client.post(url, json={"studentId": "S001"})).status_code == 201


@pytest.mark.asyncio
async def test_enroll_errors(client: AsyncClient, section: Section) -> None:
    invalid = await client.post("/api/v1/sections/abc/students", json={"studentId": "S001"})
    assert invalid.status_code == 400
    assert invalid.json()["code"] == "INVALID_SECTION_ID"

    for body in ({}, {"studentId": ""}, {"studentId": "   "}):
        missing = await client.post(f"/api/v1/sections/{section.id}/students", json=body)
        assert missing.status_code == 400
        assert missing.json()["code"] == "MISSING_STUDENT_ID"

    unknown = await client.post("/api/v1/sections/999/students", json={"studentId": "S001"})
    assert unknown.status_code == 404
    assert unknown.json()["code"] == "SECTION_NOT_FOUND"


@pytest.mark.asyncio
async def test_roster_invalid_section_id(client: AsyncClient) -> None:
    response = await client.get("/api/v1/sections/x1/students")
    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_SECTION_ID"


@pytest.mark.asyncio
async def test_unenroll_errors(client: AsyncClient, section: Section) -> None:
    invalid = await client.delete("/api/v1/sections/abc/students/S001")
    assert invalid.json()["code"] == "INVALID_SECTION_ID"

    blank = await client.delete(f"/api/v1/sections/{section.id}/students/%20")
    assert blank.status_code == 400
    assert blank.json()["code"] == "INVALID_STUDENT_ID"

    missing = await client.delete(f"/api/v1/sections/{section.id}/students/S404")
    assert missing.status_code == 404
    assert missing.json()["code"] == "ENROLLMENT_NOT_FOUND"


@pytest.mark.asyncio
async def test_sections_for_student(client: AsyncClient, db_session: AsyncSession, section: Section) -> None:
    await client.post(f"/api/v1/sections/{section.id}/students", json={"studentId": "S001"})
    # Enrollment pointing at a section that no longer exists
    db_session.add(StudentSection(student_id="S001", section_id=section.id + 100))
    await db_session.commit()

    response = await client.get("/api/v1/students/S001/sections")
    assert response.status_code == 200
    assert response.json() == [
        {
            "id": section.id,
            "sectionCode": "S3",
            "name": "Biology301",
            "teacherName": "Bob Teacher",
            "teacherId": section.teacher_id,
            "enrolledAt": response.json()[0]["enrolledAt"],
        }
    ]

    nobody = await client.get("/api/v1/students/S999/sections")
    assert nobody.json() == []

    blank = await client.get("/api/v1/students/%20/sections")
    assert blank.status_code == 400
    assert blank.json()["code"] == "MISSING_STUDENT_ID"


@pytest.mark.asyncio
async def test_concurrent_duplicate_enrollment(
    client: AsyncClient, db_session: AsyncSession, monkeypatch, section: Section
) -> None:
    from app.api.v1.enrollments import service

    url = f"/api/v1/sections/{section.id}/students"
    section_id = section.id
    assert (await client.post(url, json={"studentId": "S001"})).status_code == 201

    async def no_enrollment(db, section_id, student_id):
        return None

    monkeypatch.setattr(service, "_find_enrollment", no_enrollment)
    racing = await client.post(url, json={"studentId": "S001"})
    assert racing.status_code == 400
    assert racing.json() == {"error": "Student is already enrolled in this section", "code": "ALREADY_ENROLLED"}

    rows = await db_session.execute(
        select(StudentSection.id).where(StudentSection.section_id == section_id, StudentSection.student_id == "S001")
    )
    assert len(rows.all()) == 1
    assert (await client.post(url, json={"studentId": "S002"})).status_code == 201
    roster = await client.get(url)
    assert [r["studentId"] for r in roster.json()] == ["S001", "S002"]
