import pytest
from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.models import Section, Teacher, User

from conftest import auth_headers, make_teacher, make_user


@pytest.mark.asyncio
async def test_create_teacher_normalizes_email(client: AsyncClient) -> None:
    response = await client.post("/api/v1/teachers", json={"name": " Alice ", "email": "Alice@X.edu"})
    assert response.status_code == 201
    data = response.json()
    assert data["name"] == "Alice"
    assert data["email"] == "alice@x.edu"
    assert data["userId"] is None

    for email in ("alice@x.edu", "ALICE@X.EDU", "  Alice@x.Edu "):
        duplicate = await client.post("/api/v1/teachers", json={"name": "Alice", "email": email})
        assert duplicate.status_code == 400
        assert duplicate.json() == {"error": "A teacher with this email already exists", "code": "DUPLICATE_EMAIL"}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload, code",
    [
        ({"email": "a@b.edu"}, "MISSING_NAME"),
        ({"name": "  ", "email": "a@b.edu"}, "MISSING_NAME"),
        ({"name": "Alice"}, "MISSING_EMAIL"),
        ({"name": "Alice", "email": "not-an-email"}, "INVALID_EMAIL_FORMAT"),
        ({"name": "Alice", "email": "alice@nodot"}, "INVALID_EMAIL_FORMAT"),
        ({"name": "Alice", "email": "al ice@x.edu"}, "INVALID_EMAIL_FORMAT"),
    ],
)
async def test_create_teacher_validation(client: AsyncClient, payload, code) -> None:
    response = await client.post("/api/v1/teachers", json=payload)
    assert response.status_code == 400
    assert response.json()["code"] == code


@pytest.mark.asyncio
async def test_create_teacher_linked_to_user(client: AsyncClient, db_session: AsyncSession) -> None:
    user = await make_user(db_session, "teacher_carol", "TEACHER")
    response = await client.post(
        "/api/v1/teachers",
        json={"name": "Carol Teacher", "email": "carol.teacher@university.edu", "userId": user.id},
    )
    assert response.status_code == 201
    assert response.json()["userId"] == user.id

    refreshed = await db_session.get(User, user.id)
    assert refreshed.teacher_id == response.json()["id"]

    unknown = await client.post(
        "/api/v1/teachers",
        json={"name": "Dan", "email": "dan@university.edu", "userId": "ghost"},
    )
    assert unknown.status_code == 400
    assert unknown.json()["code"] == "USER_NOT_FOUND"


@pytest.mark.asyncio
async def test_list_teachers_is_public(client: AsyncClient, db_session: AsyncSession) -> None:
    await make_teacher(db_session, "Alice Teacher", "alice.teacher@university.edu")
    await make_teacher(db_session, "Bob Teacher", "bob.teacher@university.edu")

    response = await client.get("/api/v1/teachers")
    assert response.status_code == 200
    assert [t["name"] for t in response.json()] == ["Alice Teacher", "Bob Teacher"]


@pytest.mark.asyncio
async def test_get_teacher_with_sections_for_owner(client: AsyncClient, db_session: AsyncSession, teacher_user, teacher) -> None:
    db_session.add(Section(section_code="S1", name="Math101", teacher_id=teacher.id))
    await db_session.commit()

    response = await client.get(f"/api/v1/teachers/{teacher.id}", headers=auth_headers(teacher_user))
    assert response.status_code == 200
    data = response.json()
    assert data["id"] == teacher.id
    assert data["userId"] == teacher_user.id
    assert [s["sectionCode"] for s in data["sections"]] == ["S1"]


@pytest.mark.asyncio
async def test_get_teacher_hides_other_teachers(client: AsyncClient, db_session: AsyncSession, teacher, admin) -> None:
    bob_user = await make_user(db_session, "teacher_bob", "TEACHER")

    for user in (bob_user, admin):
        response = await client.get(f"/api/v1/teachers/{teacher.id}", headers=auth_headers(user))
        assert response.status_code == 404
        assert response.json()["code"] == "TEACHER_NOT_FOUND"

    missing = await client.get("/api/v1/teachers/999", headers=auth_headers(bob_user))
    assert missing.status_code == 404
    assert missing.json() == response.json()


@pytest.mark.asyncio
async def test_get_teacher_requires_authentication(client: AsyncClient, teacher) -> None:
    anonymous = await client.get(f"/api/v1/teachers/{teacher.id}")
    assert anonymous.status_code == 401
    assert anonymous.json()["code"] == "AUTHENTICATION_REQUIRED"

    garbage = await client.get(f"/api/v1/teachers/{teacher.id}", headers={"Authorization": "Bearer not-a-jwt"})
    assert garbage.status_code == 401


@pytest.mark.asyncio
async def test_get_teacher_invalid_id(client: AsyncClient, teacher_user) -> None:
    response = await client.get("/api/v1/teachers/abc", headers=auth_headers(teacher_user))
    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_ID"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload, code",
    [
        ({"name": 123, "email": "a@b.edu"}, "MISSING_NAME"),
        ({"name": ["Alice"], "email": "a@b.edu"}, "MISSING_NAME"),
        ({"name": "Alice", "email": 5}, "MISSING_EMAIL"),
        ({"name": "Alice", "email": None}, "MISSING_EMAIL"),
        ({"name": "A" * 256, "email": "a@b.edu"}, "INVALID_REQUEST"),
    ],
)
async def test_create_teacher_non_string_fields(client: AsyncClient, payload, code) -> None:
    response = await client.post("/api/v1/teachers", json=payload)
    assert response.status_code == 400
    assert response.json()["code"] == code


@pytest.mark.asyncio
async def test_concurrent_duplicate_teacher_email(client: AsyncClient, db_session: AsyncSession, monkeypatch) -> None:
    from app.api.v1.teachers import service

    await make_teacher(db_session, "Alice", "alice@x.edu")

    async def not_taken(db, email):
        return False

    monkeypatch.setattr(service, "_email_taken", not_taken)
    racing = await client.post("/api/v1/teachers", json={"name": "Alice Again", "email": "Alice@X.edu"})
    assert racing.status_code == 400
    assert racing.json() == {"error": "A teacher with this email already exists", "code": "DUPLICATE_EMAIL"}

    rows = await db_session.execute(select(Teacher.id).where(Teacher.email == "alice@x.edu"))
    assert len(rows.all()) == 1
    after = await client.post("/api/v1/teachers", json={"name": "Bob", "email": "bob@x.edu"})
    assert after.status_code == 201
