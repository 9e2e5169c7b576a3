import os
from typing import AsyncGenerator, Dict, Optional

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.auth.security import create_access_token
from app.core.models import Teacher, User
from app.db.session import Base, get_db
from app.main import app


TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest.fixture()
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Fresh in-memory database per test; overrides the FastAPI data-access dependency."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        future=True,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:

        async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
            yield session

        app.dependency_overrides[get_db] = override_get_db
        yield session
        app.dependency_overrides.pop(get_db, None)

    await engine.dispose()


@pytest.fixture()
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client bound to the FastAPI app."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


async def make_user(db: AsyncSession, user_id: str, role: Optional[str] = "STUDENT") -> User:
    user = User(id=user_id, name=user_id.replace("_", " ").title(), email=f"{user_id}@university.edu", role=role)
    db.add(user)
    await db.commit()
    return user


async def make_teacher(db: AsyncSession, name: str, email: str, user: Optional[User] = None) -> Teacher:
    teacher = Teacher(name=name, email=email, user_id=user.id if user else None)
    db.add(teacher)
    await db.flush()
    if user is not None:
        user.teacher_id = teacher.id
    await db.commit()
    return teacher


def auth_headers(user: User) -> Dict[str, str]:
    token = create_access_token(subject={"sub": user.id})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
async def admin(db_session: AsyncSession) -> User:
    return await make_user(db_session, "admin_001", "ADMIN")


@pytest.fixture()
async def student(db_session: AsyncSession) -> User:
    return await make_user(db_session, "S001", "STUDENT")


@pytest.fixture()
async def teacher_user(db_session: AsyncSession) -> User:
    return await make_user(db_session, "teacher_alice", "TEACHER")


@pytest.fixture()
async def teacher(db_session: AsyncSession, teacher_user: User) -> Teacher:
    return await make_teacher(db_session, "Alice Teacher", "alice.teacher@university.edu", teacher_user)


@pytest.fixture()
async def error_client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Client that gets the 500 response instead of the re-raised exception."""
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
