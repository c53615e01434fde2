"""
Pytest fixtures for ArtiBrain tests.

Everything runs against a temporary SQLite file so the app's own engine and
the fixtures' sessions see the same data. The environment is set before any
artibrain module is imported, since settings are read at import time.
"""

import os
import shutil
import tempfile
import uuid
from typing import AsyncGenerator, Callable, Dict

_tmp_dir = tempfile.mkdtemp(prefix="artibrain-tests-")
TEST_DB_PATH = os.path.join(_tmp_dir, "test.db")
TEST_UPLOAD_DIR = os.path.join(_tmp_dir, "uploads")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{TEST_DB_PATH}"
os.environ["UPLOAD_DIR"] = TEST_UPLOAD_DIR
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-only-0123456789"
os.environ["ENVIRONMENT"] = "test"

from artibrain.config import get_settings

get_settings.cache_clear()

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from artibrain.database import async_session_maker, engine
from artibrain.kernel.identity.password import PasswordHasher
from artibrain.kernel.identity.principal import Principal
from artibrain.kernel.identity.session import issue_session_token
from artibrain.kernel.models import Base, User, UserRole

# Low bcrypt cost keeps fixture setup fast; verification reads the cost
# from the digest.
FAST_ROUNDS = 4
DEFAULT_PASSWORD = "CorrectHorse123"


def pytest_sessionfinish(session, exitstatus):
    """Remove the temp database and upload directory."""
    shutil.rmtree(_tmp_dir, ignore_errors=True)


@pytest_asyncio.fixture
async def database() -> AsyncGenerator[None, None]:
    """Fresh tables for each test."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(database) -> AsyncGenerator[AsyncSession, None]:
    async with async_session_maker() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def client(database) -> AsyncGenerator[AsyncClient, None]:
    """Async client against the app; rate limiting is off."""
    from artibrain.main import app

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def make_user(db_session: AsyncSession) -> Callable:
    """Factory: ``await make_user(UserRole.AUTHOR, email=...)`` -> committed User."""

    async def _make(
        role: UserRole,
        email: str = None,
        name: str = None,
        password: str = DEFAULT_PASSWORD,
    ) -> User:
        user = User(
            id=uuid.uuid4(),
            name=name or f"{role.value.title()} User",
            email=email or f"{role.value.lower()}-{uuid.uuid4().hex[:8]}@example.com",
            password_hash=PasswordHasher.hash(password, rounds=FAST_ROUNDS),
            role=role,
        )
        db_session.add(user)
        await db_session.commit()
        await db_session.refresh(user)
        return user

    return _make


@pytest_asyncio.fixture
async def admin(make_user) -> User:
    return await make_user(UserRole.ADMIN, name="Ada Admin")


@pytest_asyncio.fixture
async def editor(make_user) -> User:
    return await make_user(UserRole.EDITOR, name="Eddie Editor")


@pytest_asyncio.fixture
async def author(make_user) -> User:
    return await make_user(UserRole.AUTHOR, name="Alice Author")


@pytest_asyncio.fixture
async def other_author(make_user) -> User:
    return await make_user(UserRole.AUTHOR, name="Bob Author")


@pytest_asyncio.fixture
async def reader(make_user) -> User:
    return await make_user(UserRole.READER, name="Rita Reader")


@pytest.fixture
def principal_for() -> Callable[[User], Principal]:
    return Principal.from_user


@pytest.fixture
def headers_for() -> Callable[[User], Dict[str, str]]:
    """Bearer headers carrying a fresh session token for a user."""

    def _headers(user: User) -> Dict[str, str]:
        token = issue_session_token(Principal.from_user(user))
        return {"Authorization": f"Bearer {token.access_token}"}

    return _headers


@pytest.fixture
def sample_document() -> dict:
    """Editor JSON document used as post content."""
    return {
        "type": "doc",
        "content": [
            {"type": "paragraph", "content": [{"type": "text", "text": "Attention is all you need."}]}
        ],
    }


@pytest.fixture
def user_password() -> str:
    """Password every ``make_user`` account gets unless told otherwise."""
    return DEFAULT_PASSWORD
