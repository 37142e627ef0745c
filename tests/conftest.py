"""
Test configuration and fixtures.

Tests run against a temporary SQLite file database. DATABASE_URL is set
before anything from shortlink is imported so that the module-level engine
points at it; tables are dropped and recreated around every test.
"""

import os
import tempfile

TEST_DB_PATH = os.path.join(tempfile.gettempdir(), f"shortlink_test_{os.getpid()}.db")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{TEST_DB_PATH}"
os.environ["AUTO_CREATE_TABLES"] = "false"

import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.exc import OperationalError  # noqa: E402

from shortlink.db.models import User  # noqa: E402
from shortlink.db.session import async_session_maker, create_tables, drop_tables  # noqa: E402
from shortlink.main import app  # noqa: E402

TEST_PASSWORD = "correct horse battery"


@pytest_asyncio.fixture
async def db():
    """Fresh schema for each test."""
    await drop_tables()
    await create_tables()
    yield
    await drop_tables()


@pytest_asyncio.fixture
async def session(db):
    async with async_session_maker() as session:
        yield session


async def make_user(session, email: str) -> User:
    user = User(email=email, password_hash="unused-in-service-tests")
    session.add(user)
    await session.commit()
    await session.refresh(user)
    return user


def break_execute(monkeypatch, session, failing_calls=None):
    """
    Make session.execute raise OperationalError.

    ``failing_calls`` lists the 1-based call numbers that fail; all calls
    fail when it is None. Returns the list of call numbers seen so far.
    """
    real_execute = session.execute
    calls = []

    async def execute(*args, **kwargs):
        calls.append(len(calls) + 1)
        if failing_calls is None or calls[-1] in failing_calls:
            raise OperationalError("SELECT 1", {}, Exception("disk I/O error"))
        return await real_execute(*args, **kwargs)

    monkeypatch.setattr(session, "execute", execute)
    return calls


@pytest_asyncio.fixture
async def owner(session) -> User:
    return await make_user(session, "owner@example.com")


@pytest_asyncio.fixture
async def other_user(session) -> User:
    return await make_user(session, "other@example.com")


@pytest_asyncio.fixture
async def client(db):
    """HTTP client talking to the app in-process."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


async def register_and_login(client: AsyncClient, email: str) -> None:
    response = await client.post(
        "/api/auth/register",
        json={"email": email, "password": TEST_PASSWORD, "name": "Test User"}
    )
    assert response.status_code == 201, response.text
    response = await client.post(
        "/api/auth/login",
        json={"email": email, "password": TEST_PASSWORD}
    )
    assert response.status_code == 200, response.text


@pytest_asyncio.fixture
async def auth_client(client) -> AsyncClient:
    """HTTP client with a logged-in session cookie."""
    await register_and_login(client, "user@example.com")
    return client
