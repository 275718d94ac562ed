"""Pytest configuration and fixtures for API tests."""
import os

# Set test env BEFORE any imports that use config
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["SESSION_SECRET"] = "test-session-secret"
os.environ["GOOGLE_CLIENT_ID"] = "test-client-id"
os.environ["GOOGLE_CLIENT_SECRET"] = "test-client-secret"
os.environ["SERVER_BASE_URL"] = "http://test"
os.environ["CLIENT_BASE_URL"] = "http://client.test/dashboard"
os.environ["INITIAL_ADMIN_GOOGLE_ID"] = ""

import pytest
from httpx import ASGITransport, AsyncClient

import config
from league.models import Role, User
from league.models.base import Base, async_session_factory, engine, init_db
from league.services import identity
from web.api.main import app


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture(autouse=True)
async def _init_db():
    """Fresh tables for every test (ASGI lifespan doesn't run with httpx)."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await init_db()
    yield
    app.dependency_overrides.clear()


@pytest.fixture
async def db_session():
    async with async_session_factory() as session:
        yield session


@pytest.fixture
async def client():
    """Async HTTP client for testing the API."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


async def create_user(display_name: str, admin: bool = False) -> User:
    """Insert a user directly, bypassing Google."""
    from sqlalchemy import select

    async with async_session_factory() as session:
        role_id = None
        if admin:
            result = await session.execute(select(Role.id).where(Role.name == config.ADMIN_ROLE_NAME))
            role_id = result.scalar_one()
        user = User(
            google_id=f"google-{display_name.lower().replace(' ', '-')}",
            email=f"{display_name.lower().replace(' ', '.')}@example.com",
            display_name=display_name,
            role_id=role_id,
        )
        session.add(user)
        await session.commit()
        await session.refresh(user)
        return user


async def login_headers(user: User) -> dict:
    """Start a session for user and return the Cookie header carrying it."""
    async with async_session_factory() as session:
        token = await identity.create_session(session, user.id)
    return {"Cookie": f"{config.SESSION_COOKIE_NAME}={token}"}


@pytest.fixture
async def player():
    return await create_user("Pat Player")


@pytest.fixture
async def admin():
    return await create_user("Ada Admin", admin=True)


@pytest.fixture
async def auth_headers(player):
    """Session cookie for a plain player."""
    return await login_headers(player)


@pytest.fixture
async def admin_headers(admin):
    """Session cookie for an admin."""
    return await login_headers(admin)


@pytest.fixture
def make_user():
    """Factory: await make_user("Name", admin=False) -> User."""
    return create_user


@pytest.fixture
def login():
    """Factory: await login(user) -> headers with that user's session cookie."""
    return login_headers
