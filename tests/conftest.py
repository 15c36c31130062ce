"""
Test configuration for pytest.

Every test gets its own in-memory SQLite database (aiosqlite) with the schema
created from the ORM metadata; HTTP tests drive the FastAPI app in-process.
"""

import os

# Settings are read at import time; configure before importing the app.
os.environ["POSTGRES_URL"] = "sqlite+aiosqlite://"
os.environ["RUN_MIGRATIONS_ON_STARTUP"] = "false"
os.environ["AUTO_SEED"] = "false"
os.environ["JWT_SECRET_KEY"] = "test-jwt-secret"
os.environ["DB_CONNECT_RETRY_BASE_DELAY"] = "0"

from typing import AsyncGenerator, Dict  # noqa: E402
from uuid import UUID  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from saas_platform.api.main import app  # noqa: E402
from saas_platform.core.security import create_access_token  # noqa: E402
from saas_platform.db.base import Base  # noqa: E402
from saas_platform.db.session import create_session_maker, get_async_session  # noqa: E402
from saas_platform.repositories.unit_of_work import UnitOfWork  # noqa: E402
from saas_platform.schemas.tenant import TenantCreate  # noqa: E402
from saas_platform.schemas.user import UserCreate  # noqa: E402
from saas_platform.services.tenant import TenantService  # noqa: E402
from saas_platform.services.user import UserService  # noqa: E402

ADMIN_PASSWORD = "S3cret-pass!"


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine) -> async_sessionmaker[AsyncSession]:
    return create_session_maker(engine)


@pytest.fixture
async def uow(session_maker) -> AsyncGenerator[UnitOfWork, None]:
    """A unit of work over a fresh session, closed after the test."""
    async with UnitOfWork(session_maker()) as unit:
        yield unit


@pytest.fixture
async def client(session_maker) -> AsyncGenerator[AsyncClient, None]:
    async def override_get_async_session():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_async_session] = override_get_async_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as test_client:
        yield test_client
    app.dependency_overrides.clear()


async def create_tenant(session_maker, code: str = "ACME", **overrides):
    """Persist a tenant through the service layer and return it."""
    data = {
        "tenant_name": f"{code} Inc",
        "tenant_code": code,
        "subscription_plan_id": "STANDARD",
        "contact_email": f"owner@{code.lower()}.example.com",
    }
    data.update(overrides)
    async with UnitOfWork(session_maker()) as unit:
        return await TenantService(unit).create(TenantCreate(**data))


async def create_user(session_maker, tenant_id: UUID, username: str = "admin", **overrides):
    """Persist a user of the tenant through the service layer and return it."""
    data = {
        "username": username,
        "email": f"{username}@acme.example.com",
        "password": ADMIN_PASSWORD,
        "first_name": "Ada",
        "last_name": "Admin",
    }
    data.update(overrides)
    async with UnitOfWork(session_maker()) as unit:
        return await UserService(unit, tenant_id).create(UserCreate(**data))


def auth_headers(tenant_id: UUID, user_id: UUID, header_tenant: UUID = None) -> Dict[str, str]:
    """Bearer token for the user plus the X-Tenant-ID header."""
    token = create_access_token(subject=str(user_id), tenant_id=str(tenant_id))
    return {
        "Authorization": f"Bearer {token}",
        "X-Tenant-ID": str(header_tenant or tenant_id),
    }


async def caller_headers(session_maker, tenant_id: UUID, username: str = "caller") -> Dict[str, str]:
    """Create an active user of the tenant and return request headers for it."""
    user = await create_user(session_maker, tenant_id, username=username)
    return auth_headers(tenant_id, user.id)
