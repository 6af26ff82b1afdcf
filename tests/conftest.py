"""Pytest configuration for all tests."""

from datetime import datetime, timezone
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from tenantaccess.core.config import Settings
from tenantaccess.core.hooks import HookRegistry
from tenantaccess.domain.services import (
    AccountDirectory,
    AccountInvitation,
    EntityLockRegistry,
    RoleRegistry,
)
from tenantaccess.infrastructure.persistence import models  # noqa: F401
from tenantaccess.infrastructure.persistence.database import Base, enable_sqlite_foreign_keys
from tenantaccess.infrastructure.persistence.models import RoleModel

COMPANY_ID = "acme"
OTHER_COMPANY_ID = "globex"
PASSWORD = "Secret123"
FIXED_NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


async def _create_schema(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def _seed_roles(session_maker: async_sessionmaker[AsyncSession]) -> None:
    """Seed Admin (system, id 1), Clerk (id 2) and Accountant (id 3) for acme."""
    async with session_maker() as session:
        session.add_all(
            [
                RoleModel(
                    company_id=COMPANY_ID,
                    name="Admin",
                    description="Administrators",
                    permissions=["Dashboard", "User Management", "Company Settings"],
                    is_system=True,
                ),
                RoleModel(
                    company_id=COMPANY_ID,
                    name="Clerk",
                    description="Front office clerks",
                    permissions=["Dashboard", "Sales"],
                ),
                RoleModel(
                    company_id=COMPANY_ID,
                    name="Accountant",
                    description="Bookkeeping",
                    permissions=["Dashboard", "Accounting", "Banking", "Reports"],
                ),
            ]
        )
        await session.commit()


@pytest.fixture
def settings() -> Settings:
    """Settings with the default credential policy and catalogs."""
    return Settings(environment="testing", _env_file=None)


@pytest.fixture
def hook_registry() -> HookRegistry:
    return HookRegistry()


@pytest.fixture
def locks() -> EntityLockRegistry:
    return EntityLockRegistry()


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session.

    Uses an in-memory SQLite database with foreign keys enforced and the
    acme roles seeded.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )
    enable_sqlite_foreign_keys(engine)
    await _create_schema(engine)

    session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await _seed_roles(session_maker)

    async with session_maker() as session:
        yield session
        await session.rollback()

    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(tmp_path) -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """File-backed SQLite for tests that need several independent sessions."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'tenantaccess.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    enable_sqlite_foreign_keys(engine)
    await _create_schema(engine)

    session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await _seed_roles(session_maker)

    yield session_maker

    await engine.dispose()


@pytest.fixture
def role_registry(db_session, settings, hook_registry, locks) -> RoleRegistry:
    return RoleRegistry(
        db_session, settings=settings, hooks=hook_registry, locks=locks, clock=lambda: FIXED_NOW
    )


@pytest.fixture
def directory(db_session, role_registry, settings, hook_registry, locks) -> AccountDirectory:
    return AccountDirectory(
        db_session,
        roles=role_registry,
        settings=settings,
        hooks=hook_registry,
        locks=locks,
        clock=lambda: FIXED_NOW,
    )


@pytest.fixture
def make_invitation():
    """Factory for valid invitations to the acme Clerk role."""

    def _make(**overrides) -> AccountInvitation:
        values = {
            "username": "jdoe",
            "full_name": "Jane Doe",
            "email": "jane.doe@example.com",
            "role": "Clerk",
            "department": "Sales",
            "password": PASSWORD,
            "confirm_password": PASSWORD,
        }
        values.update(overrides)
        return AccountInvitation(**values)

    return _make


@pytest_asyncio.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client with overridden database dependency."""
    from tenantaccess.infrastructure.api.app import app
    from tenantaccess.infrastructure.persistence.database import get_db_session

    app.dependency_overrides[get_db_session] = lambda: db_session

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides = {}
