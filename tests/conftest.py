"""
Pytest configuration and shared fixtures.
"""

import os

# Set required environment variables before package import
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from collections.abc import AsyncGenerator

import pytest
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from consult_admin.core.password_service import PasswordService
from consult_admin.models import Base
from consult_admin.repositories.account import AccountRepository
from consult_admin.repositories.role import RoleRepository
from consult_admin.services.role import RoleService
from consult_admin.services.user import UserService

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    """SQLite ignores ON DELETE clauses unless foreign keys are switched on."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@pytest.fixture
async def test_engine():
    """Fresh in-memory database per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def test_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session."""
    session_factory = async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False
    )
    async with session_factory() as session:
        try:
            yield session
        finally:
            if session.in_transaction():
                await session.rollback()


@pytest.fixture(scope="session")
def password_service() -> PasswordService:
    """Argon2 with low cost parameters to keep the suite fast."""
    service = PasswordService(schemes=["argon2"])
    service.pwd_context.update(argon2__time_cost=1, argon2__memory_cost=1024)
    return service


@pytest.fixture
def account_store(test_session, password_service) -> AccountRepository:
    return AccountRepository(test_session, password_service=password_service)


@pytest.fixture
def role_store(test_session) -> RoleRepository:
    return RoleRepository(test_session)


@pytest.fixture
def user_service(account_store, role_store, test_session) -> UserService:
    return UserService(account_store, role_store, test_session)


@pytest.fixture
def role_service(account_store, role_store) -> RoleService:
    return RoleService(account_store, role_store)
