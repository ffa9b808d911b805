"""
Tests for engine bootstrap helpers against a temporary SQLite file.
"""

import pytest
from sqlalchemy import inspect

from consult_admin.core import config as core_config
from consult_admin.core import database as db


@pytest.fixture
async def temp_database(tmp_path, monkeypatch):
    """Point the cached engine at a throwaway SQLite file."""
    db_file = tmp_path / "admin.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{db_file}")
    core_config.get_settings.cache_clear()
    db.get_engine.cache_clear()
    db.get_sessionmaker.cache_clear()

    yield db_file

    await db.close_database_connections()
    core_config.get_settings.cache_clear()


async def test_create_tables_builds_schema(temp_database) -> None:
    await db.create_tables()

    async with db.get_engine().connect() as conn:
        tables = await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names())

    assert {
        "accounts",
        "roles",
        "account_roles",
        "companies",
        "company_activities",
        "company_activity_links",
    } <= set(tables)


async def test_health_check_reports_healthy(temp_database) -> None:
    status = await db.DatabaseManager.health_check()

    assert status["status"] == "healthy"
    assert status["details"]["database_url"].startswith("sqlite+aiosqlite")


async def test_session_context_manager(temp_database) -> None:
    await db.create_tables()

    async with db.get_db_session() as session:
        assert session.is_active
