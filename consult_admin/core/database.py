"""Database configuration and connection management."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from functools import lru_cache
from typing import Any
from urllib.parse import urlparse, urlunparse

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from consult_admin.core.config import get_settings
from consult_admin.core.logger import get_logger
from consult_admin.models.base import Base

logger = get_logger()


def _sanitize_database_url(database_url: str) -> str:
    """Remove credentials from DATABASE_URL for safe logging."""
    try:
        parsed = urlparse(database_url)
        if parsed.hostname:
            safe_netloc = parsed.hostname
            if parsed.port:
                safe_netloc = f"{safe_netloc}:{parsed.port}"
        else:
            safe_netloc = ""
        return urlunparse((parsed.scheme, safe_netloc, parsed.path, "", "", ""))
    except ValueError:
        return "configured"


@lru_cache
def get_engine() -> AsyncEngine:
    """Create the async engine for the configured database (cached)."""
    engine_kwargs = get_settings().get_database_settings()
    url = engine_kwargs.pop("url")
    logger.info("Creating database engine", url=_sanitize_database_url(url))
    return create_async_engine(url, **engine_kwargs)


@lru_cache
def get_sessionmaker() -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        get_engine(),
        class_=AsyncSession,
        expire_on_commit=False,
    )


@asynccontextmanager
async def get_db_session() -> AsyncIterator[AsyncSession]:
    """Context manager for database sessions"""
    async with get_sessionmaker()() as session:
        try:
            yield session
        finally:
            await session.close()


async def create_tables() -> None:
    """Create database tables for a fresh database."""
    try:
        async with get_engine().begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables created successfully")
    except Exception as e:
        logger.error("Failed to create database tables", error=str(e))
        raise


async def close_database_connections() -> None:
    """Close all database connections"""
    await get_engine().dispose()
    get_sessionmaker.cache_clear()
    get_engine.cache_clear()
    logger.info("Database connections closed")


class DatabaseManager:
    """Database connection manager with health checks."""

    @staticmethod
    async def health_check() -> dict[str, Any]:
        """Check database connectivity"""
        database_url = get_settings().async_database_url
        try:
            async with get_db_session() as session:
                await session.execute(text("SELECT 1"))
                return {
                    "status": "healthy",
                    "message": "Database connection successful",
                    "details": {"database_url": _sanitize_database_url(database_url)},
                }
        except Exception as e:
            logger.error("Database health check failed", error=str(e))
            return {
                "status": "unhealthy",
                "message": f"Database connection failed: {e!s}",
                "details": {"error": str(e)},
            }
