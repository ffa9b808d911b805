"""Base models with typed SQLAlchemy mapping."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def new_identifier() -> str:
    """Opaque string identity used for accounts and roles."""
    return str(uuid.uuid4())


def normalize_key(value: str | None) -> str | None:
    """Upper-cased lookup key for names and emails."""
    if value is None:
        return None
    return value.strip().upper()


class Base(DeclarativeBase):
    """Declarative base for all SQLAlchemy models."""


class TimestampMixin:
    """Mixin for created/updated timestamps."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


class StringIdMixin:
    """Mixin for identity-store entities keyed by an opaque string."""

    id: Mapped[str] = mapped_column(
        String(64), primary_key=True, default=new_identifier
    )
