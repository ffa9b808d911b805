"""Account model for the identity store."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from .base import Base, StringIdMixin, TimestampMixin, normalize_key

if TYPE_CHECKING:
    from .company import Company


class Account(Base, StringIdMixin, TimestampMixin):
    """User account, optionally attached to a company."""

    __tablename__ = "accounts"

    user_name: Mapped[str] = mapped_column(String(256), nullable=False)
    normalized_user_name: Mapped[str | None] = mapped_column(
        String(256), unique=True, index=True
    )
    email: Mapped[str | None] = mapped_column(String(256), nullable=True)
    normalized_email: Mapped[str | None] = mapped_column(String(256), index=True)
    first_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(100), nullable=True, index=True)
    password_hash: Mapped[str | None] = mapped_column(String(255), nullable=True)

    company_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("companies.id", ondelete="SET NULL"), nullable=True
    )
    company: Mapped[Company | None] = relationship(
        "Company", back_populates="accounts", foreign_keys=[company_id]
    )

    @validates("user_name")
    def _normalize_user_name(self, key: str, value: str) -> str:
        self.normalized_user_name = normalize_key(value)
        return value

    @validates("email")
    def _normalize_email(self, key: str, value: str | None) -> str | None:
        self.normalized_email = normalize_key(value)
        return value

    def __repr__(self) -> str:
        return f"Account(id={self.id!r}, user_name={self.user_name!r})"
