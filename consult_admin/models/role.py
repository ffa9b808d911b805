"""Role model and the account/role membership relation."""

from __future__ import annotations

from sqlalchemy import Column, ForeignKey, String, Table
from sqlalchemy.orm import Mapped, mapped_column, validates

from .base import Base, StringIdMixin, normalize_key

# Membership is only written through the account store's add/remove
# operations; neither Account nor Role maps it as a collection.
account_roles = Table(
    "account_roles",
    Base.metadata,
    Column(
        "account_id",
        String(64),
        ForeignKey("accounts.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "role_id",
        String(64),
        ForeignKey("roles.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class Role(Base, StringIdMixin):
    """Named permission group."""

    __tablename__ = "roles"

    name: Mapped[str] = mapped_column(String(256), nullable=False)
    normalized_name: Mapped[str | None] = mapped_column(
        String(256), unique=True, index=True
    )

    @validates("name")
    def _normalize_name(self, key: str, value: str) -> str:
        self.normalized_name = normalize_key(value)
        return value

    def __repr__(self) -> str:
        return f"Role(id={self.id!r}, name={self.name!r})"
