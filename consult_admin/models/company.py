"""Company directory models: companies, activities and their links."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base

if TYPE_CHECKING:
    from .account import Account


class Company(Base):
    """Client company; read-only for the administration layer."""

    __tablename__ = "companies"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    # Owning account id, kept as a plain column: accounts already hold
    # the company foreign key.
    application_user_id: Mapped[str | None] = mapped_column(String(64), nullable=True)

    accounts: Mapped[list[Account]] = relationship(
        "Account", back_populates="company", foreign_keys="Account.company_id"
    )
    activity_links: Mapped[list[CompanyActivityLink]] = relationship(
        "CompanyActivityLink", back_populates="company", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"Company(id={self.id!r}, name={self.name!r})"


class CompanyActivity(Base):
    """Business activity a company can be tagged with."""

    __tablename__ = "company_activities"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)

    company_links: Mapped[list[CompanyActivityLink]] = relationship(
        "CompanyActivityLink", back_populates="activity", cascade="all, delete-orphan"
    )


class CompanyActivityLink(Base):
    """Many-to-many link between companies and activities."""

    __tablename__ = "company_activity_links"

    company_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("companies.id", ondelete="CASCADE"), primary_key=True
    )
    activity_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("company_activities.id", ondelete="CASCADE"), primary_key=True
    )

    company: Mapped[Company] = relationship("Company", back_populates="activity_links")
    activity: Mapped[CompanyActivity] = relationship(
        "CompanyActivity", back_populates="company_links"
    )
