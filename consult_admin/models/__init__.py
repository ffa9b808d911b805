"""
Database models for accounts, roles and the company directory.
"""

from .account import Account
from .base import Base, StringIdMixin, TimestampMixin
from .company import Company, CompanyActivity, CompanyActivityLink
from .role import Role, account_roles

__all__ = [
    "Account",
    "Base",
    "Company",
    "CompanyActivity",
    "CompanyActivityLink",
    "Role",
    "StringIdMixin",
    "TimestampMixin",
    "account_roles",
]
