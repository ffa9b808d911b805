"""
Repository layer: generic data access and the SQL-backed identity stores.
"""

from .account import AccountRepository
from .base import BaseRepository
from .contracts import AccountStore, RoleStore
from .role import RoleRepository

__all__ = [
    "AccountRepository",
    "AccountStore",
    "BaseRepository",
    "RoleRepository",
    "RoleStore",
]
