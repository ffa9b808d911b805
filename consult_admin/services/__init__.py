"""
Administration services for accounts and roles.
"""

from .role import RoleService
from .user import UserService

__all__ = [
    "RoleService",
    "UserService",
]
