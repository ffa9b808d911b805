"""
Request payloads and read views for the administration services.
"""

from .roles import CreateRoleRequest, UpdateRoleRequest
from .users import CreateUserRequest, UpdateUserRequest, UserWithCompany

__all__ = [
    "CreateRoleRequest",
    "CreateUserRequest",
    "UpdateRoleRequest",
    "UpdateUserRequest",
    "UserWithCompany",
]
