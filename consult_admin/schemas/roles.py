"""
Role administration schemas.
"""

from pydantic import BaseModel, Field


class CreateRoleRequest(BaseModel):
    """Role creation payload"""

    role_name: str = Field(..., description="Name of the new role")


class UpdateRoleRequest(BaseModel):
    """Role rename payload"""

    role_id: str = Field(..., min_length=1, description="Role identifier")
    role_name: str = Field(..., description="New role name")
