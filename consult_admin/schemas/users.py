"""
User administration schemas.
"""

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from consult_admin.models.account import Account
from consult_admin.models.company import Company


class CreateUserRequest(BaseModel):
    """Account creation payload; the email doubles as the user name."""

    email: EmailStr = Field(..., description="Email address, also used as user name")
    password: str = Field(..., description="Initial credential, hashed by the store")
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    company_id: int | None = Field(default=None, description="Owning company")
    roles: list[str] = Field(default_factory=list, description="Roles to assign")

    @field_validator("email", "first_name", "last_name", mode="before")
    @classmethod
    def strip_text(cls, value: object) -> object:
        # Credential is left as supplied
        return value.strip() if isinstance(value, str) else value


class UpdateUserRequest(BaseModel):
    """Mutable account fields."""

    model_config = ConfigDict(str_strip_whitespace=True)

    id: str = Field(..., min_length=1, description="Account identifier")
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)


@dataclass(frozen=True, slots=True)
class UserWithCompany:
    """An account paired with its owning company, if any."""

    user: Account
    company: Company | None

    @property
    def company_name(self) -> str | None:
        return self.company.name if self.company is not None else None
