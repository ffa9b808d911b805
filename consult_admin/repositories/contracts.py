"""Store contracts the administration services depend on."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from consult_admin.core.results import IdentityResult
from consult_admin.models.account import Account
from consult_admin.models.role import Role


@runtime_checkable
class AccountStore(Protocol):
    """Account persistence and role membership."""

    async def create(self, account: Account, credential: str) -> IdentityResult: ...

    async def find_by_id(self, account_id: str) -> Account | None: ...

    async def find_by_name(self, user_name: str) -> Account | None: ...

    async def update(self, account: Account) -> IdentityResult: ...

    async def delete(self, account: Account) -> IdentityResult: ...

    async def get_roles(self, account: Account) -> list[str]: ...

    async def is_in_role(self, account: Account, role_name: str) -> bool: ...

    async def add_to_role(self, account: Account, role_name: str) -> IdentityResult: ...

    async def remove_from_role(
        self, account: Account, role_name: str
    ) -> IdentityResult: ...

    async def get_users_in_role(self, role_name: str) -> Sequence[Account]: ...


@runtime_checkable
class RoleStore(Protocol):
    """Role persistence."""

    async def create(self, role: Role) -> IdentityResult: ...

    async def find_by_id(self, role_id: str) -> Role | None: ...

    async def find_by_name(self, role_name: str) -> Role | None: ...

    async def update(self, role: Role) -> IdentityResult: ...

    async def delete(self, role: Role) -> IdentityResult: ...

    async def list_roles(self) -> list[Role]: ...
