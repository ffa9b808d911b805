"""
Role repository implementing the role store contract.
"""

from sqlalchemy import inspect, select
from sqlalchemy.ext.asyncio import AsyncSession

from consult_admin.core.logger import get_logger
from consult_admin.core.results import IdentityError, IdentityResult
from consult_admin.models.base import normalize_key
from consult_admin.models.role import Role

from .base import BaseRepository

logger = get_logger()


class RoleRepository(BaseRepository[Role]):
    """SQL-backed role store."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Role)

    async def find_by_id(self, role_id: str) -> Role | None:
        return await self.get_by_id(role_id)

    async def find_by_name(self, role_name: str) -> Role | None:
        """Case-insensitive lookup through the normalized name."""
        return await self.get_by_field("normalized_name", normalize_key(role_name))

    async def list_roles(self) -> list[Role]:
        result = await self.session.execute(select(Role).order_by(Role.name))
        return list(result.scalars().all())

    async def create(self, role: Role) -> IdentityResult:
        validation = await self._validate(role)
        if not validation.succeeded:
            return validation
        return await self.add(role)

    async def update(self, role: Role) -> IdentityResult:
        validation = await self._validate(role)
        if not validation.succeeded:
            if inspect(role).persistent:
                # Drop the rejected in-memory change
                with self.session.no_autoflush:
                    await self.session.refresh(role)
            return validation
        return await self.save(role)

    async def delete(self, role: Role) -> IdentityResult:
        return await self.remove(role)

    async def _validate(self, role: Role) -> IdentityResult:
        """Reject blank names and names already held by another role."""
        if not role.name or not role.name.strip():
            return IdentityResult.failed(
                IdentityError(
                    code="InvalidRoleName",
                    description=f"Role name '{role.name or ''}' is invalid.",
                )
            )

        with self.session.no_autoflush:
            existing = await self.find_by_name(role.name)
        if existing is not None and existing.id != role.id:
            logger.info("Duplicate role name rejected", role_name=role.name)
            return IdentityResult.failed(
                IdentityError(
                    code="DuplicateRoleName",
                    description=f"Role name '{role.name}' is already taken.",
                )
            )
        return IdentityResult.success()
