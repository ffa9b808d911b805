"""Role administration service."""

from consult_admin.core.logger import get_logger, log_function_call
from consult_admin.core.results import IdentityResult, role_not_found
from consult_admin.models.role import Role
from consult_admin.repositories.contracts import AccountStore, RoleStore
from consult_admin.schemas.roles import CreateRoleRequest, UpdateRoleRequest

logger = get_logger(__name__)


class RoleService:
    """Create, rename and delete roles."""

    def __init__(self, account_store: AccountStore, role_store: RoleStore) -> None:
        self.account_store = account_store
        self.role_store = role_store

    @log_function_call
    async def create_role(self, dto: CreateRoleRequest) -> IdentityResult:
        result = await self.role_store.create(Role(name=dto.role_name))
        if not result.succeeded:
            logger.info(
                "Role creation rejected",
                role_name=dto.role_name,
                errors=result.descriptions,
            )
        return result

    @log_function_call
    async def update_role(self, dto: UpdateRoleRequest) -> IdentityResult:
        role = await self.role_store.find_by_id(dto.role_id)
        if role is None:
            logger.info("Role not found", role_id=dto.role_id)
            return role_not_found(dto.role_id)

        role.name = dto.role_name
        return await self.role_store.update(role)

    @log_function_call
    async def delete_role(self, role_id: str) -> IdentityResult:
        """Strip the role from every holder, then delete it.

        Removals run one account at a time and are not rolled back. A failed
        removal does not stop the remaining ones, but it keeps the role in
        place and the returned failure carries every removal error.
        """
        role = await self.role_store.find_by_id(role_id)
        if role is None:
            logger.info("Role not found", role_id=role_id)
            return role_not_found(role_id)

        holders = await self.account_store.get_users_in_role(role.name)
        removals: list[IdentityResult] = []
        for account in holders:
            removal = await self.account_store.remove_from_role(account, role.name)
            if not removal.succeeded:
                logger.warning(
                    "Failed to detach role from account",
                    role_id=role_id,
                    account_id=account.id,
                    errors=removal.descriptions,
                )
            removals.append(removal)

        detached = IdentityResult.combine(removals)
        if not detached.succeeded:
            logger.warning(
                "Role kept after partial detach",
                role_id=role_id,
                failed=len(detached.errors),
                holders=len(holders),
            )
            return detached

        logger.info("Role detached from holders", role_id=role_id, holders=len(holders))
        return await self.role_store.delete(role)
