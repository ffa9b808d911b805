"""
Account repository implementing the account store contract.
"""

from sqlalchemy import and_, delete, insert, inspect, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from consult_admin.core.exceptions import CredentialError
from consult_admin.core.logger import get_logger
from consult_admin.core.password_service import PasswordService
from consult_admin.core.results import IdentityError, IdentityResult
from consult_admin.models.account import Account
from consult_admin.models.base import normalize_key
from consult_admin.models.role import Role, account_roles

from .base import BaseRepository

logger = get_logger()


class AccountRepository(BaseRepository[Account]):
    """SQL-backed account store with role membership."""

    def __init__(
        self,
        session: AsyncSession,
        password_service: PasswordService | None = None,
    ) -> None:
        super().__init__(session, Account)
        self.password_service = password_service or PasswordService()

    async def find_by_id(self, account_id: str) -> Account | None:
        return await self.get_by_id(account_id)

    async def find_by_name(self, user_name: str) -> Account | None:
        return await self.get_by_field("normalized_user_name", normalize_key(user_name))

    async def find_by_email(self, email: str) -> Account | None:
        return await self.get_by_field("normalized_email", normalize_key(email))

    async def create(self, account: Account, credential: str) -> IdentityResult:
        """Validate, hash the credential and insert the account."""
        if not credential:
            return IdentityResult.failed(
                IdentityError(code="PasswordRequired", description="A password is required.")
            )

        validation = await self._validate(account)
        if not validation.succeeded:
            return validation

        try:
            account.password_hash = self.password_service.get_password_hash(credential)
        except CredentialError as exc:
            logger.warning("Credential rejected", user_name=account.user_name, error=exc.message)
            return IdentityResult.failed(
                IdentityError(code="InvalidPassword", description=exc.message)
            )

        return await self.add(account)

    async def update(self, account: Account) -> IdentityResult:
        validation = await self._validate(account)
        if not validation.succeeded:
            if inspect(account).persistent:
                # Drop the rejected in-memory change
                with self.session.no_autoflush:
                    await self.session.refresh(account)
            return validation
        return await self.save(account)

    async def delete(self, account: Account) -> IdentityResult:
        return await self.remove(account)

    async def get_roles(self, account: Account) -> list[str]:
        """Names of the roles the account currently holds."""
        stmt = (
            select(Role.name)
            .join(account_roles, account_roles.c.role_id == Role.id)
            .where(account_roles.c.account_id == account.id)
            .order_by(Role.name)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def is_in_role(self, account: Account, role_name: str) -> bool:
        role = await self._find_role(role_name)
        if role is None:
            return False
        return await self._has_membership(account.id, role.id)

    async def add_to_role(self, account: Account, role_name: str) -> IdentityResult:
        role = await self._find_role(role_name)
        if role is None:
            return _role_does_not_exist(role_name)
        if await self._has_membership(account.id, role.id):
            return IdentityResult.failed(
                IdentityError(
                    code="UserAlreadyInRole",
                    description=f"User already in role '{role_name}'.",
                )
            )

        await self.session.execute(
            insert(account_roles).values(account_id=account.id, role_id=role.id)
        )
        return await self._commit_membership("Added account to role", account, role)

    async def remove_from_role(self, account: Account, role_name: str) -> IdentityResult:
        role = await self._find_role(role_name)
        if role is None:
            return _role_does_not_exist(role_name)
        if not await self._has_membership(account.id, role.id):
            return IdentityResult.failed(
                IdentityError(
                    code="UserNotInRole",
                    description=f"User is not in role '{role_name}'.",
                )
            )

        await self.session.execute(
            delete(account_roles).where(
                and_(
                    account_roles.c.account_id == account.id,
                    account_roles.c.role_id == role.id,
                )
            )
        )
        return await self._commit_membership("Removed account from role", account, role)

    async def get_users_in_role(self, role_name: str) -> list[Account]:
        """Accounts holding the role; empty when the role does not exist."""
        stmt = (
            select(Account)
            .join(account_roles, account_roles.c.account_id == Account.id)
            .join(Role, Role.id == account_roles.c.role_id)
            .where(Role.normalized_name == normalize_key(role_name))
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def _find_role(self, role_name: str) -> Role | None:
        stmt = select(Role).where(Role.normalized_name == normalize_key(role_name))
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def _has_membership(self, account_id: str, role_id: str) -> bool:
        stmt = select(account_roles.c.account_id).where(
            and_(
                account_roles.c.account_id == account_id,
                account_roles.c.role_id == role_id,
            )
        )
        result = await self.session.execute(stmt)
        return result.first() is not None

    async def _commit_membership(
        self, message: str, account: Account, role: Role
    ) -> IdentityResult:
        try:
            await self.session.commit()
        except SQLAlchemyError as exc:
            await self.session.rollback()
            logger.error(
                "Failed to change role membership",
                account_id=account.id,
                role_name=role.name,
                error=str(exc),
            )
            raise

        logger.info(message, account_id=account.id, role_name=role.name)
        return IdentityResult.success()

    async def _validate(self, account: Account) -> IdentityResult:
        """Reject blank user names and names or emails owned by another account."""
        if not account.user_name or not account.user_name.strip():
            return IdentityResult.failed(
                IdentityError(
                    code="InvalidUserName",
                    description=(
                        f"User name '{account.user_name or ''}' is invalid, "
                        "can only contain letters or digits."
                    ),
                )
            )

        errors: list[IdentityError] = []
        with self.session.no_autoflush:
            owner = await self.find_by_name(account.user_name)
            if owner is not None and owner.id != account.id:
                errors.append(
                    IdentityError(
                        code="DuplicateUserName",
                        description=f"Username '{account.user_name}' is already taken.",
                    )
                )

            if account.email:
                owner = await self.find_by_email(account.email)
                if owner is not None and owner.id != account.id:
                    errors.append(
                        IdentityError(
                            code="DuplicateEmail",
                            description=f"Email '{account.email}' is already taken.",
                        )
                    )

        if errors:
            logger.info(
                "Account rejected",
                user_name=account.user_name,
                errors=[error.code for error in errors],
            )
            return IdentityResult.failed(*errors)
        return IdentityResult.success()


def _role_does_not_exist(role_name: str) -> IdentityResult:
    return IdentityResult.failed(
        IdentityError(code="RoleNotFound", description=f"Role {role_name} does not exist.")
    )
