"""User administration service: account CRUD and directory queries."""

from collections.abc import Iterable, Sequence

from sqlalchemy import inspect, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from consult_admin.core.logger import get_logger, log_function_call
from consult_admin.core.results import IdentityResult, user_not_found
from consult_admin.models.account import Account
from consult_admin.models.company import Company, CompanyActivity, CompanyActivityLink
from consult_admin.models.role import Role
from consult_admin.repositories.base import BaseRepository
from consult_admin.repositories.contracts import AccountStore, RoleStore
from consult_admin.schemas.users import (
    CreateUserRequest,
    UpdateUserRequest,
    UserWithCompany,
)

logger = get_logger(__name__)


class UserService:
    """Service for account administration and account search."""

    def __init__(
        self,
        account_store: AccountStore,
        role_store: RoleStore,
        db: AsyncSession,
    ) -> None:
        self.account_store = account_store
        self.role_store = role_store
        self.db = db
        self.activity_repo = BaseRepository(db, CompanyActivity)
        self.company_repo = BaseRepository(db, Company)

    # ------------------------------------------------------------------
    # Accounts
    # ------------------------------------------------------------------

    async def get_all_users(self) -> list[Account]:
        result = await self.db.execute(select(Account))
        return list(result.scalars().all())

    async def get_all_users_with_company(
        self, accounts: Iterable[Account] | None = None
    ) -> list[UserWithCompany]:
        """Pair accounts with their companies.

        Without ``accounts`` every stored account is loaded with its company.
        With ``accounts`` only those are joined, in the given order, using
        each account's loaded ``company`` and one lookup for the rest.
        """
        if accounts is None:
            stmt = select(Account).options(selectinload(Account.company))
            result = await self.db.execute(stmt)
            return [
                UserWithCompany(user=account, company=account.company)
                for account in result.scalars().all()
            ]

        return await self._join_companies(accounts)

    async def get_user_by_id(self, user_id: str) -> Account | None:
        return await self.account_store.find_by_id(user_id)

    @log_function_call
    async def create_user(self, dto: CreateUserRequest) -> IdentityResult:
        """Create the account, then assign any requested roles."""
        account = Account(
            user_name=dto.email,
            email=dto.email,
            first_name=dto.first_name,
            last_name=dto.last_name,
            company_id=dto.company_id,
        )
        result = await self.account_store.create(account, dto.password)
        if not result.succeeded:
            logger.info(
                "Account creation rejected",
                user_name=dto.email,
                errors=result.descriptions,
            )
            return result

        if not dto.roles:
            return result

        assignments = [
            await self.account_store.add_to_role(account, role_name)
            for role_name in dto.roles
        ]
        return IdentityResult.combine([result, *assignments])

    @log_function_call
    async def update_user(self, dto: UpdateUserRequest) -> IdentityResult:
        account = await self.account_store.find_by_id(dto.id)
        if account is None:
            logger.info("User not found", user_id=dto.id)
            return user_not_found(dto.id)

        account.first_name = dto.first_name
        account.last_name = dto.last_name
        return await self.account_store.update(account)

    @log_function_call
    async def delete_user(self, user_id: str) -> IdentityResult:
        """Remove every role membership, then delete the account.

        Same policy as role deletion: all removals are attempted, and the
        account survives if any of them failed.
        """
        account = await self.account_store.find_by_id(user_id)
        if account is None:
            logger.info("User not found", user_id=user_id)
            return user_not_found(user_id)

        role_names = await self.account_store.get_roles(account)
        removals: list[IdentityResult] = []
        for role_name in role_names:
            removal = await self.account_store.remove_from_role(account, role_name)
            if not removal.succeeded:
                logger.warning(
                    "Failed to remove role from account",
                    user_id=user_id,
                    role_name=role_name,
                    errors=removal.descriptions,
                )
            removals.append(removal)

        detached = IdentityResult.combine(removals)
        if not detached.succeeded:
            return detached

        return await self.account_store.delete(account)

    # ------------------------------------------------------------------
    # Roles and directory
    # ------------------------------------------------------------------

    async def get_all_roles(self) -> list[Role]:
        return list(await self.role_store.list_roles())

    async def get_role_by_id(self, role_id: str) -> Role | None:
        return await self.role_store.find_by_id(role_id)

    async def get_all_activities(self) -> list[CompanyActivity]:
        return await self.activity_repo.get_all()

    async def get_company_by_user(self, account: Account) -> Company | None:
        if account.company_id is None:
            return None
        return await self.company_repo.get_by_id(account.company_id)

    async def get_roles_by_user(self, account: Account) -> list[str]:
        return list(await self.account_store.get_roles(account))

    async def get_users_by_role(self, role_name: str) -> list[UserWithCompany]:
        accounts = await self.account_store.get_users_in_role(role_name)
        return await self._join_companies(accounts)

    async def get_users_by_roles(self, role_names: Sequence[str]) -> list[UserWithCompany]:
        """Union of the roles' members, each account listed once."""
        seen: set[str] = set()
        accounts: list[Account] = []
        for role_name in role_names:
            for account in await self.account_store.get_users_in_role(role_name):
                if account.id in seen:
                    continue
                seen.add(account.id)
                accounts.append(account)
        return await self._join_companies(accounts)

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    async def search_by_activity(self, activity_description: str) -> list[Account]:
        stmt = (
            select(Account)
            .join(Company, Account.company_id == Company.id)
            .join(CompanyActivityLink, CompanyActivityLink.company_id == Company.id)
            .join(CompanyActivity, CompanyActivity.id == CompanyActivityLink.activity_id)
            .where(CompanyActivity.description == activity_description)
            .distinct()
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def search_by_last_name(self, fragment: str) -> list[Account]:
        stmt = select(Account).where(Account.last_name.contains(fragment, autoescape=True))
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def search_by_company_name(self, fragment: str) -> list[Account]:
        stmt = (
            select(Account)
            .join(Company, Account.company_id == Company.id)
            .where(Company.name.contains(fragment, autoescape=True))
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def _join_companies(self, accounts: Iterable[Account]) -> list[UserWithCompany]:
        """Pair accounts with companies, preferring relationships already in memory.

        Only accounts whose ``company`` is not loaded cost a lookup, and all of
        them share one ``IN`` query.
        """
        accounts = list(accounts)
        in_memory: dict[int, Company | None] = {}
        missing_ids: set[int] = set()
        for index, account in enumerate(accounts):
            if "company" not in inspect(account).unloaded:
                company = account.company
                if company is not None or account.company_id is None:
                    in_memory[index] = company
                    continue
            if account.company_id is not None:
                missing_ids.add(account.company_id)

        companies: dict[int, Company] = {}
        if missing_ids:
            result = await self.db.execute(select(Company).where(Company.id.in_(missing_ids)))
            companies = {company.id: company for company in result.scalars().all()}

        return [
            UserWithCompany(
                user=account,
                company=in_memory[index]
                if index in in_memory
                else companies.get(account.company_id),
            )
            for index, account in enumerate(accounts)
        ]
