"""
Tests for the SQL-backed account and role stores.
"""

import pytest
from sqlalchemy import text

from consult_admin.models.account import Account
from consult_admin.models.role import Role
from consult_admin.repositories.contracts import AccountStore, RoleStore


class TestRoleRepository:
    """Role store behaviour."""

    def test_satisfies_role_store_contract(self, role_store) -> None:
        assert isinstance(role_store, RoleStore)

    async def test_create_and_find(self, role_store) -> None:
        role = Role(name="Auditor")

        result = await role_store.create(role)

        assert result.succeeded is True
        assert role.id is not None
        assert (await role_store.find_by_id(role.id)) is role
        assert (await role_store.find_by_name("AUDITOR")) is role

    @pytest.mark.parametrize("name", ["", "   "])
    async def test_create_rejects_blank_name(self, role_store, name) -> None:
        result = await role_store.create(Role(name=name))

        assert result.succeeded is False
        assert [e.code for e in result.errors] == ["InvalidRoleName"]
        assert await role_store.list_roles() == []

    async def test_list_roles_sorted_by_name(self, role_store) -> None:
        for name in ("User", "Admin", "Manager"):
            await role_store.create(Role(name=name))

        roles = await role_store.list_roles()

        assert [r.name for r in roles] == ["Admin", "Manager", "User"]

    async def test_update_rejected_name_is_discarded(self, role_store) -> None:
        role = Role(name="Analyst")
        await role_store.create(role)

        role.name = ""
        result = await role_store.update(role)

        assert result.succeeded is False
        assert role.name == "Analyst"

    async def test_delete(self, role_store) -> None:
        role = Role(name="Temp")
        await role_store.create(role)

        result = await role_store.delete(role)

        assert result.succeeded is True
        assert await role_store.find_by_name("Temp") is None


class TestAccountRepository:
    """Account store behaviour."""

    @pytest.fixture
    async def account(self, account_store) -> Account:
        account = Account(user_name="jane@example.com", email="jane@example.com", last_name="Doe")
        result = await account_store.create(account, "S3cret-value")
        assert result.succeeded, result.descriptions
        return account

    @pytest.fixture
    async def admin_role(self, role_store) -> Role:
        role = Role(name="Admin")
        await role_store.create(role)
        return role

    def test_satisfies_account_store_contract(self, account_store) -> None:
        assert isinstance(account_store, AccountStore)

    async def test_create_hashes_credential(self, account_store, account, password_service) -> None:
        assert account.id is not None
        assert account.password_hash is not None
        assert "S3cret-value" not in account.password_hash
        assert password_service.verify_password("S3cret-value", account.password_hash)
        assert (await account_store.find_by_name("JANE@EXAMPLE.COM")) is account

    async def test_create_requires_credential(self, account_store) -> None:
        result = await account_store.create(Account(user_name="x@example.com"), "")

        assert result.succeeded is False
        assert result.descriptions == ["A password is required."]

    async def test_create_rejects_blank_user_name(self, account_store) -> None:
        result = await account_store.create(Account(user_name=" "), "S3cret-value")

        assert result.succeeded is False
        assert [e.code for e in result.errors] == ["InvalidUserName"]

    async def test_create_rejects_taken_email(self, account_store, account) -> None:
        other = Account(user_name="someone-else", email="Jane@Example.com")

        result = await account_store.create(other, "S3cret-value")

        assert result.succeeded is False
        assert result.descriptions == ["Email 'Jane@Example.com' is already taken."]

    async def test_update_persists_changes(self, account_store, account) -> None:
        account.last_name = "Smith"

        result = await account_store.update(account)

        assert result.succeeded is True
        assert (await account_store.find_by_id(account.id)).last_name == "Smith"

    async def test_role_membership_round(self, account_store, account, admin_role) -> None:
        assert await account_store.is_in_role(account, "Admin") is False

        added = await account_store.add_to_role(account, "admin")

        assert added.succeeded is True
        assert await account_store.is_in_role(account, "Admin") is True
        assert await account_store.get_roles(account) == ["Admin"]
        assert [a.id for a in await account_store.get_users_in_role("ADMIN")] == [account.id]

        removed = await account_store.remove_from_role(account, "Admin")

        assert removed.succeeded is True
        assert await account_store.get_roles(account) == []

    async def test_add_to_role_twice_fails(self, account_store, account, admin_role) -> None:
        await account_store.add_to_role(account, "Admin")

        result = await account_store.add_to_role(account, "Admin")

        assert result.succeeded is False
        assert result.descriptions == ["User already in role 'Admin'."]

    async def test_remove_from_role_not_held_fails(
        self, account_store, account, admin_role
    ) -> None:
        result = await account_store.remove_from_role(account, "Admin")

        assert result.succeeded is False
        assert result.descriptions == ["User is not in role 'Admin'."]

    async def test_unknown_role(self, account_store, account) -> None:
        result = await account_store.add_to_role(account, "Ghost")

        assert result.succeeded is False
        assert result.descriptions == ["Role Ghost does not exist."]
        assert await account_store.get_users_in_role("Ghost") == []
        assert await account_store.is_in_role(account, "Ghost") is False

    async def test_deleting_role_drops_memberships(
        self, account_store, role_store, account, admin_role
    ) -> None:
        await account_store.add_to_role(account, "Admin")

        await role_store.delete(admin_role)

        assert await account_store.get_roles(account) == []

    async def test_rejected_update_does_not_block_later_writes(
        self, account_store, account, admin_role
    ) -> None:
        """A refused rename is discarded instead of being flushed by the next write."""
        other = Account(user_name="john@example.com", email="john@example.com")
        await account_store.create(other, "S3cret-value")

        other.user_name = account.user_name
        rejected = await account_store.update(other)

        assert rejected.descriptions == ["Username 'jane@example.com' is already taken."]
        assert other.user_name == "john@example.com"

        added = await account_store.add_to_role(account, "Admin")

        assert added.succeeded is True
        assert await account_store.get_roles(account) == ["Admin"]

    async def test_update_of_vanished_account_reports_concurrency_failure(
        self, account_store, account, test_session
    ) -> None:
        await test_session.commit()
        await test_session.execute(
            text("DELETE FROM accounts WHERE id = :id"), {"id": account.id}
        )
        await test_session.commit()

        account.last_name = "Smith"
        result = await account_store.update(account)

        assert result.succeeded is False
        assert [e.code for e in result.errors] == ["ConcurrencyFailure"]
        assert result.descriptions == [
            "Optimistic concurrency failure, object has been modified."
        ]
