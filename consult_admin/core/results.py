"""Uniform success/failure outcome for account and role mutations."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class IdentityError:
    """Single failure reported by a store or service."""

    code: str
    description: str


@dataclass(frozen=True, slots=True)
class IdentityResult:
    """Outcome of an administration operation."""

    succeeded: bool
    errors: list[IdentityError] = field(default_factory=list)

    @classmethod
    def success(cls) -> IdentityResult:
        return cls(succeeded=True)

    @classmethod
    def failed(cls, *errors: IdentityError) -> IdentityResult:
        return cls(succeeded=False, errors=list(errors))

    @classmethod
    def combine(cls, results: Iterable[IdentityResult]) -> IdentityResult:
        """Merge results in order; succeeds only if every input succeeded."""
        errors: list[IdentityError] = []
        succeeded = True
        for result in results:
            succeeded = succeeded and result.succeeded
            errors.extend(result.errors)
        return cls(succeeded=succeeded, errors=errors)

    @property
    def descriptions(self) -> list[str]:
        return [error.description for error in self.errors]


def role_not_found(role_id: str) -> IdentityResult:
    return IdentityResult.failed(
        IdentityError(code="RoleNotFound", description=f"Role with ID {role_id} not found.")
    )


def user_not_found(user_id: str) -> IdentityResult:
    return IdentityResult.failed(
        IdentityError(code="UserNotFound", description=f"User with ID {user_id} not found.")
    )
