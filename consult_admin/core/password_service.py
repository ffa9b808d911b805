"""Credential hashing for account creation, backed by Passlib.

The account store hashes the credential it is handed with the first scheme
in ``PASSWORD_HASH_SCHEMES`` (argon2id by default) and never keeps the
plaintext. ``verify_password`` is the matching check for a stored hash.
"""

from passlib.context import CryptContext
from passlib.exc import UnknownHashError

from .exceptions import CredentialError


class PasswordService:
    """Hashes and checks account credentials."""

    def __init__(self, schemes: list[str] | None = None) -> None:
        if schemes is None:
            from .config import settings

            schemes = settings.PASSWORD_HASH_SCHEMES
        self.pwd_context = CryptContext(
            schemes=schemes,
            argon2__type="ID",
            argon2__time_cost=3,
            argon2__memory_cost=65536,  # 64 MiB
            argon2__parallelism=4,
        )

    def get_password_hash(self, password: str) -> str:
        """Hash a credential exactly as supplied."""
        if not password:
            raise CredentialError("Password cannot be empty")

        try:
            return self.pwd_context.hash(password)
        except (TypeError, ValueError) as e:
            raise CredentialError(f"Failed to hash password: {e}") from e

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        if not plain_password or not hashed_password:
            return False

        try:
            return self.pwd_context.verify(plain_password, hashed_password)
        except (UnknownHashError, ValueError):
            return False
