"""Application-specific exceptions.

Expected administration failures (unknown ids, duplicate names) are
reported through ``IdentityResult`` values, not exceptions.
"""

from typing import Any


class ConfigurationError(Exception):
    """Invalid or unusable application configuration."""

    def __init__(
        self,
        message: str,
        setting: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.setting = setting
        self.details = details or {}

    def __repr__(self) -> str:
        """Return detailed string representation for logging and debugging."""
        setting_info = f", setting={self.setting!r}" if self.setting else ""
        return f"ConfigurationError(message={self.message!r}{setting_info})"


class CredentialError(Exception):
    """A credential could not be turned into a stored hash."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __repr__(self) -> str:
        """Return detailed string representation for logging and debugging."""
        return f"CredentialError(message={self.message!r})"
