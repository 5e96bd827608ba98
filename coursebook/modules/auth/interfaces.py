"""Authentication interfaces following Black Box Design principles."""
from enum import Enum
from typing import Any, Optional, Protocol


class DenialReason(str, Enum):
    """Why a request was denied. Internal diagnostics only."""

    MISSING_CREDENTIALS = "missing-credentials"
    UNKNOWN_IDENTITY = "unknown-identity"
    BAD_SECRET = "bad-secret"


class UserDirectory(Protocol):
    """Protocol for user lookup - allows swappable storage backends."""

    async def find_by_identity(self, identity: str) -> Optional[Any]:
        """
        Look up a user by login identity.

        Args:
            identity: Email address the caller claims

        Returns:
            User object exposing `email_address` and `password_hash`, or None
        """
        ...


class CredentialVerifier(Protocol):
    """Protocol for secret comparison against a stored hash."""

    def verify(self, claimed_secret: str, stored_hash: str) -> bool:
        """Return True only if the secret matches the hash."""
        ...

    def verify_dummy(self, claimed_secret: str) -> None:
        """Spend the same effort as verify() without a real hash."""
        ...
