"""
Authentication Service Facade following Black Box Design principles.

This module provides:
- A clean interface for authentication that hides implementation details
- Standardized authentication results
- One uniform denial regardless of why the gate refused
"""

from dataclasses import dataclass, field
from typing import Any, Optional, Protocol

from .interfaces import DenialReason

ACCESS_DENIED_MESSAGE = "Access Denied"
ACCESS_DENIED_STATUS = 401


class AccessDeniedError(Exception):
    """Raised at the API boundary when authentication fails."""

    status_code = ACCESS_DENIED_STATUS

    def __init__(self):
        super().__init__(ACCESS_DENIED_MESSAGE)


@dataclass(frozen=True)
class AuthenticatedUser:
    """Request-scoped identity of the caller. Never persisted."""

    email_address: str
    first_name: str
    last_name: str


@dataclass
class AuthResult:
    """Standardized authentication result."""
    ok: bool
    user: Optional[AuthenticatedUser]
    error: Optional[str] = None
    # Diagnostics only; never sent to the caller
    reason: Optional[DenialReason] = field(default=None, repr=False)

    @property
    def identity(self) -> Optional[str]:
        return self.user.email_address if self.user else None


class AuthenticationService(Protocol):
    """Protocol for authentication services."""

    async def authenticate(self, authorization: Optional[str]) -> AuthResult:
        """
        Authenticate a request.

        Args:
            authorization: Authorization header value

        Returns:
            AuthResult with authentication status and details
        """
        ...


class DefaultAuthenticationService:
    """
    Default implementation of AuthenticationService.

    This facade hides the complexity of the underlying auth module
    and provides a clean, stable interface for the API layer.
    """

    def __init__(self, auth_module: Any):
        """
        Initialize with any auth module that has verify_credentials.

        Args:
            auth_module: Module with verify_credentials method
        """
        self._auth = auth_module

    async def authenticate(self, authorization: Optional[str]) -> AuthResult:
        ok, user, reason = await self._auth.verify_credentials(authorization)

        if ok:
            return AuthResult(
                ok=True,
                user=AuthenticatedUser(
                    email_address=user.email_address,
                    first_name=user.first_name,
                    last_name=user.last_name,
                ),
            )

        return AuthResult(ok=False, user=None, error=ACCESS_DENIED_MESSAGE, reason=reason)
