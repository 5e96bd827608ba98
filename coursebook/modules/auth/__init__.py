"""
Authentication Module - Black Box Interface

Purpose: Decide whether a request's credentials belong to a known user
Interface: AuthFactory.build(), AuthenticationService.authenticate()
Hidden: Header parsing, password hashing, denial reasons, audit trail

This module can be completely replaced with any other auth implementation
(OAuth, JWT, external service) without affecting other modules.
"""

from .auth import AuthModule, Credentials
from .factory import AuthFactory
from .interfaces import DenialReason
from .service import (
    ACCESS_DENIED_MESSAGE,
    ACCESS_DENIED_STATUS,
    AccessDeniedError,
    AuthenticatedUser,
    AuthResult,
    DefaultAuthenticationService,
)
from .verifier import BcryptVerifier

__all__ = [
    "AuthModule",
    "AuthFactory",
    "AuthResult",
    "AuthenticatedUser",
    "AccessDeniedError",
    "ACCESS_DENIED_MESSAGE",
    "ACCESS_DENIED_STATUS",
    "BcryptVerifier",
    "Credentials",
    "DefaultAuthenticationService",
    "DenialReason",
]
