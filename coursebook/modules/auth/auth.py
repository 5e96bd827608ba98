"""
Authentication module for the Coursebook API.

This module decides whether a request's HTTP Basic credentials belong
to a known user. It's designed as a black box that can be replaced with
any auth system without affecting other modules.
"""

import asyncio
import base64
import binascii
import json
import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, Optional, Tuple

from .interfaces import CredentialVerifier, DenialReason, UserDirectory

logger = logging.getLogger(__name__)


@dataclass
class Credentials:
    """Identity and secret parsed from an Authorization header."""

    name: str
    password: str

    def __repr__(self) -> str:
        return f"Credentials(name={self.name!r}, password='***')"


class AuthModule:
    """
    Authentication gate for user credentials.

    One pass per request:
    missing credentials -> denied, unknown identity -> denied,
    secret mismatch -> denied, otherwise authenticated.
    """

    @staticmethod
    def extract_credentials(authorization: Optional[str]) -> Optional[Credentials]:
        """
        Parse HTTP Basic credentials.

        Args:
            authorization: Authorization header value

        Returns:
            Credentials, or None if the header is absent or malformed

        Example:
            >>> AuthModule.extract_credentials("Basic am9lQGV4YW1wbGUuY29tOnNlY3JldA==")
            Credentials(name='joe@example.com', password='***')
        """
        if not authorization:
            return None

        scheme, _, encoded = authorization.strip().partition(" ")
        if scheme.lower() != "basic" or not encoded:
            return None

        try:
            decoded = base64.b64decode(encoded.strip(), validate=True).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError):
            return None

        if ":" not in decoded:
            return None

        name, password = decoded.split(":", 1)
        return Credentials(name=name, password=password)

    def __init__(
        self,
        user_directory: UserDirectory,
        verifier: CredentialVerifier,
        redis_client=None,
    ):
        """
        Initialize auth module.

        Args:
            user_directory: Lookup for users by email address
            verifier: Secret comparison primitive
            redis_client: Optional async Redis client for the audit trail
        """
        self.users = user_directory
        self.verifier = verifier
        self.redis = redis_client

    async def verify_credentials(
        self, authorization: Optional[str]
    ) -> Tuple[bool, Optional[Any], Optional[DenialReason]]:
        """
        Verify the credentials carried by an Authorization header.

        Args:
            authorization: Authorization header value

        Returns:
            Tuple of (is_valid, user or None, denial reason or None)
        """
        credentials = self.extract_credentials(authorization)
        if credentials is None:
            await self._deny(DenialReason.MISSING_CREDENTIALS, None)
            return False, None, DenialReason.MISSING_CREDENTIALS

        user = await self.users.find_by_identity(credentials.name)
        if user is None:
            # Keep the unknown-identity path as slow as a real check
            await asyncio.to_thread(self.verifier.verify_dummy, credentials.password)
            await self._deny(DenialReason.UNKNOWN_IDENTITY, credentials.name)
            return False, None, DenialReason.UNKNOWN_IDENTITY

        matched = await asyncio.to_thread(
            self.verifier.verify, credentials.password, user.password_hash
        )
        if not matched:
            await self._deny(DenialReason.BAD_SECRET, credentials.name)
            return False, None, DenialReason.BAD_SECRET

        logger.info(f"Authentication successful for {user.email_address}")
        await self._log_event("auth_succeeded", {"identity": user.email_address})
        return True, user, None

    async def _deny(self, reason: DenialReason, claimed_identity: Optional[str]) -> None:
        logger.warning(f"Authentication denied ({reason.value}) for identity: {claimed_identity}")
        await self._log_event(
            "auth_denied", {"reason": reason.value, "identity": claimed_identity}
        )

    async def _log_event(self, event_type: str, data: dict) -> None:
        """
        Record security event for audit.

        Args:
            event_type: Type of security event
            data: Event data (never secrets or hashes)
        """
        if self.redis is None:
            return

        event = {
            "type": event_type,
            "data": data,
            "timestamp": datetime.now(UTC).isoformat(),
        }

        await self.redis.lpush("auth:audit", json.dumps(event))

        # Keep last 10000 events
        await self.redis.ltrim("auth:audit", 0, 9999)
