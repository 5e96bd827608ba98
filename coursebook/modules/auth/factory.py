"""
Authentication Factory following Black Box Design principles.

This factory:
- Constructs the authentication stack based on configuration
- Wires dependencies together
- Returns only the service facade (hiding implementation)
"""

import logging
from typing import Any, Optional

from ...config.provider import ConfigProvider
from .auth import AuthModule
from .interfaces import UserDirectory
from .service import AuthenticationService, DefaultAuthenticationService
from .verifier import BcryptVerifier

logger = logging.getLogger(__name__)


class AuthFactory:
    """
    Factory for building the authentication stack.

    This is the composition root that:
    - Creates all auth components
    - Wires them together via dependency injection
    - Returns only the public interface
    """

    @staticmethod
    def build_verifier(config_provider: ConfigProvider) -> BcryptVerifier:
        """Build the credential verifier used for both hashing and checking."""
        auth_config = config_provider.get_auth_config()
        return BcryptVerifier(rounds=auth_config.bcrypt_rounds)

    @staticmethod
    def build(
        config_provider: ConfigProvider,
        user_directory: UserDirectory,
        redis_client: Optional[Any] = None,
        verifier: Optional[BcryptVerifier] = None,
    ) -> AuthenticationService:
        """
        Build the complete authentication stack.

        Args:
            config_provider: Configuration provider
            user_directory: Lookup for users by email address
            redis_client: Optional Redis client for audit logging
            verifier: Optional prebuilt verifier to share with user registration

        Returns:
            AuthenticationService facade (hides all implementation details)
        """
        verifier = verifier or AuthFactory.build_verifier(config_provider)
        logger.info(f"Building authentication stack with bcrypt (rounds={verifier.rounds})")

        auth_module = AuthModule(
            user_directory=user_directory,
            verifier=verifier,
            redis_client=redis_client,
        )

        return DefaultAuthenticationService(auth_module)
