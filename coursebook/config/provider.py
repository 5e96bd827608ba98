"""Configuration provider following Black Box Design principles."""
from dataclasses import dataclass
from typing import List, Optional, Protocol

from coursebook.modules.config import ConfigModule


@dataclass
class StoreConfig:
    """Course store configuration."""
    path: str
    id_upper_bound: int


@dataclass
class APIConfig:
    """API configuration."""
    cors_origins: List[str]


@dataclass
class AuthConfig:
    """Authentication configuration."""
    bcrypt_rounds: int
    realm: str


class ConfigProvider(Protocol):
    """Protocol for configuration providers."""

    def get_store_config(self) -> StoreConfig:
        """Get course store configuration."""
        ...

    def get_api_config(self) -> APIConfig:
        """Get API configuration."""
        ...

    def get_auth_config(self) -> AuthConfig:
        """Get authentication configuration."""
        ...


class EnvConfigProvider:
    """
    Environment-based configuration provider.

    Without an explicit ConfigModule the environment is re-read on every
    call, so sections reflect the variables set at the time they are built.
    """

    def __init__(self, config: Optional[ConfigModule] = None):
        self._config = config

    def _settings(self) -> ConfigModule:
        return self._config or ConfigModule()

    def get_store_config(self) -> StoreConfig:
        """Get course store configuration from environment variables."""
        settings = self._settings()
        return StoreConfig(
            path=settings.get("store_path"),
            id_upper_bound=settings.get("id_upper_bound"),
        )

    def get_api_config(self) -> APIConfig:
        """Get API configuration from environment variables."""
        return APIConfig(cors_origins=self._settings().get("cors_origins"))

    def get_auth_config(self) -> AuthConfig:
        """Get authentication configuration from environment variables."""
        settings = self._settings()
        return AuthConfig(
            bcrypt_rounds=settings.get("bcrypt_rounds"),
            realm=settings.get("auth_realm"),
        )
