"""
Config Module - Black Box Interface

Purpose: Service settings read from the environment
Interface: get_config(), ConfigModule.get()
Hidden: Environment variable names, defaults, parsing and range checks

Every setting the service reads lives here; EnvConfigProvider groups
them into typed sections for the modules that need them.
"""

import os
from typing import Any, Dict, List


# Settings that must resolve to a value after defaults are applied
REQUIRED_CONFIG_KEYS = {
    "redis_host": "Redis server hostname",
    "redis_port": "Redis server port number",
    "redis_db": "Redis database number",
    "host": "API server bind address",
    "port": "API server port",
    "log_level": "Logging level (DEBUG, INFO, WARNING, ERROR)",
    "store_path": "Path of the JSON course document",
    "id_upper_bound": "Course ids are drawn from [0, id_upper_bound)",
    "bcrypt_rounds": "bcrypt cost factor for new password hashes",
    "auth_realm": "Realm named in WWW-Authenticate on denial",
}

# bcrypt accepts cost factors 4..31
BCRYPT_ROUNDS_RANGE = (4, 31)


class ConfigModule:
    """Configuration management module."""

    def __init__(self):
        """Initialize with environment variables."""
        self._config = self._load_from_env()
        self._validate()

    def _validate(self) -> None:
        """
        Check presence and ranges of the loaded settings.

        Raises:
            ValueError: If a required key is missing or a value is out of range
        """
        missing_keys = [key for key in REQUIRED_CONFIG_KEYS if self._config.get(key) is None]
        if missing_keys:
            raise ValueError(
                f"Missing required configuration keys: {', '.join(missing_keys)}. "
                f"Check environment variables and deployment configuration."
            )

        if self._config["id_upper_bound"] < 1:
            raise ValueError("ID_UPPER_BOUND must be a positive integer")

        low, high = BCRYPT_ROUNDS_RANGE
        if not low <= self._config["bcrypt_rounds"] <= high:
            raise ValueError(f"BCRYPT_ROUNDS must be between {low} and {high}")

    def _load_from_env(self) -> Dict[str, Any]:
        """Load configuration from environment."""
        # Parse Redis port (might be in tcp://host:port format from K8s)
        redis_port_env = os.getenv("REDIS_PORT", "6379")
        if redis_port_env.startswith("tcp://"):
            redis_port = int(redis_port_env.split(":")[-1])
        else:
            redis_port = int(redis_port_env)

        return {
            # Redis settings
            "redis_host": os.getenv("REDIS_HOST", "localhost"),
            "redis_port": redis_port,
            "redis_db": int(os.getenv("REDIS_DB", "0")),
            "redis_password": os.getenv("REDIS_PASSWORD"),
            # API settings
            "host": os.getenv("API_HOST", "0.0.0.0"),
            "port": int(os.getenv("API_PORT", "8080")),
            "log_level": os.getenv("LOG_LEVEL", "INFO").upper(),
            "debug": os.getenv("DEBUG", "false").lower() == "true",
            "cors_origins": _split_origins(os.getenv("CORS_ORIGINS", "*")),
            # Course store
            "store_path": os.getenv("STORE_PATH", "data.json"),
            "id_upper_bound": int(os.getenv("ID_UPPER_BOUND", "10000")),
            # Authentication gate
            "bcrypt_rounds": int(os.getenv("BCRYPT_ROUNDS", "10")),
            "auth_realm": os.getenv("AUTH_REALM", "coursebook"),
        }

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value."""
        return self._config.get(key, default)


def _split_origins(value: str) -> List[str]:
    return [origin.strip() for origin in value.split(",") if origin.strip()]


# Singleton instance
_instance = None


def get_config() -> ConfigModule:
    """Get the configuration module singleton."""
    global _instance
    if _instance is None:
        _instance = ConfigModule()
    return _instance


__all__ = ["get_config", "ConfigModule", "REQUIRED_CONFIG_KEYS"]
