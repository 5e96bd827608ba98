"""
User directory backed by Redis.

Each user is one JSON value under user:<email address>; registration
uses SET NX so two sign-ups for the same address cannot both succeed.
"""

import json
from dataclasses import asdict, dataclass
from typing import Optional


class UserExistsError(Exception):
    """A user with this email address is already registered."""

    def __init__(self, email_address: str):
        super().__init__(f"User already exists: {email_address}")
        self.email_address = email_address


@dataclass
class UserRecord:
    first_name: str
    last_name: str
    email_address: str
    password_hash: str

    def to_public(self) -> dict:
        """Profile fields safe to return to a caller."""
        return {
            "firstName": self.first_name,
            "lastName": self.last_name,
            "emailAddress": self.email_address,
        }


class RedisUserDirectory:
    def __init__(self, redis_client):
        """
        Initialize user directory.

        Args:
            redis_client: Async Redis client
        """
        self.redis = redis_client

    async def find_by_identity(self, identity: str) -> Optional[UserRecord]:
        """
        Look up a user by email address.

        Args:
            identity: Email address, matched exactly

        Returns:
            UserRecord or None if not found
        """
        data = await self.redis.get(f"user:{identity}")

        if data:
            return UserRecord(**json.loads(data))
        return None

    async def create_user(
        self,
        first_name: str,
        last_name: str,
        email_address: str,
        password_hash: str,
    ) -> UserRecord:
        """
        Register a user.

        Args:
            first_name: Given name
            last_name: Family name
            email_address: Login identity, unique across users
            password_hash: bcrypt hash of the password

        Returns:
            The stored UserRecord

        Raises:
            UserExistsError: If the email address is taken
        """
        user = UserRecord(
            first_name=first_name,
            last_name=last_name,
            email_address=email_address,
            password_hash=password_hash,
        )

        # NX makes the uniqueness check and the write one operation
        created = await self.redis.set(f"user:{email_address}", json.dumps(asdict(user)), nx=True)
        if not created:
            raise UserExistsError(email_address)

        return user
