"""
Users Module - Black Box Interface

Purpose: Store registered users and look them up by email address
Interface: find_by_identity(), create_user()
Hidden: Redis key layout, record serialization

Replaceable with any user backend (SQL database, LDAP, identity provider).
"""

from .directory import RedisUserDirectory, UserExistsError, UserRecord

__all__ = ["RedisUserDirectory", "UserExistsError", "UserRecord"]
