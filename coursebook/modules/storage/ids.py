"""
Identifier allocation for new courses.

Ids are drawn at random from a bounded range and checked against the
ids already in use.
"""

import secrets
from typing import Iterable

from .errors import IdentifierSpaceExhaustedError


class IdentifierAllocator:
    def __init__(self, upper_bound: int = 10000, max_attempts: int = 32):
        """
        Initialize identifier allocator.

        Args:
            upper_bound: Ids are drawn from [0, upper_bound)
            max_attempts: Random draws tried before falling back to a scan
        """
        if upper_bound < 1:
            raise ValueError("upper_bound must be at least 1")
        self.upper_bound = upper_bound
        self.max_attempts = max_attempts

    def allocate(self, existing_ids: Iterable[int] = ()) -> int:
        """
        Pick an id not present in existing_ids.

        Args:
            existing_ids: Ids currently held by the store

        Returns:
            New id in [0, upper_bound)

        Raises:
            IdentifierSpaceExhaustedError: If every id in range is taken

        Logic:
        1. Draw uniformly at random, retry on collision
        2. After max_attempts misses, return the lowest free id
        """
        taken = set(existing_ids)

        for _ in range(self.max_attempts):
            candidate = secrets.randbelow(self.upper_bound)
            if candidate not in taken:
                return candidate

        # Dense range: scan instead of drawing forever
        for candidate in range(self.upper_bound):
            if candidate not in taken:
                return candidate

        raise IdentifierSpaceExhaustedError(
            f"All {self.upper_bound} course ids are in use"
        )
