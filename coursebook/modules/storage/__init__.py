"""
Storage Module - Black Box Interface

Purpose: Persist the course collection
Interface: CourseStore.list_all(), get_by_id(), get_random(), create(), update(), delete()
Hidden: JSON document layout, atomic file replacement, writer serialization, id allocation

Can be replaced with a database-backed store without affecting other modules.
"""

from .errors import (
    CorruptStoreError,
    CourseNotFoundError,
    EmptyStoreError,
    IdentifierSpaceExhaustedError,
    StorageFaultError,
    StoreError,
)
from .ids import IdentifierAllocator
from .store import CourseStore, decode_document, encode_document

__all__ = [
    "CourseStore",
    "IdentifierAllocator",
    "StoreError",
    "CourseNotFoundError",
    "EmptyStoreError",
    "StorageFaultError",
    "CorruptStoreError",
    "IdentifierSpaceExhaustedError",
    "decode_document",
    "encode_document",
]
