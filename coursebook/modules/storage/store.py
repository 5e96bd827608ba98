"""
Course store backed by a single JSON document.

Every mutation loads the whole document, changes it in memory and
rewrites the whole file. Mutations are serialized through one
asyncio.Lock so that concurrent writers cannot lose each other's
updates; readers never take the lock and only ever see a complete
file because writes are swapped in with os.replace.
"""

import asyncio
import json
import logging
import os
import random
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from .errors import CorruptStoreError, CourseNotFoundError, EmptyStoreError, StorageFaultError
from .ids import IdentifierAllocator

logger = logging.getLogger(__name__)

COLLECTION_KEY = "courses"


def encode_document(document: Dict[str, Any]) -> str:
    """Serialize a store document the way it is written to disk."""
    return json.dumps(document, indent=2)


def decode_document(raw: Union[str, bytes]) -> Dict[str, Any]:
    """
    Parse a store document.

    Every entry must carry an integer id and text title and description.

    Raises:
        CorruptStoreError: If the bytes are not UTF-8 JSON or the shape is wrong
    """
    try:
        text = raw.decode("utf-8") if isinstance(raw, bytes) else raw
        document = json.loads(text)
    except UnicodeDecodeError as e:
        raise CorruptStoreError(f"Course document is not valid UTF-8: {e}") from e
    except json.JSONDecodeError as e:
        raise CorruptStoreError(f"Course document is not valid JSON: {e}") from e

    if not isinstance(document, dict) or not isinstance(document.get(COLLECTION_KEY), list):
        raise CorruptStoreError(f"Course document has no '{COLLECTION_KEY}' list")

    for entry in document[COLLECTION_KEY]:
        if not _is_course_entry(entry):
            raise CorruptStoreError(f"Malformed course entry: {entry!r}")

    return document


def _is_course_entry(entry: Any) -> bool:
    if not isinstance(entry, dict):
        return False
    # bool is a subclass of int
    course_id = entry.get("id")
    if not isinstance(course_id, int) or isinstance(course_id, bool):
        return False
    return isinstance(entry.get("title"), str) and isinstance(entry.get("description"), str)


class CourseStore:
    """CRUD over the course collection in one JSON file."""

    def __init__(self, path: str = "data.json", allocator: Optional[IdentifierAllocator] = None):
        """
        Initialize course store.

        Args:
            path: Location of the JSON document
            allocator: Id allocator for new courses
        """
        self.path = Path(path)
        self.allocator = allocator or IdentifierAllocator()
        self._write_lock = asyncio.Lock()

    async def initialize(self) -> None:
        """Create an empty document if none exists yet."""
        async with self._write_lock:
            if await asyncio.to_thread(self.path.exists):
                return
            logger.info(f"Creating empty course document at {self.path}")
            await self._persist({COLLECTION_KEY: []})

    async def list_all(self) -> List[dict]:
        """Return every course in stored order."""
        document = await self._load()
        return document[COLLECTION_KEY]

    async def get_by_id(self, course_id: int) -> Optional[dict]:
        """
        Get a single course.

        Returns:
            Course dict or None if not found
        """
        document = await self._load()
        return _find(document, course_id)

    async def get_random(self) -> dict:
        """
        Pick one course uniformly at random.

        Raises:
            EmptyStoreError: If there are no courses
        """
        courses = await self.list_all()
        if not courses:
            raise EmptyStoreError("No courses in store")
        return random.choice(courses)

    async def create(self, payload: Mapping[str, Any]) -> dict:
        """
        Add a course.

        Args:
            payload: Mapping with 'title' and 'description'

        Returns:
            The stored course including its new id
        """
        async with self._write_lock:
            document = await self._load()
            courses = document[COLLECTION_KEY]

            course_id = self.allocator.allocate(course["id"] for course in courses)
            course = {
                "id": course_id,
                "title": payload["title"],
                "description": payload["description"],
            }
            courses.append(course)

            await self._persist(document)

        logger.info(f"Created course {course_id}")
        return dict(course)

    async def update(self, course_id: int, payload: Mapping[str, Any]) -> None:
        """
        Replace a course's title and description.

        Raises:
            CourseNotFoundError: If no course has this id
        """
        async with self._write_lock:
            document = await self._load()
            course = _find(document, course_id)
            if course is None:
                raise CourseNotFoundError(course_id)

            course["title"] = payload["title"]
            course["description"] = payload["description"]

            await self._persist(document)

        logger.info(f"Updated course {course_id}")

    async def delete(self, course_id: int) -> None:
        """
        Remove a course.

        Raises:
            CourseNotFoundError: If no course has this id
        """
        async with self._write_lock:
            document = await self._load()
            before = len(document[COLLECTION_KEY])
            document[COLLECTION_KEY] = [
                course for course in document[COLLECTION_KEY] if course["id"] != course_id
            ]
            if len(document[COLLECTION_KEY]) == before:
                raise CourseNotFoundError(course_id)

            await self._persist(document)

        logger.info(f"Deleted course {course_id}")

    async def _load(self) -> Dict[str, Any]:
        try:
            raw = await asyncio.to_thread(self.path.read_bytes)
        except OSError as e:
            raise StorageFaultError(f"Failed to read {self.path}: {e}") from e
        return decode_document(raw)

    async def _persist(self, document: Dict[str, Any]) -> None:
        try:
            await asyncio.to_thread(self._write_atomic, encode_document(document))
        except OSError as e:
            raise StorageFaultError(f"Failed to write {self.path}: {e}") from e

    def _write_atomic(self, text: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(text)
            os.replace(tmp_path, self.path)
        except BaseException:
            os.unlink(tmp_path)
            raise


def _find(document: Dict[str, Any], course_id: int) -> Optional[dict]:
    for course in document[COLLECTION_KEY]:
        if course["id"] == course_id:
            return course
    return None
