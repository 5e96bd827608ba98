"""Error taxonomy for the course store."""


class StoreError(Exception):
    """Base class for course store errors."""


class CourseNotFoundError(StoreError):
    """No course matches the requested id."""

    def __init__(self, course_id: int):
        super().__init__(f"Course not found: {course_id}")
        self.course_id = course_id


class EmptyStoreError(StoreError):
    """The store holds no courses."""


class StorageFaultError(StoreError):
    """The backing document could not be read or written."""


class CorruptStoreError(StorageFaultError):
    """The backing document exists but does not decode to a course document."""


class IdentifierSpaceExhaustedError(StorageFaultError):
    """Every id in the allocator's range is already taken."""
