"""
API Module - Black Box Interface

Purpose: HTTP request and response shapes
Interface: Pydantic models, validation message formatting
Hidden: Field aliases, validation rules

The API module only describes data - it contains no business logic.
All logic is delegated to appropriate modules.
"""

from .models import (
    CourseRequest,
    CourseResponse,
    CreateUserRequest,
    UserResponse,
    validation_messages,
)

__all__ = [
    "CourseRequest",
    "CourseResponse",
    "CreateUserRequest",
    "UserResponse",
    "validation_messages",
]
