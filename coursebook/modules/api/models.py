"""
Coursebook shared data models.

These models define the structure of all data passed between
the HTTP layer and the modules. Field names on the wire are camelCase.
"""

import re
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field, field_validator

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
MAX_PASSWORD_BYTES = 72


def _require_value(value: str, field_name: str) -> str:
    if not value:
        raise ValueError(f'Please provide a value for "{field_name}"')
    return value


# Request Models (API Input)


class CourseRequest(BaseModel):
    """Title and description for creating or updating a course."""

    title: str = Field(..., description="Course title")
    description: str = Field(..., description="Course description")

    @field_validator("title")
    @classmethod
    def title_present(cls, v: str) -> str:
        return _require_value(v, "title")

    @field_validator("description")
    @classmethod
    def description_present(cls, v: str) -> str:
        return _require_value(v, "description")


class CreateUserRequest(BaseModel):
    """Request to register a user."""

    model_config = ConfigDict(populate_by_name=True)

    first_name: str = Field(..., alias="firstName")
    last_name: str = Field(..., alias="lastName")
    email_address: str = Field(..., alias="emailAddress")
    password: str = Field(..., description="Plaintext password, hashed before storage")

    @field_validator("first_name")
    @classmethod
    def first_name_present(cls, v: str) -> str:
        return _require_value(v, "firstName")

    @field_validator("last_name")
    @classmethod
    def last_name_present(cls, v: str) -> str:
        return _require_value(v, "lastName")

    @field_validator("email_address")
    @classmethod
    def validate_email(cls, v: str) -> str:
        _require_value(v, "emailAddress")
        if not EMAIL_PATTERN.match(v):
            raise ValueError("Please enter a valid email address")
        return v

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        _require_value(v, "password")
        if len(v.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
        return v


# Response Models (API Output)


class CourseResponse(BaseModel):
    """A stored course."""

    id: int
    title: str
    description: str


class UserResponse(BaseModel):
    """Public profile of a user. Never includes the password hash."""

    model_config = ConfigDict(populate_by_name=True)

    first_name: str = Field(..., alias="firstName")
    last_name: str = Field(..., alias="lastName")
    email_address: str = Field(..., alias="emailAddress")


def validation_messages(errors: List[Dict[str, Any]]) -> List[str]:
    """
    Turn pydantic validation errors into client-facing messages.

    Validator messages are passed through; structural errors (missing
    field, wrong type) become 'Please provide a value for "<field>"'.
    """
    messages = []
    for error in errors:
        ctx_error = (error.get("ctx") or {}).get("error")
        if error.get("type") == "value_error" and ctx_error is not None:
            messages.append(str(ctx_error))
            continue
        if error.get("type") == "json_invalid":
            messages.append("Request body must be valid JSON")
            continue

        source, *loc = error.get("loc") or ("body",)
        if source in ("path", "query", "header") and loc:
            messages.append(f'Invalid value for "{loc[-1]}"')
        elif loc:
            messages.append(f'Please provide a value for "{loc[-1]}"')
        else:
            messages.append("Request body must be a JSON object")
    return messages
