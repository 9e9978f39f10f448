"""
Pydantic schemas for request validation and response bodies.

Request models are validated by the service layer (not by FastAPI) so both
deployment adapters produce identical 400 bodies.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Any, ClassVar, Mapping, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from backend.errors import ValidationError
from shared.constants import (
    DESCRIPTION_MAX_LENGTH,
    MSG_DESCRIPTION_LENGTH,
    MSG_DISPLAY_NAME_REQUIRED,
    MSG_INVALID_DATE,
    MSG_INVALID_EMAIL,
    MSG_INVALID_FIELD,
    MSG_PASSWORD_LENGTH,
    MSG_PASSWORD_REQUIRED,
    MSG_TITLE_LENGTH,
    PASSWORD_MIN_LENGTH,
    TITLE_MAX_LENGTH,
)

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

M = TypeVar("M", bound=BaseModel)


def parse_iso_date(value: str) -> date:
    """Accepts an ISO-8601 date or datetime and returns the calendar date."""
    try:
        return date.fromisoformat(value)
    except ValueError:
        pass
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value).date()


def _validate_email(value: str) -> str:
    value = value.strip()
    if not EMAIL_PATTERN.match(value):
        raise ValueError("invalid email")
    return value


class MemoryCreateForm(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    field_messages: ClassVar[dict[str, str]] = {
        "title": MSG_TITLE_LENGTH,
        "description": MSG_DESCRIPTION_LENGTH,
        "date": MSG_INVALID_DATE,
    }

    title: str = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH)
    description: str = Field(..., min_length=1, max_length=DESCRIPTION_MAX_LENGTH)
    date: str

    @field_validator("date")
    @classmethod
    def _normalize_date(cls, value: str) -> str:
        return parse_iso_date(value).isoformat()


class LoginPayload(BaseModel):
    field_messages: ClassVar[dict[str, str]] = {
        "email": MSG_INVALID_EMAIL,
        "password": MSG_PASSWORD_REQUIRED,
    }

    email: str
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def _check_email(cls, value: str) -> str:
        return _validate_email(value)


class RegisterPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    field_messages: ClassVar[dict[str, str]] = {
        "email": MSG_INVALID_EMAIL,
        "password": MSG_PASSWORD_LENGTH,
        "displayName": MSG_DISPLAY_NAME_REQUIRED,
    }

    email: str
    password: str = Field(..., min_length=PASSWORD_MIN_LENGTH)
    display_name: str = Field(..., alias="displayName")

    @field_validator("email")
    @classmethod
    def _check_email(cls, value: str) -> str:
        return _validate_email(value)

    @field_validator("display_name")
    @classmethod
    def _check_display_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("empty display name")
        return value


def parse_payload(model: type[M], data: Any) -> M:
    """
    Validates request data against a model.

    Raises:
        ValidationError: with one entry per offending field, using the
            model's user-facing messages.
    """
    if not isinstance(data, Mapping):
        raise ValidationError.single("body", MSG_INVALID_FIELD)
    try:
        return model.model_validate(dict(data))
    except PydanticValidationError as e:
        messages = model.field_messages
        field_errors = []
        seen = set()
        for error in e.errors():
            field = str(error["loc"][0]) if error["loc"] else "body"
            if field in seen:
                continue
            seen.add(field)
            field_errors.append(
                {"field": field, "msg": messages.get(field, MSG_INVALID_FIELD)}
            )
        raise ValidationError(field_errors) from e


class MemoryResponse(BaseModel):
    memoryId: str
    title: str
    description: str
    date: str
    photoUrl: Optional[str] = None
    createdAt: str


class UserResponse(BaseModel):
    uid: str
    email: str
    displayName: Optional[str] = None


class AuthResponse(BaseModel):
    token: str
    user: UserResponse


class MessageResponse(BaseModel):
    message: str


class HealthResponse(BaseModel):
    status: str
