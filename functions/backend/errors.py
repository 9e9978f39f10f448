"""
Error taxonomy shared by the HTTP adapters.

Every error carries the status code and the JSON body the adapters should
emit, so FastAPI and the cloud function map them the same way.
"""

from __future__ import annotations

from typing import Any


class ServiceError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code = 500

    def __init__(self, message: str, *, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.message}


class ValidationError(ServiceError):
    """Malformed or missing request fields."""

    status_code = 400

    def __init__(self, field_errors: list[dict[str, str]]):
        first = field_errors[0]["msg"] if field_errors else "Invalid request"
        super().__init__(first)
        self.field_errors = field_errors

    @classmethod
    def single(cls, field: str, msg: str) -> "ValidationError":
        return cls([{"field": field, "msg": msg}])

    def to_dict(self) -> dict[str, Any]:
        return {"errors": self.field_errors}


class AuthError(ServiceError):
    """Unknown account, bad credentials or duplicate registration."""

    status_code = 401


class NotFoundError(ServiceError):
    status_code = 404


class DependencyError(ServiceError):
    """Database, storage or identity provider failure."""

    status_code = 500
