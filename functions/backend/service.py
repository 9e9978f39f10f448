"""
Request handling core shared by the FastAPI server and the cloud function.

Adapters translate their framework's request into plain arguments, call
these services and render the returned objects (or raised ServiceError)
as JSON.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Mapping, Optional

from backend.db import DbClient
from backend.errors import (
    AuthError,
    DependencyError,
    NotFoundError,
    ValidationError,
)
from backend.identity import (
    EmailAlreadyExistsError,
    IdentityGateway,
    InvalidCredentialsError,
)
from backend.schemas import (
    LoginPayload,
    MemoryCreateForm,
    RegisterPayload,
    parse_payload,
)
from backend.storage import StorageClient, photo_path
from shared.constants import (
    MAX_PHOTO_BYTES,
    MSG_CREATE_FAILED,
    MSG_DELETE_FAILED,
    MSG_EMAIL_IN_USE,
    MSG_GET_FAILED,
    MSG_INVALID_CREDENTIALS,
    MSG_LIST_FAILED,
    MSG_LOGIN_FAILED,
    MSG_MEMORY_DELETED,
    MSG_MEMORY_NOT_FOUND,
    MSG_PHOTO_REQUIRED,
    MSG_PHOTO_TOO_LARGE,
    MSG_REGISTER_FAILED,
)
from shared.types import AuthResult, MemoryRecord

logger = logging.getLogger(__name__)

DEFAULT_PHOTO_CONTENT_TYPE = "application/octet-stream"


@dataclass
class PhotoUpload:
    """An uploaded photo file, already read into memory."""

    data: bytes
    content_type: Optional[str] = None
    filename: Optional[str] = None


class MemoryService:
    """Create, list, get and delete memory records of a group."""

    def __init__(
        self,
        db: DbClient,
        storage: StorageClient,
        *,
        max_photo_bytes: int = MAX_PHOTO_BYTES,
        require_photo: bool = False,
    ):
        self.db = db
        self.storage = storage
        self.max_photo_bytes = max_photo_bytes
        self.require_photo = require_photo

    def list_memories(self, group_id: str) -> list[MemoryRecord]:
        try:
            return self.db.list_memories(group_id)
        except Exception as e:
            logger.exception("Error fetching memories for group %s", group_id)
            raise DependencyError(MSG_LIST_FAILED) from e

    def get_memory(self, group_id: str, memory_id: str) -> MemoryRecord:
        try:
            record = self.db.get_memory(group_id, memory_id)
        except Exception as e:
            logger.exception("Error fetching memory %s/%s", group_id, memory_id)
            raise DependencyError(MSG_GET_FAILED) from e
        if record is None:
            raise NotFoundError(MSG_MEMORY_NOT_FOUND)
        return record

    def create_memory(
        self,
        group_id: str,
        form: Mapping[str, Any],
        photo: Optional[PhotoUpload] = None,
    ) -> MemoryRecord:
        """
        Validates the form, uploads the optional photo and appends the record.

        Raises:
            ValidationError: invalid fields, missing required photo or a
                photo over the size limit.
            DependencyError: storage or database failure.
        """
        fields = parse_payload(MemoryCreateForm, form)
        if photo is not None and not photo.data:
            photo = None
        if photo is None and self.require_photo:
            raise ValidationError.single("photo", MSG_PHOTO_REQUIRED)
        if photo is not None and len(photo.data) > self.max_photo_bytes:
            raise ValidationError.single("photo", MSG_PHOTO_TOO_LARGE)

        memory_id = uuid.uuid4().hex
        photo_url = None
        if photo is not None:
            try:
                photo_url = self.storage.upload_public(
                    photo_path(group_id, memory_id),
                    photo.data,
                    photo.content_type or DEFAULT_PHOTO_CONTENT_TYPE,
                )
            except Exception as e:
                logger.exception("Error uploading photo for group %s", group_id)
                raise DependencyError(MSG_CREATE_FAILED) from e

        record = MemoryRecord(
            memory_id=memory_id,
            title=fields.title,
            description=fields.description,
            date=fields.date,
            photo_url=photo_url,
            created_at=datetime.now(timezone.utc),
        )
        try:
            self.db.append_memory(group_id, record)
        except Exception as e:
            logger.exception("Error creating memory for group %s", group_id)
            if photo_url:
                self._discard_photo(group_id, memory_id)
            raise DependencyError(MSG_CREATE_FAILED) from e
        logger.info("Created memory %s in group %s", memory_id, group_id)
        return record

    def delete_memory(self, group_id: str, memory_id: str) -> dict[str, str]:
        try:
            removed = self.db.remove_memory(group_id, memory_id)
        except Exception as e:
            logger.exception("Error deleting memory %s/%s", group_id, memory_id)
            raise DependencyError(MSG_DELETE_FAILED) from e
        if removed is None:
            raise NotFoundError(MSG_MEMORY_NOT_FOUND)

        if removed.photo_url:
            try:
                self.storage.delete(photo_path(group_id, memory_id))
            except Exception as e:
                logger.exception(
                    "Memory %s/%s removed but its photo was not deleted",
                    group_id,
                    memory_id,
                )
                raise DependencyError(MSG_DELETE_FAILED) from e
        logger.info("Deleted memory %s from group %s", memory_id, group_id)
        return {"message": MSG_MEMORY_DELETED}

    def _discard_photo(self, group_id: str, memory_id: str) -> None:
        try:
            self.storage.delete(photo_path(group_id, memory_id))
        except Exception:
            logger.exception(
                "Could not remove orphaned photo %s", photo_path(group_id, memory_id)
            )


class AuthService:
    """Login and registration against the identity provider."""

    def __init__(self, identity: IdentityGateway, *, verify_password: bool = True):
        self.identity = identity
        self.verify_password = verify_password

    def login(self, payload: Any) -> AuthResult:
        credentials = parse_payload(LoginPayload, payload)
        try:
            if self.verify_password:
                user = self.identity.verify_password(
                    credentials.email, credentials.password
                )
            else:
                logger.warning(
                    "Issuing token without password verification for %s",
                    credentials.email,
                )
                user = self.identity.get_user_by_email(credentials.email)
        except InvalidCredentialsError as e:
            raise AuthError(MSG_INVALID_CREDENTIALS) from e
        except Exception as e:
            logger.exception("Identity provider error during login")
            raise DependencyError(MSG_LOGIN_FAILED) from e
        return self._issue(user, MSG_LOGIN_FAILED)

    def register(self, payload: Any) -> AuthResult:
        fields = parse_payload(RegisterPayload, payload)
        try:
            user = self.identity.create_user(
                fields.email, fields.password, fields.display_name
            )
        except EmailAlreadyExistsError as e:
            raise AuthError(MSG_EMAIL_IN_USE, status_code=400) from e
        except Exception as e:
            logger.exception("Identity provider error during registration")
            raise DependencyError(MSG_REGISTER_FAILED) from e
        logger.info("Registered user %s", user.uid)
        return self._issue(user, MSG_REGISTER_FAILED)

    def _issue(self, user, failure_message: str) -> AuthResult:
        try:
            token = self.identity.create_token(user.uid)
        except Exception as e:
            logger.exception("Could not issue token for %s", user.uid)
            raise DependencyError(failure_message) from e
        return AuthResult(token=token, user=user)
