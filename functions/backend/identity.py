"""
Identity provider access: Firebase Authentication and an in-memory double.
"""

from __future__ import annotations

import hashlib
import logging
import uuid
from typing import Optional, Protocol

import requests
from firebase_admin import auth

from shared.types import UserAccount

logger = logging.getLogger(__name__)

SIGN_IN_WITH_PASSWORD_URL = (
    "https://identitytoolkit.googleapis.com/v1/accounts:signInWithPassword"
)
REQUEST_TIMEOUT = 10

# Identity Toolkit error codes that mean bad credentials rather than an outage.
INVALID_CREDENTIAL_CODES = (
    "EMAIL_NOT_FOUND",
    "INVALID_PASSWORD",
    "INVALID_LOGIN_CREDENTIALS",
    "USER_DISABLED",
)


class InvalidCredentialsError(Exception):
    """Unknown account or wrong password."""


class EmailAlreadyExistsError(Exception):
    pass


class IdentityGateway(Protocol):
    def get_user_by_email(self, email: str) -> UserAccount:
        """Raises InvalidCredentialsError when no account exists."""
        ...

    def verify_password(self, email: str, password: str) -> UserAccount:
        """Raises InvalidCredentialsError on unknown email or wrong password."""
        ...

    def create_user(self, email: str, password: str, display_name: str) -> UserAccount:
        """Raises EmailAlreadyExistsError for a registered email."""
        ...

    def create_token(self, uid: str) -> str:
        ...


def _to_account(user_record) -> UserAccount:
    return UserAccount(
        uid=user_record.uid,
        email=user_record.email,
        display_name=user_record.display_name,
    )


class FirebaseIdentityGateway:
    """Firebase Authentication via the Admin SDK and Identity Toolkit REST."""

    def __init__(self, web_api_key: Optional[str] = None, app=None):
        self._web_api_key = web_api_key
        self._app = app

    def get_user_by_email(self, email: str) -> UserAccount:
        try:
            return _to_account(auth.get_user_by_email(email, app=self._app))
        except auth.UserNotFoundError as e:
            raise InvalidCredentialsError(email) from e

    def verify_password(self, email: str, password: str) -> UserAccount:
        if not self._web_api_key:
            raise RuntimeError(
                "FIREBASE_WEB_API_KEY is required to verify login passwords"
            )
        response = requests.post(
            SIGN_IN_WITH_PASSWORD_URL,
            params={"key": self._web_api_key},
            json={"email": email, "password": password, "returnSecureToken": True},
            timeout=REQUEST_TIMEOUT,
        )
        if response.status_code == 400:
            message = response.json().get("error", {}).get("message", "")
            if message.startswith(INVALID_CREDENTIAL_CODES):
                raise InvalidCredentialsError(email)
        response.raise_for_status()
        return self.get_user_by_email(email)

    def create_user(self, email: str, password: str, display_name: str) -> UserAccount:
        try:
            user_record = auth.create_user(
                email=email,
                password=password,
                display_name=display_name,
                email_verified=False,
                app=self._app,
            )
        except auth.EmailAlreadyExistsError as e:
            raise EmailAlreadyExistsError(email) from e
        return _to_account(user_record)

    def create_token(self, uid: str) -> str:
        token = auth.create_custom_token(uid, app=self._app)
        if isinstance(token, bytes):
            return token.decode("utf-8")
        return token


def _hash_password(password: str) -> str:
    return hashlib.sha256(password.encode("utf-8")).hexdigest()


class InMemoryIdentityGateway:
    """Account store for development and tests."""

    def __init__(self):
        self.users: dict[str, UserAccount] = {}
        self.password_hashes: dict[str, str] = {}

    def get_user_by_email(self, email: str) -> UserAccount:
        user = self.users.get(email.lower())
        if user is None:
            raise InvalidCredentialsError(email)
        return user

    def verify_password(self, email: str, password: str) -> UserAccount:
        user = self.get_user_by_email(email)
        if self.password_hashes.get(user.uid) != _hash_password(password):
            raise InvalidCredentialsError(email)
        return user

    def create_user(self, email: str, password: str, display_name: str) -> UserAccount:
        if email.lower() in self.users:
            raise EmailAlreadyExistsError(email)
        user = UserAccount(uid=uuid.uuid4().hex, email=email, display_name=display_name)
        self.users[email.lower()] = user
        self.password_hashes[user.uid] = _hash_password(password)
        return user

    def create_token(self, uid: str) -> str:
        return f"test-token-{uid}-{uuid.uuid4().hex}"

    def reset(self) -> None:
        self.users.clear()
        self.password_hashes.clear()
