"""
Dependency wiring shared by the FastAPI app and the cloud function.
"""

from __future__ import annotations

import logging

import firebase_admin
from firebase_admin import credentials

from backend.config import Settings, get_settings
from backend.db import DbClient, FirestoreDbClient, InMemoryDbClient
from backend.identity import (
    FirebaseIdentityGateway,
    IdentityGateway,
    InMemoryIdentityGateway,
)
from backend.service import AuthService, MemoryService
from backend.storage import (
    FirebaseStorageClient,
    InMemoryStorageClient,
    S3StorageClient,
    StorageClient,
)

logger = logging.getLogger(__name__)

_db_client: DbClient | None = None
_storage_client: StorageClient | None = None
_identity_gateway: IdentityGateway | None = None


def ensure_firebase_app(settings: Settings) -> firebase_admin.App:
    """
    Return the default Firebase app, initializing it from settings if needed.

    Inside Cloud Functions the app is already initialized by main.py.
    """
    try:
        return firebase_admin.get_app()
    except ValueError:
        pass

    options = {}
    if settings.firebase_storage_bucket:
        options["storageBucket"] = settings.firebase_storage_bucket
    if settings.firebase_project_id:
        options["projectId"] = settings.firebase_project_id

    cred = None
    if settings.firebase_client_email and settings.firebase_private_key:
        cred = credentials.Certificate(
            {
                "type": "service_account",
                "project_id": settings.firebase_project_id,
                "private_key": settings.firebase_private_key,
                "client_email": settings.firebase_client_email,
                "token_uri": "https://oauth2.googleapis.com/token",
            }
        )
    logger.info("Initializing Firebase app (project: %s)", settings.firebase_project_id)
    return firebase_admin.initialize_app(cred, options or None)


def get_db_client() -> DbClient:
    """
    Return a singleton DB client so in-memory state persists across requests.
    """
    global _db_client
    if _db_client:
        return _db_client

    settings = get_settings()
    if settings.use_in_memory_backends:
        _db_client = InMemoryDbClient()
    else:
        ensure_firebase_app(settings)
        _db_client = FirestoreDbClient(collection=settings.memories_collection)
    return _db_client


def get_storage_client() -> StorageClient:
    global _storage_client
    if _storage_client:
        return _storage_client

    settings = get_settings()
    if settings.use_in_memory_backends:
        _storage_client = InMemoryStorageClient()
    elif settings.s3_endpoint and settings.firebase_storage_bucket:
        _storage_client = S3StorageClient(
            bucket=settings.firebase_storage_bucket,
            region=settings.s3_region or "",
            endpoint=settings.s3_endpoint,
            access_key_id=settings.aws_access_key_id or "",
            secret_access_key=settings.aws_secret_access_key or "",
            public_base_url=settings.s3_public_base_url or "",
        )
    else:
        ensure_firebase_app(settings)
        _storage_client = FirebaseStorageClient(settings.firebase_storage_bucket)
    return _storage_client


def get_identity_gateway() -> IdentityGateway:
    global _identity_gateway
    if _identity_gateway:
        return _identity_gateway

    settings = get_settings()
    if settings.use_in_memory_backends:
        _identity_gateway = InMemoryIdentityGateway()
    else:
        ensure_firebase_app(settings)
        _identity_gateway = FirebaseIdentityGateway(
            web_api_key=settings.firebase_web_api_key
        )
    return _identity_gateway


def get_memory_service() -> MemoryService:
    settings = get_settings()
    return MemoryService(
        get_db_client(),
        get_storage_client(),
        max_photo_bytes=settings.max_photo_bytes,
        require_photo=settings.memories_require_photo,
    )


def get_auth_service() -> AuthService:
    settings = get_settings()
    return AuthService(
        get_identity_gateway(),
        verify_password=settings.verify_login_password,
    )


def reset_clients() -> None:
    """Drop cached clients and settings (used by tests)."""
    global _db_client, _storage_client, _identity_gateway
    _db_client = None
    _storage_client = None
    _identity_gateway = None
    get_settings.cache_clear()
