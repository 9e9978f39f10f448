"""
Photo storage abstraction for Cloud Storage for Firebase, S3-compatible
object stores and in-memory testing.

Uploaded photos are public; each client computes the deterministic public
URL for a path instead of asking the service for a signed one.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, Protocol

import boto3
from botocore.config import Config
from firebase_admin import storage
from google.api_core import exceptions

from shared.firebase_constants import PHOTO_STORAGE_PREFIX, PUBLIC_STORAGE_BASE_URL

logger = logging.getLogger(__name__)


def photo_path(group_id: str, memory_id: str) -> str:
    """Storage path of a memory's photo: memories/<groupId>/<memoryId>."""
    return f"{PHOTO_STORAGE_PREFIX}/{group_id}/{memory_id}"


class StorageClient(Protocol):
    """Defines the operations the API needs from object storage."""

    def upload_public(self, path: str, data: bytes, content_type: str) -> str:
        """Uploads bytes, makes them publicly readable and returns the URL."""
        ...

    def public_url(self, path: str) -> str:
        ...

    def delete(self, path: str) -> None:
        """Deletes an object. A missing object is not an error."""
        ...


@dataclass
class InMemoryStorageClient:
    """Test double for storage interactions."""

    bucket_name: str = "memorybox-test"
    base_url: str = PUBLIC_STORAGE_BASE_URL
    stored_objects: dict = field(default_factory=dict)

    def upload_public(self, path: str, data: bytes, content_type: str) -> str:
        self.stored_objects[path] = (bytes(data), content_type)
        return self.public_url(path)

    def public_url(self, path: str) -> str:
        return f"{self.base_url}/{self.bucket_name}/{path}"

    def delete(self, path: str) -> None:
        self.stored_objects.pop(path, None)


class FirebaseStorageClient:
    """Cloud Storage bucket reached through the Firebase Admin SDK."""

    def __init__(self, bucket_name: Optional[str] = None, bucket=None):
        self._bucket = bucket or storage.bucket(bucket_name)

    @property
    def bucket_name(self) -> str:
        return self._bucket.name

    def upload_public(self, path: str, data: bytes, content_type: str) -> str:
        blob = self._bucket.blob(path)
        blob.upload_from_string(data, content_type=content_type)
        blob.make_public()
        return self.public_url(path)

    def public_url(self, path: str) -> str:
        return f"{PUBLIC_STORAGE_BASE_URL}/{self.bucket_name}/{path}"

    def delete(self, path: str) -> None:
        try:
            self._bucket.blob(path).delete()
        except exceptions.NotFound:
            logger.warning("Photo already deleted: %s", path)


@dataclass
class S3StorageClient:
    """
    S3-compatible storage client (e.g. Tencent COS, MinIO).
    """

    bucket: str
    region: str
    endpoint: str
    access_key_id: str
    secret_access_key: str
    public_base_url: str = ""

    def __post_init__(self):
        # Use virtual-hosted style addressing to satisfy COS requirements.
        config = Config(
            s3={"addressing_style": "virtual"},
            signature_version="s3v4",
        )
        self._client = boto3.client(
            "s3",
            endpoint_url=self.endpoint,
            region_name=self.region,
            aws_access_key_id=self.access_key_id,
            aws_secret_access_key=self.secret_access_key,
            config=config,
        )

    @property
    def bucket_name(self) -> str:
        return self.bucket

    def upload_public(self, path: str, data: bytes, content_type: str) -> str:
        self._client.put_object(
            Bucket=self.bucket,
            Key=path,
            Body=data,
            ContentType=content_type,
            ACL="public-read",
        )
        return self.public_url(path)

    def public_url(self, path: str) -> str:
        base = (self.public_base_url or self.endpoint).rstrip("/")
        return f"{base}/{self.bucket}/{path}"

    def delete(self, path: str) -> None:
        # S3 DeleteObject succeeds for missing keys.
        self._client.delete_object(Bucket=self.bucket, Key=path)
