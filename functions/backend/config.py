"""
Configuration and settings for the Memory Box backend.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from shared.constants import MAX_PHOTO_BYTES
from shared.firebase_constants import MEMORIES_COLLECTION


class Settings(BaseSettings):
    """Environment-backed settings for both deployment adapters."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    api_prefix: str = Field(default="/api")
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3000)
    cors_origins: list[str] = Field(
        default=[
            "http://localhost:3000",
            "http://localhost:3001",
            "http://localhost:8501",
        ]
    )

    # Firebase service account. When client email / private key are unset the
    # application default credentials are used.
    firebase_project_id: Optional[str] = Field(default=None)
    firebase_client_email: Optional[str] = Field(default=None)
    firebase_private_key: Optional[str] = Field(default=None)
    firebase_storage_bucket: Optional[str] = Field(default=None)
    # Web API key for the Identity Toolkit password sign-in endpoint.
    firebase_web_api_key: Optional[str] = Field(default=None)

    memories_collection: str = Field(default=MEMORIES_COLLECTION)
    max_photo_bytes: int = Field(default=MAX_PHOTO_BYTES)
    memories_require_photo: bool = Field(default=False)
    verify_login_password: bool = Field(default=True)

    # S3-compatible storage as an alternative to Cloud Storage.
    s3_endpoint: Optional[str] = Field(default=None)
    s3_region: Optional[str] = Field(default=None)
    s3_public_base_url: Optional[str] = Field(default=None)
    aws_access_key_id: Optional[str] = Field(default=None)
    aws_secret_access_key: Optional[str] = Field(default=None)

    # Development toggles
    use_in_memory_backends: bool = Field(default=False)

    @field_validator("firebase_private_key")
    @classmethod
    def _expand_newlines(cls, value: Optional[str]) -> Optional[str]:
        # Keys pasted into .env files usually carry literal "\n" sequences.
        if value:
            return value.replace("\\n", "\n")
        return value


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
