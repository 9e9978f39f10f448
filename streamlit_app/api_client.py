# Copyright 2025 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
# ==============================================================================

"""HTTP client for the Memory Box API used by the Streamlit app."""

import logging
import os
from typing import Any, Optional, Tuple
from urllib.parse import quote

import requests

from streamlit_app.session import SessionStore

logger = logging.getLogger(__name__)

API_URL_ENV = "MEMORYBOX_API_URL"
DEFAULT_API_URL = "http://localhost:3000/api"
REQUEST_TIMEOUT = 30

FALLBACK_ERROR = "Bir hata oluştu. Lütfen tekrar deneyin."
AUTH_FAILED_ERROR = "Kimlik doğrulama başarısız oldu"

# (filename, bytes, content type)
PhotoFile = Tuple[str, bytes, str]


class ApiError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def error_message(response: requests.Response) -> str:
    """Server-provided message: "error", else the first "errors" entry."""
    try:
        body = response.json()
    except ValueError:
        return FALLBACK_ERROR
    if not isinstance(body, dict):
        return FALLBACK_ERROR
    if body.get("error"):
        return body["error"]
    errors = body.get("errors")
    if errors and isinstance(errors, list) and isinstance(errors[0], dict):
        if errors[0].get("msg"):
            return errors[0]["msg"]
    return FALLBACK_ERROR


class MemoryBoxClient:
    def __init__(
        self, base_url: Optional[str] = None, session: Optional[SessionStore] = None
    ):
        self.base_url = (
            base_url or os.environ.get(API_URL_ENV) or DEFAULT_API_URL
        ).rstrip("/")
        self.session = session or SessionStore()

    def _request(self, method: str, path: str, **kwargs) -> Any:
        headers = dict(kwargs.pop("headers", {}))
        headers.update(self.session.auth_headers())
        try:
            response = requests.request(
                method,
                f"{self.base_url}{path}",
                headers=headers,
                timeout=REQUEST_TIMEOUT,
                **kwargs,
            )
        except requests.RequestException as e:
            logger.error("Request %s %s failed: %s", method, path, e)
            raise ApiError(FALLBACK_ERROR) from e
        if not response.ok:
            raise ApiError(error_message(response), response.status_code)
        try:
            return response.json()
        except ValueError as e:
            logger.error("Response to %s %s is not JSON", method, path)
            raise ApiError(FALLBACK_ERROR, response.status_code) from e

    def _start_session(self, data: dict) -> dict:
        if not data.get("token"):
            raise ApiError(AUTH_FAILED_ERROR)
        self.session.save(data["token"], data.get("user") or {})
        return data["user"]

    def login(self, email: str, password: str) -> dict:
        data = self._request(
            "POST", "/auth/login", json={"email": email, "password": password}
        )
        return self._start_session(data)

    def register(self, email: str, password: str, display_name: str) -> dict:
        data = self._request(
            "POST",
            "/auth/register",
            json={"email": email, "password": password, "displayName": display_name},
        )
        return self._start_session(data)

    def logout(self) -> None:
        self.session.clear()

    def list_memories(self, group_id: str) -> list[dict]:
        return self._request("GET", f"/memories/{quote(group_id, safe='')}")

    def create_memory(
        self,
        group_id: str,
        title: str,
        description: str,
        date: str,
        photo: Optional[PhotoFile] = None,
    ) -> dict:
        files = {"photo": photo} if photo else None
        return self._request(
            "POST",
            f"/memories/{quote(group_id, safe='')}",
            data={"title": title, "description": description, "date": date},
            files=files,
        )

    def delete_memory(self, group_id: str, memory_id: str) -> dict:
        return self._request(
            "DELETE",
            f"/memories/{quote(group_id, safe='')}/{quote(memory_id, safe='')}",
        )
