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

from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any, Optional

from dacite import Config, from_dict

from shared.json_utils import convert_keys


@dataclass
class MemoryRecord:
    """A single journaled memory belonging to a memory group."""

    memory_id: str
    title: str
    description: str
    # Calendar date, ISO formatted (YYYY-MM-DD).
    date: str
    created_at: datetime
    photo_url: Optional[str] = None

    @classmethod
    def from_firestore(cls, data: dict) -> "MemoryRecord":
        """Builds a record from its camelCase Firestore representation."""
        fields = convert_keys(data, "camel_to_snake")
        # Older documents stored the date as a Firestore timestamp.
        if isinstance(fields.get("date"), datetime):
            fields["date"] = fields["date"].date().isoformat()
        return from_dict(
            data_class=cls,
            data=fields,
            config=Config(check_types=False),
        )

    def to_firestore(self) -> dict:
        return convert_keys(asdict(self), "snake_to_camel")

    def to_json(self) -> dict:
        """camelCase dict with the timestamp rendered as ISO-8601."""
        data = self.to_firestore()
        created_at = data.get("createdAt")
        if isinstance(created_at, datetime):
            data["createdAt"] = created_at.isoformat()
        return data


@dataclass
class UserAccount:
    """Profile data owned by the identity provider."""

    uid: str
    email: str
    display_name: Optional[str] = None

    def to_json(self) -> dict:
        return convert_keys(asdict(self), "snake_to_camel")


@dataclass
class AuthResult:
    token: str
    user: UserAccount

    def to_json(self) -> dict[str, Any]:
        return {"token": self.token, "user": self.user.to_json()}
