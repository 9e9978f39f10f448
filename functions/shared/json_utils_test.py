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

import unittest
from datetime import datetime, timezone

from shared.json_utils import convert_keys
from shared.types import MemoryRecord, UserAccount


class ConvertKeysTest(unittest.TestCase):

    def test_nested_structures(self):
        data = {"memory_id": "m1", "items": [{"photo_url": None}], "user": {"display_name": "A"}}
        self.assertEqual(
            convert_keys(data, "snake_to_camel"),
            {"memoryId": "m1", "items": [{"photoUrl": None}], "user": {"displayName": "A"}},
        )
        self.assertEqual(convert_keys(convert_keys(data, "snake_to_camel"), "camel_to_snake"), data)

    def test_unknown_direction(self):
        with self.assertRaises(ValueError):
            convert_keys({}, "sideways")


class TypesTest(unittest.TestCase):

    def test_memory_record_json(self):
        record = MemoryRecord(
            memory_id="m1",
            title="Trip",
            description="Beach day",
            date="2024-06-01",
            created_at=datetime(2024, 6, 2, 9, 30, tzinfo=timezone.utc),
            photo_url="https://storage.googleapis.com/b/memories/g1/m1",
        )
        self.assertEqual(
            record.to_json(),
            {
                "memoryId": "m1",
                "title": "Trip",
                "description": "Beach day",
                "date": "2024-06-01",
                "createdAt": "2024-06-02T09:30:00+00:00",
                "photoUrl": "https://storage.googleapis.com/b/memories/g1/m1",
            },
        )
        self.assertEqual(MemoryRecord.from_firestore(record.to_firestore()), record)

    def test_user_account_json(self):
        user = UserAccount(uid="u1", email="a@b.co", display_name="A")
        self.assertEqual(user.to_json(), {"uid": "u1", "email": "a@b.co", "displayName": "A"})


if __name__ == "__main__":
    unittest.main()
