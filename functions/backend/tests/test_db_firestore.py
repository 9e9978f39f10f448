import unittest
from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

from google.api_core import exceptions
from google.cloud.firestore_v1 import SERVER_TIMESTAMP

from backend.db import FirestoreDbClient
from shared.types import MemoryRecord


def _record(memory_id, title="Trip"):
    return MemoryRecord(
        memory_id=memory_id,
        title=title,
        description="Beach day",
        date="2024-06-01",
        created_at=datetime(2024, 6, 2, tzinfo=timezone.utc),
    )


def _snapshot(items=None, exists=True):
    snapshot = MagicMock()
    snapshot.exists = exists
    snapshot.to_dict.return_value = {"items": items or []} if exists else None
    return snapshot


class FirestoreDbClientTests(unittest.TestCase):
    """
    Uses a mocked Firestore client; transactions run the wrapped function
    directly.
    """

    def setUp(self):
        patcher = patch("backend.db.firestore")
        self.mock_firestore = patcher.start()
        self.addCleanup(patcher.stop)
        self.mock_firestore.transactional = lambda fn: fn

        self.mock_client = MagicMock()
        self.doc_ref = self.mock_client.collection.return_value.document.return_value
        self.transaction = self.mock_client.transaction.return_value
        self.db = FirestoreDbClient(client=self.mock_client)

    def test_list_creates_missing_group(self):
        self.doc_ref.get.return_value = _snapshot(exists=False)

        self.assertEqual(self.db.list_memories("g1"), [])

        self.mock_client.collection.assert_called_with("memories")
        self.mock_client.collection.return_value.document.assert_called_with("g1")
        self.doc_ref.create.assert_called_once_with(
            {"items": [], "createdAt": SERVER_TIMESTAMP, "updatedAt": SERVER_TIMESTAMP}
        )

    def test_list_after_concurrent_create(self):
        existing = _record("a").to_firestore()
        self.doc_ref.get.side_effect = [_snapshot(exists=False), _snapshot([existing])]
        self.doc_ref.create.side_effect = exceptions.AlreadyExists("exists")

        self.assertEqual(self.db.list_memories("g1"), [_record("a")])

    def test_list_existing_group(self):
        items = [_record("a").to_firestore(), _record("b").to_firestore()]
        self.doc_ref.get.return_value = _snapshot(items)

        records = self.db.list_memories("g1")

        self.assertEqual([r.memory_id for r in records], ["a", "b"])
        self.doc_ref.create.assert_not_called()

    def test_legacy_timestamp_date(self):
        item = _record("a").to_firestore()
        item["date"] = datetime(2024, 6, 1, 21, 0, tzinfo=timezone.utc)
        self.doc_ref.get.return_value = _snapshot([item])

        self.assertEqual(self.db.get_memory("g1", "a").date, "2024-06-01")

    def test_get_memory_missing_group(self):
        self.doc_ref.get.return_value = _snapshot(exists=False)
        self.assertIsNone(self.db.get_memory("g1", "a"))

    def test_append_to_existing_group(self):
        existing = _record("a").to_firestore()
        self.doc_ref.get.return_value = _snapshot([existing])

        self.db.append_memory("g1", _record("b"))

        self.doc_ref.get.assert_called_once_with(transaction=self.transaction)
        self.transaction.set.assert_called_once_with(
            self.doc_ref,
            {
                "items": [existing, _record("b").to_firestore()],
                "updatedAt": SERVER_TIMESTAMP,
            },
            merge=True,
        )

    def test_append_creates_group(self):
        self.doc_ref.get.return_value = _snapshot(exists=False)

        self.db.append_memory("g1", _record("a"))

        written = self.transaction.set.call_args.args[1]
        self.assertEqual(written["items"], [_record("a").to_firestore()])
        self.assertEqual(written["createdAt"], SERVER_TIMESTAMP)

    def test_remove_memory(self):
        items = [_record("a").to_firestore(), _record("b").to_firestore()]
        self.doc_ref.get.return_value = _snapshot(items)

        removed = self.db.remove_memory("g1", "a")

        self.assertEqual(removed, _record("a"))
        self.transaction.update.assert_called_once_with(
            self.doc_ref,
            {"items": [_record("b").to_firestore()], "updatedAt": SERVER_TIMESTAMP},
        )

    def test_remove_missing_memory_does_not_write(self):
        self.doc_ref.get.return_value = _snapshot([_record("a").to_firestore()])

        self.assertIsNone(self.db.remove_memory("g1", "zzz"))
        self.transaction.update.assert_not_called()


if __name__ == "__main__":
    unittest.main()
