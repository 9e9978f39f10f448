import os
import unittest
from unittest.mock import patch

from backend.dependencies import get_storage_client, reset_clients
from backend.storage import FirebaseStorageClient, InMemoryStorageClient


class StorageWiringTests(unittest.TestCase):
    def setUp(self):
        self.addCleanup(reset_clients)
        reset_clients()

    @patch.dict(os.environ, {"USE_IN_MEMORY_BACKENDS": "true"})
    def test_in_memory_when_enabled(self):
        self.assertIsInstance(get_storage_client(), InMemoryStorageClient)

    @patch("backend.storage.storage")
    @patch("backend.dependencies.ensure_firebase_app")
    @patch.dict(
        os.environ,
        {"USE_IN_MEMORY_BACKENDS": "false", "FIREBASE_STORAGE_BUCKET": "memories-bucket"},
    )
    def test_firebase_storage_by_default(self, mock_ensure_app, mock_storage):
        client = get_storage_client()
        self.assertIsInstance(client, FirebaseStorageClient)
        mock_ensure_app.assert_called_once()
        mock_storage.bucket.assert_called_once_with("memories-bucket")

    @patch("backend.storage.storage")
    @patch("backend.dependencies.ensure_firebase_app")
    @patch.dict(
        os.environ,
        {"USE_IN_MEMORY_BACKENDS": "false", "FIREBASE_STORAGE_BUCKET": ""},
    )
    def test_missing_bucket_does_not_fall_back(self, mock_ensure_app, mock_storage):
        mock_storage.bucket.side_effect = ValueError("Storage bucket name not specified")
        with self.assertRaises(ValueError):
            get_storage_client()


if __name__ == "__main__":
    unittest.main()
