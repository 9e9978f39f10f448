"""
Document store abstraction for memory groups: Firestore and an in-memory
test implementation.

Each memory group is one document holding an ordered ``items`` array.
Appends and removals run as read-modify-write inside a Firestore
transaction, so concurrent writers to the same group do not lose updates.
"""

from __future__ import annotations

import threading
from typing import Optional, Protocol

from firebase_admin import firestore
from google.api_core import exceptions
from google.cloud.firestore_v1 import SERVER_TIMESTAMP

from shared.firebase_constants import (
    CREATED_AT_FIELD,
    ITEMS_FIELD,
    MEMORIES_COLLECTION,
    UPDATED_AT_FIELD,
)
from shared.types import MemoryRecord


class DbClient(Protocol):
    """Interface for memory group persistence."""

    def list_memories(self, group_id: str) -> list[MemoryRecord]:
        """Returns the group's records, creating an empty group if absent."""
        ...

    def get_memory(self, group_id: str, memory_id: str) -> Optional[MemoryRecord]:
        ...

    def append_memory(self, group_id: str, record: MemoryRecord) -> None:
        ...

    def remove_memory(self, group_id: str, memory_id: str) -> Optional[MemoryRecord]:
        """Removes and returns the record, or None if group/record is absent."""
        ...


class InMemoryDbClient:
    """Simple in-memory database for development and tests."""

    def __init__(self):
        self.groups: dict[str, list[dict]] = {}
        self._lock = threading.Lock()

    def list_memories(self, group_id: str) -> list[MemoryRecord]:
        with self._lock:
            items = self.groups.setdefault(group_id, [])
            return [MemoryRecord.from_firestore(item) for item in items]

    def get_memory(self, group_id: str, memory_id: str) -> Optional[MemoryRecord]:
        with self._lock:
            for item in self.groups.get(group_id, []):
                if item.get("memoryId") == memory_id:
                    return MemoryRecord.from_firestore(item)
        return None

    def append_memory(self, group_id: str, record: MemoryRecord) -> None:
        with self._lock:
            self.groups.setdefault(group_id, []).append(record.to_firestore())

    def remove_memory(self, group_id: str, memory_id: str) -> Optional[MemoryRecord]:
        with self._lock:
            items = self.groups.get(group_id)
            if items is None:
                return None
            for index, item in enumerate(items):
                if item.get("memoryId") == memory_id:
                    del items[index]
                    return MemoryRecord.from_firestore(item)
        return None

    def reset(self) -> None:
        """Clear all stored data (useful in tests)."""
        with self._lock:
            self.groups.clear()


def _items(snapshot) -> list[dict]:
    if not snapshot.exists:
        return []
    return (snapshot.to_dict() or {}).get(ITEMS_FIELD) or []


class FirestoreDbClient:
    """Firestore-backed store, one document per memory group."""

    def __init__(self, collection: str = MEMORIES_COLLECTION, client=None):
        self._db = client or firestore.client()
        self._collection = collection

    def _doc_ref(self, group_id: str):
        return self._db.collection(self._collection).document(group_id)

    def list_memories(self, group_id: str) -> list[MemoryRecord]:
        doc_ref = self._doc_ref(group_id)
        snapshot = doc_ref.get()
        if not snapshot.exists:
            try:
                doc_ref.create(
                    {
                        ITEMS_FIELD: [],
                        CREATED_AT_FIELD: SERVER_TIMESTAMP,
                        UPDATED_AT_FIELD: SERVER_TIMESTAMP,
                    }
                )
            except exceptions.AlreadyExists:
                # Another request created the group in the meantime.
                return self.list_memories(group_id)
            return []
        return [MemoryRecord.from_firestore(item) for item in _items(snapshot)]

    def get_memory(self, group_id: str, memory_id: str) -> Optional[MemoryRecord]:
        snapshot = self._doc_ref(group_id).get()
        for item in _items(snapshot):
            if item.get("memoryId") == memory_id:
                return MemoryRecord.from_firestore(item)
        return None

    def append_memory(self, group_id: str, record: MemoryRecord) -> None:
        transaction = self._db.transaction()
        doc_ref = self._doc_ref(group_id)

        @firestore.transactional
        def _append_transaction(transaction, doc_ref):
            snapshot = doc_ref.get(transaction=transaction)
            doc_data = {
                ITEMS_FIELD: _items(snapshot) + [record.to_firestore()],
                UPDATED_AT_FIELD: SERVER_TIMESTAMP,
            }
            if not snapshot.exists:
                doc_data[CREATED_AT_FIELD] = SERVER_TIMESTAMP
            transaction.set(doc_ref, doc_data, merge=True)

        _append_transaction(transaction, doc_ref)

    def remove_memory(self, group_id: str, memory_id: str) -> Optional[MemoryRecord]:
        transaction = self._db.transaction()
        doc_ref = self._doc_ref(group_id)

        @firestore.transactional
        def _remove_transaction(transaction, doc_ref):
            snapshot = doc_ref.get(transaction=transaction)
            items = _items(snapshot)
            removed = None
            remaining = []
            for item in items:
                if removed is None and item.get("memoryId") == memory_id:
                    removed = item
                else:
                    remaining.append(item)
            if removed is None:
                return None
            transaction.update(
                doc_ref, {ITEMS_FIELD: remaining, UPDATED_AT_FIELD: SERVER_TIMESTAMP}
            )
            return MemoryRecord.from_firestore(removed)

        return _remove_transaction(transaction, doc_ref)
