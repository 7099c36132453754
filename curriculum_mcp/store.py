"""
JSON-file collection store for the curriculum MCP server.

The whole datastore is one JSON object whose top-level fields are the
collection names, each holding an ordered list of records. Every mutation
rewrites the entire file.

Consistency rules:
- A mutation builds the next snapshot, persists it, then swaps it in, so a
  failed write leaves memory and disk agreeing on the previous state
- Writes go to a sibling ``.tmp`` file which then replaces the target
- Unknown top-level fields are preserved; missing or non-list collections
  are reset to empty lists on load
- Single process, single writer: there is no locking
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
import secrets
import string
import time
from typing import Any

from curriculum_mcp.errors import AlreadyExistsError, StorageError
from curriculum_mcp.models import Collection

logger = logging.getLogger("curriculum-mcp.store")

Record = dict[str, Any]

_BASE36 = string.digits + string.ascii_lowercase


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def generate_id() -> str:
    """
    Generate a record id: base36 millisecond timestamp + random suffix.

    Not cryptographically unique; uniqueness within a collection is checked
    on insert.
    """
    stamp = _to_base36(time.time_ns() // 1_000_000)
    suffix = "".join(secrets.choice(_BASE36) for _ in range(11))
    return stamp + suffix


def empty_document() -> dict[str, list[Record]]:
    """Return a document with every collection initialised to an empty list."""
    return {collection.value: [] for collection in Collection}


class CollectionStore:
    """Owns the in-memory snapshot and the backing JSON file."""

    def __init__(self, path: str | Path, indent: int = 2):
        self.path = Path(path)
        self.indent = indent
        self._data: dict[str, Any] = self._load()

    def _load(self) -> dict[str, Any]:
        try:
            missing = not self.path.exists()
            if missing:
                self.path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Failed to load database: {e}") from e

        if missing:
            data: dict[str, Any] = empty_document()
            self._save(data)
            logger.info(f"Created datastore at {self.path}")
            return data

        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise StorageError(f"Failed to load database: {e}") from e

        if not isinstance(raw, dict):
            raise StorageError(
                f"Failed to load database: top-level value in {self.path} is not an object"
            )

        for collection in Collection:
            if not isinstance(raw.get(collection.value), list):
                if collection.value in raw:
                    logger.warning(
                        f"Collection '{collection.value}' is not a list, resetting to empty"
                    )
                raw[collection.value] = []

        logger.info(f"Loaded datastore from {self.path}")
        return raw

    def _save(self, data: dict[str, Any]) -> None:
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            tmp_path.write_text(json.dumps(data, indent=self.indent), encoding="utf-8")
            tmp_path.replace(self.path)
        except (OSError, TypeError, ValueError) as e:
            raise StorageError(f"Failed to save database: {e}") from e

    def _commit(self, collection: Collection, records: list[Record]) -> None:
        """Persist a replacement list for one collection, then adopt it."""
        data = dict(self._data)
        data[collection.value] = records
        self._save(data)
        self._data = data
        logger.debug(f"Persisted {collection.value} ({len(records)} records)")

    def generate_id(self) -> str:
        return generate_id()

    def document(self) -> dict[str, Any]:
        """The full snapshot, including unrecognised top-level fields. Read-only."""
        return self._data

    def get_collection(self, collection: Collection) -> list[Record]:
        """Records of a collection in insertion order. Treat as read-only."""
        return self._data[collection.value]

    def find_by_id(self, collection: Collection, record_id: str) -> Record | None:
        for record in self.get_collection(collection):
            if record.get("id") == record_id:
                return record
        return None

    def add(self, collection: Collection, record: Record) -> Record:
        """Append a record and persist. Raises AlreadyExistsError on duplicate id."""
        records = self.get_collection(collection)
        if any(existing.get("id") == record.get("id") for existing in records):
            raise AlreadyExistsError(
                f"Item with ID {record.get('id')} already exists in {collection.value}"
            )
        self._commit(collection, [*records, record])
        return record

    def update(self, collection: Collection, record_id: str, fields: Record) -> Record | None:
        """
        Shallow-merge ``fields`` over the record with ``record_id`` and persist.

        Returns None when the id is absent. The id itself cannot be changed.
        """
        records = self.get_collection(collection)
        for index, existing in enumerate(records):
            if existing.get("id") == record_id:
                break
        else:
            return None

        merged = {**existing, **fields, "id": record_id}
        updated = list(records)
        updated[index] = merged
        self._commit(collection, updated)
        return merged

    def delete(self, collection: Collection, record_id: str) -> bool:
        """Remove the record with ``record_id``. Returns False when absent."""
        records = self.get_collection(collection)
        for index, existing in enumerate(records):
            if existing.get("id") == record_id:
                break
        else:
            return False

        self._commit(collection, records[:index] + records[index + 1 :])
        return True

    def counts(self) -> dict[str, int]:
        """Record count per collection."""
        return {collection.value: len(self.get_collection(collection)) for collection in Collection}
