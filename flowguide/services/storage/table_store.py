"""
Table Store

A generic keyed-record store over a fixed set of named tables, persisted
as one JSON document under a single durable key.

GUARANTEES:
- Every read returns a deep copy; callers cannot reach internal state
- Every mutation is applied in memory before the persistence write
- A failed persistence write is logged and dropped; memory stays authoritative
- State that fails the shape check (every table must be a list) is replaced
  by a fresh seed instead of raising

The store is constructed once and passed to its callers. It must be
initialized explicitly with ``initialize()`` before use.
"""

import copy
import json
from typing import Any, Callable, Optional

from flowguide.audit import AuditLogger
from flowguide.services.storage.identity import generate_id, now_iso
from flowguide.services.storage.interface import (
    KeyValueSlot,
    StoreNotInitializedError,
    StorageWriteError,
    UnknownTableError,
)
from flowguide.services.storage.seed import (
    TABLE_ID_PREFIXES,
    TABLE_NAMES,
    TIMESTAMPED_TABLES,
    TableSet,
    build_seed_data,
)


DEFAULT_STORAGE_KEY = "flowguide-demo-store"

Record = dict[str, Any]


def is_valid_table_set(value: Any) -> bool:
    """Shape check: a mapping where every recognized table is a list."""
    if not isinstance(value, dict):
        return False
    return all(isinstance(value.get(table), list) for table in TABLE_NAMES)


class TableStore:
    """
    Per-table CRUD store with durable persistence and self-healing.

    Args:
        slot: Durable key-value medium
        seed_factory: Returns a fresh seed table set on every call
        storage_key: Key under which the table set is persisted
        audit_logger: Receives mutation, reseed and persistence events
        clock: Returns the current timestamp as an ISO string
    """

    def __init__(
        self,
        slot: KeyValueSlot,
        seed_factory: Callable[[], TableSet] = build_seed_data,
        storage_key: str = DEFAULT_STORAGE_KEY,
        audit_logger: Optional[AuditLogger] = None,
        clock: Callable[[], str] = now_iso,
    ):
        self._slot = slot
        self._seed_factory = seed_factory
        self._storage_key = storage_key
        self._audit = audit_logger or AuditLogger()
        self._clock = clock
        self._tables: Optional[TableSet] = None

    @property
    def storage_key(self) -> str:
        return self._storage_key

    @property
    def is_initialized(self) -> bool:
        return self._tables is not None

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def initialize(self) -> None:
        """
        Load the persisted table set, or seed it.

        Absent, unparsable or malformed persisted data is discarded and
        replaced by the seed, which is then persisted.
        """
        stored = self._read_persisted()
        if stored is not None:
            self._tables = stored
            return

        self._tables = self._seed_factory()
        self._audit.record_reseed("no valid persisted data")
        self._persist()

    def reset_store(self) -> None:
        """Discard the current state and return to the seed data."""
        self._tables = self._seed_factory()
        self._audit.record_mutation("*", "reset")
        self._persist()

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def get_snapshot(self) -> TableSet:
        """Deep copy of the whole table set."""
        self._ensure_integrity()
        return copy.deepcopy(self._tables)

    def get_table(self, table: str) -> list[Record]:
        """Deep copy of one table's records, in storage order."""
        return copy.deepcopy(self._records(table))

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def set_table(self, table: str, records: list[Record]) -> None:
        """Replace a table wholesale with a copy of ``records``."""
        self._records(table)
        self._tables[table] = copy.deepcopy(list(records))
        self._audit.record_mutation(table, "set", count=len(records))
        self._persist()

    def insert_record(self, table: str, record: Record) -> Record:
        """
        Append a copy of ``record`` and return a copy of what was stored.

        Missing ``id`` and ``created_at`` are filled in; tables that carry
        ``updated_at`` default it to ``created_at``. Ids are not checked
        for uniqueness.
        """
        records = self._records(table)
        entry = copy.deepcopy(dict(record))

        if not entry.get("id"):
            entry["id"] = generate_id(TABLE_ID_PREFIXES[table])
        if not entry.get("created_at"):
            entry["created_at"] = self._clock()
        if table in TIMESTAMPED_TABLES or "updated_at" in entry:
            if not entry.get("updated_at"):
                entry["updated_at"] = entry["created_at"]

        records.append(entry)
        self._audit.record_mutation(table, "insert", entry["id"])
        self._persist()
        return copy.deepcopy(entry)

    def update_record(
        self,
        table: str,
        record_id: str,
        updates: Record,
    ) -> Optional[Record]:
        """
        Shallow-merge ``updates`` into the first record with ``record_id``.

        The id is preserved. Records carrying ``updated_at`` get it
        refreshed unless the update sets it explicitly.

        Returns:
            A copy of the merged record, or None if no record matched
        """
        records = self._records(table)

        for index, existing in enumerate(records):
            if existing.get("id") != record_id:
                continue

            merged = {**existing, **copy.deepcopy(dict(updates))}
            merged["id"] = existing.get("id")
            if "updated_at" in existing and "updated_at" not in updates:
                merged["updated_at"] = self._clock()

            records[index] = merged
            self._audit.record_mutation(
                table,
                "update",
                record_id,
                fields=sorted(updates),
            )
            self._persist()
            return copy.deepcopy(merged)

        return None

    def delete_record(self, table: str, record_id: str) -> bool:
        """
        Remove every record with ``record_id``.

        Returns:
            True if anything was removed. Persists only in that case.
        """
        records = self._records(table)
        remaining = [row for row in records if row.get("id") != record_id]

        if len(remaining) == len(records):
            return False

        self._tables[table] = remaining
        self._audit.record_mutation(table, "delete", record_id)
        self._persist()
        return True

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _records(self, table: str) -> list[Record]:
        """The live list for ``table`` (never handed out to callers)."""
        self._ensure_integrity()
        if table not in TABLE_ID_PREFIXES:
            raise UnknownTableError(table)
        return self._tables[table]

    def _ensure_integrity(self) -> None:
        if self._tables is None:
            raise StoreNotInitializedError(
                "TableStore.initialize() must be called before use"
            )
        if not is_valid_table_set(self._tables):
            self._tables = self._seed_factory()
            self._audit.record_reseed("in-memory table set failed shape check")
            self._persist()

    def _read_persisted(self) -> Optional[TableSet]:
        raw = self._slot.read(self._storage_key)
        if not raw:
            return None

        try:
            parsed = json.loads(raw)
        except ValueError:
            return None

        return parsed if is_valid_table_set(parsed) else None

    def _persist(self) -> None:
        try:
            payload = json.dumps(self._tables, default=str)
            self._slot.write(self._storage_key, payload)
        except StorageWriteError as e:
            self._audit.record_persist_failure(self._storage_key, e)
