"""
Storage Services Package

Provides the durable key-value interface, its file and in-memory
implementations, the seed dataset and the table store built on top.
"""

from flowguide.services.storage.identity import generate_id, now_iso, to_iso
from flowguide.services.storage.interface import (
    KeyValueSlot,
    NotFoundError,
    StorageError,
    StorageWriteError,
    StoreNotInitializedError,
    UnknownTableError,
)
from flowguide.services.storage.seed import (
    DEFAULT_USER_ID,
    DEMO_USERS,
    TABLE_NAMES,
    build_seed_data,
    get_demo_user,
)
from flowguide.services.storage.slots import FileSlot, MemorySlot
from flowguide.services.storage.table_store import (
    DEFAULT_STORAGE_KEY,
    TableStore,
    is_valid_table_set,
)

__all__ = [
    # Interfaces
    "KeyValueSlot",
    # Exceptions
    "NotFoundError",
    "StorageError",
    "StorageWriteError",
    "StoreNotInitializedError",
    "UnknownTableError",
    # Slots
    "FileSlot",
    "MemorySlot",
    # Seed
    "DEFAULT_USER_ID",
    "DEMO_USERS",
    "TABLE_NAMES",
    "build_seed_data",
    "get_demo_user",
    # Table store
    "DEFAULT_STORAGE_KEY",
    "TableStore",
    "is_valid_table_set",
    # Identity
    "generate_id",
    "now_iso",
    "to_iso",
]
