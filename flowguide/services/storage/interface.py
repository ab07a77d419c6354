"""
Abstract Storage Interface

The demo store persists its whole table set under a single durable key.
A ``KeyValueSlot`` is the minimal contract it needs from the backing
medium, which lets us:
1. Persist to local files for the Streamlit app
2. Use in-memory storage for testing
3. Emulate a full quota without touching the disk

The interface is intentionally tiny - three operations on opaque strings.
"""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueSlot(ABC):
    """
    Abstract durable key-value storage.

    Values are opaque strings (the store writes serialized JSON).
    """

    @abstractmethod
    def read(self, key: str) -> Optional[str]:
        """
        Read the value stored under a key.

        Returns:
            The stored string, or None if nothing is stored or the
            medium is unavailable
        """
        pass

    @abstractmethod
    def write(self, key: str, value: str) -> None:
        """
        Store a value under a key, replacing any previous value.

        Raises:
            StorageWriteError: If the medium rejects the write
        """
        pass

    @abstractmethod
    def remove(self, key: str) -> None:
        """
        Remove a key. Removing a missing key is not an error.

        Raises:
            StorageWriteError: If the medium rejects the removal
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class StorageWriteError(StorageError):
    """The durable medium rejected a write (quota exceeded, read-only disk)."""
    pass


class UnknownTableError(StorageError):
    """The requested table is not part of the table set."""

    def __init__(self, table: str):
        self.table = table
        super().__init__(f"Unknown table: {table}")


class StoreNotInitializedError(StorageError):
    """The table store was used before initialize() was called."""
    pass
