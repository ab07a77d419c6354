"""
Key-Value Slot Implementations

FileSlot keeps one JSON document per key inside a directory, so the demo
data survives restarts of the Streamlit app. MemorySlot keeps everything
in a dict and is what the tests use.
"""

import re
from pathlib import Path
from typing import Optional, Union

from flowguide.services.storage.interface import KeyValueSlot, StorageWriteError


_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9._-]")


class FileSlot(KeyValueSlot):
    """
    Directory-backed key-value slot.

    Keys map to ``<directory>/<key>.json``. The directory is created on
    the first write. Reads never raise: an unreadable file reads as absent.
    """

    def __init__(self, directory: Union[str, Path]):
        self._directory = Path(directory)

    @property
    def directory(self) -> Path:
        return self._directory

    def _path_for(self, key: str) -> Path:
        safe_key = _UNSAFE_KEY_CHARS.sub("_", key)
        return self._directory / f"{safe_key}.json"

    def read(self, key: str) -> Optional[str]:
        path = self._path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            return None

    def write(self, key: str, value: str) -> None:
        path = self._path_for(key)
        tmp_path = path.with_suffix(".json.tmp")
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(value, encoding="utf-8")
            tmp_path.replace(path)
        except OSError as e:
            raise StorageWriteError(f"Failed to write {key}: {e}") from e

    def remove(self, key: str) -> None:
        try:
            self._path_for(key).unlink(missing_ok=True)
        except OSError as e:
            raise StorageWriteError(f"Failed to remove {key}: {e}") from e


class MemorySlot(KeyValueSlot):
    """
    In-memory key-value slot.

    Set ``fail_writes`` to emulate a medium that rejects every write,
    like a browser storage quota that has been exhausted.
    """

    def __init__(
        self,
        initial: Optional[dict[str, str]] = None,
        fail_writes: bool = False,
    ):
        self.values: dict[str, str] = dict(initial or {})
        self.fail_writes = fail_writes
        self.write_count = 0

    def read(self, key: str) -> Optional[str]:
        return self.values.get(key)

    def write(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise StorageWriteError(f"Quota exceeded while writing {key}")
        self.values[key] = value
        self.write_count += 1

    def remove(self, key: str) -> None:
        if self.fail_writes:
            raise StorageWriteError(f"Quota exceeded while removing {key}")
        self.values.pop(key, None)
