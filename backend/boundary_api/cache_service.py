"""
CONTENT CACHE
-------------
Tracks a short content hash per stored file.

Hashes are computed from the file bytes (never the path or mtime), so a
hash changes if and only if the content changes. A combined data version
is derived from all known hashes; clients use it to drop their caches
whenever any tracked file changes.

State is in-memory only. It is lost on restart and rebuilt lazily as
files are read or downloaded.
"""

from __future__ import annotations

import hashlib
import threading

HASH_LENGTH = 12


class CacheService:
    def __init__(self):
        self._file_hashes: dict[str, str] = {}
        self._data_version: str | None = None
        self._lock = threading.Lock()

    @staticmethod
    def calculate_data_hash(data: bytes | str) -> str:
        if isinstance(data, str):
            data = data.encode("utf-8")
        return hashlib.sha256(data).hexdigest()[:HASH_LENGTH]

    def update_file_hash(self, filename: str, data: bytes | str) -> str:
        file_hash = self.calculate_data_hash(data)
        with self._lock:
            self._file_hashes[filename] = file_hash
            self._update_data_version()
        return file_hash

    def update_multiple_hashes(self, file_data: dict[str, bytes | str]) -> list[dict]:
        return [
            {"filename": filename, "hash": self.update_file_hash(filename, data)}
            for filename, data in file_data.items()
        ]

    def get_file_hash(self, filename: str) -> str | None:
        with self._lock:
            return self._file_hashes.get(filename)

    def has_file(self, filename: str) -> bool:
        return self.get_file_hash(filename) is not None

    def get_all_file_hashes(self) -> dict[str, str]:
        with self._lock:
            return dict(self._file_hashes)

    @property
    def data_version(self) -> str | None:
        with self._lock:
            return self._data_version

    def clear(self) -> None:
        with self._lock:
            self._file_hashes.clear()
            self._data_version = None

    def _update_data_version(self) -> None:
        # caller holds the lock
        hashes = sorted(self._file_hashes.values())
        if not hashes:
            self._data_version = None
            return
        self._data_version = self.calculate_data_hash("".join(hashes))
