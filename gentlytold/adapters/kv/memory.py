import json
from threading import Lock
from typing import Any

from gentlytold.core.ports.kv import VersionConflictError, VersionedValue


class InMemoryKVStore:
    """
    Process-local versioned KV store.

    Values go through a JSON round-trip on write so callers can't mutate
    stored state through shared references.
    """

    def __init__(self) -> None:
        self._data: dict[str, tuple[str, int]] = {}  # key -> (json, version)
        self._lock = Lock()

    def get(self, key: str) -> VersionedValue | None:
        with self._lock:
            entry = self._data.get(key)
        if entry is None:
            return None
        payload, version = entry
        return VersionedValue(value=json.loads(payload), version=version)

    def put(self, key: str, value: Any, expected_version: int | None = None) -> int:
        payload = json.dumps(value)
        with self._lock:
            current = self._data.get(key)
            current_version = current[1] if current else 0
            if expected_version is not None and expected_version != current_version:
                raise VersionConflictError(
                    key, expected_version, current_version if current else None
                )
            new_version = current_version + 1
            self._data[key] = (payload, new_version)
            return new_version

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def keys(self) -> list[str]:
        with self._lock:
            return sorted(self._data)
