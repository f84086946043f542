"""
Key-Value Store Interface.

Protocol for the document store holding memorial queues, admin records and
draft pages. Values are JSON-serializable; there is no query capability.

Every stored value carries an integer version that advances on each write.
Writers pass the version they read so that a concurrent write is detected
instead of silently overwritten.

expected_version semantics for put():
- None: unconditional write (last write wins)
- 0: create only; fails if the key already exists
- n > 0: write only if the stored version is still n
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol


@dataclass(frozen=True)
class VersionedValue:
    """A stored value and the version it was read at."""

    value: Any
    version: int


class KeyValueStorePort(Protocol):
    def get(self, key: str) -> VersionedValue | None:
        """Return the value and its version, or None if absent."""
        ...

    def put(self, key: str, value: Any, expected_version: int | None = None) -> int:
        """
        Write a value and return its new version.

        Raises:
            VersionConflictError: if expected_version does not match
        """
        ...

    def delete(self, key: str) -> None:
        """Remove a key. Missing keys are ignored."""
        ...


# --- Error Types ---


class VersionConflictError(Exception):
    """The stored version moved on since the caller read it."""

    def __init__(self, key: str, expected: int | None, actual: int | None) -> None:
        self.key = key
        self.expected = expected
        self.actual = actual
        super().__init__(f"Version conflict on {key}: expected {expected}, found {actual}")
