from datetime import datetime
from typing import Any, Protocol

from gentlytold.core.ports.kv import VersionedValue


class DraftStorePort(Protocol):
    def get(self, key: str) -> VersionedValue | None: ...
    def put(self, key: str, value: Any, expected_version: int | None = None) -> int: ...
    def delete(self, key: str) -> None: ...


class NotifierPort(Protocol):
    def send(self, text: str) -> bool: ...


class TimePort(Protocol):
    """Port for time operations - enables deterministic testing."""

    def now(self) -> datetime:
        """Get current UTC time."""
        ...
