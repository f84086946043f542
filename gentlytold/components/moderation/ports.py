"""Moderation component port definitions - protocols for dependencies."""

from datetime import datetime
from typing import Protocol

from gentlytold.core.ports.blobs import BlobStorePort
from gentlytold.core.ports.kv import KeyValueStorePort
from gentlytold.core.ports.notify import NotifierPort


class ClockPort(Protocol):
    """Protocol for time operations."""

    def now(self) -> datetime:
        """Return current UTC time."""
        ...


__all__ = ["BlobStorePort", "ClockPort", "KeyValueStorePort", "NotifierPort"]
