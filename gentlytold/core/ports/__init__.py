"""Ports (Protocols) for the external collaborators."""

from gentlytold.core.ports.blobs import BlobStorePort, StoredBlob
from gentlytold.core.ports.kv import KeyValueStorePort, VersionConflictError, VersionedValue
from gentlytold.core.ports.notify import NotifierPort

__all__ = [
    "BlobStorePort",
    "KeyValueStorePort",
    "NotifierPort",
    "StoredBlob",
    "VersionConflictError",
    "VersionedValue",
]
