from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class StoredBlob:
    data: bytes
    content_type: str


class BlobStorePort(Protocol):
    def put(self, key: str, data: bytes, content_type: str) -> str:
        """Save bytes with their content type and return the key."""
        ...

    def get(self, key: str) -> StoredBlob:
        """Retrieve a blob by key. Raises FileNotFoundError."""
        ...

    def delete(self, key: str) -> None: ...
