import json
import os
from pathlib import Path

from gentlytold.core.ports.blobs import StoredBlob

META_SUFFIX = ".meta.json"
DEFAULT_CONTENT_TYPE = "application/octet-stream"


class FileSystemStore:
    """Blob store on a local directory; content type kept in a sidecar file."""

    def __init__(self, base_path: str):
        self.base_path = Path(base_path).resolve()
        if not self.base_path.exists():
            os.makedirs(self.base_path, exist_ok=True)

    def _safe_path(self, path: str) -> Path:
        # Prevent traversal
        target = (self.base_path / path).resolve()
        if self.base_path not in target.parents:
            raise ValueError(f"Path traversal attempt detected: {path}")
        return target

    def _meta_path(self, target: Path) -> Path:
        return target.with_name(target.name + META_SUFFIX)

    def put(self, key: str, data: bytes, content_type: str) -> str:
        target = self._safe_path(key)
        target.parent.mkdir(parents=True, exist_ok=True)
        with open(target, "wb") as f:
            f.write(data)
        with open(self._meta_path(target), "w") as f:
            json.dump({"content_type": content_type, "size_bytes": len(data)}, f)
        return str(target.relative_to(self.base_path))

    def get(self, key: str) -> StoredBlob:
        """Retrieve a blob by key. Raises FileNotFoundError."""
        target = self._safe_path(key)
        if not target.exists():
            raise FileNotFoundError(f"File not found: {key}")
        with open(target, "rb") as f:
            data = f.read()

        content_type = DEFAULT_CONTENT_TYPE
        meta = self._meta_path(target)
        if meta.exists():
            with open(meta) as f:
                content_type = json.load(f).get("content_type") or DEFAULT_CONTENT_TYPE
        return StoredBlob(data=data, content_type=content_type)

    def delete(self, key: str) -> None:
        target = self._safe_path(key)
        if target.exists():
            os.remove(target)
        meta = self._meta_path(target)
        if meta.exists():
            os.remove(meta)
