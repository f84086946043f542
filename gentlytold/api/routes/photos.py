"""
Photo serving.

Photo keys are "{slug}-{memory_id}" and never change, so responses are
cacheable for a year.
"""

import re

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from gentlytold.adapters.fs.filestore import FileSystemStore
from gentlytold.api.deps import get_blob_store
from gentlytold.domain.errors import NotFoundError

router = APIRouter()

# Cache for 1 year (immutable content)
CACHE_MAX_AGE = 31536000
CACHE_CONTROL_IMMUTABLE = f"public, max-age={CACHE_MAX_AGE}"

_PHOTO_KEY = re.compile(r"^[a-z0-9][a-z0-9-]{0,200}$")


@router.get("/photo/{key}")
def get_photo(
    key: str,
    blobs: FileSystemStore = Depends(get_blob_store),
) -> Response:
    if not _PHOTO_KEY.fullmatch(key):
        raise NotFoundError("Not found")
    try:
        blob = blobs.get(key)
    except FileNotFoundError as e:
        raise NotFoundError("Not found") from e

    return Response(
        content=blob.data,
        media_type=blob.content_type,
        headers={"Cache-Control": CACHE_CONTROL_IMMUTABLE},
    )
