"""
Public memory endpoints.

Endpoints:
- POST /api/memories/{slug} - Submit a memory (multipart form, optional photo)
- GET /api/memories/{slug} - List approved memories
"""

from fastapi import APIRouter, Depends, File, Form, UploadFile

from gentlytold.api.deps import get_moderation_queue, get_rules
from gentlytold.api.schemas import MemoryResponse, SubmitMemoryResponse
from gentlytold.components.moderation import ModerationQueue, PhotoUpload, SubmitMemoryInput
from gentlytold.rules.models import Rules

router = APIRouter()

DEFAULT_PHOTO_TYPE = "image/jpeg"
UNTYPED_UPLOADS = {"", "application/octet-stream"}


def photo_content_type(photo: UploadFile) -> str:
    """Clients that send no real type (curl, some mobile browsers) get image/jpeg."""
    content_type = (photo.content_type or "").split(";", 1)[0].strip().lower()
    if content_type in UNTYPED_UPLOADS:
        return DEFAULT_PHOTO_TYPE
    return content_type


@router.post("/memories/{slug}", response_model=SubmitMemoryResponse)
def submit_memory(
    slug: str,
    name: str = Form(""),
    relationship: str = Form(""),
    memory: str = Form(""),
    photo: UploadFile | None = File(None),
    queue: ModerationQueue = Depends(get_moderation_queue),
    rules: Rules = Depends(get_rules),
) -> SubmitMemoryResponse:
    """Submit a memory; it stays hidden until the family approves it."""
    upload = None
    if photo is not None:
        # At most limit + 1 bytes; anything longer fails the size check
        data = photo.file.read(rules.memories.max_photo_bytes + 1)
        if data:
            upload = PhotoUpload(data=data, content_type=photo_content_type(photo))

    result = queue.submit(
        SubmitMemoryInput(
            slug=slug,
            text=memory,
            author_name=name,
            relationship=relationship,
            photo=upload,
        )
    )

    return SubmitMemoryResponse(
        id=result.memory.id,
        message="Thank you. Your memory will appear once the family has reviewed it.",
    )


@router.get(
    "/memories/{slug}",
    response_model=list[MemoryResponse],
    response_model_exclude_none=True,
)
def list_memories(
    slug: str,
    queue: ModerationQueue = Depends(get_moderation_queue),
) -> list[MemoryResponse]:
    """Approved memories in display order."""
    return [MemoryResponse.from_memory(m) for m in queue.list_approved(slug)]
