"""Moderation component models - frozen dataclass inputs and outputs."""

from dataclasses import dataclass, field

from gentlytold.domain.entities import AdminRecord, Memory


@dataclass(frozen=True)
class ModerationConfig:
    """Operator configuration injected at construction."""

    master_key: str | None
    base_url: str = "http://localhost:8000"
    max_photo_bytes: int = 5 * 1024 * 1024
    allowed_photo_mime_types: tuple[str, ...] = (
        "image/jpeg",
        "image/png",
        "image/gif",
        "image/webp",
        "image/heic",
    )
    max_text_chars: int = 10000
    max_name_chars: int = 200
    preview_chars: int = 200
    admin_token_bytes: int = 32


@dataclass(frozen=True)
class PhotoUpload:
    data: bytes
    content_type: str = "image/jpeg"

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class SubmitMemoryInput:
    slug: str
    text: str
    author_name: str | None = None
    relationship: str | None = None
    photo: PhotoUpload | None = None


@dataclass(frozen=True)
class SubmitMemoryOutput:
    memory: Memory
    pending_count: int


@dataclass(frozen=True)
class ListPendingInput:
    slug: str
    token: str | None


@dataclass(frozen=True)
class ListApprovedInput:
    slug: str


@dataclass(frozen=True)
class ApproveInput:
    slug: str
    memory_id: str
    token: str | None


@dataclass(frozen=True)
class RejectInput:
    slug: str
    memory_id: str
    token: str | None


@dataclass(frozen=True)
class ModerationOutput:
    """Result of approve/reject."""

    memory_id: str
    remaining_pending: int


@dataclass(frozen=True)
class ProvisionAdminInput:
    slug: str
    master_key: str | None
    contact_email: str | None = None
    contact_name: str | None = None


@dataclass(frozen=True)
class ProvisionAdminOutput:
    record: AdminRecord


@dataclass(frozen=True)
class MemoryListOutput:
    memories: list[Memory] = field(default_factory=list)
