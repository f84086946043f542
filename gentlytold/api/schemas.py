from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from gentlytold.domain.entities import Memory, PublishedMemorial


# --- Memories ---
class MemoryResponse(BaseModel):
    """Public wire format for a memory (camelCase photo fields, as the memorial pages expect)."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    relationship: str = ""
    memory: str
    date: datetime
    photo_reference: str | None = Field(default=None, alias="photoReference")
    photo_url: str | None = Field(default=None, alias="photoUrl")

    @classmethod
    def from_memory(cls, m: Memory) -> "MemoryResponse":
        return cls(
            id=m.id,
            name=m.author_name,
            relationship=m.relationship,
            memory=m.text,
            date=m.submitted_at,
            photo_reference=m.photo_reference,
            photo_url=f"/api/photo/{m.photo_reference}" if m.photo_reference else None,
        )


class SubmitMemoryResponse(BaseModel):
    success: bool = True
    id: str
    status: str = "pending"
    message: str


class ModerationResponse(BaseModel):
    success: bool = True
    id: str
    remaining: int


# --- Admin ---
class ProvisionAdminRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    contact_email: str | None = Field(default=None, alias="contactEmail", max_length=254)
    contact_name: str | None = Field(default=None, alias="contactName", max_length=200)


class ProvisionAdminResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    slug: str
    token: str
    created_at: datetime = Field(alias="createdAt")
    review_url: str = Field(alias="reviewUrl")


# --- Drafts ---
class SubmitDraftResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    id: str
    preview_url: str = Field(alias="previewUrl")


class DraftPreviewResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    data: dict[str, Any]
    created_at: datetime = Field(alias="createdAt")
    approve_url: str = Field(alias="approveUrl")


class PublishedMemorialResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    data: dict[str, Any]
    funeral_home_name: str = Field(default="", alias="funeralHomeName")
    created_at: datetime = Field(alias="createdAt")
    published_at: datetime = Field(alias="publishedAt")

    @classmethod
    def from_published(cls, p: PublishedMemorial) -> "PublishedMemorialResponse":
        return cls(
            id=p.slug,
            data=p.data.model_dump(mode="json"),
            funeral_home_name=p.funeral_home_name,
            created_at=p.created_at,
            published_at=p.published_at,
        )


class ApproveDraftResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    id: str
    permanent_url: str = Field(alias="permanentUrl")
    already_published: bool = Field(default=False, alias="alreadyPublished")
