from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, Field

DEFAULT_AUTHOR_NAME = "Anonymous"

# --- Memories ---


class Memory(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid4()))
    author_name: str = DEFAULT_AUTHOR_NAME
    relationship: str = ""
    text: str
    submitted_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    photo_reference: str | None = None  # blob key, "{slug}-{id}"


class MemorialQueue(BaseModel):
    """Stored document for one memorial's memories (key memorial:{slug})."""

    slug: str
    pending: list[Memory] = Field(default_factory=list)
    approved: list[Memory] = Field(default_factory=list)

    def find_pending(self, memory_id: str) -> Memory | None:
        for m in self.pending:
            if m.id == memory_id:
                return m
        return None

    def is_approved(self, memory_id: str) -> bool:
        return any(m.id == memory_id for m in self.approved)


class AdminRecord(BaseModel):
    slug: str
    token: str
    contact_email: str = ""
    contact_name: str = ""
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


# --- Draft memorial pages ---


class TimelineItem(BaseModel):
    year: str = ""
    title: str = ""
    description: str = ""


class FamilyMember(BaseModel):
    name: str
    relationship: str = ""


class MemorialPageData(BaseModel):
    name: str
    partner_name: str = ""
    is_couple: bool = False
    birth_date: str = ""
    death_date: str = ""
    partner_birth_date: str = ""
    partner_death_date: str = ""
    hero_quote: str = ""
    hero_quote_attribution: str = ""
    story_paragraphs: list[str] = Field(default_factory=list)
    timeline_items: list[TimelineItem] = Field(default_factory=list)
    family_members: list[FamilyMember] = Field(default_factory=list)
    closing_quote: str = ""
    closing_quote_attribution: str = ""
    funeral_home_name: str = ""
    funeral_home_url: str = ""
    memory_form_enabled: bool = True


class DraftMemorial(BaseModel):
    slug: str
    token: str
    data: MemorialPageData
    form: dict[str, Any] = Field(default_factory=dict)
    email: str = ""
    funeral_home_name: str = ""
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class PublishedMemorial(BaseModel):
    slug: str
    data: MemorialPageData
    email: str = ""
    funeral_home_name: str = ""
    created_at: datetime
    published_at: datetime
