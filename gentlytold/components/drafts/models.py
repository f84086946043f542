from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from gentlytold.domain.entities import DraftMemorial, PublishedMemorial


class IntakeTimelineItem(BaseModel):
    model_config = ConfigDict(extra="ignore")

    year: str = ""
    title: str = ""
    text: str = ""
    description: str = ""


class IntakeFamilyMember(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str = ""
    relationship: str = ""


class IntakeForm(BaseModel):
    """Family intake form as posted by the website (camelCase field names)."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    person_name1: str = Field(default="", alias="personName1")
    name: str = ""
    person_name2: str = Field(default="", alias="personName2")
    is_couple: bool = Field(default=False, alias="isCouple")
    person_born1: str = Field(default="", alias="personBorn1")
    birth_date: str = Field(default="", alias="birthDate")
    person_died1: str = Field(default="", alias="personDied1")
    death_date: str = Field(default="", alias="deathDate")
    person_born2: str = Field(default="", alias="personBorn2")
    person_died2: str = Field(default="", alias="personDied2")
    hero_quote: str = Field(default="", alias="heroQuote")
    hero_quote_attribution: str = Field(default="", alias="heroQuoteAttribution")
    story_text: str = Field(default="", alias="storyText")
    timeline_items: list[IntakeTimelineItem] = Field(default_factory=list, alias="timelineItems")
    family_members: list[str | IntakeFamilyMember] = Field(
        default_factory=list, alias="familyMembers"
    )
    closing_quote: str = Field(default="", alias="closingQuote")
    closing_quote_attribution: str = Field(default="", alias="closingQuoteAttribution")
    funeral_home_name: str = Field(default="", alias="funeralHomeName")
    funeral_home_website: str = Field(default="", alias="funeralHomeWebsite")
    funeral_home_url: str = Field(default="", alias="funeralHomeUrl")
    form_email: str = Field(default="", alias="formEmail")

    @property
    def display_name(self) -> str:
        return (self.person_name1 or self.name).strip()


@dataclass(frozen=True)
class SubmitDraftInput:
    form: IntakeForm


@dataclass(frozen=True)
class SubmitDraftOutput:
    slug: str
    preview_path: str


@dataclass(frozen=True)
class PreviewDraftInput:
    slug: str


@dataclass(frozen=True)
class PreviewDraftOutput:
    draft: DraftMemorial
    approve_url: str


@dataclass(frozen=True)
class ApproveDraftInput:
    slug: str
    token: str | None


@dataclass(frozen=True)
class ApproveDraftOutput:
    published: PublishedMemorial
    permanent_url: str
    already_published: bool = False


@dataclass(frozen=True)
class GetPublishedInput:
    slug: str


@dataclass(frozen=True)
class DraftsConfig:
    base_url: str = "http://localhost:8000"


def intake_to_dict(form: IntakeForm) -> dict[str, Any]:
    return form.model_dump(mode="json", by_alias=True)
