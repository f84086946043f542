"""
Drafts component unit tests.
"""

from datetime import UTC, datetime, timedelta

import pytest

from gentlytold.adapters.kv.memory import InMemoryKVStore
from gentlytold.adapters.notify.dev import DevNotifier
from gentlytold.components.drafts import (
    ApproveDraftInput,
    DraftsConfig,
    GetPublishedInput,
    IntakeForm,
    PreviewDraftInput,
    SubmitDraftInput,
    map_form_to_page_data,
    run,
    run_approve,
    run_get_published,
    run_preview,
    run_submit,
)
from gentlytold.domain.errors import AuthorizationError, NotFoundError, ValidationError
from gentlytold.domain.slugs import is_valid_slug

# --- Mock Implementations ---


class MockTime:
    def __init__(self, start: datetime | None = None) -> None:
        self._time = start or datetime(2025, 1, 2, 8, 0, 0, tzinfo=UTC)

    def now(self) -> datetime:
        return self._time

    def advance(self, delta: timedelta) -> None:
        self._time += delta


class BrokenNotifier:
    def send(self, text: str) -> bool:
        raise ConnectionError("no network")


CONFIG = DraftsConfig(base_url="https://memorials.example")


def make_form(**overrides) -> IntakeForm:
    payload = {
        "personName1": "Jane Doe",
        "personBorn1": "1940",
        "personDied1": "2024",
        "storyText": "She grew up by the sea.\n\nShe taught for forty years.",
        "timelineItems": [{"year": "1962", "text": "Married Tom"}, {"year": "", "text": ""}],
        "familyMembers": ["Tom Doe", {"name": "Ana", "relationship": "Niece"}, "  "],
        "funeralHomeName": "Willow Funeral Home",
        "funeralHomeWebsite": "https://willow.example",
        "formEmail": "family@example.com",
    }
    payload.update(overrides)
    return IntakeForm.model_validate(payload)


@pytest.fixture
def store() -> InMemoryKVStore:
    return InMemoryKVStore()


@pytest.fixture
def time() -> MockTime:
    return MockTime()


# --- Form mapping ---


class TestMapFormToPageData:
    def test_basic_fields(self) -> None:
        data = map_form_to_page_data(make_form())

        assert data.name == "Jane Doe"
        assert data.birth_date == "1940"
        assert data.death_date == "2024"
        assert data.story_paragraphs == ["She grew up by the sea.", "She taught for forty years."]
        assert data.funeral_home_url == "https://willow.example"
        assert not data.is_couple

    def test_blank_timeline_and_family_entries_dropped(self) -> None:
        data = map_form_to_page_data(make_form())

        assert [(t.year, t.title) for t in data.timeline_items] == [("1962", "Married Tom")]
        assert [(f.name, f.relationship) for f in data.family_members] == [
            ("Tom Doe", ""),
            ("Ana", "Niece"),
        ]

    def test_partner_fields_only_for_couples(self) -> None:
        single = map_form_to_page_data(make_form(personName2="Tom Doe", personBorn2="1938"))
        couple = map_form_to_page_data(
            make_form(personName2="Tom Doe", personBorn2="1938", isCouple=True)
        )

        assert single.partner_name == ""
        assert single.partner_birth_date == ""
        assert couple.partner_name == "Tom Doe"
        assert couple.partner_birth_date == "1938"

    def test_legacy_name_field_accepted(self) -> None:
        form = IntakeForm.model_validate({"name": "Ray Lane", "birthDate": "1950"})

        data = map_form_to_page_data(form)

        assert data.name == "Ray Lane"
        assert data.birth_date == "1950"


# --- Submit / Preview ---


class TestSubmitAndPreview:
    def test_submit_stores_draft_with_token(self, store, time) -> None:
        out = run_submit(SubmitDraftInput(form=make_form()), store, time)

        assert out.slug.startswith("jane-doe-")
        assert out.preview_path == f"/api/drafts/{out.slug}"

        preview = run_preview(PreviewDraftInput(slug=out.slug), store, CONFIG)
        assert preview.draft.data.name == "Jane Doe"
        assert preview.draft.email == "family@example.com"
        assert preview.draft.created_at == time.now()
        assert preview.approve_url == (
            f"https://memorials.example/api/drafts/{out.slug}/approve?token={preview.draft.token}"
        )

    def test_couple_with_shared_last_name_gets_joined_slug(self, store, time) -> None:
        form = make_form(personName2="Tom Doe", isCouple=True)

        out = run_submit(SubmitDraftInput(form=form), store, time)

        assert out.slug.startswith("jane-tom-doe-")

    def test_partner_name_feeds_slug_without_couple_flag(self, store, time) -> None:
        form = make_form(personName2="Tom Roe")

        out = run_submit(SubmitDraftInput(form=form), store, time)

        assert out.slug.startswith("jane-doe-tom-roe-")
        preview = run_preview(PreviewDraftInput(slug=out.slug), store, CONFIG)
        assert preview.draft.data.partner_name == ""

    def test_non_ascii_name_gets_valid_slug(self, store, time) -> None:
        out = run_submit(SubmitDraftInput(form=make_form(personName1="李小龙")), store, time)

        assert out.slug.startswith("memorial-")
        assert is_valid_slug(out.slug)

    def test_missing_name_rejected(self, store, time) -> None:
        with pytest.raises(ValidationError, match="personName1"):
            run_submit(SubmitDraftInput(form=make_form(personName1="  ")), store, time)

        assert store.keys() == []

    def test_preview_unknown_slug(self, store) -> None:
        with pytest.raises(NotFoundError):
            run_preview(PreviewDraftInput(slug="nobody-0000"), store, CONFIG)


# --- Approve ---


class TestApprove:
    @pytest.fixture
    def draft(self, store, time):
        out = run_submit(SubmitDraftInput(form=make_form()), store, time)
        return run_preview(PreviewDraftInput(slug=out.slug), store, CONFIG).draft

    def test_approve_publishes_and_removes_draft(self, store, time, draft) -> None:
        notifier = DevNotifier()
        time.advance(timedelta(hours=2))

        out = run_approve(ApproveDraftInput(slug=draft.slug, token=draft.token), store, notifier, time, CONFIG)

        assert not out.already_published
        assert out.permanent_url == f"https://memorials.example/m/{draft.slug}"
        assert out.published.published_at == time.now()
        assert out.published.created_at == draft.created_at
        assert store.get(f"draft:{draft.slug}") is None

        page = run_get_published(GetPublishedInput(slug=draft.slug), store)
        assert page.data.name == "Jane Doe"

        message = notifier.get_last()
        assert message is not None
        assert "Willow Funeral Home" in message.text
        assert out.permanent_url in message.text

    def test_approve_twice_reports_already_published(self, store, time, draft) -> None:
        notifier = DevNotifier()
        inp = ApproveDraftInput(slug=draft.slug, token=draft.token)
        run_approve(inp, store, notifier, time, CONFIG)

        again = run_approve(inp, store, notifier, time, CONFIG)

        assert again.already_published
        assert notifier.count == 1

    def test_wrong_token_rejected(self, store, time, draft) -> None:
        with pytest.raises(AuthorizationError):
            run_approve(ApproveDraftInput(slug=draft.slug, token="nope"), store, DevNotifier(), time, CONFIG)

        assert store.get(f"published:{draft.slug}") is None

    @pytest.mark.parametrize("token", [None, ""])
    def test_missing_token_rejected(self, store, time, draft, token) -> None:
        with pytest.raises(ValidationError):
            run_approve(ApproveDraftInput(slug=draft.slug, token=token), store, DevNotifier(), time, CONFIG)

    def test_unknown_slug_not_found(self, store, time) -> None:
        with pytest.raises(NotFoundError):
            run_approve(ApproveDraftInput(slug="ghost-0000", token="t"), store, DevNotifier(), time, CONFIG)

    def test_notification_failure_still_publishes(self, store, time, draft) -> None:
        out = run_approve(
            ApproveDraftInput(slug=draft.slug, token=draft.token), store, BrokenNotifier(), time, CONFIG
        )

        assert run_get_published(GetPublishedInput(slug=draft.slug), store) == out.published


def test_get_published_missing(store) -> None:
    with pytest.raises(NotFoundError):
        run_get_published(GetPublishedInput(slug="nobody-0000"), store)


def test_run_dispatches(store, time) -> None:
    submitted = run(SubmitDraftInput(form=make_form()), store=store, time=time)
    preview = run(PreviewDraftInput(slug=submitted.slug), store=store, config=CONFIG)

    approved = run(
        ApproveDraftInput(slug=submitted.slug, token=preview.draft.token),
        store=store,
        notifier=DevNotifier(),
        time=time,
        config=CONFIG,
    )

    assert approved.published.slug == submitted.slug
