import logging
import re
from uuid import uuid4

from gentlytold.domain.entities import (
    DraftMemorial,
    FamilyMember,
    MemorialPageData,
    PublishedMemorial,
    TimelineItem,
)
from gentlytold.domain.errors import AuthorizationError, NotFoundError, ValidationError
from gentlytold.domain.slugs import generate_slug
from gentlytold.domain.tokens import tokens_match

from .models import (
    ApproveDraftInput,
    ApproveDraftOutput,
    DraftsConfig,
    GetPublishedInput,
    IntakeForm,
    PreviewDraftInput,
    PreviewDraftOutput,
    SubmitDraftInput,
    SubmitDraftOutput,
    intake_to_dict,
)
from .ports import DraftStorePort, NotifierPort, TimePort

logger = logging.getLogger(__name__)

_PARAGRAPH_BREAK = re.compile(r"\n\s*\n")


def draft_key(slug: str) -> str:
    return f"draft:{slug}"


def published_key(slug: str) -> str:
    return f"published:{slug}"


def map_form_to_page_data(form: IntakeForm) -> MemorialPageData:
    is_couple = form.is_couple
    paragraphs = [p.strip() for p in _PARAGRAPH_BREAK.split(form.story_text) if p.strip()]

    timeline = [
        TimelineItem(
            year=item.year,
            title=item.title or item.text,
            description=item.description,
        )
        for item in form.timeline_items
        if item.year or item.text or item.title
    ]

    family: list[FamilyMember] = []
    for member in form.family_members:
        if isinstance(member, str):
            if member.strip():
                family.append(FamilyMember(name=member))
        elif member.name.strip():
            family.append(FamilyMember(name=member.name, relationship=member.relationship))

    return MemorialPageData(
        name=form.display_name,
        partner_name=form.person_name2 if is_couple else "",
        is_couple=is_couple,
        birth_date=form.person_born1 or form.birth_date,
        death_date=form.person_died1 or form.death_date,
        partner_birth_date=form.person_born2 if is_couple else "",
        partner_death_date=form.person_died2 if is_couple else "",
        hero_quote=form.hero_quote,
        hero_quote_attribution=form.hero_quote_attribution,
        story_paragraphs=paragraphs,
        timeline_items=timeline,
        family_members=family,
        closing_quote=form.closing_quote,
        closing_quote_attribution=form.closing_quote_attribution,
        funeral_home_name=form.funeral_home_name,
        funeral_home_url=form.funeral_home_website or form.funeral_home_url,
    )


def run_submit(
    inp: SubmitDraftInput,
    store: DraftStorePort,
    time: TimePort,
) -> SubmitDraftOutput:
    form = inp.form
    if not form.display_name:
        raise ValidationError("Missing required field: personName1 (or name)", field="personName1")

    # Partner name feeds the slug even when the page is not laid out as a couple
    slug = generate_slug(form.display_name, form.person_name2.strip() or None)
    draft = DraftMemorial(
        slug=slug,
        token=str(uuid4()),
        data=map_form_to_page_data(form),
        form=intake_to_dict(form),
        email=form.form_email,
        funeral_home_name=form.funeral_home_name,
        created_at=time.now(),
    )
    store.put(draft_key(slug), draft.model_dump(mode="json"))

    logger.info("Draft memorial %s created", slug)
    return SubmitDraftOutput(slug=slug, preview_path=f"/api/drafts/{slug}")


def run_preview(
    inp: PreviewDraftInput,
    store: DraftStorePort,
    config: DraftsConfig,
) -> PreviewDraftOutput:
    stored = store.get(draft_key(inp.slug))
    if stored is None:
        raise NotFoundError(
            "This preview link is no longer valid or has already been published."
        )
    draft = DraftMemorial.model_validate(stored.value)
    approve_url = f"{config.base_url.rstrip('/')}/api/drafts/{draft.slug}/approve?token={draft.token}"
    return PreviewDraftOutput(draft=draft, approve_url=approve_url)


def run_approve(
    inp: ApproveDraftInput,
    store: DraftStorePort,
    notifier: NotifierPort,
    time: TimePort,
    config: DraftsConfig,
) -> ApproveDraftOutput:
    if not inp.token:
        raise ValidationError("No approval token provided.", field="token")

    permanent_url = f"{config.base_url.rstrip('/')}/m/{inp.slug}"

    stored = store.get(draft_key(inp.slug))
    if stored is None:
        existing = store.get(published_key(inp.slug))
        if existing is not None:
            return ApproveDraftOutput(
                published=PublishedMemorial.model_validate(existing.value),
                permanent_url=permanent_url,
                already_published=True,
            )
        raise NotFoundError(
            "This draft no longer exists. It may have already been published or expired."
        )

    draft = DraftMemorial.model_validate(stored.value)
    if not tokens_match(inp.token, draft.token):
        raise AuthorizationError(
            "The approval token does not match. Please use the link from your preview."
        )

    published = PublishedMemorial(
        slug=draft.slug,
        data=draft.data,
        email=draft.email,
        funeral_home_name=draft.funeral_home_name,
        created_at=draft.created_at,
        published_at=time.now(),
    )
    store.put(published_key(draft.slug), published.model_dump(mode="json"))
    store.delete(draft_key(draft.slug))
    logger.info("Memorial %s published", draft.slug)

    message = (
        "New memorial published!\n\n"
        f"{draft.data.name or 'Unknown'}\n"
        f"{draft.funeral_home_name or 'N/A'}\n"
        f"{permanent_url}"
    )
    try:
        if not notifier.send(message):
            logger.warning("Publish notification for %s was not delivered", draft.slug)
    except Exception:
        logger.warning("Publish notification for %s raised", draft.slug, exc_info=True)

    return ApproveDraftOutput(published=published, permanent_url=permanent_url)


def run_get_published(inp: GetPublishedInput, store: DraftStorePort) -> PublishedMemorial:
    stored = store.get(published_key(inp.slug))
    if stored is None:
        raise NotFoundError("This memorial page does not exist or has been removed.")
    return PublishedMemorial.model_validate(stored.value)


def run(
    inp: SubmitDraftInput | PreviewDraftInput | ApproveDraftInput | GetPublishedInput,
    *,
    store: DraftStorePort,
    notifier: NotifierPort | None = None,
    time: TimePort | None = None,
    config: DraftsConfig | None = None,
) -> SubmitDraftOutput | PreviewDraftOutput | ApproveDraftOutput | PublishedMemorial:
    config = config or DraftsConfig()
    if isinstance(inp, SubmitDraftInput):
        assert time
        return run_submit(inp, store, time)

    elif isinstance(inp, PreviewDraftInput):
        return run_preview(inp, store, config)

    elif isinstance(inp, ApproveDraftInput):
        assert notifier and time
        return run_approve(inp, store, notifier, time, config)

    elif isinstance(inp, GetPublishedInput):
        return run_get_published(inp, store)

    else:
        raise ValueError(f"Unknown input type: {type(inp)}")
