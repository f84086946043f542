"""
Draft memorial pages: submit -> preview -> approve -> publish.

Endpoints:
- POST /api/drafts - Submit family intake data, create a draft
- GET /api/drafts/{slug} - Draft preview (includes the approval link)
- GET or POST /api/drafts/{slug}/approve - Publish a draft (draft token in `token`);
  GET so the approval link works when clicked
- GET /m/{slug} - Published memorial data
"""

from fastapi import APIRouter, Depends, Query

from gentlytold.adapters.clock import SystemClock
from gentlytold.adapters.sqlite.kv_store import SQLiteKVStore
from gentlytold.api.deps import get_clock, get_drafts_config, get_kv_store, get_notifier
from gentlytold.api.schemas import (
    ApproveDraftResponse,
    DraftPreviewResponse,
    PublishedMemorialResponse,
    SubmitDraftResponse,
)
from gentlytold.components.drafts import (
    ApproveDraftInput,
    DraftsConfig,
    GetPublishedInput,
    IntakeForm,
    PreviewDraftInput,
    SubmitDraftInput,
    run_approve,
    run_get_published,
    run_preview,
    run_submit,
)
from gentlytold.core.ports.notify import NotifierPort

router = APIRouter()
published_router = APIRouter()


@router.post("/drafts", response_model=SubmitDraftResponse)
def submit_draft(
    form: IntakeForm,
    store: SQLiteKVStore = Depends(get_kv_store),
    clock: SystemClock = Depends(get_clock),
) -> SubmitDraftResponse:
    result = run_submit(SubmitDraftInput(form=form), store=store, time=clock)
    return SubmitDraftResponse(id=result.slug, preview_url=result.preview_path)


@router.get("/drafts/{slug}", response_model=DraftPreviewResponse)
def preview_draft(
    slug: str,
    store: SQLiteKVStore = Depends(get_kv_store),
    config: DraftsConfig = Depends(get_drafts_config),
) -> DraftPreviewResponse:
    result = run_preview(PreviewDraftInput(slug=slug), store=store, config=config)
    draft = result.draft
    return DraftPreviewResponse(
        id=draft.slug,
        data=draft.data.model_dump(mode="json"),
        created_at=draft.created_at,
        approve_url=result.approve_url,
    )


@router.api_route(
    "/drafts/{slug}/approve", methods=["GET", "POST"], response_model=ApproveDraftResponse
)
def approve_draft(
    slug: str,
    token: str | None = Query(None),
    store: SQLiteKVStore = Depends(get_kv_store),
    notifier: NotifierPort = Depends(get_notifier),
    clock: SystemClock = Depends(get_clock),
    config: DraftsConfig = Depends(get_drafts_config),
) -> ApproveDraftResponse:
    result = run_approve(
        ApproveDraftInput(slug=slug, token=token),
        store=store,
        notifier=notifier,
        time=clock,
        config=config,
    )
    return ApproveDraftResponse(
        id=result.published.slug,
        permanent_url=result.permanent_url,
        already_published=result.already_published,
    )


@published_router.get("/m/{slug}", response_model=PublishedMemorialResponse)
def get_published(
    slug: str,
    store: SQLiteKVStore = Depends(get_kv_store),
) -> PublishedMemorialResponse:
    published = run_get_published(GetPublishedInput(slug=slug), store=store)
    return PublishedMemorialResponse.from_published(published)
