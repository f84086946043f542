"""
Drafts component - draft memorial pages awaiting family approval.

Intake form -> draft (with preview + approval token) -> published memorial.
"""

from .component import (
    map_form_to_page_data,
    run,
    run_approve,
    run_get_published,
    run_preview,
    run_submit,
)
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
)
from .ports import DraftStorePort, NotifierPort, TimePort

__all__ = [
    # Entry points
    "run",
    "run_approve",
    "run_get_published",
    "run_preview",
    "run_submit",
    "map_form_to_page_data",
    # Input models
    "ApproveDraftInput",
    "GetPublishedInput",
    "IntakeForm",
    "PreviewDraftInput",
    "SubmitDraftInput",
    # Output models
    "ApproveDraftOutput",
    "PreviewDraftOutput",
    "SubmitDraftOutput",
    "DraftsConfig",
    # Ports
    "DraftStorePort",
    "NotifierPort",
    "TimePort",
]
