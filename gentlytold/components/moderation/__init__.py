"""
Moderation component - visitor memories awaiting family approval.

Submissions are held as pending until the memorial's admin token holder
approves (publishes) or rejects (deletes) them.
"""

from .component import (
    ModerationQueue,
    build_submission_message,
    run,
    validate_submission,
)
from .models import (
    ApproveInput,
    ListApprovedInput,
    ListPendingInput,
    MemoryListOutput,
    ModerationConfig,
    ModerationOutput,
    PhotoUpload,
    ProvisionAdminInput,
    ProvisionAdminOutput,
    RejectInput,
    SubmitMemoryInput,
    SubmitMemoryOutput,
)
from .ports import BlobStorePort, ClockPort, KeyValueStorePort, NotifierPort

__all__ = [
    # Entry points
    "run",
    "ModerationQueue",
    "build_submission_message",
    "validate_submission",
    # Input models
    "ApproveInput",
    "ListApprovedInput",
    "ListPendingInput",
    "PhotoUpload",
    "ProvisionAdminInput",
    "RejectInput",
    "SubmitMemoryInput",
    # Output models
    "MemoryListOutput",
    "ModerationOutput",
    "ProvisionAdminOutput",
    "SubmitMemoryOutput",
    # Config
    "ModerationConfig",
    # Ports
    "BlobStorePort",
    "ClockPort",
    "KeyValueStorePort",
    "NotifierPort",
]
