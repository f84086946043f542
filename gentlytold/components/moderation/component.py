"""
Moderation component - the visitor memory queue for a memorial page.

Key behaviors:
- Submissions land in the memorial's pending sequence
- Only the holder of the memorial's admin token can list, approve or reject
- Approve moves an item pending -> approved; reject deletes it and its photo
- Every queue write is versioned; a lost race raises ConflictError
- Reviewer notification is best-effort and never fails the submission

Invariants:
- An item id is in at most one of pending/approved
- Approved items never return to pending
- Stored text is never blank
"""

from __future__ import annotations

import logging
import secrets

from gentlytold.components.moderation.models import (
    ApproveInput,
    ListApprovedInput,
    ListPendingInput,
    MemoryListOutput,
    ModerationConfig,
    ModerationOutput,
    ProvisionAdminInput,
    ProvisionAdminOutput,
    RejectInput,
    SubmitMemoryInput,
    SubmitMemoryOutput,
)
from gentlytold.components.moderation.ports import (
    BlobStorePort,
    ClockPort,
    KeyValueStorePort,
    NotifierPort,
)
from gentlytold.core.ports.kv import VersionConflictError
from gentlytold.domain.entities import DEFAULT_AUTHOR_NAME, AdminRecord, MemorialQueue, Memory
from gentlytold.domain.errors import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    UpstreamError,
    ValidationError,
)
from gentlytold.domain.slugs import DEFAULT_SLUG_PATTERN, is_valid_slug, photo_key
from gentlytold.domain.tokens import tokens_match

logger = logging.getLogger(__name__)

INVALID_TOKEN_MESSAGE = "Invalid token"

ModerationInput = (
    SubmitMemoryInput
    | ListPendingInput
    | ListApprovedInput
    | ApproveInput
    | RejectInput
    | ProvisionAdminInput
)
ModerationResult = SubmitMemoryOutput | MemoryListOutput | ModerationOutput | ProvisionAdminOutput


# --- Pure Functions ---


def queue_key(slug: str) -> str:
    return f"memorial:{slug}"


def admin_key(slug: str) -> str:
    return f"admin:{slug}"


def validate_submission(inp: SubmitMemoryInput, config: ModerationConfig) -> list[ValidationError]:
    """Check a submission before anything is stored."""
    errors: list[ValidationError] = []

    if not inp.text or not inp.text.strip():
        errors.append(ValidationError("Please share a memory before submitting.", field="memory"))
    elif len(inp.text) > config.max_text_chars:
        errors.append(
            ValidationError(
                f"Memories must be {config.max_text_chars} characters or less.", field="memory"
            )
        )

    if inp.author_name and len(inp.author_name) > config.max_name_chars:
        errors.append(
            ValidationError(f"Name must be {config.max_name_chars} characters or less.", field="name")
        )
    if inp.relationship and len(inp.relationship) > config.max_name_chars:
        errors.append(
            ValidationError(
                f"Relationship must be {config.max_name_chars} characters or less.",
                field="relationship",
            )
        )

    photo = inp.photo
    if photo is not None and photo.size > 0:
        if photo.size > config.max_photo_bytes:
            limit_mb = config.max_photo_bytes // (1024 * 1024)
            errors.append(ValidationError(f"Photo must be under {limit_mb}MB", field="photo"))
        elif photo.content_type not in config.allowed_photo_mime_types:
            errors.append(ValidationError("Photo must be an image file.", field="photo"))

    return errors


def truncate_preview(text: str, limit: int) -> str:
    text = " ".join(text.split())
    if len(text) <= limit:
        return text
    return text[:limit].rstrip() + "…"


def build_submission_message(memory: Memory, slug: str, base_url: str, preview_chars: int) -> str:
    author = memory.author_name
    if memory.relationship:
        author = f"{author} ({memory.relationship})"
    lines = [
        f"New memory awaiting review for {slug}",
        "",
        f"From: {author}",
        f'"{truncate_preview(memory.text, preview_chars)}"',
    ]
    if memory.photo_reference:
        lines.append("Includes a photo")
    lines += ["", f"Review (admin token required): {base_url.rstrip('/')}/api/review/{slug}"]
    return "\n".join(lines)


# --- Component ---


class ModerationQueue:
    """Pending/approved memory queue per memorial, gated by the admin token."""

    def __init__(
        self,
        store: KeyValueStorePort,
        blobs: BlobStorePort,
        notifier: NotifierPort,
        clock: ClockPort,
        config: ModerationConfig,
        slug_pattern: str = DEFAULT_SLUG_PATTERN,
    ) -> None:
        self._store = store
        self._blobs = blobs
        self._notifier = notifier
        self._clock = clock
        self._config = config
        self._slug_pattern = slug_pattern

    def run(self, inp: ModerationInput) -> ModerationResult:
        """Dispatch on input type."""
        if isinstance(inp, SubmitMemoryInput):
            return self.submit(inp)
        elif isinstance(inp, ListPendingInput):
            return MemoryListOutput(memories=self.list_pending(inp.slug, inp.token))
        elif isinstance(inp, ListApprovedInput):
            return MemoryListOutput(memories=self.list_approved(inp.slug))
        elif isinstance(inp, ApproveInput):
            return self.approve(inp.slug, inp.memory_id, inp.token)
        elif isinstance(inp, RejectInput):
            return self.reject(inp.slug, inp.memory_id, inp.token)
        elif isinstance(inp, ProvisionAdminInput):
            return self.provision_admin(inp)
        else:
            raise TypeError(f"Unknown input type: {type(inp)}")

    # --- Operations ---

    def submit(self, inp: SubmitMemoryInput) -> SubmitMemoryOutput:
        self._check_slug(inp.slug)
        errors = validate_submission(inp, self._config)
        if errors:
            raise errors[0]

        memory = Memory(
            author_name=(inp.author_name or "").strip() or DEFAULT_AUTHOR_NAME,
            relationship=(inp.relationship or "").strip(),
            text=inp.text,
            submitted_at=self._clock.now(),
        )

        if inp.photo is not None and inp.photo.size > 0:
            key = photo_key(inp.slug, memory.id)
            try:
                self._blobs.put(key, inp.photo.data, inp.photo.content_type)
            except OSError as e:
                logger.error("Could not store photo %s: %s", key, e)
                raise UpstreamError("Could not store photo. Please try again.") from e
            memory.photo_reference = key

        queue, version = self._load_queue(inp.slug)
        queue.pending.append(memory)
        try:
            self._save_queue(queue, version)
        except ConflictError:
            if memory.photo_reference:
                self._discard_photo(memory.photo_reference)
            raise

        logger.info("Memory %s submitted to %s (pending=%d)", memory.id, inp.slug, len(queue.pending))
        self._notify(
            build_submission_message(
                memory, inp.slug, self._config.base_url, self._config.preview_chars
            )
        )
        return SubmitMemoryOutput(memory=memory, pending_count=len(queue.pending))

    def list_pending(self, slug: str, token: str | None) -> list[Memory]:
        self._authorize(slug, token)
        queue, _ = self._load_queue(slug)
        return list(queue.pending)

    def list_approved(self, slug: str) -> list[Memory]:
        self._check_slug(slug)
        queue, _ = self._load_queue(slug)
        return list(queue.approved)

    def approve(self, slug: str, memory_id: str, token: str | None) -> ModerationOutput:
        self._authorize(slug, token)
        queue, version = self._load_queue(slug)

        memory = queue.find_pending(memory_id)
        if memory is None:
            raise NotFoundError("Memory not found in pending queue")

        queue.pending = [m for m in queue.pending if m.id != memory_id]
        duplicate = queue.is_approved(memory_id)
        if not duplicate:
            queue.approved.append(memory)
        self._save_queue(queue, version)

        if duplicate:
            logger.warning("Memory %s on %s was already approved; dropped pending copy", memory_id, slug)
            raise ConflictError("Memory was already approved")

        logger.info("Memory %s approved on %s", memory_id, slug)
        return ModerationOutput(memory_id=memory_id, remaining_pending=len(queue.pending))

    def reject(self, slug: str, memory_id: str, token: str | None) -> ModerationOutput:
        self._authorize(slug, token)
        queue, version = self._load_queue(slug)

        memory = queue.find_pending(memory_id)
        if memory is None:
            raise NotFoundError("Memory not found in pending queue")

        queue.pending = [m for m in queue.pending if m.id != memory_id]
        self._save_queue(queue, version)

        if memory.photo_reference:
            self._discard_photo(memory.photo_reference)

        logger.info("Memory %s rejected on %s", memory_id, slug)
        return ModerationOutput(memory_id=memory_id, remaining_pending=len(queue.pending))

    def provision_admin(self, inp: ProvisionAdminInput) -> ProvisionAdminOutput:
        if not tokens_match(inp.master_key, self._config.master_key):
            raise AuthorizationError("Invalid master key")
        self._check_slug(inp.slug)

        record = AdminRecord(
            slug=inp.slug,
            token=secrets.token_urlsafe(self._config.admin_token_bytes),
            contact_email=(inp.contact_email or "").strip(),
            contact_name=(inp.contact_name or "").strip(),
            created_at=self._clock.now(),
        )
        # Unconditional write: a new token replaces (and invalidates) the old one
        self._store.put(admin_key(inp.slug), record.model_dump(mode="json"))

        logger.info("Admin token issued for %s", inp.slug)
        return ProvisionAdminOutput(record=record)

    # --- Internals ---

    def _check_slug(self, slug: str) -> None:
        if not is_valid_slug(slug, self._slug_pattern):
            raise ValidationError("Invalid memorial slug", field="slug")

    def _authorize(self, slug: str, token: str | None) -> AdminRecord:
        if not token:
            raise AuthorizationError(INVALID_TOKEN_MESSAGE)
        stored = self._store.get(admin_key(slug))
        if stored is None:
            raise AuthorizationError(INVALID_TOKEN_MESSAGE)
        record = AdminRecord.model_validate(stored.value)
        if not tokens_match(token, record.token):
            raise AuthorizationError(INVALID_TOKEN_MESSAGE)
        return record

    def _load_queue(self, slug: str) -> tuple[MemorialQueue, int]:
        stored = self._store.get(queue_key(slug))
        if stored is None:
            return MemorialQueue(slug=slug), 0
        return MemorialQueue.model_validate(stored.value), stored.version

    def _save_queue(self, queue: MemorialQueue, version: int) -> int:
        try:
            return self._store.put(
                queue_key(queue.slug), queue.model_dump(mode="json"), expected_version=version
            )
        except VersionConflictError as e:
            logger.warning("Lost write race on %s: %s", queue.slug, e)
            raise ConflictError(
                "This memorial was updated by another request. Please try again."
            ) from e

    def _discard_photo(self, key: str) -> None:
        try:
            self._blobs.delete(key)
        except (OSError, ValueError) as e:
            logger.warning("Could not delete photo %s: %s", key, e)

    def _notify(self, text: str) -> None:
        try:
            delivered = self._notifier.send(text)
        except Exception:
            logger.warning("Reviewer notification raised", exc_info=True)
            return
        if not delivered:
            logger.warning("Reviewer notification was not delivered")


def run(
    inp: ModerationInput,
    *,
    store: KeyValueStorePort,
    blobs: BlobStorePort,
    notifier: NotifierPort,
    clock: ClockPort,
    config: ModerationConfig,
) -> ModerationResult:
    """Functional entry point; builds a queue and runs one input."""
    return ModerationQueue(store, blobs, notifier, clock, config).run(inp)
