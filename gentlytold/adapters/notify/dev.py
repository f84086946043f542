"""
Dev Notifier Adapter.

Logs notifications instead of delivering them. Used when no Telegram bot
token is configured, and as the notification sink in tests.

Key behaviors:
- Logs a preview of each message
- Stores messages in memory for test assertions
- Always reports success
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import uuid4

logger = logging.getLogger(__name__)


@dataclass
class SentNotification:
    """Record of a logged notification for test assertions."""

    id: str
    text: str
    logged_at: datetime


@dataclass
class DevNotifier:
    # In-memory storage for test assertions
    sent: list[SentNotification] = field(default_factory=list)

    log_level: int = logging.INFO
    preview_length: int = 120

    def send(self, text: str) -> bool:
        message_id = f"dev-{uuid4().hex[:12]}"
        self.sent.append(SentNotification(id=message_id, text=text, logged_at=datetime.now(UTC)))

        preview = text[: self.preview_length].replace("\n", " | ")
        if len(text) > self.preview_length:
            preview += "..."
        logger.log(self.log_level, "NOTIFY (dev): %s MessageID=%s", preview, message_id)
        return True

    # --- Test Helper Methods ---

    def get_last(self) -> SentNotification | None:
        return self.sent[-1] if self.sent else None

    def clear(self) -> None:
        self.sent.clear()

    @property
    def count(self) -> int:
        return len(self.sent)
