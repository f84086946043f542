"""
Notification Sink Interface.

Fire-and-forget text messages to the operator's review channel.

Implementations:
- TelegramNotifier: Telegram Bot API sendMessage
- DevNotifier: logs messages and keeps them in memory (dev/test)

Callers treat delivery as best-effort: a failed notification never fails the
operation that triggered it.
"""

from __future__ import annotations

from typing import Protocol


class NotifierPort(Protocol):
    def send(self, text: str) -> bool:
        """
        Deliver a plain-text message.

        Returns:
            True if the message was accepted by the channel

        Notes:
            - Should not raise; return False instead
        """
        ...
