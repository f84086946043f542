"""
Telegram notifier using the requests library.

Posts plain-text messages to a single chat through the Bot API sendMessage
method. Delivery failures are logged and reported as False.
"""

import logging

import requests

logger = logging.getLogger(__name__)


class TelegramNotifier:
    API_BASE = "https://api.telegram.org"
    DEFAULT_TIMEOUT = 10.0

    def __init__(
        self,
        bot_token: str,
        chat_id: str,
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ):
        if not bot_token:
            raise ValueError("Telegram bot token is required")
        if not chat_id:
            raise ValueError("Telegram chat id is required")
        self.bot_token = bot_token
        self.chat_id = chat_id
        self.timeout = timeout
        self.session = session or requests.Session()

    @property
    def endpoint(self) -> str:
        return f"{self.API_BASE}/bot{self.bot_token}/sendMessage"

    def send(self, text: str) -> bool:
        payload = {
            "chat_id": self.chat_id,
            "text": text,
            "disable_web_page_preview": False,
        }
        try:
            response = self.session.post(self.endpoint, json=payload, timeout=self.timeout)
        except requests.Timeout:
            logger.error("Telegram sendMessage timed out after %ss", self.timeout)
            return False
        except requests.RequestException as e:
            logger.error("Telegram sendMessage failed: %s", e)
            return False

        if not response.ok:
            logger.error("Telegram API error: %s %s", response.status_code, response.text[:200])
            return False
        return True
