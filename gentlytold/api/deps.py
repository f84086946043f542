import os
from functools import lru_cache
from pathlib import Path

from fastapi import Depends

from gentlytold.adapters.clock import SystemClock
from gentlytold.adapters.fs.filestore import FileSystemStore
from gentlytold.adapters.notify.dev import DevNotifier
from gentlytold.adapters.notify.telegram import TelegramNotifier
from gentlytold.adapters.sqlite.kv_store import SQLiteKVStore
from gentlytold.components.drafts import DraftsConfig
from gentlytold.components.moderation import ModerationConfig, ModerationQueue
from gentlytold.core.ports.notify import NotifierPort
from gentlytold.rules.loader import load_rules
from gentlytold.rules.models import Rules


# --- Settings ---
class Settings:
    def __init__(self) -> None:
        self.base_dir = Path(os.getcwd())
        self.data_dir = Path(os.environ.get("GENTLYTOLD_DATA_DIR", "./data"))
        self.db_path = str(self.data_dir / "gentlytold.db")
        self.photos_dir = self.data_dir / "photos"
        self.rules_path = Path(
            os.environ.get("GENTLYTOLD_RULES_PATH", str(self.base_dir / "rules.yaml"))
        )
        self.master_key = os.environ.get("GENTLYTOLD_MASTER_KEY") or None
        self.base_url = os.environ.get("GENTLYTOLD_BASE_URL", "http://localhost:8000")
        self.telegram_bot_token = os.environ.get("TELEGRAM_BOT_TOKEN", "")
        self.telegram_chat_id = os.environ.get("TELEGRAM_CHAT_ID", "")


@lru_cache
def get_settings() -> Settings:
    return Settings()


# --- Rules ---
@lru_cache
def get_rules(settings: Settings = Depends(get_settings)) -> Rules:
    return load_rules(settings.rules_path)


# --- Stores ---
# One adapter per path; the schema check runs once per process
@lru_cache
def kv_store_for(db_path: str) -> SQLiteKVStore:
    return SQLiteKVStore(db_path)


@lru_cache
def blob_store_for(photos_dir: str) -> FileSystemStore:
    return FileSystemStore(base_path=photos_dir)


def get_kv_store(settings: Settings = Depends(get_settings)) -> SQLiteKVStore:
    return kv_store_for(settings.db_path)


def get_blob_store(settings: Settings = Depends(get_settings)) -> FileSystemStore:
    return blob_store_for(str(settings.photos_dir))


# Notifier singleton; Telegram when configured, otherwise log-only
_notifier_instance: NotifierPort | None = None


def get_notifier(settings: Settings = Depends(get_settings)) -> NotifierPort:
    global _notifier_instance
    if _notifier_instance is None:
        if settings.telegram_bot_token and settings.telegram_chat_id:
            timeout = load_rules(settings.rules_path).notifications.timeout_seconds
            _notifier_instance = TelegramNotifier(
                bot_token=settings.telegram_bot_token,
                chat_id=settings.telegram_chat_id,
                timeout=timeout,
            )
        else:
            _notifier_instance = DevNotifier()
    return _notifier_instance


_clock_instance: SystemClock | None = None


def get_clock() -> SystemClock:
    """Get clock singleton."""
    global _clock_instance
    if _clock_instance is None:
        _clock_instance = SystemClock()
    return _clock_instance


# --- Component Services ---
def get_moderation_config(
    settings: Settings = Depends(get_settings),
    rules: Rules = Depends(get_rules),
) -> ModerationConfig:
    return ModerationConfig(
        master_key=settings.master_key,
        base_url=settings.base_url,
        max_photo_bytes=rules.memories.max_photo_bytes,
        allowed_photo_mime_types=tuple(rules.memories.allowed_photo_mime_types),
        max_text_chars=rules.memories.max_text_chars,
        max_name_chars=rules.memories.max_name_chars,
        preview_chars=rules.memories.preview_chars,
        admin_token_bytes=rules.tokens.admin_token_bytes,
    )


def get_moderation_queue(
    store: SQLiteKVStore = Depends(get_kv_store),
    blobs: FileSystemStore = Depends(get_blob_store),
    notifier: NotifierPort = Depends(get_notifier),
    clock: SystemClock = Depends(get_clock),
    config: ModerationConfig = Depends(get_moderation_config),
    rules: Rules = Depends(get_rules),
) -> ModerationQueue:
    """Get the moderation queue wired to the configured stores."""
    return ModerationQueue(
        store=store,
        blobs=blobs,
        notifier=notifier,
        clock=clock,
        config=config,
        slug_pattern=rules.slugs.pattern,
    )


def get_drafts_config(settings: Settings = Depends(get_settings)) -> DraftsConfig:
    return DraftsConfig(base_url=settings.base_url)
