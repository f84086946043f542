import os
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).parent.parent

# Point the app at the real rules file and a scratch data dir before it is imported
os.environ.setdefault("GENTLYTOLD_RULES_PATH", str(PROJECT_ROOT / "rules.yaml"))
os.environ.setdefault("GENTLYTOLD_DATA_DIR", "/tmp/gentlytold_test")

from fastapi.testclient import TestClient  # noqa: E402

from gentlytold.adapters.fs.filestore import FileSystemStore  # noqa: E402
from gentlytold.adapters.kv.memory import InMemoryKVStore  # noqa: E402
from gentlytold.adapters.notify.dev import DevNotifier  # noqa: E402
from gentlytold.api.deps import (  # noqa: E402
    Settings,
    get_blob_store,
    get_kv_store,
    get_notifier,
    get_settings,
)
from gentlytold.api.main import app  # noqa: E402
from gentlytold.rules.loader import load_rules  # noqa: E402

MASTER_KEY = "test-master-key"


@pytest.fixture
def rules():
    return load_rules(PROJECT_ROOT / "rules.yaml")


@pytest.fixture
def settings(monkeypatch, tmp_path) -> Settings:
    monkeypatch.setenv("GENTLYTOLD_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("GENTLYTOLD_RULES_PATH", str(PROJECT_ROOT / "rules.yaml"))
    monkeypatch.setenv("GENTLYTOLD_MASTER_KEY", MASTER_KEY)
    monkeypatch.setenv("GENTLYTOLD_BASE_URL", "https://memorials.example")
    return Settings()


@pytest.fixture
def kv_store() -> InMemoryKVStore:
    return InMemoryKVStore()


@pytest.fixture
def blob_store(tmp_path) -> FileSystemStore:
    return FileSystemStore(str(tmp_path / "photos"))


@pytest.fixture
def notifier() -> DevNotifier:
    return DevNotifier()


@pytest.fixture
def client(settings, kv_store, blob_store, notifier):
    """TestClient with in-memory KV, temp-dir photos and a recording notifier."""
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_kv_store] = lambda: kv_store
    app.dependency_overrides[get_blob_store] = lambda: blob_store
    app.dependency_overrides[get_notifier] = lambda: notifier
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def admin_token(client) -> str:
    """Provision jane-doe and return its admin token."""
    response = client.post("/api/admin/jane-doe", headers={"X-Master-Key": MASTER_KEY})
    assert response.status_code == 200
    return response.json()["token"]
