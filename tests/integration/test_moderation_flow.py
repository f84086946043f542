"""
End-to-end moderation and drafts flow over the real SQLite and filesystem
adapters (only settings are overridden).
"""

import pytest
from fastapi.testclient import TestClient

from gentlytold.adapters.sqlite.kv_store import SQLiteKVStore
from gentlytold.api.deps import get_notifier, get_settings
from gentlytold.api.main import app

MASTER_KEY = "test-master-key"


@pytest.fixture
def live_client(settings, notifier):
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_notifier] = lambda: notifier
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


def test_family_moderation_journey(live_client, settings):
    client = live_client

    # Operator provisions the memorial
    token = client.post(
        "/api/admin/jane-doe",
        headers={"X-Master-Key": MASTER_KEY},
        json={"contactEmail": "family@example.com"},
    ).json()["token"]

    # Two visitors submit, one with a photo
    kept = client.post(
        "/api/memories/jane-doe",
        data={"name": "Ana", "relationship": "Niece", "memory": "She loved gardenias."},
        files={"photo": ("g.jpg", b"\xff\xd8gardenia", "image/jpeg")},
    ).json()["id"]
    dropped = client.post(
        "/api/memories/jane-doe",
        data={"memory": "Spam spam spam"},
        files={"photo": ("s.jpg", b"\xff\xd8spam", "image/jpeg")},
    ).json()["id"]

    pending = client.get("/api/pending/jane-doe", params={"token": token}).json()
    assert [m["id"] for m in pending] == [kept, dropped]
    assert client.get("/api/memories/jane-doe").json() == []

    # Family moderates
    assert client.post(f"/api/approve/jane-doe/{kept}", params={"token": token}).status_code == 200
    assert client.post(f"/api/reject/jane-doe/{dropped}", params={"token": token}).status_code == 200

    public = client.get("/api/memories/jane-doe").json()
    assert [m["memory"] for m in public] == ["She loved gardenias."]
    assert client.get(public[0]["photoUrl"]).content == b"\xff\xd8gardenia"
    assert client.get(f"/api/photo/jane-doe-{dropped}").status_code == 404
    assert client.get("/api/pending/jane-doe", params={"token": token}).json() == []

    # State is in the SQLite file under the configured data dir
    stored = SQLiteKVStore(settings.db_path).get("memorial:jane-doe")
    assert stored.version == 4
    assert [m["id"] for m in stored.value["approved"]] == [kept]
    assert stored.value["pending"] == []


def test_stale_write_is_rejected_with_409(live_client, settings):
    client = live_client
    token = client.post("/api/admin/jane-doe", headers={"X-Master-Key": MASTER_KEY}).json()["token"]
    memory_id = client.post("/api/memories/jane-doe", data={"memory": "Hello"}).json()["id"]

    # Another writer bumps the version between this request's read and write
    store = SQLiteKVStore(settings.db_path)
    real_get = SQLiteKVStore.get

    def racing_get(self, key):
        result = real_get(self, key)
        if key == "memorial:jane-doe":
            store.put(key, result.value)
        return result

    with pytest.MonkeyPatch.context() as mp:
        mp.setattr(SQLiteKVStore, "get", racing_get)
        response = client.post(f"/api/approve/jane-doe/{memory_id}", params={"token": token})

    assert response.status_code == 409
    assert "error" in response.json()
    assert [m["id"] for m in client.get("/api/pending/jane-doe", params={"token": token}).json()] == [
        memory_id
    ]


def test_draft_to_published_journey(live_client):
    client = live_client

    slug = client.post("/api/drafts", json={"name": "Ray Lane"}).json()["id"]
    approve_url = client.get(f"/api/drafts/{slug}").json()["approveUrl"]
    token = approve_url.split("token=", 1)[1]

    assert client.post(f"/api/drafts/{slug}/approve", params={"token": token}).status_code == 200
    assert client.get(f"/m/{slug}").json()["data"]["name"] == "Ray Lane"
