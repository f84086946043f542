"""
API tests for admin token provisioning (operator master key in X-Master-Key).
"""

MASTER_KEY = "test-master-key"


class TestProvisionAdmin:
    def test_provision_returns_token_and_review_url(self, client):
        response = client.post(
            "/api/admin/new-memorial",
            headers={"X-Master-Key": MASTER_KEY},
            json={"contactEmail": "family@example.com", "contactName": "The Does"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["slug"] == "new-memorial"
        assert body["token"]
        assert body["createdAt"]
        assert body["reviewUrl"] == (
            f"https://memorials.example/api/review/new-memorial?token={body['token']}"
        )

    def test_body_is_optional(self, client, kv_store):
        response = client.post("/api/admin/new-memorial", headers={"X-Master-Key": MASTER_KEY})

        assert response.status_code == 200
        record = kv_store.get("admin:new-memorial").value
        assert record["contact_email"] == ""

    def test_wrong_master_key_is_401(self, client, kv_store):
        response = client.post("/api/admin/new-memorial", headers={"X-Master-Key": "guess"})

        assert response.status_code == 401
        assert kv_store.get("admin:new-memorial") is None

    def test_missing_master_key_is_401(self, client):
        response = client.post("/api/admin/new-memorial")

        assert response.status_code == 401

    def test_reprovision_invalidates_previous_token(self, client):
        headers = {"X-Master-Key": MASTER_KEY}
        first = client.post("/api/admin/new-memorial", headers=headers).json()["token"]
        second = client.post("/api/admin/new-memorial", headers=headers).json()["token"]

        assert first != second
        old = client.get("/api/pending/new-memorial", params={"token": first})
        new = client.get("/api/pending/new-memorial", params={"token": second})
        assert old.status_code == 401
        assert new.status_code == 200
        assert new.json() == []

    def test_invalid_slug_is_400(self, client):
        response = client.post("/api/admin/Bad_Slug", headers={"X-Master-Key": MASTER_KEY})

        assert response.status_code == 400

    def test_oversized_contact_is_400(self, client):
        response = client.post(
            "/api/admin/new-memorial",
            headers={"X-Master-Key": MASTER_KEY},
            json={"contactName": "x" * 500},
        )

        assert response.status_code == 400
        assert "error" in response.json()


class TestCors:
    def test_preflight_allows_any_origin(self, client):
        response = client.options(
            "/api/memories/jane-doe",
            headers={
                "Origin": "https://jane-doe.example",
                "Access-Control-Request-Method": "POST",
            },
        )

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "*"


def test_health(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["service"] == "gentlytold-api"
