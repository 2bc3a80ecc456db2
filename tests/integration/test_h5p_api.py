# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Integration tests for the H5P content bank HTTP API.

The application runs with the in-memory repository and staging area.
"""

from urllib.parse import parse_qs, urlparse

import pytest
from fastapi.testclient import TestClient

from h5p_api.api.app import create_app
from h5p_api.core.config.settings import APISettings, H5PSettings, Settings
from h5p_api.services.h5p import Capability

API_KEY = "test-api-key"
BASE_URL = "https://lms.example.com"


@pytest.fixture
def settings() -> Settings:
    """Provide settings with an API key and one admin principal."""
    return Settings(
        environment="development",
        debug=True,
        api=APISettings(
            api_key=API_KEY,  # type: ignore[arg-type]
            public_base_url=f"{BASE_URL}/",
            admin_principals="admin",
        ),
        h5p=H5PSettings(repository_backend="memory", staging_backend="memory"),
    )


@pytest.fixture
def client(settings: Settings):
    """Create test client with the application lifespan running."""
    with TestClient(create_app(settings)) as client:
        yield client


def headers(principal: str = "admin") -> dict[str, str]:
    return {"X-API-Key": API_KEY, "X-User-Id": principal}


def upload(client: TestClient, principal: str = "admin", **body) -> dict:
    body.setdefault("payload_base64", "SGVsbG8=")
    body.setdefault("filename", "demo.h5p")
    response = client.post("/api/v1/h5p/upload", json=body, headers=headers(principal))
    assert response.status_code == 200, response.text
    return response.json()


@pytest.mark.integration
class TestH5PAPIRouting:
    """Tests for route registration."""

    def test_routes_registered(self, settings: Settings) -> None:
        app = create_app(settings)
        routes = [route.path for route in app.routes]

        assert "/api/v1/h5p/upload" in routes
        assert "/api/v1/h5p/list" in routes
        assert "/api/v1/h5p/embed/{content_id}" in routes
        assert "/api/v1/h5p/functions" in routes
        assert "/pluginfile/{scope_id}/contentbank/public/{content_id}/{filename}" in routes
        assert "/health" in routes


@pytest.mark.integration
class TestAuthentication:
    """Tests for API key and principal assertion."""

    def test_missing_api_key(self, client: TestClient) -> None:
        response = client.get("/api/v1/h5p/list", headers={"X-User-Id": "admin"})

        assert response.status_code == 401

    def test_wrong_api_key(self, client: TestClient) -> None:
        response = client.get(
            "/api/v1/h5p/list", headers={"X-API-Key": "nope", "X-User-Id": "admin"}
        )

        assert response.status_code == 401

    def test_missing_principal(self, client: TestClient) -> None:
        response = client.get("/api/v1/h5p/list", headers={"X-API-Key": API_KEY})

        assert response.status_code == 401

    def test_no_key_configured(self) -> None:
        """Test that an empty API key disables the key check."""
        settings = Settings(api=APISettings(admin_principals="admin"))

        with TestClient(create_app(settings)) as client:
            response = client.get("/api/v1/h5p/list", headers={"X-User-Id": "admin"})

        assert response.status_code == 200

    def test_request_id_echoed(self, client: TestClient) -> None:
        response = client.get(
            "/api/v1/h5p/list", headers={**headers(), "X-Request-Id": "req-123"}
        )

        assert response.headers["X-Request-Id"] == "req-123"


@pytest.mark.integration
class TestUploadEndpoint:
    """Tests for POST /api/v1/h5p/upload."""

    def test_upload_success(self, client: TestClient) -> None:
        data = upload(client, title="")

        assert data["success"] is True
        assert data["name"] == "demo"
        assert data["scope_id"] == 1
        assert "embed?url=" in data["embed_url"]
        assert data["embed_url"].startswith(f"{BASE_URL}/embed?url=")
        assert data["iframe_html"].startswith("<iframe ")

    def test_embed_url_points_at_public_file(self, client: TestClient) -> None:
        """Test that the embedded file URL serves the uploaded bytes."""
        data = upload(client)

        file_url = parse_qs(urlparse(data["embed_url"]).query)["url"][0]
        response = client.get(urlparse(file_url).path)

        assert response.status_code == 200
        assert response.content == b"Hello"
        assert response.headers["content-type"] == "application/zip"

    def test_invalid_payload(self, client: TestClient) -> None:
        response = client.post(
            "/api/v1/h5p/upload",
            json={"payload_base64": "***", "filename": "demo.h5p"},
            headers=headers(),
        )

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["error"]["kind"] == "invalid_payload"

    def test_missing_payload_field(self, client: TestClient) -> None:
        """Test that a body failing request validation gets a structured failure."""
        response = client.post(
            "/api/v1/h5p/upload",
            json={"filename": "demo.h5p"},
            headers=headers(),
        )

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["error"]["kind"] == "invalid_payload"
        assert "payload_base64" in body["error"]["message"]
        assert body["error"]["details"]["errors"][0]["field"] == "body.payload_base64"

    def test_negative_scope_rejected(self, client: TestClient) -> None:
        response = client.post(
            "/api/v1/h5p/upload",
            json={"payload_base64": "SGVsbG8=", "scope_id": -1},
            headers=headers(),
        )

        assert response.status_code == 400
        assert response.json()["error"]["kind"] == "invalid_payload"

    def test_ingestion_failure_status(self, client: TestClient, monkeypatch) -> None:
        """Test that an ingestion failure maps to 422 and leaves nothing listed."""
        repository = client.app.state.repository

        async def fail_attach(*args, **kwargs):
            raise RuntimeError("disk full")

        monkeypatch.setattr(repository, "attach_file", fail_attach)

        response = client.post(
            "/api/v1/h5p/upload",
            json={"payload_base64": "SGVsbG8=", "filename": "demo.h5p"},
            headers=headers(),
        )

        assert response.status_code == 422
        assert response.json()["error"]["kind"] == "ingestion_failed"
        assert client.get("/api/v1/h5p/list", headers=headers()).json()["count"] == 0

    def test_empty_filename_creates_nothing(self, client: TestClient) -> None:
        response = client.post(
            "/api/v1/h5p/upload",
            json={"payload_base64": "SGVsbG8=", "filename": ""},
            headers=headers(),
        )

        assert response.status_code == 400
        assert client.get("/api/v1/h5p/list", headers=headers()).json()["count"] == 0

    def test_unknown_scope(self, client: TestClient) -> None:
        response = client.post(
            "/api/v1/h5p/upload",
            json={"payload_base64": "SGVsbG8=", "scope_id": 404},
            headers=headers(),
        )

        assert response.status_code == 404
        assert response.json()["error"]["kind"] == "scope_not_found"

    def test_denied(self, client: TestClient) -> None:
        response = client.post(
            "/api/v1/h5p/upload",
            json={"payload_base64": "SGVsbG8="},
            headers=headers("student"),
        )

        assert response.status_code == 403
        assert response.json()["error"]["kind"] == "authorization_denied"

    def test_granted_principal(self, client: TestClient) -> None:
        """Test a non-admin principal with a grant on the system scope."""
        client.app.state.repository.grant("editor", Capability.UPLOAD, 1)

        data = upload(client, principal="editor")

        assert data["success"] is True

    def test_content_type_disabled(self, settings: Settings) -> None:
        settings.h5p = H5PSettings(enabled_content_kinds="")

        with TestClient(create_app(settings)) as client:
            response = client.post(
                "/api/v1/h5p/upload",
                json={"payload_base64": "SGVsbG8="},
                headers=headers(),
            )

        assert response.status_code == 409
        assert response.json()["error"]["kind"] == "content_type_unavailable"


@pytest.mark.integration
class TestListEndpoint:
    """Tests for GET /api/v1/h5p/list."""

    def test_list_after_uploads(self, client: TestClient) -> None:
        ids = [upload(client, filename=f"quiz{n}.h5p")["content_id"] for n in range(3)]

        response = client.get("/api/v1/h5p/list", headers=headers())

        data = response.json()
        assert data["success"] is True
        assert data["count"] == 3
        assert sorted(item["content_id"] for item in data["items"]) == sorted(ids)
        assert isinstance(data["items"][0]["created_at"], int)

    def test_empty_scope(self, client: TestClient) -> None:
        client.app.state.repository.add_scope(scope_id=7, collection_id=70)

        response = client.get("/api/v1/h5p/list", params={"scope_id": 7}, headers=headers())

        assert response.status_code == 200
        assert response.json() == {"success": True, "count": 0, "items": []}

    def test_by_collection(self, client: TestClient) -> None:
        scope = client.app.state.repository.add_scope(collection_id=70)
        upload(client, collection_id=70)

        data = client.get(
            "/api/v1/h5p/list", params={"collection_id": 70}, headers=headers()
        ).json()

        assert data["count"] == 1
        assert data["items"][0]["scope_id"] == scope.id

    def test_unknown_collection(self, client: TestClient) -> None:
        response = client.get(
            "/api/v1/h5p/list", params={"collection_id": 999}, headers=headers()
        )

        assert response.status_code == 404
        assert response.json()["error"]["message"] == "Collection not found"


@pytest.mark.integration
class TestEmbedEndpoint:
    """Tests for GET /api/v1/h5p/embed/{content_id}."""

    def test_embed_matches_upload(self, client: TestClient) -> None:
        uploaded = upload(client)

        response = client.get(f"/api/v1/h5p/embed/{uploaded['content_id']}", headers=headers())

        data = response.json()
        assert data["embed_url"] == uploaded["embed_url"]
        assert data["iframe_html"] == uploaded["iframe_html"]
        assert data["short_code"] == f"{{h5p:{uploaded['content_id']}}}"

    def test_unknown_content(self, client: TestClient) -> None:
        response = client.get("/api/v1/h5p/embed/999", headers=headers())

        assert response.status_code == 404
        assert response.json()["error"]["kind"] == "content_not_found"

    def test_non_integer_content_id(self, client: TestClient) -> None:
        response = client.get("/api/v1/h5p/embed/abc", headers=headers())

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["error"]["kind"] == "invalid_payload"


@pytest.mark.integration
class TestMiscEndpoints:
    """Tests for the catalogue, public files and health."""

    def test_functions(self, client: TestClient) -> None:
        data = client.get("/api/v1/h5p/functions", headers=headers()).json()

        assert data["shortname"] == "local_h5p_api"
        assert [f["name"] for f in data["functions"]] == [
            "local_h5p_api_upload",
            "local_h5p_api_list",
            "local_h5p_api_get_embed",
        ]
        assert data["content_types"][0]["kind"] == "h5p"

    def test_public_file_not_found(self, client: TestClient) -> None:
        response = client.get("/pluginfile/1/contentbank/public/999/demo.h5p")

        assert response.status_code == 404

    def test_health(self, client: TestClient) -> None:
        data = client.get("/health").json()

        assert data["status"] == "healthy"
        assert data["components"]["database"]["status"] == "not_configured"
        assert data["components"]["redis"]["status"] == "not_configured"
