import base64

import pytest
from fastapi.testclient import TestClient

from library_catalog_api.app.core.config import Settings
from library_catalog_api.app.core.db import DocumentStore
from library_catalog_api.app.main import create_app

TEST_SECRET = "test-secret"

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 8 + b"cover"
GIF_BYTES = b"GIF89a" + b"\x01\x00\x01\x00"


def cover_payload(data: bytes = PNG_BYTES, mime_type: str = "image/png") -> dict:
    return {"type": mime_type, "data": base64.b64encode(data).decode("ascii")}


@pytest.fixture
def store(tmp_path):
    # Each test gets its own database file
    db_store = DocumentStore(str(tmp_path / "catalog_test.db")).open()
    yield db_store
    db_store.close()


@pytest.fixture
def settings(tmp_path):
    return Settings(database_url=str(tmp_path / "api_test.db"), secret_key=TEST_SECRET)


@pytest.fixture
def client(settings):
    app = create_app(settings)
    # Entering the client runs the lifespan, which opens the store
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers(client):
    """Register a user, log in, and return a header factory keyed by e-mail."""

    def _headers(email: str = "ada@example.com", name: str = "Ada", password: str = "secret") -> dict:
        response = client.post(
            "/api/v1/users/register",
            json={"name": name, "email": email, "password": password},
        )
        assert response.status_code in (201, 409)
        response = client.post("/api/v1/users/login", json={"email": email, "password": password})
        assert response.status_code == 200
        return {"Authorization": f"Bearer {response.json()['access_token']}"}

    return _headers
