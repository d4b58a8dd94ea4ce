"""End-to-end tests: real use cases, filesystem object store, HTTP surface and upload agent."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import httpx
import pytest
from fastapi.testclient import TestClient

from domain.value_objects.file_candidate import FileCandidate
from infrastructure.config import Settings
from infrastructure.di.container import create_container
from infrastructure.metrics.upload_metrics_recorder import UploadMetricsRecorder
from interfaces.api.main import app
from interfaces.client import ProfileImageClient, StaticCredentialStore, UploadError, UploadErrorType
from interfaces.dependencies import get_container
from tests.mocks import jpeg_bytes

MB = 1024 * 1024


@pytest.fixture
def container(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):  # type: ignore[no-untyped-def]
    monkeypatch.setenv("STORAGE_BACKEND", "filesystem")
    monkeypatch.setenv("FILESYSTEM_STORAGE_URL", f"file://{tmp_path}")
    monkeypatch.setenv("CUSTOMER_REPOSITORY", "memory")
    container = create_container(Settings(_env_file=None))
    app.dependency_overrides[get_container] = lambda: container
    yield container
    app.dependency_overrides.clear()


@pytest.fixture
def api(container) -> Iterator[TestClient]:  # type: ignore[no-untyped-def]
    client = TestClient(app)
    response = client.post(
        "/api/v1/customers",
        json={"name": "Ada", "email": "ada@example.com", "age": 36, "gender": "FEMALE"},
    )
    assert response.status_code == 201
    yield client


def test_one_megabyte_jpeg_round_trip(api: TestClient, container, tmp_path: Path) -> None:  # type: ignore[no-untyped-def]
    content = jpeg_bytes(1 * MB)

    upload = api.post(
        "/api/v1/customers/1/profile-image",
        files={"file": ("avatar.jpg", content, "image/jpeg")},
    )
    download = api.get("/api/v1/customers/1/profile-image")

    assert upload.status_code == 200
    assert download.status_code == 200
    assert download.content == content
    assert download.headers["content-type"] == "image/jpeg"

    profile_image_id = api.get("/api/v1/customers/1").json()["profile_image_id"]
    stored = tmp_path / "customer-profiles" / "profile-images" / "1" / profile_image_id
    assert stored.read_bytes() == content
    assert container[UploadMetricsRecorder].success_count == 1


def test_text_file_is_rejected(api: TestClient, tmp_path: Path) -> None:
    response = api.post(
        "/api/v1/customers/1/profile-image",
        files={"file": ("notes.txt", b"hello", "text/plain")},
    )

    assert response.status_code == 400
    assert "Invalid file type" in response.json()["detail"]
    assert not (tmp_path / "customer-profiles").exists()


def test_oversized_request_is_rejected_before_parsing(api: TestClient, container) -> None:  # type: ignore[no-untyped-def]
    response = api.post(
        "/api/v1/customers/1/profile-image",
        files={"file": ("big.jpg", jpeg_bytes(11 * MB), "image/jpeg")},
    )

    assert response.status_code == 413
    assert "exceeds maximum" in response.json()["detail"]
    # Rejected by the middleware, so the use case never ran
    assert container[UploadMetricsRecorder].summary()["validation_failure_count"] == 0


def test_chunked_oversized_request_is_rejected_while_streaming(api: TestClient, container) -> None:  # type: ignore[no-untyped-def]
    encoded = httpx.Request(
        "POST",
        "http://testserver/api/v1/customers/1/profile-image",
        files={"file": ("big.jpg", jpeg_bytes(12 * MB), "image/jpeg")},
    )
    body = encoded.read()

    def chunks() -> Iterator[bytes]:
        for offset in range(0, len(body), MB):
            yield body[offset : offset + MB]

    response = api.post(
        "/api/v1/customers/1/profile-image",
        content=chunks(),
        headers={"Content-Type": encoded.headers["Content-Type"]},
    )

    assert response.status_code == 413
    assert response.json()["detail"].startswith("Request size")
    assert container[UploadMetricsRecorder].validation_failure_count == 0


def test_file_between_file_and_request_limit_is_rejected_by_validator(api: TestClient, container) -> None:  # type: ignore[no-untyped-def]
    response = api.post(
        "/api/v1/customers/1/profile-image",
        files={"file": ("big.jpg", jpeg_bytes(10 * MB + 1), "image/jpeg")},
    )

    assert response.status_code == 413
    assert "exceeds maximum allowed size" in response.json()["detail"]
    assert container[UploadMetricsRecorder].validation_failure_count == 1


def test_unknown_customer(api: TestClient) -> None:
    response = api.post(
        "/api/v1/customers/999/profile-image",
        files={"file": ("avatar.jpg", jpeg_bytes(1024), "image/jpeg")},
    )

    assert response.status_code == 404
    assert "not found" in response.json()["detail"]


def test_download_before_upload(api: TestClient) -> None:
    assert api.get("/api/v1/customers/1/profile-image").status_code == 404


@pytest.mark.asyncio
async def test_upload_agent_against_running_app(api: TestClient, container) -> None:  # type: ignore[no-untyped-def]
    rules = container[Settings].upload_rules()
    progress: list[int] = []
    content = jpeg_bytes(300 * 1024)

    async with ProfileImageClient(
        "http://testserver",
        rules,
        StaticCredentialStore("token"),
        transport=httpx.ASGITransport(app=app),
    ) as agent:
        response = await agent.upload(
            1,
            FileCandidate(content=content, content_type="image/jpeg", filename="avatar.jpg"),
            on_progress=lambda p: progress.append(p.progress),
        )
        downloaded = await agent.get_profile_image(1)

        with pytest.raises(UploadError) as exc_info:
            await agent.upload(
                999,
                FileCandidate(content=content, content_type="image/jpeg", filename="avatar.jpg"),
            )

    assert response.status_code == 200
    assert downloaded == content
    assert progress[-1] == 100
    assert exc_info.value.type == UploadErrorType.NOT_FOUND
