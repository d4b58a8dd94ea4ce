"""Tests for API routes."""

from __future__ import annotations

from collections.abc import Callable, Iterator

import pytest
from fastapi.testclient import TestClient
from returns.result import Failure, Success

from application.dtos.errors import AppError
from application.ports.upload_metrics import UploadMetrics
from application.use_cases.customer_use_cases import (
    DeleteCustomerUseCase,
    GetCustomerUseCase,
    ListCustomersUseCase,
    RegisterCustomerUseCase,
    UpdateCustomerUseCase,
)
from application.use_cases.profile_image_use_cases import (
    GetProfileImageUseCase,
    UploadProfileImageUseCase,
)
from domain.exceptions import InfrastructureError
from domain.services.file_validator import FileValidator
from domain.value_objects.upload_rules import UploadRules
from infrastructure.metrics.upload_metrics_recorder import UploadMetricsRecorder
from interfaces.api.main import app
from interfaces.dependencies import get_container
from tests.mocks import BUCKET, MockCustomerRepository, MockObjectStore, jpeg_bytes


class FakeContainer:
    def __init__(self, mapping: dict[type, object]) -> None:
        self._mapping = mapping

    def __getitem__(self, key: type) -> object:
        return self._mapping[key]


class FakeUseCase:
    def __init__(self, result: object) -> None:
        self._result = result

    def execute(self, *args, **kwargs):  # type: ignore[no-untyped-def]
        if isinstance(self._result, Exception):
            raise self._result
        return self._result


@pytest.fixture
def make_client() -> Iterator[Callable[[dict[type, object]], TestClient]]:
    def _make_client(overrides: dict[type, object]) -> TestClient:
        container = FakeContainer(overrides)
        app.dependency_overrides[get_container] = lambda: container
        return TestClient(app)

    yield _make_client
    app.dependency_overrides.clear()


@pytest.fixture
def wired(sample_customer) -> tuple[dict[type, object], MockObjectStore, UploadMetricsRecorder]:  # type: ignore[no-untyped-def]
    repository = MockCustomerRepository()
    repository.insert(sample_customer)
    store = MockObjectStore()
    metrics = UploadMetricsRecorder()
    validator = FileValidator(UploadRules())
    mapping: dict[type, object] = {
        ListCustomersUseCase: ListCustomersUseCase(repository),
        GetCustomerUseCase: GetCustomerUseCase(repository),
        RegisterCustomerUseCase: RegisterCustomerUseCase(repository),
        UpdateCustomerUseCase: UpdateCustomerUseCase(repository),
        DeleteCustomerUseCase: DeleteCustomerUseCase(repository),
        UploadProfileImageUseCase: UploadProfileImageUseCase(
            repository,
            store,
            validator,
            metrics,
            BUCKET,
        ),
        GetProfileImageUseCase: GetProfileImageUseCase(repository, store, BUCKET),
        UploadMetrics: metrics,
        UploadMetricsRecorder: metrics,
    }
    return mapping, store, metrics


class TestCustomerRoutes:
    def test_register_and_get(self, make_client, wired) -> None:
        mapping, _, _ = wired
        client = make_client(mapping)

        response = client.post(
            "/api/v1/customers",
            json={"name": "Grace", "email": "grace@example.com", "age": 85, "gender": "FEMALE"},
        )

        assert response.status_code == 201
        customer_id = response.json()["id"]
        assert client.get(f"/api/v1/customers/{customer_id}").json()["email"] == "grace@example.com"
        assert len(client.get("/api/v1/customers").json()) == 2

    def test_register_duplicate_email(self, make_client, wired) -> None:
        mapping, _, _ = wired
        client = make_client(mapping)

        response = client.post(
            "/api/v1/customers",
            json={"name": "Ada", "email": "ada@example.com", "age": 36, "gender": "FEMALE"},
        )

        assert response.status_code == 409
        assert response.json()["detail"] == "email already taken"

    def test_update_without_changes(self, make_client, wired) -> None:
        mapping, _, _ = wired
        client = make_client(mapping)

        response = client.put("/api/v1/customers/1", json={"age": 36})

        assert response.status_code == 400
        assert response.json()["detail"] == "no data changes found"

    def test_delete(self, make_client, wired) -> None:
        mapping, _, _ = wired
        client = make_client(mapping)

        assert client.delete("/api/v1/customers/1").status_code == 204
        assert client.get("/api/v1/customers/1").status_code == 404


class TestProfileImageRoutes:
    def test_upload_success_returns_empty_body(self, make_client, wired) -> None:
        mapping, store, metrics = wired
        client = make_client(mapping)

        response = client.post(
            "/api/v1/customers/1/profile-image",
            files={"file": ("avatar.jpg", jpeg_bytes(2048), "image/jpeg")},
        )

        assert response.status_code == 200
        assert response.content == b""
        assert len(store.objects) == 1
        assert metrics.success_count == 1

    def test_upload_then_download(self, make_client, wired) -> None:
        mapping, _, _ = wired
        client = make_client(mapping)
        content = b"\x89PNG\r\n\x1a\n" + b"\x00" * 100
        client.post(
            "/api/v1/customers/1/profile-image",
            files={"file": ("avatar.png", content, "image/png")},
        )

        response = client.get("/api/v1/customers/1/profile-image")

        assert response.status_code == 200
        assert response.content == content
        assert response.headers["content-type"] == "image/png"

    def test_upload_invalid_type(self, make_client, wired) -> None:
        mapping, store, _ = wired
        client = make_client(mapping)

        response = client.post(
            "/api/v1/customers/1/profile-image",
            files={"file": ("notes.txt", b"hello", "text/plain")},
        )

        assert response.status_code == 400
        assert "Invalid file type" in response.json()["detail"]
        assert store.put_calls == []

    def test_upload_empty_file(self, make_client, wired) -> None:
        mapping, _, _ = wired
        client = make_client(mapping)

        response = client.post(
            "/api/v1/customers/1/profile-image",
            files={"file": ("empty.jpg", b"", "image/jpeg")},
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "File cannot be empty"

    def test_upload_unknown_customer(self, make_client, wired) -> None:
        mapping, _, _ = wired
        client = make_client(mapping)

        response = client.post(
            "/api/v1/customers/99/profile-image",
            files={"file": ("avatar.jpg", jpeg_bytes(10), "image/jpeg")},
        )

        assert response.status_code == 404
        assert "not found" in response.json()["detail"]

    def test_upload_requires_file_field(self, make_client, wired) -> None:
        mapping, _, _ = wired
        client = make_client(mapping)

        response = client.post(
            "/api/v1/customers/1/profile-image",
            files={"image": ("avatar.jpg", jpeg_bytes(10), "image/jpeg")},
        )

        assert response.status_code == 422

    def test_download_without_image(self, make_client, wired) -> None:
        mapping, _, _ = wired
        client = make_client(mapping)

        response = client.get("/api/v1/customers/1/profile-image")

        assert response.status_code == 404

    @pytest.mark.parametrize(
        ("category", "status_code", "detail"),
        [
            ("payload_too_large", 413, "too big"),
            ("storage_error", 500, "Failed to store profile image"),
            ("reference_update_failed", 500, "Failed to update customer profile image reference"),
            ("infrastructure", 500, "Internal server error"),
        ],
    )
    def test_error_categories(
        self,
        make_client,
        category: str,
        status_code: int,
        detail: str,
    ) -> None:
        use_case = FakeUseCase(Failure(AppError(category, "too big")))
        client = make_client({UploadProfileImageUseCase: use_case})

        response = client.post(
            "/api/v1/customers/1/profile-image",
            files={"file": ("avatar.jpg", jpeg_bytes(10), "image/jpeg")},
        )

        assert response.status_code == status_code
        assert response.json()["detail"] == detail

    def test_server_errors_do_not_leak_internal_messages(self, make_client) -> None:
        secret = "S3 service error during put_object: AccessDenied arn:aws:s3:::private"
        use_case = FakeUseCase(Failure(AppError("storage_error", secret)))
        client = make_client({UploadProfileImageUseCase: use_case})

        response = client.post(
            "/api/v1/customers/1/profile-image",
            files={"file": ("avatar.jpg", jpeg_bytes(10), "image/jpeg")},
        )

        assert "arn:aws" not in response.text

    def test_infrastructure_exception(self, make_client) -> None:
        use_case = FakeUseCase(InfrastructureError("mongo down"))
        client = make_client({GetCustomerUseCase: use_case})

        response = client.get("/api/v1/customers/1")

        assert response.status_code == 500
        assert response.json()["detail"] == "Service temporarily unavailable"

    def test_success_result_is_unwrapped(self, make_client) -> None:
        client = make_client({ListCustomersUseCase: FakeUseCase(Success([]))})

        response = client.get("/api/v1/customers")

        assert response.status_code == 200
        assert response.json() == []


class TestOperationalRoutes:
    def test_health_reports_upload_metrics(self, make_client, wired) -> None:
        mapping, _, metrics = wired
        metrics.record_success()
        client = make_client(mapping)

        body = client.get("/health").json()

        assert body["status"] == "healthy"
        assert body["uploads"]["success_count"] == 1

    def test_upload_metrics_endpoint(self, make_client, wired) -> None:
        mapping, _, _ = wired
        client = make_client(mapping)
        client.post(
            "/api/v1/customers/1/profile-image",
            files={"file": ("notes.txt", b"hello", "text/plain")},
        )

        summary = client.get("/api/v1/metrics/uploads").json()

        assert summary["validation_failure_count"] == 1
        assert summary["total_uploads"] == 0

    def test_prometheus_exposition(self, make_client, wired) -> None:
        mapping, _, _ = wired
        client = make_client(mapping)
        client.post(
            "/api/v1/customers/1/profile-image",
            files={"file": ("avatar.jpg", jpeg_bytes(1024), "image/jpeg")},
        )

        response = client.get("/api/v1/metrics/prometheus")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert "file_upload_success_total 1.0" in response.text
        assert 'file_upload_failure_total{type="validation"} 0.0' in response.text
        assert "file_upload_duration_seconds_count 1.0" in response.text
