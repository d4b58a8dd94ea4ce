"""Mock implementations for testing."""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

from application.ports.upload_metrics import UploadTimer
from domain.exceptions import BlobNotFoundError, InfrastructureError, ObjectStoreError
from infrastructure.repositories.in_memory_customer_repository import InMemoryCustomerRepository

if TYPE_CHECKING:
    from collections.abc import Iterator

    from domain.value_objects.upload_outcome import UploadOutcome


# Smallest byte prefix that identifies a JPEG; the validator only looks at the declared type
JPEG_HEADER = b"\xff\xd8\xff\xe0\x00\x10JFIF\x00"

BUCKET = "customer-profiles-test"


def jpeg_bytes(size: int) -> bytes:
    return (JPEG_HEADER + b"\x00" * size)[:size]


# ---------------------------------------------------------------------------
# Repository mocks
# ---------------------------------------------------------------------------


class MockCustomerRepository(InMemoryCustomerRepository):
    """In-memory repository that records profile image reference updates."""

    def __init__(self) -> None:
        super().__init__()
        self.profile_image_updates: list[tuple[int, str, str | None]] = []

    def update_profile_image(
        self,
        customer_id: int,
        profile_image_id: str,
        content_type: str | None,
    ) -> None:
        super().update_profile_image(customer_id, profile_image_id, content_type)
        self.profile_image_updates.append((customer_id, profile_image_id, content_type))


class FailingReferenceRepository(MockCustomerRepository):
    """Repository whose profile image reference update always fails."""

    def update_profile_image(
        self,
        customer_id: int,
        profile_image_id: str,
        content_type: str | None,
    ) -> None:
        msg = "datastore unavailable"
        raise InfrastructureError(msg)


# ---------------------------------------------------------------------------
# Object store mocks
# ---------------------------------------------------------------------------


class MockObjectStore:
    """Dict-backed object store keyed by (bucket, key)."""

    def __init__(self) -> None:
        self.objects: dict[tuple[str, str], bytes] = {}
        self.content_types: dict[tuple[str, str], str | None] = {}
        self.put_calls: list[tuple[str, str]] = []

    def put(self, bucket: str, key: str, data: bytes, *, content_type: str | None = None) -> None:
        self.put_calls.append((bucket, key))
        self.objects[(bucket, key)] = data
        self.content_types[(bucket, key)] = content_type

    def get(self, bucket: str, key: str) -> bytes:
        try:
            return self.objects[(bucket, key)]
        except KeyError:
            raise BlobNotFoundError(bucket, key) from None

    def exists(self, bucket: str, key: str) -> bool:
        return (bucket, key) in self.objects


class FailingObjectStore(MockObjectStore):
    """Object store whose reads and writes fail with a service error."""

    def __init__(self, error_code: str = "InternalError") -> None:
        super().__init__()
        self.error_code = error_code

    def put(self, bucket: str, key: str, data: bytes, *, content_type: str | None = None) -> None:
        self.put_calls.append((bucket, key))
        msg = "We encountered an internal error. Please try again."
        raise ObjectStoreError(
            msg,
            operation="put",
            bucket=bucket,
            key=key,
            kind="service",
            error_code=self.error_code,
        )

    def get(self, bucket: str, key: str) -> bytes:
        msg = "connection reset"
        raise ObjectStoreError(msg, operation="get", bucket=bucket, key=key)


# ---------------------------------------------------------------------------
# Metrics mock
# ---------------------------------------------------------------------------


class MockUploadMetrics:
    """Records every call made through the UploadMetrics port."""

    def __init__(self) -> None:
        self.successes: list[dict[str, Any]] = []
        self.failures: list[str | None] = []
        self.validation_failures: list[tuple[str | None, str | None]] = []
        self.store_failures: list[tuple[str | None, str | None]] = []
        self.durations: list[float] = []
        self.outcomes: list[UploadOutcome] = []

    def record_success(
        self,
        customer_id: int | None = None,
        filename: str | None = None,
        size_bytes: int | None = None,
        content_type: str | None = None,
    ) -> None:
        self.successes.append(
            {
                "customer_id": customer_id,
                "filename": filename,
                "size_bytes": size_bytes,
                "content_type": content_type,
            },
        )

    def record_failure(self, reason: str | None = None) -> None:
        self.failures.append(reason)

    def record_validation_failure(self, kind: str | None = None, reason: str | None = None) -> None:
        self.validation_failures.append((kind, reason))

    def record_store_failure(self, operation: str | None = None, reason: str | None = None) -> None:
        self.store_failures.append((operation, reason))

    def record_duration(self, duration_ms: float) -> None:
        self.durations.append(duration_ms)

    def record_outcome(self, outcome: UploadOutcome) -> None:
        self.outcomes.append(outcome)

    @contextmanager
    def time_upload(self) -> Iterator[UploadTimer]:
        timer = UploadTimer()
        try:
            yield timer
        finally:
            outcome = timer.to_outcome()
            self.record_duration(outcome.duration_ms)
            self.record_outcome(outcome)

    def summary(self) -> dict[str, Any]:
        return {"success_count": len(self.successes), "failure_count": len(self.failures)}
