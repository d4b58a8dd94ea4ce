"""Port for upload metrics (abstraction from the metrics backend)."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol

from domain.value_objects.upload_outcome import UploadFailureReason, UploadOutcome

if TYPE_CHECKING:
    from contextlib import AbstractContextManager


@dataclass
class UploadTimer:
    """Scoped timer handed out by ``UploadMetrics.time_upload``.

    The caller marks the outcome while the scope is open; the metrics
    implementation reads it when the scope closes. An attempt that is never
    marked is reported as an unexpected failure.
    """

    started_at: float = field(default_factory=time.perf_counter)
    success: bool = False
    failure_reason: UploadFailureReason | None = None

    def succeed(self) -> None:
        self.success = True
        self.failure_reason = None

    def fail(self, reason: UploadFailureReason) -> None:
        self.success = False
        self.failure_reason = reason

    def elapsed_ms(self) -> float:
        return (time.perf_counter() - self.started_at) * 1000.0

    def to_outcome(self) -> UploadOutcome:
        reason = None if self.success else (self.failure_reason or UploadFailureReason.UNEXPECTED)
        return UploadOutcome(
            success=self.success,
            failure_reason=reason,
            duration_ms=max(self.elapsed_ms(), 0.0),
        )


class UploadMetrics(Protocol):
    """Counters and timings for the profile image upload path.

    Every method is best-effort: implementations must never raise, so that
    recording cannot change the outcome of an upload.
    """

    def record_success(
        self,
        customer_id: int | None = None,
        filename: str | None = None,
        size_bytes: int | None = None,
        content_type: str | None = None,
    ) -> None: ...

    def record_failure(self, reason: str | None = None) -> None: ...

    def record_validation_failure(
        self,
        kind: str | None = None,
        reason: str | None = None,
    ) -> None: ...

    def record_store_failure(
        self,
        operation: str | None = None,
        reason: str | None = None,
    ) -> None: ...

    def record_duration(self, duration_ms: float) -> None: ...

    def record_outcome(self, outcome: UploadOutcome) -> None: ...

    def time_upload(self) -> AbstractContextManager[UploadTimer]:
        """Open a timer scope; duration and outcome are recorded on every exit path."""
        ...

    def summary(self) -> dict[str, Any]: ...
