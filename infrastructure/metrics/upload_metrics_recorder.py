"""Prometheus-backed upload metrics."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import structlog
from prometheus_client import CollectorRegistry, Counter, Histogram

from application.ports.upload_metrics import UploadMetrics, UploadTimer
from domain.value_objects.upload_outcome import UploadOutcome

logger = structlog.get_logger()

_SUCCESS = "file_upload_success"
_FAILURE = "file_upload_failure"
_DURATION = "file_upload_duration_seconds"
_OUTCOME_FAILURES = "file_upload_outcome_failures"


class UploadMetricsRecorder(UploadMetrics):
    """Counters and duration samples for profile image uploads.

    Counters:
    - ``file_upload_success_total``: uploads that stored the blob and updated the reference
    - ``file_upload_failure_total{type="general"}``: missing customer, store, reference, unexpected
    - ``file_upload_failure_total{type="validation"}``: files rejected by the validator
    - ``file_upload_failure_total{type="store"}``: object store write failures

    Durations go to the ``file_upload_duration_seconds`` histogram. Each
    recorder owns its ``CollectorRegistry``, which ``/api/v1/metrics/prometheus``
    exposes. All public methods log their own errors and never raise.
    """

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self.registry = registry or CollectorRegistry()
        self._success = Counter(
            _SUCCESS,
            "Total number of successful file uploads",
            registry=self.registry,
        )
        failures = Counter(
            _FAILURE,
            "Total number of failed file uploads by failure type",
            ["type"],
            registry=self.registry,
        )
        self._failure = failures.labels(type="general")
        self._validation_failure = failures.labels(type="validation")
        self._store_failure = failures.labels(type="store")
        self._duration = Histogram(
            _DURATION,
            "Time taken for file upload operations",
            registry=self.registry,
        )
        self._outcome_failures = Counter(
            _OUTCOME_FAILURES,
            "Upload attempts that ended in failure, by reason",
            ["reason"],
            registry=self.registry,
        )

    # ============================================================================
    # RECORDING
    # ============================================================================

    def record_success(
        self,
        customer_id: int | None = None,
        filename: str | None = None,
        size_bytes: int | None = None,
        content_type: str | None = None,
    ) -> None:
        try:
            self._success.inc()
            logger.info(
                "upload_success_recorded",
                customer_id=customer_id,
                filename=filename,
                size_bytes=size_bytes,
                content_type=content_type,
            )
        except Exception:  # noqa: BLE001
            logger.warning("upload_metric_recording_failed", metric="success", exc_info=True)

    def record_failure(self, reason: str | None = None) -> None:
        try:
            self._failure.inc()
            logger.info("upload_failure_recorded", reason=reason)
        except Exception:  # noqa: BLE001
            logger.warning("upload_metric_recording_failed", metric="failure", exc_info=True)

    def record_validation_failure(
        self,
        kind: str | None = None,
        reason: str | None = None,
    ) -> None:
        try:
            self._validation_failure.inc()
            logger.info("upload_validation_failure_recorded", kind=kind, reason=reason)
        except Exception:  # noqa: BLE001
            logger.warning("upload_metric_recording_failed", metric="validation", exc_info=True)

    def record_store_failure(
        self,
        operation: str | None = None,
        reason: str | None = None,
    ) -> None:
        try:
            self._store_failure.inc()
            logger.info("upload_store_failure_recorded", operation=operation, reason=reason)
        except Exception:  # noqa: BLE001
            logger.warning("upload_metric_recording_failed", metric="store", exc_info=True)

    def record_duration(self, duration_ms: float) -> None:
        try:
            duration_ms = float(duration_ms)
            if duration_ms < 0:
                logger.warning("upload_duration_negative_ignored", duration_ms=duration_ms)
                return
            self._duration.observe(duration_ms / 1000.0)
            logger.debug("upload_duration_recorded", duration_ms=round(duration_ms, 3))
        except Exception:  # noqa: BLE001
            logger.warning("upload_metric_recording_failed", metric="duration", exc_info=True)

    def record_outcome(self, outcome: UploadOutcome) -> None:
        """Log one attempt's outcome and tally failures per reason.

        The success/failure counters are driven by the dedicated record_*
        calls; this only feeds the per-reason breakdown.
        """
        try:
            if outcome.failure_reason is not None:
                self._outcome_failures.labels(reason=outcome.failure_reason.value).inc()
            logger.info(
                "upload_outcome",
                success=outcome.success,
                failure_reason=outcome.failure_reason.value if outcome.failure_reason else None,
                duration_ms=round(outcome.duration_ms, 3),
            )
        except Exception:  # noqa: BLE001
            logger.warning("upload_metric_recording_failed", metric="outcome", exc_info=True)

    @contextmanager
    def time_upload(self) -> Iterator[UploadTimer]:
        timer = UploadTimer()
        try:
            yield timer
        finally:
            outcome = timer.to_outcome()
            self.record_duration(outcome.duration_ms)
            self.record_outcome(outcome)

    # ============================================================================
    # READING
    # ============================================================================

    def _sample(self, name: str, labels: dict[str, str] | None = None) -> float:
        return self.registry.get_sample_value(name, labels) or 0.0

    @property
    def success_count(self) -> int:
        return int(self._sample(f"{_SUCCESS}_total"))

    @property
    def failure_count(self) -> int:
        return int(self._sample(f"{_FAILURE}_total", {"type": "general"}))

    @property
    def validation_failure_count(self) -> int:
        return int(self._sample(f"{_FAILURE}_total", {"type": "validation"}))

    @property
    def store_failure_count(self) -> int:
        return int(self._sample(f"{_FAILURE}_total", {"type": "store"}))

    @property
    def duration_sample_count(self) -> int:
        return int(self._sample(f"{_DURATION}_count"))

    @property
    def average_duration_ms(self) -> float:
        count = self._sample(f"{_DURATION}_count")
        if count == 0:
            return 0.0
        return self._sample(f"{_DURATION}_sum") * 1000.0 / count

    def failures_by_reason(self) -> dict[str, int]:
        return {
            sample.labels["reason"]: int(sample.value)
            for metric in self._outcome_failures.collect()
            for sample in metric.samples
            if sample.name == f"{_OUTCOME_FAILURES}_total"
        }

    def summary(self) -> dict[str, Any]:
        """Snapshot for health checks and monitoring collaborators."""
        success = self.success_count
        failure = self.failure_count
        total = success + failure
        return {
            "total_uploads": total,
            "success_count": success,
            "failure_count": failure,
            "validation_failure_count": self.validation_failure_count,
            "store_failure_count": self.store_failure_count,
            "average_duration_ms": self.average_duration_ms,
            "success_rate": success / total if total else 0.0,
            "failure_rate": failure / total if total else 0.0,
            "failures_by_reason": self.failures_by_reason(),
        }

    def log_current_metrics(self) -> None:
        try:
            logger.info("upload_metrics_snapshot", **self.summary())
        except Exception:  # noqa: BLE001
            logger.warning("upload_metrics_snapshot_failed", exc_info=True)
