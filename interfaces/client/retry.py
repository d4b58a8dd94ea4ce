from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import TypeVar

import structlog

from interfaces.client.errors import UploadError, UploadErrorType, parse_error

logger = structlog.get_logger()

T = TypeVar("T")

Sleep = Callable[[float], Awaitable[None]]


@dataclass(frozen=True)
class RetryConfig:
    """Exponential backoff settings: attempt ``n`` waits ``retry_delay * 2**n`` seconds."""

    max_retries: int = 3
    retry_delay: float = 1.0
    retryable_errors: frozenset[UploadErrorType] = field(
        default_factory=lambda: frozenset({UploadErrorType.NETWORK, UploadErrorType.SERVER}),
    )

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            msg = "max_retries must not be negative"
            raise ValueError(msg)
        if self.retry_delay < 0:
            msg = "retry_delay must not be negative"
            raise ValueError(msg)

    def should_retry(self, error: UploadError) -> bool:
        return error.retryable and error.type in self.retryable_errors

    def delay_for(self, attempt: int) -> float:
        return self.retry_delay * 2**attempt


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    config: RetryConfig,
    *,
    sleep: Sleep = asyncio.sleep,
) -> T:
    """Run ``operation`` up to ``config.max_retries + 1`` times.

    Every failure is classified with :func:`parse_error`. Non-retryable errors
    are raised at once, and the last error is raised once the retries are spent.
    Cancellation is never caught here.
    """
    attempt = 0
    while True:
        try:
            return await operation()
        except Exception as e:  # noqa: BLE001
            error = parse_error(e)

        if not config.should_retry(error) or attempt >= config.max_retries:
            raise error from error.original_error

        delay = config.delay_for(attempt)
        logger.warning(
            "upload_attempt_failed_retrying",
            attempt=attempt + 1,
            max_retries=config.max_retries,
            delay_seconds=delay,
            error_type=error.type.value,
            error=error.title,
            status_code=error.status_code,
        )
        await sleep(delay)
        attempt += 1
