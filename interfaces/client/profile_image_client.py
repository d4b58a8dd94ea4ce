"""Async upload agent for customer profile images.

Validates the file locally with the same rules as the server, then posts it as
multipart ``file`` with bearer authentication. Transient failures are retried
with exponential backoff. Progress is reported per streamed chunk, and the
upload can be cancelled through a :class:`CancelHandle`.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import AsyncIterator, Callable
from typing import TYPE_CHECKING, Self

import httpx
import structlog

from domain.exceptions import EmptyFileError, FileSizeExceededError, InvalidFileTypeError
from domain.services.file_validator import FileValidator
from interfaces.client.errors import (
    UploadCancelledError,
    UploadError,
    UploadErrorType,
    parse_error,
)
from interfaces.client.progress import CancelHandle, UploadProgress
from interfaces.client.retry import RetryConfig, Sleep, with_retry

if TYPE_CHECKING:
    from types import TracebackType

    from domain.value_objects.file_candidate import FileCandidate
    from domain.value_objects.upload_rules import UploadRules
    from interfaces.client.credentials import CredentialStore

logger = structlog.get_logger()

CHUNK_SIZE = 64 * 1024
_MB = 1024 * 1024

ProgressCallback = Callable[[UploadProgress], None]


def validate_file(candidate: FileCandidate | None, rules: UploadRules) -> None:
    """Check a file before any network traffic, raising :class:`UploadError`."""
    try:
        FileValidator(rules).validate(candidate)
    except EmptyFileError as e:
        raise UploadError(
            UploadErrorType.FILE_TYPE,
            "No file selected",
            "Please select a file to upload",
            e,
        ) from e
    except InvalidFileTypeError as e:
        allowed = ", ".join(rules.allowed_types)
        raise UploadError(
            UploadErrorType.FILE_TYPE,
            "Invalid file type",
            f"Please select one of {allowed}. Selected: {e.content_type}",
            e,
        ) from e
    except FileSizeExceededError as e:
        raise UploadError(
            UploadErrorType.FILE_SIZE,
            "File size too large",
            f"Please select an image under {e.max_size / _MB:g}MB. "
            f"Current size: {e.actual_size / _MB:.2f}MB",
            e,
        ) from e


class ProfileImageClient:
    def __init__(
        self,
        base_url: str,
        rules: UploadRules,
        credentials: CredentialStore,
        *,
        retry_config: RetryConfig | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.rules = rules
        self.credentials = credentials
        self.retry_config = retry_config or RetryConfig()
        self._sleep = sleep
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def profile_image_url(self, customer_id: int) -> str:
        return f"{self.base_url}{self._profile_image_path(customer_id)}"

    async def upload(
        self,
        customer_id: int,
        candidate: FileCandidate,
        *,
        on_progress: ProgressCallback | None = None,
        cancel_handle: CancelHandle | None = None,
    ) -> httpx.Response:
        """Upload ``candidate`` as the profile image of ``customer_id``.

        Raises:
            UploadError: Validation failed, or the last attempt failed.
            UploadCancelledError: ``cancel_handle`` was cancelled.

        """
        validate_file(candidate, self.rules)

        handle = cancel_handle or CancelHandle()
        if handle.cancelled:
            handle.finish()
            raise UploadCancelledError

        body, content_type = self._encode_multipart(candidate)
        log = logger.bind(
            customer_id=customer_id,
            filename=candidate.filename,
            size_bytes=candidate.size,
        )
        log.info("profile_image_upload_requested")

        task = asyncio.ensure_future(
            with_retry(
                lambda: self._send(customer_id, body, content_type, on_progress),
                self.retry_config,
                sleep=self._sleep,
            ),
        )
        handle.bind(task)
        try:
            response = await task
        except asyncio.CancelledError:
            if handle.cancelled:
                log.info("profile_image_upload_cancelled")
                raise UploadCancelledError from None
            raise
        except UploadError as e:
            log.warning(
                "profile_image_upload_failed",
                error_type=e.type.value,
                error=e.title,
                status_code=e.status_code,
            )
            raise
        finally:
            handle.finish()

        log.info("profile_image_upload_completed", status_code=response.status_code)
        return response

    async def get_profile_image(self, customer_id: int) -> bytes:
        async def fetch() -> httpx.Response:
            response = await self._client.get(
                self._profile_image_path(customer_id),
                headers=self._auth_headers(),
            )
            response.raise_for_status()
            return response

        response = await with_retry(fetch, self.retry_config, sleep=self._sleep)
        return response.content

    def _profile_image_path(self, customer_id: int) -> str:
        return f"/api/v1/customers/{customer_id}/profile-image"

    def _auth_headers(self) -> dict[str, str]:
        token = self.credentials.get_access_token()
        return {"Authorization": f"Bearer {token}"} if token else {}

    def _encode_multipart(self, candidate: FileCandidate) -> tuple[bytes, str]:
        """Encode the multipart body once so every attempt resends the same bytes."""
        request = self._client.build_request(
            "POST",
            "/",
            files={
                "file": (
                    candidate.filename or "upload",
                    candidate.content,
                    candidate.content_type,
                ),
            },
        )
        return request.read(), request.headers["Content-Type"]

    async def _send(
        self,
        customer_id: int,
        body: bytes,
        content_type: str,
        on_progress: ProgressCallback | None,
    ) -> httpx.Response:
        headers = {
            **self._auth_headers(),
            "Content-Type": content_type,
            "Content-Length": str(len(body)),
        }
        response = await self._client.post(
            self._profile_image_path(customer_id),
            content=_stream_with_progress(body, on_progress),
            headers=headers,
        )
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise parse_error(e) from e
        return response


async def _stream_with_progress(
    body: bytes,
    on_progress: ProgressCallback | None,
) -> AsyncIterator[bytes]:
    total = len(body)
    started = time.perf_counter()
    loaded = 0
    for offset in range(0, total, CHUNK_SIZE):
        chunk = body[offset : offset + CHUNK_SIZE]
        loaded += len(chunk)
        if on_progress is not None:
            on_progress(UploadProgress.measure(loaded, total, time.perf_counter() - started))
        yield chunk
