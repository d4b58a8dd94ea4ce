"""Error taxonomy of the profile image upload agent."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum

import httpx


class UploadErrorType(str, Enum):
    FILE_SIZE = "FILE_SIZE"
    FILE_TYPE = "FILE_TYPE"
    NETWORK = "NETWORK"
    SERVER = "SERVER"
    AUTHENTICATION = "AUTHENTICATION"
    NOT_FOUND = "NOT_FOUND"
    UNKNOWN = "UNKNOWN"


class UploadError(Exception):
    """A classified upload failure with a short title and an actionable detail.

    ``str(error)`` is the title. ``retryable`` tells the retry loop whether
    another attempt may succeed.
    """

    def __init__(
        self,
        error_type: UploadErrorType,
        title: str,
        details: str | None = None,
        original_error: BaseException | None = None,
        *,
        status_code: int | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(title)
        self.type = error_type
        self.title = title
        self.details = details
        self.original_error = original_error
        self.status_code = status_code
        self.retryable = retryable
        self.timestamp = datetime.now(UTC).isoformat()

    def __repr__(self) -> str:
        return (
            f"UploadError(type={self.type.value}, title={self.title!r}, "
            f"status_code={self.status_code}, retryable={self.retryable})"
        )


class UploadCancelledError(UploadError):
    """Raised when the caller cancels an upload through its CancelHandle."""

    def __init__(self) -> None:
        super().__init__(
            UploadErrorType.UNKNOWN,
            "Upload cancelled",
            "The upload was cancelled by the user",
        )


@dataclass(frozen=True)
class ErrorMessage:
    title: str
    description: str
    type: UploadErrorType


def _response_message(response: httpx.Response) -> str | None:
    try:
        body = response.json()
    except ValueError:
        return response.text or None
    if isinstance(body, dict):
        message = body.get("detail") or body.get("message")
        return str(message) if message else None
    return None


def _from_status(error: httpx.HTTPStatusError) -> UploadError:
    status_code = error.response.status_code
    message = _response_message(error.response)

    if status_code >= httpx.codes.INTERNAL_SERVER_ERROR:
        return UploadError(
            UploadErrorType.SERVER,
            "Server error",
            "Please try again later",
            error,
            status_code=status_code,
            retryable=True,
        )
    if status_code == httpx.codes.BAD_REQUEST:
        if message and "file type" in message.lower():
            return UploadError(
                UploadErrorType.FILE_TYPE,
                "Invalid file type",
                "Please select a JPEG, PNG, GIF, or WebP image",
                error,
                status_code=status_code,
            )
        return UploadError(
            UploadErrorType.SERVER,
            "Invalid request",
            message or "Please check your file and try again",
            error,
            status_code=status_code,
        )
    if status_code in (httpx.codes.UNAUTHORIZED, httpx.codes.FORBIDDEN):
        return UploadError(
            UploadErrorType.AUTHENTICATION,
            "Authentication required",
            "Please log in again to continue",
            error,
            status_code=status_code,
        )
    if status_code == httpx.codes.NOT_FOUND:
        return UploadError(
            UploadErrorType.NOT_FOUND,
            "Customer not found",
            "Please refresh the page and try again",
            error,
            status_code=status_code,
        )
    if status_code == httpx.codes.REQUEST_ENTITY_TOO_LARGE:
        return UploadError(
            UploadErrorType.FILE_SIZE,
            "File size too large",
            message or "Please select a smaller image",
            error,
            status_code=status_code,
        )
    return UploadError(
        UploadErrorType.SERVER,
        "Upload failed",
        message or "Please try again",
        error,
        status_code=status_code,
    )


def parse_error(error: BaseException) -> UploadError:
    """Classify any failure raised while talking to the API."""
    if isinstance(error, UploadError):
        return error
    if isinstance(error, httpx.HTTPStatusError):
        return _from_status(error)
    if isinstance(error, httpx.TransportError):
        # Timeouts are a TransportError subclass and are reported the same way
        return UploadError(
            UploadErrorType.NETWORK,
            "Network error",
            "Please check your connection and try again",
            error,
            retryable=True,
        )
    return UploadError(
        UploadErrorType.UNKNOWN,
        "Unexpected error",
        str(error) or "Please try again",
        error,
    )


def get_error_message(error: BaseException) -> ErrorMessage:
    """Turn any error into a title/description pair for display."""
    parsed = parse_error(error)
    return ErrorMessage(
        title=parsed.title,
        description=parsed.details or "Please try again",
        type=parsed.type,
    )
