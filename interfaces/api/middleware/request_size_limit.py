"""Reject oversized request bodies before they are parsed."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from fastapi import HTTPException, status
from starlette.responses import JSONResponse

if TYPE_CHECKING:
    from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = structlog.get_logger()

_METHODS_WITH_BODY = frozenset({"POST", "PUT", "PATCH"})


class RequestSizeLimitMiddleware:
    """Answer 413 when a request body exceeds ``max_request_size``.

    A declared Content-Length over the limit is rejected on headers alone,
    before multipart parsing and before the use case sees the request. Bodies
    without one (chunked transfer) are counted as they are received, and the
    first chunk past the limit aborts parsing with the same 413.
    """

    def __init__(self, app: ASGIApp, max_request_size: int) -> None:
        self.app = app
        self.max_request_size = max_request_size

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or scope.get("method") not in _METHODS_WITH_BODY:
            await self.app(scope, receive, send)
            return

        content_length = _content_length(scope)
        if content_length is not None and content_length > self.max_request_size:
            self._log_rejection(scope, content_length, streamed=False)
            response = JSONResponse(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                content={"detail": self._detail(content_length)},
            )
            await response(scope, receive, send)
            return

        received = 0

        async def receive_within_limit() -> Message:
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > self.max_request_size:
                    self._log_rejection(scope, received, streamed=True)
                    # Raised inside body parsing; the app's exception handler answers it
                    raise HTTPException(
                        status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                        detail=self._detail(received),
                    )
            return message

        await self.app(scope, receive_within_limit, send)

    def _detail(self, size: int) -> str:
        return f"Request size {size} bytes exceeds maximum allowed size of {self.max_request_size} bytes"

    def _log_rejection(self, scope: Scope, size: int, *, streamed: bool) -> None:
        logger.warning(
            "request_size_limit_exceeded",
            path=scope.get("path"),
            size_bytes=size,
            max_request_size=self.max_request_size,
            streamed=streamed,
        )


def _content_length(scope: Scope) -> int | None:
    for name, value in scope.get("headers", []):
        if name == b"content-length":
            try:
                return int(value)
            except ValueError:
                return None
    return None
