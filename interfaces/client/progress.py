from __future__ import annotations

import asyncio
from dataclasses import dataclass


@dataclass(frozen=True)
class UploadProgress:
    loaded: int
    total: int
    progress: int
    speed: float  # bytes per second

    @classmethod
    def measure(cls, loaded: int, total: int, elapsed_seconds: float) -> UploadProgress:
        return cls(
            loaded=loaded,
            total=total,
            progress=round(loaded * 100 / total) if total else 100,
            speed=loaded / elapsed_seconds if elapsed_seconds > 0 else 0.0,
        )


class CancelHandle:
    """Cancel an in-flight upload from outside the awaiting coroutine.

    ``cancel()`` may be called before the upload starts, while a request is in
    flight or while the agent is backing off between retries. Once the upload
    has finished, cancelling is a no-op.
    """

    def __init__(self) -> None:
        self._cancelled = False
        self._done = False
        self._task: asyncio.Future | None = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def done(self) -> bool:
        return self._done

    def cancel(self) -> bool:
        """Request cancellation. Returns False if the upload already finished."""
        if self._done:
            return False
        self._cancelled = True
        if self._task is not None and not self._task.done():
            self._task.cancel()
        return True

    def bind(self, task: asyncio.Future) -> None:
        self._task = task
        if self._cancelled:
            task.cancel()

    def finish(self) -> None:
        self._done = True
        self._task = None
