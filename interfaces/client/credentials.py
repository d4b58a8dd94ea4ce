"""Sources for the bearer token sent with every API request."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Protocol

import structlog

logger = structlog.get_logger()


class CredentialStore(Protocol):
    def get_access_token(self) -> str | None: ...


class StaticCredentialStore:
    def __init__(self, token: str | None) -> None:
        self._token = token

    def get_access_token(self) -> str | None:
        return self._token


class FileCredentialStore:
    """Read ``access_token`` from a JSON file on every call.

    The file is re-read so that a token refreshed by another process is
    picked up without restarting the client. A missing or unreadable file
    means no token.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path).expanduser()

    def get_access_token(self) -> str | None:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as e:
            logger.warning("credential_file_unreadable", path=str(self.path), error=str(e))
            return None

        token = data.get("access_token") if isinstance(data, dict) else None
        return str(token) if token else None
