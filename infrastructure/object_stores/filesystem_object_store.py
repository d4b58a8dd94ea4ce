from __future__ import annotations

import time
from pathlib import PurePosixPath

import fsspec
import structlog

from application.ports.object_store import ObjectStore
from domain.exceptions import BlobNotFoundError, ObjectStoreError

logger = structlog.get_logger()


class FilesystemObjectStore(ObjectStore):
    """Object store on an fsspec filesystem, used in place of S3 in development.

    Objects live at ``{base_url}/{bucket}/{key}``; parent directories are
    created on write. With the default ``file://`` URL this needs no cloud
    credentials, while matching the S3 store's observable behaviour: overwrite
    on put, ``BlobNotFoundError`` on a missing key, ``False`` from exists.
    """

    def __init__(self, base_url: str, *, storage_options: dict | None = None) -> None:
        self.base_url = base_url.rstrip("/")
        self.storage_options = storage_options or {}
        self.fs, self.root = fsspec.core.url_to_fs(self.base_url, **self.storage_options)

    def _path(self, bucket: str, key: str, operation: str) -> str:
        parts = PurePosixPath(key).parts
        if (
            not bucket
            or "/" in bucket
            or bucket in {".", ".."}
            or not key
            or key.startswith("/")
            or ".." in parts
        ):
            msg = f"Invalid object location: bucket={bucket!r}, key={key!r}"
            raise ObjectStoreError(msg, operation=operation, bucket=bucket, key=key)
        return f"{self.root.rstrip('/')}/{bucket}/{key}"

    def put(
        self,
        bucket: str,
        key: str,
        data: bytes,
        *,
        content_type: str | None = None,
    ) -> None:
        path = self._path(bucket, key, "put")
        start = time.perf_counter()
        try:
            self.fs.makedirs(path.rsplit("/", 1)[0], exist_ok=True)
            with self.fs.open(path, "wb") as out:
                out.write(data)
        except OSError as e:
            logger.error("filesystem_put_failed", bucket=bucket, key=key, path=path, error=str(e))
            msg = f"Failed to write object to filesystem store: {e!s}"
            raise ObjectStoreError(msg, operation="put", bucket=bucket, key=key) from e

        logger.info(
            "filesystem_put_object",
            bucket=bucket,
            key=key,
            size_bytes=len(data),
            content_type=content_type,
            duration_ms=round((time.perf_counter() - start) * 1000.0, 3),
        )

    def get(self, bucket: str, key: str) -> bytes:
        path = self._path(bucket, key, "get")
        start = time.perf_counter()
        try:
            with self.fs.open(path, "rb") as f:
                data = f.read()
        except FileNotFoundError as e:
            logger.warning("filesystem_object_not_found", bucket=bucket, key=key, path=path)
            raise BlobNotFoundError(bucket, key) from e
        except OSError as e:
            logger.error("filesystem_get_failed", bucket=bucket, key=key, path=path, error=str(e))
            msg = f"Failed to read object from filesystem store: {e!s}"
            raise ObjectStoreError(msg, operation="get", bucket=bucket, key=key) from e

        logger.info(
            "filesystem_get_object",
            bucket=bucket,
            key=key,
            size_bytes=len(data),
            duration_ms=round((time.perf_counter() - start) * 1000.0, 3),
        )
        return data

    def exists(self, bucket: str, key: str) -> bool:
        path = self._path(bucket, key, "exists")
        try:
            return self.fs.isfile(path)
        except OSError as e:
            msg = f"Failed to check object in filesystem store: {e!s}"
            raise ObjectStoreError(msg, operation="exists", bucket=bucket, key=key) from e
