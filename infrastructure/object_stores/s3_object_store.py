from __future__ import annotations

import time
from typing import TYPE_CHECKING, Any

import boto3
import structlog
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from application.ports.object_store import ObjectStore
from domain.exceptions import BlobNotFoundError, ObjectStoreError

if TYPE_CHECKING:
    from botocore.client import BaseClient

logger = structlog.get_logger()

_NOT_FOUND_CODES = frozenset({"NoSuchKey", "NotFound", "404"})


def _error_code(error: ClientError) -> str:
    return str(error.response.get("Error", {}).get("Code", "unknown"))


def _error_message(error: ClientError) -> str:
    return str(error.response.get("Error", {}).get("Message") or error)


def _is_not_found(error: ClientError) -> bool:
    status = error.response.get("ResponseMetadata", {}).get("HTTPStatusCode")
    return _error_code(error) in _NOT_FOUND_CODES or status == 404  # noqa: PLR2004


class S3ObjectStore(ObjectStore):
    """Object store backed by Amazon S3 (or any S3-compatible service).

    Failures are split into service-side errors (``ClientError``, the service
    answered with an error code) and client-side errors (``BotoCoreError``:
    connection, endpoint, credential or read problems). Both surface as
    ``ObjectStoreError`` with ``kind`` set accordingly; a missing key surfaces
    as ``BlobNotFoundError``.
    """

    def __init__(
        self,
        client: BaseClient | None = None,
        *,
        region_name: str | None = None,
        endpoint_url: str | None = None,
    ) -> None:
        if client is None:
            # The upload path surfaces store failures immediately; botocore's
            # own retry loop is disabled.
            client = boto3.client(
                "s3",
                region_name=region_name,
                endpoint_url=endpoint_url,
                config=Config(retries={"max_attempts": 1, "mode": "standard"}),
            )
        self.client = client

    def put(
        self,
        bucket: str,
        key: str,
        data: bytes,
        *,
        content_type: str | None = None,
    ) -> None:
        params: dict[str, Any] = {"Bucket": bucket, "Key": key, "Body": data}
        if content_type:
            params["ContentType"] = content_type

        start = time.perf_counter()
        try:
            self.client.put_object(**params)
        except ClientError as e:
            raise self._service_error("put_object", bucket, key, e, start) from e
        except BotoCoreError as e:
            raise self._client_error("put_object", bucket, key, e, start) from e

        logger.info(
            "s3_put_object",
            bucket=bucket,
            key=key,
            size_bytes=len(data),
            duration_ms=_elapsed_ms(start),
        )

    def get(self, bucket: str, key: str) -> bytes:
        start = time.perf_counter()
        try:
            response = self.client.get_object(Bucket=bucket, Key=key)
            data = response["Body"].read()
        except ClientError as e:
            if _is_not_found(e):
                logger.warning("s3_object_not_found", bucket=bucket, key=key)
                raise BlobNotFoundError(bucket, key) from e
            raise self._service_error("get_object", bucket, key, e, start) from e
        except BotoCoreError as e:
            raise self._client_error("get_object", bucket, key, e, start) from e

        logger.info(
            "s3_get_object",
            bucket=bucket,
            key=key,
            size_bytes=len(data),
            duration_ms=_elapsed_ms(start),
        )
        return data

    def exists(self, bucket: str, key: str) -> bool:
        start = time.perf_counter()
        try:
            self.client.head_object(Bucket=bucket, Key=key)
        except ClientError as e:
            if _is_not_found(e):
                logger.debug("s3_object_absent", bucket=bucket, key=key)
                return False
            raise self._service_error("head_object", bucket, key, e, start) from e
        except BotoCoreError as e:
            raise self._client_error("head_object", bucket, key, e, start) from e

        logger.debug("s3_object_present", bucket=bucket, key=key)
        return True

    @staticmethod
    def _service_error(
        operation: str,
        bucket: str,
        key: str,
        error: ClientError,
        start: float,
    ) -> ObjectStoreError:
        code = _error_code(error)
        logger.error(
            "s3_service_error",
            operation=operation,
            bucket=bucket,
            key=key,
            error_code=code,
            error=_error_message(error),
            duration_ms=_elapsed_ms(start),
        )
        return ObjectStoreError(
            f"S3 service error during {operation}: {_error_message(error)}",
            operation=operation,
            bucket=bucket,
            key=key,
            kind="service",
            error_code=code,
        )

    @staticmethod
    def _client_error(
        operation: str,
        bucket: str,
        key: str,
        error: BotoCoreError,
        start: float,
    ) -> ObjectStoreError:
        logger.error(
            "s3_client_error",
            operation=operation,
            bucket=bucket,
            key=key,
            error=str(error),
            error_type=type(error).__name__,
            duration_ms=_elapsed_ms(start),
        )
        return ObjectStoreError(
            f"S3 client error during {operation}: {error!s}",
            operation=operation,
            bucket=bucket,
            key=key,
            kind="client",
        )


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000.0, 3)
