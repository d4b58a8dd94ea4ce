from __future__ import annotations

from typing import Protocol


class ObjectStore(Protocol):
    """Key-value blob storage addressed by (bucket, key).

    Implementations raise domain exceptions only:
    - BlobNotFoundError: the key does not exist (``get`` only)
    - ObjectStoreError: any other transport or service failure, with the
      original exception chained for diagnostics
    """

    def put(
        self,
        bucket: str,
        key: str,
        data: bytes,
        *,
        content_type: str | None = None,
    ) -> None:
        """Store ``data`` under the key, silently replacing existing content."""
        ...

    def get(self, bucket: str, key: str) -> bytes: ...

    def exists(self, bucket: str, key: str) -> bool:
        """Return False for a missing key instead of raising."""
        ...
