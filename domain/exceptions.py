"""Domain exceptions for business rule violations."""

from __future__ import annotations


class DomainError(Exception):
    """Base exception for domain layer."""


class ValidationError(DomainError):
    """Raised when input validation fails."""


class EmptyFileError(ValidationError):
    """Raised when an uploaded file is missing or has no content."""


class InvalidFileTypeError(ValidationError):
    """Raised when the declared content type is not in the allowed set."""

    def __init__(self, message: str, content_type: str | None = None) -> None:
        super().__init__(message)
        self.content_type = content_type


class FileSizeExceededError(ValidationError):
    """Raised when a file is larger than the configured maximum."""

    def __init__(self, message: str, actual_size: int, max_size: int) -> None:
        super().__init__(message)
        self.actual_size = actual_size
        self.max_size = max_size


class AggregateNotFoundError(DomainError):
    """Raised when an aggregate is not found in the repository."""


class CustomerNotFoundError(AggregateNotFoundError):
    """Raised when a customer does not exist."""

    def __init__(self, customer_id: int) -> None:
        super().__init__(f"customer with id [{customer_id}] not found")
        self.customer_id = customer_id


class DuplicateResourceError(DomainError):
    """Raised when a unique attribute (e.g. email) is already taken."""


class BlobNotFoundError(DomainError):
    """Raised when no blob exists under the requested bucket and key."""

    def __init__(self, bucket: str, key: str) -> None:
        super().__init__(f"The specified key does not exist: {key}")
        self.bucket = bucket
        self.key = key


class InfrastructureError(DomainError):
    """Raised when infrastructure operations fail (DB, network, etc.)."""


class ObjectStoreError(InfrastructureError):
    """Raised when an object store operation fails.

    ``kind`` is ``"client"`` for connectivity/local I/O problems and
    ``"service"`` for errors reported by the storage service itself.
    The underlying transport exception is chained as ``__cause__``.
    """

    def __init__(  # noqa: PLR0913
        self,
        message: str,
        *,
        operation: str,
        bucket: str,
        key: str,
        kind: str = "client",
        error_code: str | None = None,
    ) -> None:
        super().__init__(message)
        self.operation = operation
        self.bucket = bucket
        self.key = key
        self.kind = kind
        self.error_code = error_code


class ReferenceUpdateError(InfrastructureError):
    """Raised when the customer's profile image reference could not be persisted."""
