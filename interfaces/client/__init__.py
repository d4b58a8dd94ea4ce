"""HTTP client agent for uploading customer profile images."""

from interfaces.client.credentials import (
    CredentialStore,
    FileCredentialStore,
    StaticCredentialStore,
)
from interfaces.client.errors import (
    ErrorMessage,
    UploadCancelledError,
    UploadError,
    UploadErrorType,
    get_error_message,
    parse_error,
)
from interfaces.client.profile_image_client import ProfileImageClient, validate_file
from interfaces.client.progress import CancelHandle, UploadProgress
from interfaces.client.retry import RetryConfig, with_retry

__all__ = [
    "CancelHandle",
    "CredentialStore",
    "ErrorMessage",
    "FileCredentialStore",
    "ProfileImageClient",
    "RetryConfig",
    "StaticCredentialStore",
    "UploadCancelledError",
    "UploadError",
    "UploadErrorType",
    "UploadProgress",
    "get_error_message",
    "parse_error",
    "validate_file",
    "with_retry",
]
