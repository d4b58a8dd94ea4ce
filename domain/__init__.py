"""Domain layer exports."""

from domain.aggregates.customer import Customer
from domain.exceptions import DomainError, ValidationError
from domain.services.file_validator import FileValidator
from domain.value_objects import (
    FileCandidate,
    Gender,
    ProfileImageKey,
    UploadFailureReason,
    UploadOutcome,
    UploadRules,
)

__all__ = [
    "Customer",
    "DomainError",
    "FileCandidate",
    "FileValidator",
    "Gender",
    "ProfileImageKey",
    "UploadFailureReason",
    "UploadOutcome",
    "UploadRules",
    "ValidationError",
]
