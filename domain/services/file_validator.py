"""Domain service validating uploaded files against the configured upload rules."""

from __future__ import annotations

from typing import TYPE_CHECKING

from domain.exceptions import EmptyFileError, FileSizeExceededError, InvalidFileTypeError

if TYPE_CHECKING:
    from domain.value_objects.file_candidate import FileCandidate
    from domain.value_objects.upload_rules import UploadRules


class FileValidator:
    """Check a file candidate for emptiness, MIME type and size.

    Checks run in that order and the first violation is raised. The validator
    holds no state besides its rules and never touches storage, so the same
    instance is shared by the server use case and the client upload agent.
    """

    def __init__(self, rules: UploadRules) -> None:
        self.rules = rules

    def validate(self, candidate: FileCandidate | None) -> None:
        """Validate a candidate file.

        Raises:
            EmptyFileError: If the candidate is missing or has zero bytes.
            InvalidFileTypeError: If the content type is not allowed.
            FileSizeExceededError: If the file exceeds the maximum size.

        """
        if candidate is None or candidate.is_empty:
            msg = "File cannot be empty"
            raise EmptyFileError(msg)

        self._validate_type(candidate.content_type)
        self._validate_size(candidate.size)

    def is_allowed_type(self, content_type: str | None) -> bool:
        return self.rules.is_allowed_type(content_type)

    def is_allowed_size(self, size: int) -> bool:
        return self.rules.is_allowed_size(size)

    def _validate_type(self, content_type: str | None) -> None:
        if not self.is_allowed_type(content_type):
            allowed = ", ".join(self.rules.allowed_types)
            msg = f"Invalid file type: {content_type}. Allowed types are: {allowed}"
            raise InvalidFileTypeError(msg, content_type=content_type)

    def _validate_size(self, size: int) -> None:
        max_size = self.rules.max_size_bytes
        if not self.is_allowed_size(size):
            msg = f"File size {size} bytes exceeds maximum allowed size of {max_size} bytes"
            raise FileSizeExceededError(msg, actual_size=size, max_size=max_size)
