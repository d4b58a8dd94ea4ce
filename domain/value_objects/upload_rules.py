from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, Field, field_validator

_SIZE_UNITS = {
    "B": 1,
    "KB": 1024,
    "MB": 1024 * 1024,
    "GB": 1024 * 1024 * 1024,
}

_SIZE_PATTERN = re.compile(r"^\s*(\d+)\s*(B|KB|MB|GB)?\s*$", re.IGNORECASE)

DEFAULT_ALLOWED_IMAGE_TYPES: tuple[str, ...] = (
    "image/jpeg",
    "image/png",
    "image/gif",
    "image/webp",
)


def parse_size(value: str) -> int:
    """Convert a human size string ("10MB", "512 kb", "2048") into bytes.

    Units are binary multiples. A bare number is interpreted as bytes.

    Raises:
        ValueError: If the string is not a non-negative integer with an optional
            B/KB/MB/GB suffix.

    """
    match = _SIZE_PATTERN.match(value or "")
    if match is None:
        msg = f"Invalid file size format: {value}"
        raise ValueError(msg)
    number, unit = match.groups()
    return int(number) * _SIZE_UNITS[(unit or "B").upper()]


class UploadRules(BaseModel):
    """Immutable rule-set shared by server-side and client-side validation."""

    model_config = ConfigDict(frozen=True)

    allowed_types: tuple[str, ...] = DEFAULT_ALLOWED_IMAGE_TYPES
    """Allowed MIME types, stored lower-cased."""

    max_size_bytes: int = Field(default=10 * 1024 * 1024, gt=0)
    """Maximum accepted file size in bytes."""

    @field_validator("allowed_types", mode="before")
    @classmethod
    def normalize_types(cls, v: object) -> tuple[str, ...]:
        if isinstance(v, str):
            v = v.split(",")
        types = tuple(t.strip().lower() for t in v if t and t.strip())  # type: ignore[union-attr]
        if not types:
            msg = "allowed_types must contain at least one MIME type"
            raise ValueError(msg)
        return types

    @classmethod
    def from_strings(cls, allowed_types: list[str] | tuple[str, ...], max_size: str) -> UploadRules:
        return cls(allowed_types=tuple(allowed_types), max_size_bytes=parse_size(max_size))

    def is_allowed_type(self, content_type: str | None) -> bool:
        return content_type is not None and content_type.strip().lower() in self.allowed_types

    def is_allowed_size(self, size: int) -> bool:
        return size <= self.max_size_bytes
