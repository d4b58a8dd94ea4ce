from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class UploadFailureReason(str, Enum):
    """Category of an upload failure, used for metrics aggregation."""

    TARGET_NOT_FOUND = "TARGET_NOT_FOUND"
    VALIDATION = "VALIDATION"
    STORE = "STORE"
    REFERENCE_UPDATE = "REFERENCE_UPDATE"
    UNEXPECTED = "UNEXPECTED"


class UploadOutcome(BaseModel):
    """Result record of a single upload attempt."""

    model_config = ConfigDict(frozen=True)

    success: bool
    failure_reason: UploadFailureReason | None = None
    duration_ms: float = Field(default=0.0, ge=0.0)
