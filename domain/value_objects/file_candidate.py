from pydantic import BaseModel, ConfigDict


class FileCandidate(BaseModel):
    """Value object for an uploaded file held in memory before validation."""

    model_config = ConfigDict(frozen=True)

    content: bytes
    """Raw file bytes."""

    content_type: str | None = None
    """MIME type declared by the caller."""

    filename: str | None = None
    """Original filename, if the caller supplied one."""

    @property
    def size(self) -> int:
        return len(self.content)

    @property
    def is_empty(self) -> bool:
        return self.size == 0
