from __future__ import annotations

from uuid import uuid4

from pydantic import BaseModel, ConfigDict

PROFILE_IMAGE_PREFIX = "profile-images"


class ProfileImageKey(BaseModel):
    """Storage key of a customer's profile image: ``profile-images/{customer_id}/{blob_key}``."""

    model_config = ConfigDict(frozen=True)

    customer_id: int
    blob_key: str

    @classmethod
    def mint(cls, customer_id: int) -> ProfileImageKey:
        """Create a key with a fresh random blob key."""
        return cls(customer_id=customer_id, blob_key=str(uuid4()))

    @property
    def storage_key(self) -> str:
        return f"{PROFILE_IMAGE_PREFIX}/{self.customer_id}/{self.blob_key}"

    def __str__(self) -> str:
        return self.storage_key
