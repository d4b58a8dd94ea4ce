from pydantic import BaseModel, Field

DEFAULT_PROFILE_IMAGE_CONTENT_TYPE = "image/jpeg"


class ProfileImageUploadResponse(BaseModel):
    customer_id: int = Field(..., description="Customer the image was attached to")
    profile_image_id: str = Field(..., description="Blob key minted for this upload")
    storage_key: str = Field(..., description="Object store key of the image")
    size_bytes: int = Field(..., description="Size of the stored image in bytes")
    content_type: str | None = Field(None, description="MIME type of the stored image")


class ProfileImage(BaseModel):
    content: bytes = Field(..., description="Raw image bytes")
    content_type: str = Field(
        DEFAULT_PROFILE_IMAGE_CONTENT_TYPE,
        description="MIME type recorded at upload time",
    )
