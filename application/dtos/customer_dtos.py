from pydantic import BaseModel, Field

from domain.value_objects.gender import Gender


class CustomerRegistrationRequest(BaseModel):
    name: str = Field(..., description="Full name of the customer")
    email: str = Field(..., description="Unique email address of the customer")
    age: int = Field(..., gt=0, description="Age of the customer in years")
    gender: Gender = Field(..., description="Gender of the customer")


class CustomerUpdateRequest(BaseModel):
    name: str | None = Field(None, description="New name, unchanged if omitted")
    email: str | None = Field(None, description="New email, unchanged if omitted")
    age: int | None = Field(None, gt=0, description="New age, unchanged if omitted")


class CustomerResponse(BaseModel):
    id: int = Field(..., description="Unique identifier of the customer")
    name: str = Field(..., description="Full name of the customer")
    email: str = Field(..., description="Email address of the customer")
    age: int = Field(..., description="Age of the customer in years")
    gender: Gender = Field(..., description="Gender of the customer")
    profile_image_id: str | None = Field(
        None,
        description="Blob key of the current profile image, if one was uploaded",
    )
