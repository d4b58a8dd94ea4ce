from __future__ import annotations

from pydantic import BaseModel

from domain.exceptions import ValidationError
from domain.value_objects.gender import Gender


class Customer(BaseModel):
    """Customer entity, the owner of a profile image reference.

    The id is assigned by the customer repository on insert; a customer that
    has not been persisted yet has ``id is None``.
    """

    id: int | None = None
    name: str
    email: str
    age: int
    gender: Gender
    profile_image_id: str | None = None
    profile_image_content_type: str | None = None

    @classmethod
    def create(cls, *, name: str, email: str, age: int, gender: Gender) -> Customer:
        name = (name or "").strip()
        email = (email or "").strip()
        if not name:
            msg = "name must be provided"
            raise ValidationError(msg)
        if "@" not in email:
            msg = f"invalid email address: {email!r}"
            raise ValidationError(msg)
        if age <= 0:
            msg = "age must be a positive integer"
            raise ValidationError(msg)
        return cls(name=name, email=email, age=age, gender=gender)

    @property
    def has_profile_image(self) -> bool:
        return bool(self.profile_image_id)

    def apply_update(
        self,
        *,
        name: str | None = None,
        email: str | None = None,
        age: int | None = None,
    ) -> bool:
        """Apply the non-null fields that differ from the current values.

        Returns:
            True if any field changed.

        """
        changed = False
        if name is not None and name != self.name:
            if not name.strip():
                msg = "name must not be blank"
                raise ValidationError(msg)
            self.name = name
            changed = True
        if age is not None and age != self.age:
            if age <= 0:
                msg = "age must be a positive integer"
                raise ValidationError(msg)
            self.age = age
            changed = True
        if email is not None and email != self.email:
            if "@" not in email:
                msg = f"invalid email address: {email!r}"
                raise ValidationError(msg)
            self.email = email
            changed = True
        return changed

    def set_profile_image(self, profile_image_id: str, content_type: str | None) -> None:
        self.profile_image_id = profile_image_id
        self.profile_image_content_type = content_type
