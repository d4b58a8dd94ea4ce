from enum import Enum


class Gender(str, Enum):
    """Gender recorded on a customer profile."""

    MALE = "MALE"
    FEMALE = "FEMALE"
