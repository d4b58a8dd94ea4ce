from .file_candidate import FileCandidate
from .gender import Gender
from .profile_image_key import ProfileImageKey
from .upload_outcome import UploadFailureReason, UploadOutcome
from .upload_rules import DEFAULT_ALLOWED_IMAGE_TYPES, UploadRules, parse_size

__all__ = [
    "DEFAULT_ALLOWED_IMAGE_TYPES",
    "FileCandidate",
    "Gender",
    "ProfileImageKey",
    "UploadFailureReason",
    "UploadOutcome",
    "UploadRules",
    "parse_size",
]
