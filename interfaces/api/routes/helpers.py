from fastapi import HTTPException, status

from application.dtos.errors import AppError

# Categories whose messages are safe to show to API clients verbatim
_CLIENT_ERROR_STATUS = {
    "validation": status.HTTP_400_BAD_REQUEST,
    "not_found": status.HTTP_404_NOT_FOUND,
    "conflict": status.HTTP_409_CONFLICT,
    "payload_too_large": status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
}

# Server-side categories: the detail is replaced with a fixed, actionable text
_SERVER_ERROR_DETAIL = {
    "storage_error": "Failed to store profile image",
    "reference_update_failed": "Failed to update customer profile image reference",
}


def _map_app_error_to_http_exception(error: AppError) -> HTTPException:
    """Map application layer errors to appropriate HTTP exceptions."""
    status_code = _CLIENT_ERROR_STATUS.get(error.category)
    if status_code is not None:
        return HTTPException(status_code=status_code, detail=error.message)

    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=_SERVER_ERROR_DETAIL.get(error.category, "Internal server error"),
    )
