"""Decorator turning use case results into HTTP responses or errors."""

import functools
from collections.abc import Awaitable, Callable
from typing import Any

import structlog
from fastapi import HTTPException, status
from returns.result import Failure, Success

from application.dtos.errors import AppError
from domain.exceptions import InfrastructureError
from interfaces.api.routes.helpers import _map_app_error_to_http_exception

logger = structlog.get_logger()


def _unwrap(result: object, endpoint: str) -> Any:  # noqa: ANN401
    if isinstance(result, Success):
        return result.unwrap()

    if isinstance(result, Failure):
        error: AppError = result.failure()
        http_error = _map_app_error_to_http_exception(error)
        # Client errors are expected traffic; server errors carry the masked detail
        log = logger.error if http_error.status_code >= 500 else logger.info  # noqa: PLR2004
        log(
            "use_case_failed",
            endpoint=endpoint,
            category=error.category,
            error=error.message,
            status_code=http_error.status_code,
        )
        raise http_error

    logger.error("use_case_result_unrecognized", endpoint=endpoint, result_type=type(result).__name__)
    raise HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Unexpected result type",
    )


def handle_use_case_errors[T](
    func: Callable[..., Awaitable[Any]],
) -> Callable[..., Awaitable[T]]:
    """Unwrap the ``Result`` returned by an endpoint.

    ``Success`` values become the response. A ``Failure`` is mapped to an
    ``HTTPException`` by category, with server-side messages replaced by a
    fixed detail. ``InfrastructureError`` and any other exception escaping the
    endpoint are logged with their traceback and answered with a generic 500,
    so no raw exception text reaches the client.
    """

    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> T:  # noqa: ANN401
        try:
            return _unwrap(await func(*args, **kwargs), func.__name__)
        except HTTPException:
            raise
        except InfrastructureError as exc:
            logger.exception("infrastructure_error", endpoint=func.__name__, error=str(exc))
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Service temporarily unavailable",
            ) from exc
        except Exception as exc:
            logger.exception(
                "unexpected_error",
                endpoint=func.__name__,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Internal server error",
            ) from exc

    return wrapper
