from typing import Annotated

from fastapi import APIRouter, Depends, File, Response, UploadFile, status
from lagom import Container
from returns.result import Result
from starlette.concurrency import run_in_threadpool

from application.dtos.customer_dtos import (
    CustomerRegistrationRequest,
    CustomerResponse,
    CustomerUpdateRequest,
)
from application.dtos.errors import AppError
from application.use_cases.customer_use_cases import (
    DeleteCustomerUseCase,
    GetCustomerUseCase,
    ListCustomersUseCase,
    RegisterCustomerUseCase,
    UpdateCustomerUseCase,
)
from application.use_cases.profile_image_use_cases import (
    GetProfileImageUseCase,
    UploadProfileImageUseCase,
)
from domain.value_objects.file_candidate import FileCandidate
from interfaces.api.middleware import handle_use_case_errors
from interfaces.dependencies import get_container

router = APIRouter(prefix="/api/v1/customers", tags=["customers"])


@router.get("", status_code=status.HTTP_200_OK)
@handle_use_case_errors
async def list_customers(
    container: Annotated[Container, Depends(get_container)],
) -> list[CustomerResponse]:
    use_case = container[ListCustomersUseCase]
    return await run_in_threadpool(use_case.execute)


@router.get("/{customer_id}", status_code=status.HTTP_200_OK)
@handle_use_case_errors
async def get_customer(
    customer_id: int,
    container: Annotated[Container, Depends(get_container)],
) -> CustomerResponse:
    use_case = container[GetCustomerUseCase]
    return await run_in_threadpool(use_case.execute, customer_id)


@router.post("", status_code=status.HTTP_201_CREATED)
@handle_use_case_errors
async def register_customer(
    request: CustomerRegistrationRequest,
    container: Annotated[Container, Depends(get_container)],
) -> CustomerResponse:
    """Register a new customer.

    Returns:
        201 Created: Customer registered
        400 Bad Request: Validation error
        409 Conflict: Email already taken

    """
    use_case = container[RegisterCustomerUseCase]
    return await run_in_threadpool(use_case.execute, request)


@router.put("/{customer_id}", status_code=status.HTTP_200_OK)
@handle_use_case_errors
async def update_customer(
    customer_id: int,
    request: CustomerUpdateRequest,
    container: Annotated[Container, Depends(get_container)],
) -> CustomerResponse:
    use_case = container[UpdateCustomerUseCase]
    return await run_in_threadpool(use_case.execute, customer_id, request)


@router.delete("/{customer_id}", status_code=status.HTTP_204_NO_CONTENT)
@handle_use_case_errors
async def delete_customer(
    customer_id: int,
    container: Annotated[Container, Depends(get_container)],
) -> Response:
    use_case = container[DeleteCustomerUseCase]
    result: Result[None, AppError] = await run_in_threadpool(use_case.execute, customer_id)
    return result.map(lambda _: Response(status_code=status.HTTP_204_NO_CONTENT))


@router.post("/{customer_id}/profile-image", status_code=status.HTTP_200_OK)
@handle_use_case_errors
async def upload_customer_profile_image(
    customer_id: int,
    file: Annotated[UploadFile, File()],
    container: Annotated[Container, Depends(get_container)],
) -> Response:
    """Upload a profile image for a customer.

    Returns:
        200 OK: Image stored and customer reference updated (empty body)
        400 Bad Request: Empty file or disallowed content type
        404 Not Found: Customer does not exist
        413 Request Entity Too Large: File exceeds the configured limit
        500 Internal Server Error: Storage or reference update failure

    """
    candidate = FileCandidate(
        content=await file.read(),
        content_type=file.content_type,
        filename=file.filename,
    )
    use_case = container[UploadProfileImageUseCase]
    result = await run_in_threadpool(use_case.execute, customer_id, candidate)
    return result.map(lambda _: Response(status_code=status.HTTP_200_OK))


@router.get("/{customer_id}/profile-image", status_code=status.HTTP_200_OK)
@handle_use_case_errors
async def get_customer_profile_image(
    customer_id: int,
    container: Annotated[Container, Depends(get_container)],
) -> Response:
    """Stream back the stored profile image with its original content type."""
    use_case = container[GetProfileImageUseCase]
    result = await run_in_threadpool(use_case.execute, customer_id)
    return result.map(
        lambda image: Response(content=image.content, media_type=image.content_type),
    )
