import structlog
from returns.result import Failure, Result, Success

from application.dtos.customer_dtos import (
    CustomerRegistrationRequest,
    CustomerResponse,
    CustomerUpdateRequest,
)
from application.dtos.errors import AppError
from application.mappers.customer_mappers import CustomerMapper
from application.ports.repositories.customer_repository import CustomerRepository
from domain.aggregates.customer import Customer
from domain.exceptions import (
    CustomerNotFoundError,
    DuplicateResourceError,
    ValidationError,
)

logger = structlog.get_logger()


class ListCustomersUseCase:
    """List all customers."""

    def __init__(self, customer_repository: CustomerRepository) -> None:
        self.customer_repository = customer_repository

    def execute(self) -> Result[list[CustomerResponse], AppError]:
        customers = self.customer_repository.list_all()
        return Success([CustomerMapper.to_customer_response(c) for c in customers])


class GetCustomerUseCase:
    """Retrieve a single customer."""

    def __init__(self, customer_repository: CustomerRepository) -> None:
        self.customer_repository = customer_repository

    def execute(self, customer_id: int) -> Result[CustomerResponse, AppError]:
        try:
            customer = self.customer_repository.get_by_id(customer_id)
            return Success(CustomerMapper.to_customer_response(customer))
        except CustomerNotFoundError as e:
            return Failure(AppError("not_found", str(e)))


class RegisterCustomerUseCase:
    """Register a new customer with a unique email address."""

    def __init__(self, customer_repository: CustomerRepository) -> None:
        self.customer_repository = customer_repository

    def execute(self, request: CustomerRegistrationRequest) -> Result[CustomerResponse, AppError]:
        try:
            if self.customer_repository.exists_by_email(request.email):
                msg = "email already taken"
                raise DuplicateResourceError(msg)

            customer = Customer.create(
                name=request.name,
                email=request.email,
                age=request.age,
                gender=request.gender,
            )
            saved = self.customer_repository.insert(customer)
            logger.info("customer_registered", customer_id=saved.id)

            return Success(CustomerMapper.to_customer_response(saved))
        except DuplicateResourceError as e:
            return Failure(AppError("conflict", str(e)))
        except ValidationError as e:
            return Failure(AppError("validation", f"Validation error: {e!s}"))


class UpdateCustomerUseCase:
    """Update name, email or age of a customer."""

    def __init__(self, customer_repository: CustomerRepository) -> None:
        self.customer_repository = customer_repository

    def execute(
        self,
        customer_id: int,
        request: CustomerUpdateRequest,
    ) -> Result[CustomerResponse, AppError]:
        try:
            customer = self.customer_repository.get_by_id(customer_id)

            if (
                request.email is not None
                and request.email != customer.email
                and self.customer_repository.exists_by_email(request.email)
            ):
                msg = "email already taken"
                raise DuplicateResourceError(msg)

            changed = customer.apply_update(
                name=request.name,
                email=request.email,
                age=request.age,
            )
            if not changed:
                return Failure(AppError("validation", "no data changes found"))

            self.customer_repository.update(customer)
            logger.info("customer_updated", customer_id=customer_id)

            return Success(CustomerMapper.to_customer_response(customer))
        except CustomerNotFoundError as e:
            return Failure(AppError("not_found", str(e)))
        except DuplicateResourceError as e:
            return Failure(AppError("conflict", str(e)))
        except ValidationError as e:
            return Failure(AppError("validation", f"Validation error: {e!s}"))


class DeleteCustomerUseCase:
    """Delete a customer.

    The customer's profile image blobs are left in the object store.
    """

    def __init__(self, customer_repository: CustomerRepository) -> None:
        self.customer_repository = customer_repository

    def execute(self, customer_id: int) -> Result[None, AppError]:
        if not self.customer_repository.exists_by_id(customer_id):
            return Failure(AppError("not_found", str(CustomerNotFoundError(customer_id))))

        self.customer_repository.delete_by_id(customer_id)
        logger.info("customer_deleted", customer_id=customer_id)
        return Success(None)
