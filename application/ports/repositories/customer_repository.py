"""Repository interfaces (ports) for the application layer."""

from abc import ABC, abstractmethod

from domain.aggregates.customer import Customer


class CustomerRepository(ABC):
    """Interface for the customer datastore.

    The repository raises domain exceptions to allow proper error handling
    at the application and interface layers:
    - CustomerNotFoundError: When a customer is not found
    - InfrastructureError: When infrastructure operations fail (DB, network, etc.)
    """

    @abstractmethod
    def list_all(self) -> list[Customer]:
        """Return every customer ordered by id."""

    @abstractmethod
    def get_by_id(self, customer_id: int) -> Customer:
        """Retrieve a customer by its ID.

        Raises:
            CustomerNotFoundError: If the customer does not exist.
            InfrastructureError: If the retrieval operation fails.

        """

    @abstractmethod
    def exists_by_id(self, customer_id: int) -> bool: ...

    @abstractmethod
    def exists_by_email(self, email: str) -> bool: ...

    @abstractmethod
    def insert(self, customer: Customer) -> Customer:
        """Persist a new customer and return it with its assigned id."""

    @abstractmethod
    def update(self, customer: Customer) -> None:
        """Replace the stored fields of an existing customer.

        Raises:
            CustomerNotFoundError: If the customer does not exist.

        """

    @abstractmethod
    def delete_by_id(self, customer_id: int) -> None: ...

    @abstractmethod
    def update_profile_image(
        self,
        customer_id: int,
        profile_image_id: str,
        content_type: str | None,
    ) -> None:
        """Point the customer's profile image reference at a new blob key.

        Raises:
            CustomerNotFoundError: If the customer does not exist.
            InfrastructureError: If the write fails.

        """
