from __future__ import annotations

from itertools import count
from threading import Lock

from application.ports.repositories.customer_repository import CustomerRepository
from domain.aggregates.customer import Customer
from domain.exceptions import CustomerNotFoundError


class InMemoryCustomerRepository(CustomerRepository):
    """Process-local customer store for development and tests.

    Entities are copied on the way in and out so callers cannot mutate the
    stored state without going through the repository.
    """

    def __init__(self, customers: list[Customer] | None = None) -> None:
        self._lock = Lock()
        self._customers: dict[int, Customer] = {}
        self._ids = count(1)
        for customer in customers or []:
            self.insert(customer)

    def list_all(self) -> list[Customer]:
        with self._lock:
            return [c.model_copy() for _, c in sorted(self._customers.items())]

    def get_by_id(self, customer_id: int) -> Customer:
        with self._lock:
            customer = self._customers.get(customer_id)
            if customer is None:
                raise CustomerNotFoundError(customer_id)
            return customer.model_copy()

    def exists_by_id(self, customer_id: int) -> bool:
        with self._lock:
            return customer_id in self._customers

    def exists_by_email(self, email: str) -> bool:
        with self._lock:
            return any(c.email == email for c in self._customers.values())

    def insert(self, customer: Customer) -> Customer:
        with self._lock:
            if customer.id is None:
                customer_id = next(self._ids)
                while customer_id in self._customers:
                    customer_id = next(self._ids)
            else:
                customer_id = customer.id
            stored = customer.model_copy(update={"id": customer_id})
            self._customers[customer_id] = stored
            return stored.model_copy()

    def update(self, customer: Customer) -> None:
        with self._lock:
            if customer.id not in self._customers:
                raise CustomerNotFoundError(customer.id)
            self._customers[customer.id] = customer.model_copy()

    def delete_by_id(self, customer_id: int) -> None:
        with self._lock:
            self._customers.pop(customer_id, None)

    def update_profile_image(
        self,
        customer_id: int,
        profile_image_id: str,
        content_type: str | None,
    ) -> None:
        with self._lock:
            customer = self._customers.get(customer_id)
            if customer is None:
                raise CustomerNotFoundError(customer_id)
            customer.set_profile_image(profile_image_id, content_type)
