"""MongoDB-backed customer repository."""

from __future__ import annotations

from typing import Any

import structlog
from pymongo import ASCENDING, MongoClient, ReturnDocument
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, PyMongoError

from application.ports.repositories.customer_repository import CustomerRepository
from domain.aggregates.customer import Customer
from domain.exceptions import CustomerNotFoundError, DuplicateResourceError, InfrastructureError

logger = structlog.get_logger()

_COUNTERS_COLLECTION = "counters"


class MongoCustomerRepository(CustomerRepository):
    """Customer repository storing one document per customer.

    Integer ids are allocated from a ``counters`` document with an atomic
    ``$inc``, so ids stay compatible with the ``/customers/{id}`` routes.
    """

    def __init__(
        self,
        client: MongoClient,
        db_name: str,
        collection_name: str = "customers",
    ) -> None:
        self.client = client
        self.db: Database = client[db_name]
        self.customers: Collection = self.db[collection_name]
        self.counters: Collection = self.db[_COUNTERS_COLLECTION]
        self._counter_id = collection_name

    # ============================================================================
    # INDEX MANAGEMENT
    # ============================================================================

    def ensure_indexes(self) -> None:
        """Create the unique email index."""
        try:
            self.customers.create_index([("email", ASCENDING)], unique=True)
        except PyMongoError as e:
            msg = f"Failed to create customer indexes: {e!s}"
            raise InfrastructureError(msg) from e

    # ============================================================================
    # QUERIES
    # ============================================================================

    def list_all(self) -> list[Customer]:
        try:
            docs = self.customers.find({}).sort("_id", ASCENDING)
            return [self._to_entity(doc) for doc in docs]
        except PyMongoError as e:
            msg = f"Failed to list customers: {e!s}"
            raise InfrastructureError(msg) from e

    def get_by_id(self, customer_id: int) -> Customer:
        try:
            doc = self.customers.find_one({"_id": customer_id})
        except PyMongoError as e:
            msg = f"Failed to load customer {customer_id}: {e!s}"
            raise InfrastructureError(msg) from e
        if doc is None:
            raise CustomerNotFoundError(customer_id)
        return self._to_entity(doc)

    def exists_by_id(self, customer_id: int) -> bool:
        try:
            return self.customers.count_documents({"_id": customer_id}, limit=1) > 0
        except PyMongoError as e:
            msg = f"Failed to check customer {customer_id}: {e!s}"
            raise InfrastructureError(msg) from e

    def exists_by_email(self, email: str) -> bool:
        try:
            return self.customers.count_documents({"email": email}, limit=1) > 0
        except PyMongoError as e:
            msg = f"Failed to check customer email: {e!s}"
            raise InfrastructureError(msg) from e

    # ============================================================================
    # WRITES
    # ============================================================================

    def insert(self, customer: Customer) -> Customer:
        try:
            customer_id = customer.id if customer.id is not None else self._next_id()
            stored = customer.model_copy(update={"id": customer_id})
            self.customers.insert_one(self._to_document(stored))
        except DuplicateKeyError as e:
            msg = "email already taken"
            raise DuplicateResourceError(msg) from e
        except PyMongoError as e:
            msg = f"Failed to insert customer: {e!s}"
            raise InfrastructureError(msg) from e

        logger.debug("mongo_customer_inserted", customer_id=customer_id)
        return stored

    def update(self, customer: Customer) -> None:
        doc = self._to_document(customer)
        doc.pop("_id")
        try:
            result = self.customers.update_one({"_id": customer.id}, {"$set": doc})
        except DuplicateKeyError as e:
            msg = "email already taken"
            raise DuplicateResourceError(msg) from e
        except PyMongoError as e:
            msg = f"Failed to update customer {customer.id}: {e!s}"
            raise InfrastructureError(msg) from e
        if result.matched_count == 0:
            raise CustomerNotFoundError(customer.id)

    def delete_by_id(self, customer_id: int) -> None:
        try:
            self.customers.delete_one({"_id": customer_id})
        except PyMongoError as e:
            msg = f"Failed to delete customer {customer_id}: {e!s}"
            raise InfrastructureError(msg) from e

    def update_profile_image(
        self,
        customer_id: int,
        profile_image_id: str,
        content_type: str | None,
    ) -> None:
        try:
            result = self.customers.update_one(
                {"_id": customer_id},
                {
                    "$set": {
                        "profile_image_id": profile_image_id,
                        "profile_image_content_type": content_type,
                    },
                },
            )
        except PyMongoError as e:
            msg = f"Failed to update profile image of customer {customer_id}: {e!s}"
            raise InfrastructureError(msg) from e
        if result.matched_count == 0:
            raise CustomerNotFoundError(customer_id)

    # ============================================================================
    # HELPERS
    # ============================================================================

    def _next_id(self) -> int:
        counter = self.counters.find_one_and_update(
            {"_id": self._counter_id},
            {"$inc": {"seq": 1}},
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        return int(counter["seq"])

    @staticmethod
    def _to_document(customer: Customer) -> dict[str, Any]:
        doc = customer.model_dump(mode="json", exclude={"id"})
        doc["_id"] = customer.id
        return doc

    @staticmethod
    def _to_entity(doc: dict[str, Any]) -> Customer:
        fields = {k: v for k, v in doc.items() if k != "_id"}
        return Customer(id=doc["_id"], **fields)
