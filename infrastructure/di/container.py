from __future__ import annotations

import structlog
from lagom import Container
from pymongo import MongoClient

from application.ports.object_store import ObjectStore
from application.ports.repositories.customer_repository import CustomerRepository
from application.ports.upload_metrics import UploadMetrics
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
from domain.services.file_validator import FileValidator
from domain.value_objects.upload_rules import UploadRules
from infrastructure.config import Settings, settings
from infrastructure.metrics.upload_metrics_recorder import UploadMetricsRecorder
from infrastructure.object_stores.filesystem_object_store import FilesystemObjectStore
from infrastructure.object_stores.s3_object_store import S3ObjectStore
from infrastructure.repositories.in_memory_customer_repository import InMemoryCustomerRepository
from infrastructure.repositories.mongo_customer_repository import MongoCustomerRepository

logger = structlog.get_logger()


def create_object_store(config: Settings) -> ObjectStore:
    """Select the storage backend from configuration."""
    if config.storage_backend == "s3":
        logger.info("object_store_selected", backend="s3", region=config.s3_region)
        return S3ObjectStore(region_name=config.s3_region, endpoint_url=config.s3_endpoint_url)

    logger.info("object_store_selected", backend="filesystem", url=config.filesystem_storage_url)
    return FilesystemObjectStore(base_url=config.filesystem_storage_url)


def create_customer_repository(config: Settings) -> CustomerRepository:
    """Select the customer datastore adapter from configuration."""
    if config.customer_repository == "mongo":
        repository = MongoCustomerRepository(
            client=MongoClient(config.mongo_uri, tz_aware=True),
            db_name=config.mongo_db,
            collection_name=config.mongo_customers_collection,
        )
        repository.ensure_indexes()
        return repository

    return InMemoryCustomerRepository()


def create_container(config: Settings | None = None) -> Container:
    config = config or settings
    container = Container()

    # Configuration, loaded once and immutable afterwards
    container[Settings] = config
    upload_rules = config.upload_rules()
    container[UploadRules] = upload_rules
    container[FileValidator] = FileValidator(upload_rules)

    # Infrastructure singletons
    container[ObjectStore] = create_object_store(config)
    container[CustomerRepository] = create_customer_repository(config)

    metrics = UploadMetricsRecorder()
    container[UploadMetricsRecorder] = metrics
    container[UploadMetrics] = metrics

    # Customer Use Cases
    container[ListCustomersUseCase] = lambda c: ListCustomersUseCase(
        customer_repository=c[CustomerRepository],
    )
    container[GetCustomerUseCase] = lambda c: GetCustomerUseCase(
        customer_repository=c[CustomerRepository],
    )
    container[RegisterCustomerUseCase] = lambda c: RegisterCustomerUseCase(
        customer_repository=c[CustomerRepository],
    )
    container[UpdateCustomerUseCase] = lambda c: UpdateCustomerUseCase(
        customer_repository=c[CustomerRepository],
    )
    container[DeleteCustomerUseCase] = lambda c: DeleteCustomerUseCase(
        customer_repository=c[CustomerRepository],
    )

    # Profile Image Use Cases
    container[UploadProfileImageUseCase] = lambda c: UploadProfileImageUseCase(
        customer_repository=c[CustomerRepository],
        object_store=c[ObjectStore],
        file_validator=c[FileValidator],
        metrics=c[UploadMetrics],
        bucket=config.s3_bucket_customer,
    )
    container[GetProfileImageUseCase] = lambda c: GetProfileImageUseCase(
        customer_repository=c[CustomerRepository],
        object_store=c[ObjectStore],
        bucket=config.s3_bucket_customer,
    )

    return container
