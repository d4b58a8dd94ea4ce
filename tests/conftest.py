"""Shared test fixtures and configuration."""

from __future__ import annotations

import pytest

from domain.aggregates.customer import Customer
from domain.services.file_validator import FileValidator
from domain.value_objects.file_candidate import FileCandidate
from domain.value_objects.gender import Gender
from domain.value_objects.upload_rules import UploadRules
from tests.mocks import MockCustomerRepository, MockObjectStore, MockUploadMetrics, jpeg_bytes


@pytest.fixture
def upload_rules() -> UploadRules:
    """Default rules: jpeg/png/gif/webp up to 10 MB."""
    return UploadRules()


@pytest.fixture
def file_validator(upload_rules: UploadRules) -> FileValidator:
    return FileValidator(upload_rules)


@pytest.fixture
def sample_customer() -> Customer:
    return Customer.create(name="Ada Lovelace", email="ada@example.com", age=36, gender=Gender.FEMALE)


@pytest.fixture
def customer_repository(sample_customer: Customer) -> MockCustomerRepository:
    repository = MockCustomerRepository()
    repository.insert(sample_customer)
    return repository


@pytest.fixture
def object_store() -> MockObjectStore:
    return MockObjectStore()


@pytest.fixture
def upload_metrics() -> MockUploadMetrics:
    return MockUploadMetrics()


@pytest.fixture
def jpeg_candidate() -> FileCandidate:
    return FileCandidate(content=jpeg_bytes(1024), content_type="image/jpeg", filename="avatar.jpg")
