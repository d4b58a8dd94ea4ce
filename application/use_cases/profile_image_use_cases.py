from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from returns.result import Failure, Result, Success

from application.dtos.errors import AppError
from application.dtos.profile_image_dtos import (
    DEFAULT_PROFILE_IMAGE_CONTENT_TYPE,
    ProfileImage,
    ProfileImageUploadResponse,
)
from domain.exceptions import (
    BlobNotFoundError,
    CustomerNotFoundError,
    EmptyFileError,
    FileSizeExceededError,
    InvalidFileTypeError,
    ObjectStoreError,
    ReferenceUpdateError,
)
from domain.value_objects.profile_image_key import ProfileImageKey
from domain.value_objects.upload_outcome import UploadFailureReason

if TYPE_CHECKING:
    from application.ports.object_store import ObjectStore
    from application.ports.repositories.customer_repository import CustomerRepository
    from application.ports.upload_metrics import UploadMetrics, UploadTimer
    from domain.services.file_validator import FileValidator
    from domain.value_objects.file_candidate import FileCandidate

logger = structlog.get_logger()


class UploadProfileImageUseCase:
    """Validate an image, store it and point the customer's reference at it.

    Steps run in order and stop at the first failure:

    1. the customer must exist
    2. the file must pass the FileValidator (nothing is stored otherwise)
    3. a fresh blob key is minted
    4. the bytes are written to the object store
    5. the customer's profile image reference is updated

    A failure in step 5 leaves the blob from step 4 unreferenced in the store.
    It is logged as ``orphaned_profile_image`` and not cleaned up.
    """

    def __init__(
        self,
        customer_repository: CustomerRepository,
        object_store: ObjectStore,
        file_validator: FileValidator,
        metrics: UploadMetrics,
        bucket: str,
    ) -> None:
        self.customer_repository = customer_repository
        self.object_store = object_store
        self.file_validator = file_validator
        self.metrics = metrics
        self.bucket = bucket

    def execute(
        self,
        customer_id: int,
        candidate: FileCandidate,
    ) -> Result[ProfileImageUploadResponse, AppError]:
        log = logger.bind(
            operation="profile_image_upload",
            customer_id=customer_id,
            filename=candidate.filename,
            size_bytes=candidate.size,
            content_type=candidate.content_type,
        )

        with self.metrics.time_upload() as timer:
            log.info("profile_image_upload_started")
            try:
                return self._upload(customer_id, candidate, timer, log)
            except Exception as e:
                log.exception("profile_image_upload_unexpected_error", error=str(e))
                timer.fail(UploadFailureReason.UNEXPECTED)
                self.metrics.record_failure(f"general_error: {e!s}")
                return Failure(
                    AppError("infrastructure", "Unexpected error during profile image upload"),
                )

    def _upload(
        self,
        customer_id: int,
        candidate: FileCandidate,
        timer: UploadTimer,
        log: structlog.stdlib.BoundLogger,
    ) -> Result[ProfileImageUploadResponse, AppError]:
        # Step 1: target must exist
        if not self.customer_repository.exists_by_id(customer_id):
            log.warning("profile_image_upload_customer_not_found")
            timer.fail(UploadFailureReason.TARGET_NOT_FOUND)
            self.metrics.record_failure("customer_not_found")
            return Failure(AppError("not_found", str(CustomerNotFoundError(customer_id))))

        # Step 2: validate before any store write
        try:
            self.file_validator.validate(candidate)
        except (EmptyFileError, InvalidFileTypeError, FileSizeExceededError) as e:
            kind, category = _classify_validation_error(e)
            log.warning("profile_image_validation_failed", validation_error=str(e), kind=kind)
            timer.fail(UploadFailureReason.VALIDATION)
            self.metrics.record_validation_failure(kind, str(e))
            return Failure(AppError(category, str(e)))

        # Step 3: mint the blob key
        key = ProfileImageKey.mint(customer_id)
        log = log.bind(profile_image_id=key.blob_key, storage_key=key.storage_key)

        # Step 4: write through the object store
        try:
            self.object_store.put(
                self.bucket,
                key.storage_key,
                candidate.content,
                content_type=candidate.content_type,
            )
        except ObjectStoreError as e:
            log.error(
                "profile_image_store_failed",
                bucket=self.bucket,
                error=str(e),
                error_kind=e.kind,
                error_code=e.error_code,
                cause=repr(e.__cause__),
            )
            timer.fail(UploadFailureReason.STORE)
            self.metrics.record_store_failure("upload", str(e))
            self.metrics.record_failure(f"store_error: {e!s}")
            return Failure(AppError("storage_error", f"Failed to upload profile image: {e!s}"))

        # Step 5: update the reference; the blob is orphaned if this fails
        try:
            self._update_reference(customer_id, key, candidate.content_type)
        except ReferenceUpdateError as e:
            log.error("profile_image_reference_update_failed", error=str(e))
            log.warning("orphaned_profile_image", bucket=self.bucket)
            timer.fail(UploadFailureReason.REFERENCE_UPDATE)
            self.metrics.record_failure(f"reference_update_error: {e!s}")
            return Failure(AppError("reference_update_failed", str(e)))

        # Step 6: success
        timer.succeed()
        self.metrics.record_success(
            customer_id=customer_id,
            filename=candidate.filename,
            size_bytes=candidate.size,
            content_type=candidate.content_type,
        )
        log.info("profile_image_upload_completed")

        return Success(
            ProfileImageUploadResponse(
                customer_id=customer_id,
                profile_image_id=key.blob_key,
                storage_key=key.storage_key,
                size_bytes=candidate.size,
                content_type=candidate.content_type,
            ),
        )

    def _update_reference(
        self,
        customer_id: int,
        key: ProfileImageKey,
        content_type: str | None,
    ) -> None:
        try:
            self.customer_repository.update_profile_image(
                customer_id,
                key.blob_key,
                content_type.lower() if content_type else None,
            )
        except Exception as e:
            msg = f"Failed to update customer profile image reference: {e!s}"
            raise ReferenceUpdateError(msg) from e


def _classify_validation_error(error: Exception) -> tuple[str, str]:
    """Return the metric kind and AppError category for a validation error."""
    if isinstance(error, FileSizeExceededError):
        return "file_size", "payload_too_large"
    if isinstance(error, InvalidFileTypeError):
        return "file_type", "validation"
    return "empty_file", "validation"


class GetProfileImageUseCase:
    """Load a customer's current profile image from the object store."""

    def __init__(
        self,
        customer_repository: CustomerRepository,
        object_store: ObjectStore,
        bucket: str,
    ) -> None:
        self.customer_repository = customer_repository
        self.object_store = object_store
        self.bucket = bucket

    def execute(self, customer_id: int) -> Result[ProfileImage, AppError]:
        log = logger.bind(operation="profile_image_retrieval", customer_id=customer_id)

        try:
            customer = self.customer_repository.get_by_id(customer_id)
        except CustomerNotFoundError as e:
            log.warning("profile_image_customer_not_found")
            return Failure(AppError("not_found", str(e)))

        if not customer.has_profile_image:
            log.warning("profile_image_not_set")
            return Failure(
                AppError("not_found", f"customer with id [{customer_id}] profile image not found"),
            )

        key = ProfileImageKey(customer_id=customer_id, blob_key=customer.profile_image_id)
        log = log.bind(storage_key=key.storage_key)

        try:
            content = self.object_store.get(self.bucket, key.storage_key)
        except BlobNotFoundError as e:
            log.warning("profile_image_blob_missing", error=str(e))
            return Failure(
                AppError("not_found", f"customer with id [{customer_id}] profile image not found"),
            )
        except ObjectStoreError as e:
            log.error("profile_image_retrieval_failed", error=str(e), error_kind=e.kind)
            return Failure(AppError("storage_error", f"Failed to retrieve profile image: {e!s}"))

        log.info("profile_image_retrieved", size_bytes=len(content))
        return Success(
            ProfileImage(
                content=content,
                content_type=customer.profile_image_content_type
                or DEFAULT_PROFILE_IMAGE_CONTENT_TYPE,
            ),
        )
