from pathlib import Path
from typing import Annotated, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from domain.value_objects.upload_rules import DEFAULT_ALLOWED_IMAGE_TYPES, UploadRules, parse_size


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # make it absolute so reload/CWD doesn't break it
        env_file=Path(__file__).resolve().parents[1] / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="CustomerProfiles", validation_alias="APP_NAME")
    app_env: Literal["development", "staging", "production"] = Field(
        default="development",
        validation_alias="APP_ENV",
    )
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_dir: Path = Field(
        default=Path(__file__).resolve().parents[1] / "logs",
        validation_alias="LOG_DIR",
    )

    # API
    api_host: str = Field(default="127.0.0.1", validation_alias="API_HOST")
    api_port: int = Field(default=8080, validation_alias="API_PORT")
    cors_allowed_origins: Annotated[list[str], NoDecode] = Field(
        default=["http://localhost:3000", "http://localhost:4200", "http://localhost:5173"],
        validation_alias="CORS_ALLOWED_ORIGINS",
    )

    # Upload rules
    upload_max_size: str = Field(default="10MB", validation_alias="UPLOAD_MAX_SIZE")
    upload_max_request_size: str = Field(
        default="11MB",
        validation_alias="UPLOAD_MAX_REQUEST_SIZE",
        description="Whole multipart request limit, enforced before the body is parsed.",
    )
    upload_allowed_types: Annotated[list[str], NoDecode] = Field(
        default=list(DEFAULT_ALLOWED_IMAGE_TYPES),
        validation_alias="UPLOAD_ALLOWED_TYPES",
    )

    # Object storage
    storage_backend: Literal["s3", "filesystem"] = Field(
        default="filesystem",
        validation_alias="STORAGE_BACKEND",
    )
    s3_bucket_customer: str = Field(default="customer-profiles", validation_alias="S3_BUCKET_CUSTOMER")
    s3_region: str = Field(default="eu-west-1", validation_alias="S3_REGION")
    s3_endpoint_url: str | None = Field(
        default=None,
        validation_alias="S3_ENDPOINT_URL",
        description="Custom endpoint for S3-compatible services (MinIO, LocalStack).",
    )
    filesystem_storage_url: str = Field(
        default="file://" + str(Path.home() / ".customer-profiles" / "s3"),
        validation_alias="FILESYSTEM_STORAGE_URL",
    )

    # Customer datastore
    customer_repository: Literal["memory", "mongo"] = Field(
        default="memory",
        validation_alias="CUSTOMER_REPOSITORY",
    )
    mongo_uri: str = Field(default="mongodb://localhost:27017", validation_alias="MONGO_URI")
    mongo_db: str = Field(default="customer_profiles", validation_alias="MONGO_DB")
    mongo_customers_collection: str = Field(
        default="customers",
        validation_alias="MONGO_CUSTOMERS_COLLECTION",
    )

    @field_validator("upload_allowed_types", "cors_allowed_origins", mode="before")
    @classmethod
    def split_comma_separated(cls, v: object) -> object:
        if isinstance(v, str):
            return [item.strip() for item in v.split(",") if item.strip()]
        return v

    @field_validator("upload_max_size", "upload_max_request_size")
    @classmethod
    def validate_size(cls, v: str) -> str:
        parse_size(v)
        return v

    @property
    def upload_max_request_size_bytes(self) -> int:
        return parse_size(self.upload_max_request_size)

    def upload_rules(self) -> UploadRules:
        """Build the immutable rule-set shared by validator and client agent."""
        return UploadRules.from_strings(self.upload_allowed_types, self.upload_max_size)


# Global settings instance
settings = Settings()
