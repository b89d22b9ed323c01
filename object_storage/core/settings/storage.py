"""S3-compatible object storage configuration settings.

Environment variables use STORAGE_ prefix.
Example: STORAGE_BUCKET="uploads"
         STORAGE_REGION="eu-west-1"
         STORAGE_PUBLIC_ENDPOINT="https://cdn.example.com"

Supports:
- AWS S3 (default, no endpoint needed)
- Scaleway Object Storage (endpoint derived from the region)
- MinIO (set endpoint to MinIO server URL)
- Any S3-compatible storage
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import (
    Field,
    SecretStr,
    computed_field,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

from .yaml_sources import create_storage_yaml_source

# The region whose virtual-hosted hostname carries no region segment.
DEFAULT_REGION = "us-east-1"


class StorageDriver(StrEnum):
    """Identifiers of the S3-compatible services the adapter can drive."""

    S3 = "s3"
    SCALEWAY = "scaleway"
    MINIO = "minio"


class StorageSettings(BaseSettings):
    """S3-compatible object storage settings.

    Environment variables use STORAGE_ prefix.
    Example: STORAGE_DRIVER=minio

    The bucket is the only identity the adapter cannot work without; the
    adapter refuses to start when it is missing instead of failing on the
    first request.
    """

    # ──────────────────────────────────────────────────────────────
    # Service identity
    # ──────────────────────────────────────────────────────────────

    driver: StorageDriver = Field(
        default=StorageDriver.S3,
        description="S3-compatible service flavour (s3, scaleway, minio)",
    )

    region: str = Field(
        default=DEFAULT_REGION,
        min_length=1,
        description="Region identifier (used for public URLs and request signing)",
    )

    bucket: str | None = Field(
        default=None,
        description="Bucket holding all objects. Required before the adapter is built.",
    )

    public_endpoint: str | None = Field(
        default=None,
        description="Public URL base for resolved keys (CDN, custom domain). Overrides the derived hostname.",
    )

    endpoint: str | None = Field(
        default=None,
        description="S3 API endpoint URL (for MinIO/Scaleway/LocalStack). None for AWS S3.",
    )

    acl: str = Field(
        default="public-read",
        description="Canned ACL applied to uploads, directory markers and copies",
    )

    # ──────────────────────────────────────────────────────────────
    # Credentials
    # ──────────────────────────────────────────────────────────────

    access_key: SecretStr | None = Field(
        default=None,
        description="S3 access key ID",
    )

    secret_key: SecretStr | None = Field(
        default=None,
        description="S3 secret access key",
    )

    # ──────────────────────────────────────────────────────────────
    # Transport
    # ──────────────────────────────────────────────────────────────

    use_ssl: bool = Field(
        default=True,
        description="Use SSL/TLS for S3 connections (set False for local MinIO without TLS)",
    )

    verify_ssl: bool = Field(
        default=True,
        description="Verify SSL certificates (set False for self-signed certs in local MinIO)",
    )

    addressing_style: str = Field(
        default="auto",
        description="botocore S3 addressing style: auto, virtual or path",
    )

    max_retries: int = Field(
        default=3,
        ge=0,
        le=10,
        description="Maximum number of retry attempts for failed S3 operations",
    )

    retry_mode: str = Field(
        default="standard",
        description="boto3 retry mode: standard, adaptive, or legacy",
    )

    timeout: int = Field(
        default=30,
        ge=1,
        le=300,
        description="S3 connect/read timeout in seconds",
    )

    max_pool_connections: int = Field(
        default=10,
        ge=1,
        le=200,
        description="Maximum number of connections in the connection pool",
    )

    # ──────────────────────────────────────────────────────────────
    # Listing
    # ──────────────────────────────────────────────────────────────

    list_page_size: int = Field(
        default=1000,
        ge=1,
        le=1000,
        description="MaxKeys requested per list_objects_v2 page",
    )

    dedupe_listing: bool = Field(
        default=False,
        description="Collapse repeated child names in list() results",
    )

    # ──────────────────────────────────────────────────────────────
    # Validators
    # ──────────────────────────────────────────────────────────────

    @field_validator("bucket", "public_endpoint", "endpoint", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        """Treat blank strings as unset."""
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("endpoint")
    @classmethod
    def _strip_trailing_slash(cls, value: str | None) -> str | None:
        """Drop trailing slashes from the API endpoint.

        public_endpoint is left verbatim; resolved URLs are always
        ``public_endpoint + "/" + key``.
        """
        if value is None:
            return None
        return value.rstrip("/")

    @field_validator("retry_mode")
    @classmethod
    def _validate_retry_mode(cls, value: str) -> str:
        """Validate retry_mode is one of the allowed values."""
        allowed_modes = {"standard", "adaptive", "legacy"}
        if value not in allowed_modes:
            raise ValueError(f"retry_mode must be one of {allowed_modes}, got {value}")
        return value

    @field_validator("addressing_style")
    @classmethod
    def _validate_addressing_style(cls, value: str) -> str:
        """Validate addressing_style is understood by botocore."""
        allowed_styles = {"auto", "virtual", "path"}
        if value not in allowed_styles:
            raise ValueError(f"addressing_style must be one of {allowed_styles}, got {value}")
        return value

    @model_validator(mode="after")
    def _validate_credential_consistency(self) -> StorageSettings:
        """Validate that both credentials are provided together or neither.

        Both must be provided for static credentials, or neither for the
        default boto credential chain (IAM role, profile, env).
        """
        has_access_key = self.access_key is not None
        has_secret_key = self.secret_key is not None

        if has_access_key != has_secret_key:
            raise ValueError(
                "Both access_key and secret_key must be provided together when using "
                "static credentials. Provide both or neither."
            )

        return self

    @model_validator(mode="after")
    def _validate_driver_endpoint(self) -> StorageSettings:
        """MinIO has no well-known hostname, so it needs an explicit endpoint."""
        if self.driver is StorageDriver.MINIO and self.endpoint is None:
            raise ValueError("The minio driver requires STORAGE_ENDPOINT to be set.")
        return self

    # ──────────────────────────────────────────────────────────────
    # Computed Properties
    # ──────────────────────────────────────────────────────────────

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_configured(self) -> bool:
        """Check if a bucket has been provided."""
        return bool(self.bucket)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_default_region(self) -> bool:
        """Check if the region is the one without a region hostname segment."""
        return self.region == DEFAULT_REGION

    @computed_field  # type: ignore[prop-decorator]
    @property
    def api_endpoint(self) -> str | None:
        """Endpoint URL the client talks to, derived per driver when unset."""
        if self.endpoint:
            return self.endpoint
        if self.driver is StorageDriver.SCALEWAY:
            return f"https://s3.{self.region}.scw.cloud"
        return None

    # ──────────────────────────────────────────────────────────────
    # Helper Methods
    # ──────────────────────────────────────────────────────────────

    def get_boto3_config(self) -> dict[str, Any]:
        """Get keyword arguments for creating an aioboto3 S3 client.

        Returns:
            Dictionary with region, SSL settings, credentials (if provided)
            and endpoint (if any). Retry/timeout tuning lives in the botocore
            Config built by the client manager.
        """
        config: dict[str, Any] = {
            "region_name": self.region,
            "use_ssl": self.use_ssl,
            "verify": self.verify_ssl,
        }

        # Without static credentials boto3 falls back to its default chain
        if self.access_key is not None and self.secret_key is not None:
            config["aws_access_key_id"] = self.access_key.get_secret_value()
            config["aws_secret_access_key"] = self.secret_key.get_secret_value()

        if self.api_endpoint:
            config["endpoint_url"] = self.api_endpoint

        return config

    # ──────────────────────────────────────────────────────────────
    # Model Configuration
    # ──────────────────────────────────────────────────────────────

    model_config = SettingsConfigDict(
        env_prefix="STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        populate_by_name=True,
        extra="ignore",
        env_ignore_empty=True,
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: Any,
        env_settings: Any,
        dotenv_settings: Any,
        file_secret_settings: Any,
    ) -> tuple[Any, ...]:
        """Customize settings source precedence: init > yaml > env > dotenv > secrets."""
        return (
            init_settings,
            create_storage_yaml_source(settings_cls),
            env_settings,
            dotenv_settings,
            file_secret_settings,
        )
