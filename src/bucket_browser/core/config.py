"""Configuration management for bucket-browser."""

from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings with environment variable support.

    Every field reads ``BUCKET_BROWSER_<FIELD>``; store and credential fields
    also accept the conventional AWS / S3 variable names.
    """

    bucket: Optional[str] = Field(
        None, validation_alias=AliasChoices("BUCKET_BROWSER_BUCKET", "S3_BUCKET")
    )
    region_name: str = Field(
        "us-east-1",
        validation_alias=AliasChoices(
            "BUCKET_BROWSER_REGION_NAME", "S3_REGION", "AWS_REGION"
        ),
    )
    endpoint_url: Optional[str] = None

    # Credential sources, highest priority first
    role_arn: Optional[str] = Field(
        None, validation_alias=AliasChoices("BUCKET_BROWSER_ROLE_ARN", "AWS_ROLE_ARN")
    )
    web_identity_token_file: Optional[str] = Field(
        None,
        validation_alias=AliasChoices(
            "BUCKET_BROWSER_WEB_IDENTITY_TOKEN_FILE", "AWS_WEB_IDENTITY_TOKEN_FILE"
        ),
    )
    role_session_name: str = "bucket-browser"
    access_key_id: Optional[str] = Field(
        None,
        validation_alias=AliasChoices(
            "BUCKET_BROWSER_ACCESS_KEY_ID", "AWS_ACCESS_KEY_ID"
        ),
    )
    secret_access_key: Optional[str] = Field(
        None,
        validation_alias=AliasChoices(
            "BUCKET_BROWSER_SECRET_ACCESS_KEY", "AWS_SECRET_ACCESS_KEY"
        ),
    )
    session_token: Optional[str] = Field(
        None,
        validation_alias=AliasChoices(
            "BUCKET_BROWSER_SESSION_TOKEN", "AWS_SESSION_TOKEN"
        ),
    )
    metadata_timeout: float = 1.0
    credential_refresh_margin: int = 300

    # Listing and enrichment
    page_size: int = Field(1000, ge=1, le=1000)
    enrich_concurrency: Optional[int] = Field(32, ge=1)
    enrich_timeout: Optional[float] = Field(10.0, gt=0)
    signed_url_ttl: int = Field(3600, ge=1, le=604800)

    log_level: str = "INFO"
    otel_enabled: bool = False
    otel_service_name: str = "bucket-browser"

    model_config = {
        "env_prefix": "BUCKET_BROWSER_",
        "case_sensitive": False,
        "populate_by_name": True,
    }


settings = Settings()
