"""
app/core/config.py

Purpose: Application configuration

- Loads environment variables
- Centralizes config values (DB URI, bucket, signing secret, etc.)
- Validates configuration on startup
- Environment-specific settings
"""

from pydantic import Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings
from typing import Optional, Literal


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Validates all required configs on startup.
    """

    # Environment
    ENVIRONMENT: Literal["development", "staging", "production"] = "development"

    # Server
    PORT: int = Field(
        default=6001,
        description="HTTP listen port"
    )

    # MongoDB
    MONGODB_URL: str = Field(
        default="mongodb://localhost:27017",
        description="MongoDB connection URI"
    )
    MONGODB_DB_NAME: str = Field(
        default="sociopedia",
        description="MongoDB database name"
    )

    # S3 object storage
    AWS_ACCESS_KEY_ID: Optional[str] = Field(
        default=None,
        description="AWS access key for the image bucket"
    )
    AWS_SECRET_ACCESS_KEY: Optional[str] = Field(
        default=None,
        description="AWS secret key for the image bucket"
    )
    AWS_REGION: str = Field(
        default="us-east-1",
        description="Region of the image bucket"
    )
    AWS_BUCKET_NAME: Optional[str] = Field(
        default=None,
        description="Bucket receiving uploaded pictures"
    )
    S3_ENDPOINT_URL: Optional[str] = Field(
        default=None,
        description="Custom S3 endpoint (MinIO, localstack)"
    )
    S3_PUBLIC_BASE_URL: Optional[str] = Field(
        default=None,
        description="Base URL for public object links; defaults to the bucket's virtual-hosted URL"
    )
    MAX_UPLOAD_BYTES: int = Field(
        default=30 * 1024 * 1024,
        description="Largest accepted picture upload"
    )

    # Auth
    JWT_SECRET: str = Field(
        default="change-me-in-production",
        description="Secret used to sign access tokens"
    )
    JWT_EXPIRES_MINUTES: int = Field(
        default=60 * 24,
        description="Access token validity window in minutes"
    )
    PASSWORD_HASH_ROUNDS: int = Field(
        default=29000,
        description="pbkdf2_sha256 work factor"
    )

    # Application
    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    CORS_ORIGINS: list = Field(
        default=["*"],
        description="Allowed CORS origins"
    )
    ASSETS_DIR: str = Field(
        default="public/assets",
        description="Directory served under /assets"
    )

    @field_validator("JWT_SECRET")
    @classmethod
    def validate_jwt_secret(cls, v: str, info: ValidationInfo) -> str:
        """Ensure signing secret is changed in production."""
        if info.data.get("ENVIRONMENT") == "production" and v == "change-me-in-production":
            raise ValueError("JWT_SECRET must be changed in production environment")
        return v

    @field_validator("PASSWORD_HASH_ROUNDS")
    @classmethod
    def validate_hash_rounds(cls, v: int) -> int:
        if v < 1000:
            raise ValueError("PASSWORD_HASH_ROUNDS must be at least 1000")
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"

    class Config:
        env_file = ".env"
        case_sensitive = True
        env_file_encoding = "utf-8"
        extra = "ignore"


# Global settings instance
settings = Settings()


def validate_settings(config: Optional[Settings] = None):
    """
    Validates critical settings on application startup.
    Raises ValueError if any required setting is missing or invalid.
    """
    config = config or settings
    errors = []

    if not config.MONGODB_URL:
        errors.append("MONGODB_URL is required")

    if not config.JWT_SECRET:
        errors.append("JWT_SECRET is required")

    # Production-specific validations
    if config.is_production:
        if not config.AWS_BUCKET_NAME:
            errors.append("AWS_BUCKET_NAME is required in production")
        if "*" in config.CORS_ORIGINS:
            errors.append("CORS_ORIGINS must be explicit in production")

    if errors:
        raise ValueError(f"Configuration validation failed: {', '.join(errors)}")

    return True
