"""
app/core/config.py

Purpose: Application configuration

- Loads environment variables
- Centralizes config values (Vonage credentials, hook secret, brand)
- Validates configuration on startup
- Environment-specific settings
"""

from pathlib import Path

from pydantic import Field, validator
from pydantic_settings import BaseSettings
from typing import Optional, Literal


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Validates all required configs on startup.
    """

    # Environment
    ENVIRONMENT: Literal["development", "staging", "production"] = "development"

    # Okta inline hook authentication
    AUTH_HEADER_KEY: str = Field(
        default="Authorization",
        description="Header Okta uses to carry the inline hook secret"
    )
    AUTH_HEADER_VALUE: Optional[str] = Field(
        default=None,
        description="Expected value of the inline hook auth header"
    )

    # Vonage Verify v2 (application JWT auth)
    VONAGE_APPLICATION_ID: Optional[str] = Field(
        default=None,
        description="Vonage application ID used as the JWT application_id claim"
    )
    VONAGE_PRIVATE_KEY: Optional[str] = Field(
        default=None,
        description="PEM private key of the Vonage application"
    )
    VONAGE_PRIVATE_KEY_PATH: Optional[str] = Field(
        default=None,
        description="Path to the PEM private key (used when VONAGE_PRIVATE_KEY is unset)"
    )
    VONAGE_API_URL: str = Field(
        default="https://api.nexmo.com",
        description="Vonage API base URL"
    )
    VONAGE_TIMEOUT: float = Field(
        default=10.0,
        description="Vonage request timeout in seconds"
    )
    VONAGE_JWT_TTL_SECONDS: int = Field(
        default=900,
        description="Lifetime of each minted application JWT"
    )

    # Verification
    VERIFY_BRAND: str = Field(
        default="Paramount",
        description="Brand name shown to the user in the OTP message"
    )
    VERIFY_SERIALIZE_PER_DESTINATION: bool = Field(
        default=False,
        description="Serialize cancel/create per phone number with an in-process lock"
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
    PORT: int = Field(
        default=3000,
        description="Port used when running the app directly"
    )

    @validator("VONAGE_PRIVATE_KEY")
    def unescape_private_key(cls, v):
        """Accept keys pasted into .env with literal \\n sequences."""
        if v and "\\n" in v:
            return v.replace("\\n", "\n")
        return v

    @validator("VERIFY_BRAND")
    def validate_brand(cls, v):
        """Vonage rejects requests without a brand."""
        if not v or not v.strip():
            raise ValueError("VERIFY_BRAND must not be empty")
        return v.strip()

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"

    def load_private_key(self) -> Optional[str]:
        """Return the application private key, reading it from disk if needed."""
        if self.VONAGE_PRIVATE_KEY:
            return self.VONAGE_PRIVATE_KEY
        if self.VONAGE_PRIVATE_KEY_PATH:
            return Path(self.VONAGE_PRIVATE_KEY_PATH).read_text(encoding="utf-8")
        return None

    class Config:
        env_file = ".env"
        case_sensitive = True
        env_file_encoding = "utf-8"


# Global settings instance
settings = Settings()


def validate_settings(config: Optional[Settings] = None):
    """
    Validates critical settings on application startup.
    Raises ValueError if any required setting is missing or invalid.
    """
    config = config or settings
    errors = []

    if not config.VONAGE_APPLICATION_ID:
        errors.append("VONAGE_APPLICATION_ID is required")

    if not config.VONAGE_PRIVATE_KEY and not config.VONAGE_PRIVATE_KEY_PATH:
        errors.append("VONAGE_PRIVATE_KEY or VONAGE_PRIVATE_KEY_PATH is required")
    elif config.VONAGE_PRIVATE_KEY_PATH and not config.VONAGE_PRIVATE_KEY:
        if not Path(config.VONAGE_PRIVATE_KEY_PATH).is_file():
            errors.append(f"VONAGE_PRIVATE_KEY_PATH not found: {config.VONAGE_PRIVATE_KEY_PATH}")

    # Production-specific validations
    if config.is_production and not config.AUTH_HEADER_VALUE:
        errors.append("AUTH_HEADER_VALUE is required in production")

    if errors:
        raise ValueError(f"Configuration validation failed: {', '.join(errors)}")

    return True
