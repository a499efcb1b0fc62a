"""
VetClinic Backend — Application Configuration
===============================================

What:  Centralized configuration management using Pydantic Settings.
Why:   Type-safe environment variable loading with validation on startup.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by every module that needs configuration values.
When:  Loaded once at module import time; validated before app starts.
"""

from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

DEFAULT_JWT_SECRET = "change-me-in-production"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have sensible defaults for development.
    Production deployments MUST override JWT_SECRET and MONGODB_URI.
    """

    # ── Document Store ────────────────────────────────────────────────────
    # mongo:  pymongo AsyncMongoClient against MONGODB_URI
    # memory: process-local store (tests, demos); data is lost on restart
    database_backend: str = Field(default="mongo")
    mongodb_uri: str = Field(
        default="mongodb://localhost:27017",
        description="MongoDB connection string",
    )
    mongodb_database: str = Field(default="veterinaria")
    mongodb_timeout_ms: int = Field(default=5000, ge=100, le=60000)

    @field_validator("database_backend")
    @classmethod
    def validate_database_backend(cls, v: str) -> str:
        backend = v.lower()
        if backend not in {"mongo", "memory"}:
            raise ValueError(f"Invalid database_backend '{v}'. Must be 'mongo' or 'memory'")
        return backend

    # ── Credentials ───────────────────────────────────────────────────────
    jwt_secret: str = Field(default=DEFAULT_JWT_SECRET)
    jwt_algorithm: str = Field(default="HS256")
    jwt_expire_hours: int = Field(default=24, ge=1, le=720)

    # bcrypt work factor; 4 is the library minimum
    bcrypt_rounds: int = Field(default=10, ge=4, le=16)

    # ── Patient ownership ─────────────────────────────────────────────────
    # When true, a new patient's owner is taken from the body field `id`
    # instead of the authenticated veterinarian. Only for old clients.
    legacy_owner_from_body: bool = Field(default=False)

    # ── CORS ──────────────────────────────────────────────────────────────
    # Comma-separated origins; "*" allows every origin
    cors_origins: str = Field(default="*")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── Server ────────────────────────────────────────────────────────────
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3000, ge=1, le=65535)

    # Advertised in the OpenAPI `servers` list when set
    public_url: Optional[str] = Field(default=None)

    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    # ── Retry Configuration ───────────────────────────────────────────────
    # Tenacity settings for the startup ping against MongoDB
    retry_max_attempts: int = Field(default=3, ge=1, le=10)
    retry_min_wait: int = Field(default=1, ge=0, le=30)
    retry_max_wait: int = Field(default=10, ge=1, le=120)

    # ── Rate Limiting ─────────────────────────────────────────────────────
    rate_limit_requests: int = Field(default=1000, ge=10, le=100000)
    rate_limit_window: int = Field(default=3600, ge=1, le=86400)  # seconds

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }

    def validate_required_for_production(self) -> None:
        """
        Validates that critical settings are configured.

        Raises ValueError listing every problem found.
        """
        errors = []
        if not self.jwt_secret or self.jwt_secret == DEFAULT_JWT_SECRET:
            errors.append("JWT_SECRET is not set; tokens are signed with the development default.")
        if self.legacy_owner_from_body:
            errors.append(
                "LEGACY_OWNER_FROM_BODY is enabled; any veterinarian can register "
                "patients for another veterinarian."
            )
        if errors:
            raise ValueError(
                "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
            )


settings = Settings()
