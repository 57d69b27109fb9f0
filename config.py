"""Application configuration using pydantic-settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Environment
    ENV: str = "dev"

    # API Configuration
    API_PREFIX: str = "/api"
    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://localhost:3001",
        "http://127.0.0.1:3000",
        "http://127.0.0.1:3001",
    ]

    # Signing key for public form tokens ("base64:..." or raw string)
    APP_KEY: str = "dev-secret"

    # Public form tokens
    PUBLIC_FORM_DEFAULT: str = "generic"
    PUBLIC_FORM_DEFAULT_TTL: int = 30

    # Tenancy: request host -> tenant id
    TENANT_DOMAINS: dict[str, str] = {}
    # Tenant id -> slug, echoed in X-Tenant-Slug
    TENANT_SLUGS: dict[str, str] = {}
    TRUST_TENANT_HEADER: bool = False

    # Logging
    LOG_LEVEL: str = "INFO"

    # Application Environment
    APP_ENV: str = "dev"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


# Global settings instance
settings = Settings()

# Validate production signing key
if settings.APP_ENV == "production" and settings.APP_KEY == "dev-secret":
    raise ValueError(
        "APP_KEY must be changed from default 'dev-secret' in production environment"
    )
