"""
Centralized Configuration Management using Pydantic Settings.

Process-wide settings (cookie secret, CORS allowlist, tenant labels, provider
endpoints) are loaded once from the environment and an optional .env file.
Per-tenant credentials are read separately by the tenant registry.
"""

from functools import lru_cache
from typing import List, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _split_csv(raw: str) -> List[str]:
    return [item.strip() for item in (raw or "").split(",") if item.strip()]


class TenantSettings(BaseSettings):
    """Known tenant labels."""

    model_config = SettingsConfigDict(
        env_file=".env", extra="ignore", populate_by_name=True
    )

    app_labels: str = Field(default="", alias="APP_LABELS")

    @property
    def labels(self) -> List[str]:
        return _split_csv(self.app_labels)


class CookieSettings(BaseSettings):
    """Cookie encryption and attribute settings."""

    model_config = SettingsConfigDict(
        env_prefix="COOKIE_", env_file=".env", extra="ignore"
    )

    secret: str = ""
    samesite: Literal["lax", "strict", "none"] = "none"
    secure: bool = True

    @field_validator("samesite", mode="before")
    @classmethod
    def normalize_samesite(cls, v):
        return v.lower() if isinstance(v, str) else v


class CORSSettings(BaseSettings):
    """Origins allowed to read /auth/token from a browser."""

    model_config = SettingsConfigDict(
        env_file=".env", extra="ignore", populate_by_name=True
    )

    allowed_origin: str = Field(default="", alias="ALLOWED_ORIGIN")

    @property
    def allowed_origins(self) -> List[str]:
        return _split_csv(self.allowed_origin)


class ProviderSettings(BaseSettings):
    """Provider authorize/token endpoint settings."""

    model_config = SettingsConfigDict(
        env_prefix="PROVIDER_", env_file=".env", extra="ignore"
    )

    # Formatted with the tenant region.
    base_url: str = "https://{region}-app.contentstack.com"
    timeout_seconds: float = Field(default=10.0, gt=0, le=120)


class AppSettings(BaseSettings):
    """
    Main application settings aggregating all configuration.

    Usage:
        settings = get_settings()
        print(settings.cookies.samesite)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Application metadata
    app_name: str = "OAuth Relay"
    app_version: str = "1.0.0"
    debug: bool = False
    environment: str = Field(default="development", alias="APP_ENV")
    log_level: str = "INFO"

    success_path: str = Field(default="/auth/success", alias="AUTH_SUCCESS_PATH")

    # Nested settings
    tenants: TenantSettings = Field(default_factory=TenantSettings)
    cookies: CookieSettings = Field(default_factory=CookieSettings)
    cors: CORSSettings = Field(default_factory=CORSSettings)
    provider: ProviderSettings = Field(default_factory=ProviderSettings)

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


@lru_cache
def get_settings() -> AppSettings:
    """
    Cached settings factory.

    The @lru_cache ensures settings are loaded only once.
    For testing, use dependency injection override.
    """
    return AppSettings()
