"""Environment-driven invoker settings via pydantic-settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class InvokerSettings(BaseSettings):
    """Invoker settings read from ``JSONAPI_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="JSONAPI_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Resource scanning; comma-separated package names are accepted
    resource_search_package: str | None = None
    resource_default_domain: str | None = None

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> InvokerSettings:
    return InvokerSettings()
