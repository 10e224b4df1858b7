import logging
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    user_agent: str = Field(
        "Mozilla/5.0 (compatible; RecipeImporter/1.0; +https://jumptorecipe.com)",
        alias="IMPORTER_USER_AGENT",
    )
    fetch_timeout_seconds: float = Field(10.0, alias="IMPORTER_FETCH_TIMEOUT_SECONDS")
    connect_timeout_seconds: float = Field(5.0, alias="IMPORTER_CONNECT_TIMEOUT_SECONDS")
    allow_private_hosts: bool = Field(False, alias="IMPORTER_ALLOW_PRIVATE_HOSTS")
    # Durations longer than this are rejected as parse errors, not clamped.
    max_duration_minutes: int = Field(24 * 60, alias="IMPORTER_MAX_DURATION_MINUTES")
    heuristic_max_items: int = Field(30, alias="IMPORTER_HEURISTIC_MAX_ITEMS")
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")


logger = logging.getLogger(__name__)


@lru_cache
def get_settings() -> Settings:
    try:
        settings = Settings()
    except PermissionError:
        logger.warning("Unable to read .env; continuing with environment variables only")
        settings = Settings(_env_file=None)
    return settings
