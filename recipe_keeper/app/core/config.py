import logging
from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    store_root: Path = Field(Path("data"), alias="RECIPE_STORE_ROOT")
    store_key: str = Field("recipes", alias="RECIPE_STORE_KEY")
    scraper_user_agent: str = Field(
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 13_6) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/124.0 Safari/537.36",
        alias="SCRAPER_USER_AGENT",
    )
    scraper_cookies: str | None = Field(None, alias="SCRAPER_COOKIES")
    fetch_timeout_seconds: float = Field(15.0, alias="FETCH_TIMEOUT_SECONDS")
    # Optional rendering backend for pages that need JavaScript (short-video sites)
    firecrawl_api_key: str | None = Field(None, alias="FIRECRAWL_API_KEY")
    firecrawl_base_url: str = Field("https://api.firecrawl.dev", alias="FIRECRAWL_BASE_URL")
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
    settings.store_root.mkdir(parents=True, exist_ok=True)
    return settings
