import logging
from functools import lru_cache
from typing import Dict, List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from recipe_harvester.app.services.url_parsing.constants import (
    DEFAULT_PROXY_ROUTES,
    DEFAULT_SITE_SELECTORS,
    DEFAULT_SUPPORTED_SITES,
    DEFAULT_USER_AGENT,
)
from recipe_harvester.app.services.url_parsing.models import SiteSelectors


class Settings(BaseSettings):
    proxy_routes: List[str] = Field(
        default_factory=lambda: list(DEFAULT_PROXY_ROUTES), alias="RECIPE_PROXY_ROUTES"
    )
    fetch_timeout_seconds: float = Field(30.0, alias="RECIPE_FETCH_TIMEOUT_SECONDS")
    fetch_max_attempts: int = Field(3, alias="RECIPE_FETCH_MAX_ATTEMPTS")
    fetch_base_delay_ms: int = Field(2000, alias="RECIPE_FETCH_BASE_DELAY_MS")
    scraper_user_agent: str = Field(DEFAULT_USER_AGENT, alias="SCRAPER_USER_AGENT")
    # hostname -> site id; subdomains of a listed hostname match too
    supported_sites: Dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_SUPPORTED_SITES), alias="RECIPE_SUPPORTED_SITES"
    )
    site_selectors: Dict[str, SiteSelectors] = Field(
        default_factory=lambda: dict(DEFAULT_SITE_SELECTORS), alias="RECIPE_SITE_SELECTORS"
    )
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=False, extra="ignore", populate_by_name=True
    )


logger = logging.getLogger(__name__)


@lru_cache
def get_settings() -> Settings:
    try:
        return Settings()
    except PermissionError:
        logger.warning("Unable to read .env; continuing with environment variables only")
        return Settings(_env_file=None)
