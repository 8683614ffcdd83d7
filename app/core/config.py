# app/core/config.py
from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    """Loads environment variables from .env file."""
    # Optional so a missing key degrades /api/seo-check to a 400 instead of failing startup
    PAGESPEED_API_KEY: Optional[str] = None
    PAGESPEED_TIMEOUT: float = 60.0

    # Where the report pages fetch from; None means this same application
    PROXY_BASE_URL: Optional[str] = None

    HOST: str = "0.0.0.0"
    PORT: int = 5000
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = ["*"]

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

@lru_cache
def get_settings() -> Settings:
    """Returns the process-wide settings. Used as a FastAPI dependency."""
    return Settings()
