# vegist/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Storefront settings, read from the environment and `.env`.

    Required env vars (.env):
      - SUPABASE_URL
      - SUPABASE_KEY (anon key)
      - DATABASE_URL (Supabase Postgres connection string)
      - SESSION_SECRET (signing secret for anonymous storefront sessions)

    Optional:
      - storefront knobs below (shipping, paging, quotas)
    """

    PROJECT_NAME: str = "Vegist Storefront API"
    API_V1_STR: str = "/api/v1"
    LOG_LEVEL: str = "INFO"

    CORS_ORIGINS: list[str] = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
        "http://localhost:3000",
    ]

    # Supabase / DB config
    SUPABASE_URL: str
    SUPABASE_KEY: str
    DATABASE_URL: str
    STORAGE_BUCKET: str = "assets"

    # Anonymous client sessions (stand-in for a browser profile)
    SESSION_SECRET: str
    SESSION_ALG: str = "HS256"
    SESSION_TTL_DAYS: int = 30

    # Storefront rules
    FREE_SHIPPING_THRESHOLD: float = 50.0
    SHIPPING_FEE: float = 10.0
    PAGE_SIZE: int = 8
    RANDOM_PRODUCTS_SAMPLE: int = 4

    # Max bytes for one stored client value (local storage quota analogue)
    STORAGE_QUOTA_BYTES: int = 5 * 1024 * 1024

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """Settings are read from the environment once per process."""
    return Settings()
