# ecofinds/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Required env vars (.env):
      - DATABASE_URL (Postgres connection string; sqlite:// for tests)
      - JWT_SECRET (HS256 signing secret for access tokens)

    Optional:
      - SUPABASE_URL / SUPABASE_SERVICE_ROLE_KEY (only needed for image upload)
      - EXPOSE_ERROR_DETAILS (include exception text in 500 responses)
    """

    PROJECT_NAME: str = "EcoFinds API"
    API_PREFIX: str = "/api"

    DATABASE_URL: str

    # Access tokens
    JWT_SECRET: str
    JWT_ALG: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    CORS_ORIGINS: list[str] = [
        "http://localhost:8081",
        "http://localhost:19006",
        "http://127.0.0.1:8081",
    ]

    # Object storage (Supabase Storage)
    SUPABASE_URL: str | None = None
    SUPABASE_SERVICE_ROLE_KEY: str | None = None
    STORAGE_BUCKET: str = "ecofinds"

    MAX_IMAGE_BYTES: int = 5 * 1024 * 1024
    MAX_IMAGES_PER_UPLOAD: int = 5

    EXPOSE_ERROR_DETAILS: bool = True

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
