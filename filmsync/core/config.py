# filmsync/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Required env vars (.env):
      - SUPABASE_URL
      - SUPABASE_KEY (anon key, also used to exchange login tokens)
      - SUPABASE_SERVICE_ROLE_KEY (admin Auth operations)
      - SUPABASE_JWT_SECRET (JWT signing secret from Supabase project settings)
      - DATABASE_URL (document store connection string)

    Optional:
      - CATALOG_BASE_URL (film catalog endpoint, SWAPI by default)
    """

    PROJECT_NAME: str = "FilmSync Backend"
    API_PREFIX: str = ""
    LOG_LEVEL: str = "INFO"

    # Supabase / DB config
    SUPABASE_URL: str
    SUPABASE_KEY: str
    SUPABASE_SERVICE_ROLE_KEY: str
    DATABASE_URL: str

    # JWT verification (backend-side)
    SUPABASE_JWT_SECRET: str
    SUPABASE_JWT_ALG: str = "HS256"

    # GoTrue REST calls made during login
    AUTH_TIMEOUT_SECONDS: float = 10.0

    # Upstream film catalog
    CATALOG_BASE_URL: str = "https://swapi.dev/api/films/"
    CATALOG_TIMEOUT_SECONDS: float = 10.0

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
