# marketplace/core/config.py
from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Required env vars (.env):
      - JWT_SECRET (HS256 secret shared with the auth service)

    Optional:
      - DATABASE_URL (defaults to a local SQLite file)
      - CHECKOUT_MODE: "lenient" (legacy best-effort checkout) or
        "strict" (single transaction, missing references abort)
    """

    PROJECT_NAME: str = "Local Marketplace API"
    API_PREFIX: str = "/api"

    # DB config
    DATABASE_URL: str = "sqlite:///./marketplace.db"
    DATABASE_ECHO: bool = False

    # JWT verification (backend-side)
    JWT_SECRET: str
    JWT_ALG: str = "HS256"

    CHECKOUT_MODE: Literal["lenient", "strict"] = "lenient"

    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5173",
    ]

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
