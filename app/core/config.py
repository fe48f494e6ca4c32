# app/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Required env vars (.env):
      - DATABASE_URL (Postgres connection string, or sqlite:// for local runs)
      - SUPABASE_JWT_SECRET (JWT signing secret from Supabase project settings)

    Optional:
      - SUPABASE_URL / SUPABASE_SERVICE_ROLE_KEY (product image uploads)
      - SMTP_* (order and account emails)
      - ADMIN_ALERT_EMAIL (low stock alerts)
    """

    PROJECT_NAME: str = "Glow Beauty API"
    API_V1_STR: str = "/api/v1"

    DATABASE_URL: str

    # JWT verification (backend-side)
    SUPABASE_JWT_SECRET: str
    SUPABASE_JWT_ALG: str = "HS256"

    # Storage (service role key bypasses RLS, backend only)
    SUPABASE_URL: str | None = None
    SUPABASE_SERVICE_ROLE_KEY: str | None = None
    STORAGE_BUCKET: str = "assets"

    # SMTP
    SMTP_HOST: str | None = None
    SMTP_PORT: int = 587
    SMTP_USERNAME: str | None = None
    SMTP_PASSWORD: str | None = None
    SMTP_FROM_EMAIL: str | None = None
    SMTP_FROM_NAME: str = "Glow Beauty"
    SMTP_USE_TLS: bool = True
    SMTP_USE_SSL: bool = False

    # Inventory alerts
    ADMIN_ALERT_EMAIL: str | None = None
    LOW_STOCK_THRESHOLD: int = 10

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
