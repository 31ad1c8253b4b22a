"""App settings, loaded from environment."""
from __future__ import annotations

import os
from dotenv import load_dotenv

load_dotenv()

DEFAULT_JWT_SECRET = "social-dev-secret-change-in-prod"


class Settings:
    # Deployment
    ENV = os.getenv("ENV", "local")

    # API
    API_HOST = os.getenv("API_HOST", "0.0.0.0")
    API_PORT = int(os.getenv("API_PORT", "8080"))
    REQUEST_TIMEOUT_SECONDS = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "60"))

    # Database
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///social.db")
    DB_ECHO = os.getenv("DB_ECHO", "false").lower() in ("1", "true", "yes")

    # Auth
    JWT_SECRET = os.getenv("JWT_SECRET", DEFAULT_JWT_SECRET)
    JWT_TTL_HOURS = int(os.getenv("JWT_TTL_HOURS", "1"))

    # CORS origins (comma-separated, or * for dev)
    CORS_ORIGINS = [
        o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",")
    ]

    # Logging
    LOG_FORMAT = os.getenv("LOG_FORMAT", "text")  # "text" or "json"
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


settings = Settings()
