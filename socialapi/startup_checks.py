"""Startup validation: catch misconfigurations before the app serves traffic."""
from __future__ import annotations

import logging
import sys

from config.settings import DEFAULT_JWT_SECRET, settings

logger = logging.getLogger(__name__)


def validate_settings() -> list[str]:
    """Validate configuration. Returns list of warnings (empty = all good).

    Raises SystemExit for critical misconfigurations in production.
    """
    warnings: list[str] = []
    is_prod = settings.ENV == "production" or (
        settings.DATABASE_URL and "sqlite" not in settings.DATABASE_URL
    )

    # Critical: JWT secret must be changed in production
    if is_prod and settings.JWT_SECRET == DEFAULT_JWT_SECRET:
        logger.critical("JWT_SECRET is still the default! Set a real secret for production.")
        sys.exit(1)

    if is_prod and "*" in settings.CORS_ORIGINS:
        warnings.append("CORS_ORIGINS is set to *, restrict in production")

    if settings.REQUEST_TIMEOUT_SECONDS <= 0:
        warnings.append("REQUEST_TIMEOUT_SECONDS must be positive, requests will time out immediately")

    for w in warnings:
        logger.warning("⚠️  %s", w)

    if not warnings:
        logger.info("✅ All startup checks passed")

    return warnings
