"""Sakhi companion — process entry point.

Usage::

    from src.main import create_app

    app = create_app()
    app.onboard("2024-01-01", diet_preference="vegetarian", language="hindi")
    print(app.status())
"""

from __future__ import annotations

import logging
import sys

from src.config import Settings, get_settings
from src.cycle.config_loader import get_cycle_config
from src.services.companion import CompanionApp
from src.services.store import ProfileStore

logger = logging.getLogger("sakhi")


# ---------- Logging ----------

def configure_logging(settings: Settings | None = None) -> None:
    settings = settings or get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)-8s %(name)s — %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
    )


# ---------- App factory ----------

def create_app(settings: Settings | None = None) -> CompanionApp:
    settings = settings or get_settings()
    configure_logging(settings)

    config = get_cycle_config()
    store = ProfileStore.at(settings.store_path)
    logger.info(
        "Starting %s v%s [%s] with store %s",
        settings.app_name,
        settings.app_version,
        settings.environment,
        settings.store_path,
    )
    if not settings.assistant_enabled:
        logger.warning("ANTHROPIC_API_KEY not set — chat is disabled")
    return CompanionApp(store, settings=settings, config=config)
