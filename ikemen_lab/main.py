"""IKEMEN Lab - Smart Collections startup wiring."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ikemen_lab.config import Config, config
from ikemen_lab.core.logging import logger, setup_logging
from ikemen_lab.services.smart_collections.cache import EvaluationCache
from ikemen_lab.services.smart_collections.smart_collection_manager import SmartCollectionManager
from ikemen_lab.version import __app_name__, __version__

if TYPE_CHECKING:
    from ikemen_lab.core.library_provider import LibraryProvider

__all__ = ["init_smart_collections"]


def init_smart_collections(provider: LibraryProvider, settings: Config | None = None) -> SmartCollectionManager:
    """Sets up logging and builds the Smart Collection manager from settings.

    Args:
        provider: Source of library snapshots.
        settings: Settings to use. Defaults to the global config.

    Returns:
        A manager with a result cache sized by ``CACHE_MAX_ENTRIES``.
    """
    settings = settings or config

    # 1. Setup logging
    setup_logging(settings.LOG_LEVEL, settings.LOG_FILE)
    logger.info("Starting %s %s", __app_name__, __version__)

    # 2. Build the evaluation stack
    cache = EvaluationCache(max_entries=settings.CACHE_MAX_ENTRIES)
    logger.debug("Smart collection cache holds up to %d results", settings.CACHE_MAX_ENTRIES)
    return SmartCollectionManager(provider, cache=cache)
