"""UI worker threads package.

Contains background worker threads for long-running operations.
"""

from __future__ import annotations

from ikemen_lab.ui.workers.smart_collection_worker import SmartCollectionWorker

__all__ = [
    "SmartCollectionWorker",
]
