"""Worker thread for evaluating a Smart Collection in the background.

The evaluation itself is fast and holds no thread affinity; running it here
keeps snapshot loading off the UI thread. Each worker carries a request id so
the view can drop results of a query that has since been edited.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING

from PyQt6.QtCore import QThread, pyqtSignal

from ikemen_lab.core.library_provider import LibraryProviderError

if TYPE_CHECKING:
    from ikemen_lab.services.smart_collections.models import SmartCollection
    from ikemen_lab.services.smart_collections.smart_collection_manager import SmartCollectionManager

logger = logging.getLogger("ikemenlab.smart_collection_worker")

__all__ = ["SmartCollectionWorker"]


class SmartCollectionWorker(QThread):
    """Background thread that evaluates one Smart Collection.

    Attributes:
        manager: The SmartCollectionManager to evaluate with.
        collection: The collection to evaluate.
        request_id: Caller-chosen id echoed back with the result.
        now: Optional reference time for ``withinDays`` rules.

    Signals:
        evaluated: Emitted with (request_id, EvaluationResult) on success.
        failed: Emitted with (request_id, message) when the library cannot be
            read or evaluation raises unexpectedly.
    """

    evaluated = pyqtSignal(int, object)
    failed = pyqtSignal(int, str)

    def __init__(
        self,
        manager: SmartCollectionManager,
        collection: SmartCollection,
        request_id: int = 0,
        now: datetime | None = None,
    ):
        """Initializes the worker.

        Args:
            manager: The SmartCollectionManager to evaluate with.
            collection: The collection to evaluate.
            request_id: Caller-chosen id echoed back with the result.
            now: Optional reference time for ``withinDays`` rules.
        """
        super().__init__()
        self.manager = manager
        self.collection = collection
        self.request_id = request_id
        self.now = now

    def run(self) -> None:
        """Evaluates the collection and emits the outcome."""
        try:
            result = self.manager.evaluate_collection(self.collection, self.now)
        except LibraryProviderError as e:
            logger.error("Could not evaluate smart collection '%s': %s", self.collection.name, e)
            self.failed.emit(self.request_id, str(e))
            return
        except Exception as e:
            # Every request must be answered with evaluated or failed
            logger.exception("Unexpected error evaluating smart collection '%s'", self.collection.name)
            self.failed.emit(self.request_id, f"{type(e).__name__}: {e}")
            return
        self.evaluated.emit(self.request_id, result)
