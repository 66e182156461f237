"""Read-only access to the library metadata store.

Smart collection code depends on this narrow interface instead of a
process-wide store, so evaluation can be tested against plain values.
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from collections.abc import Iterable

from ikemen_lab.core.records import CharacterRecord, LibrarySnapshot, StageRecord

__all__ = ["InMemoryLibraryProvider", "LibraryProvider", "LibraryProviderError"]

logger = logging.getLogger("ikemenlab.library")


class LibraryProviderError(Exception):
    """Raised when the metadata store cannot produce a snapshot."""


class LibraryProvider(ABC):
    """Abstract source of library snapshots."""

    @abstractmethod
    def snapshot(self) -> LibrarySnapshot:
        """Return the current set of character and stage records.

        Returns:
            A fully materialized snapshot.

        Raises:
            LibraryProviderError: If the store could not be read.
        """


class InMemoryLibraryProvider(LibraryProvider):
    """Provider backed by in-memory record lists.

    Every replacement of the record lists bumps the snapshot version so that
    cached evaluations of the previous state are never reused.
    """

    def __init__(
        self,
        characters: Iterable[CharacterRecord] = (),
        stages: Iterable[StageRecord] = (),
    ) -> None:
        self._lock = threading.Lock()
        self._characters: tuple[CharacterRecord, ...] = tuple(characters)
        self._stages: tuple[StageRecord, ...] = tuple(stages)
        self._version = 1

    @property
    def version(self) -> int:
        return self._version

    def snapshot(self) -> LibrarySnapshot:
        with self._lock:
            return LibrarySnapshot(
                characters=self._characters,
                stages=self._stages,
                version=self._version,
            )

    def replace(
        self,
        characters: Iterable[CharacterRecord] | None = None,
        stages: Iterable[StageRecord] | None = None,
    ) -> int:
        """Swaps in new record lists.

        Args:
            characters: New character records, or None to keep the current ones.
            stages: New stage records, or None to keep the current ones.

        Returns:
            The new snapshot version.
        """
        with self._lock:
            if characters is not None:
                self._characters = tuple(characters)
            if stages is not None:
                self._stages = tuple(stages)
            self._version += 1
            version = self._version

        logger.debug(
            "Library replaced: %d characters, %d stages (version %d)",
            len(self._characters),
            len(self._stages),
            version,
        )
        return version
