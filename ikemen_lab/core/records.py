# ikemen_lab/core/records.py

"""Read-only metadata records for installed content.

The metadata store hands these out as immutable snapshots. Smart collection
evaluation borrows them for the duration of one call and never mutates them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

__all__ = [
    "CharacterRecord",
    "ItemKind",
    "LibrarySnapshot",
    "StageRecord",
    "as_utc",
]


class ItemKind(Enum):
    """Kinds of library content a smart collection can contain."""

    CHARACTER = "character"
    STAGE = "stage"


def as_utc(value: datetime) -> datetime:
    """Returns an aware UTC datetime, treating naive values as UTC.

    Args:
        value: The datetime to normalize.

    Returns:
        The same instant as an aware datetime in UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass(frozen=True)
class CharacterRecord:
    """Metadata for one installed character.

    Attributes:
        id: Folder name, unique within the library.
        name: Display name from the character's DEF file.
        author: Author credited in the DEF file.
        tags: Custom and detected tags, in display order.
        installed_at: When the character was installed.
        source_game: Originating game (e.g. "Street Fighter"), if known.
        style: Sprite style (e.g. "POTS", "MVC2"), if known.
        is_hd: Whether the sprites are high resolution, if known.
        has_ai: Whether the character ships custom AI, if known.
    """

    id: str
    name: str = ""
    author: str = ""
    tags: tuple[str, ...] = ()
    installed_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    source_game: str | None = None
    style: str | None = None
    is_hd: bool | None = None
    has_ai: bool | None = None

    kind = ItemKind.CHARACTER

    def __post_init__(self) -> None:
        if not isinstance(self.tags, tuple):
            object.__setattr__(self, "tags", tuple(self.tags))


@dataclass(frozen=True)
class StageRecord:
    """Metadata for one installed stage.

    Attributes:
        id: Stage file name without extension, unique within the library.
        name: Display name from the stage's DEF file.
        author: Author credited in the DEF file.
        tags: Custom and detected tags, in display order.
        installed_at: When the stage was installed.
        source_game: Originating game, if known.
        style: Art style, if known.
        has_music: Whether the stage defines background music, if known.
        resolution: Native resolution such as "1280x720", if known.
        total_width: Camera bounds width in pixels, if known.
    """

    id: str
    name: str = ""
    author: str = ""
    tags: tuple[str, ...] = ()
    installed_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    source_game: str | None = None
    style: str | None = None
    has_music: bool | None = None
    resolution: str | None = None
    total_width: float | None = None

    kind = ItemKind.STAGE

    def __post_init__(self) -> None:
        if not isinstance(self.tags, tuple):
            object.__setattr__(self, "tags", tuple(self.tags))


@dataclass(frozen=True)
class LibrarySnapshot:
    """The full set of character and stage records at one point in time.

    Attributes:
        characters: Character records in the store's natural order.
        stages: Stage records in the store's natural order.
        version: Change counter of the metadata store when the snapshot was taken.
    """

    characters: tuple[CharacterRecord, ...] = ()
    stages: tuple[StageRecord, ...] = ()
    version: int = 0

    def __post_init__(self) -> None:
        if not isinstance(self.characters, tuple):
            object.__setattr__(self, "characters", tuple(self.characters))
        if not isinstance(self.stages, tuple):
            object.__setattr__(self, "stages", tuple(self.stages))
