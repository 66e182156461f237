# tests/conftest.py
import os
from datetime import datetime, timedelta, timezone

# Ensure Qt can run headless (CI runners have no display server)
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PyQt6.QtWidgets import QApplication
from pytestqt.qtbot import QtBot

from ikemen_lab.core.logging import logger as app_logger
from ikemen_lab.core.records import CharacterRecord, LibrarySnapshot, StageRecord

# Fixed reference time so date rules are deterministic
NOW = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture(scope="session")
def qapp():
    """QApplication instance for all Qt tests."""
    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    yield app


@pytest.fixture
def qtbot(qapp, request):
    """Provide qtbot fixture with automatic cleanup."""
    bot = QtBot(request)
    yield bot
    if hasattr(bot, "cleanup"):
        bot.cleanup()


@pytest.fixture
def clean_logger():
    """Detach handlers so each test starts from an unconfigured logger."""
    saved_handlers = list(app_logger.handlers)
    saved_level = app_logger.level
    for handler in saved_handlers:
        app_logger.removeHandler(handler)
    yield app_logger
    for handler in list(app_logger.handlers):
        app_logger.removeHandler(handler)
        handler.close()
    for handler in saved_handlers:
        app_logger.addHandler(handler)
    app_logger.setLevel(saved_level)


@pytest.fixture
def now() -> datetime:
    """The reference time used by date-based rules in tests."""
    return NOW


@pytest.fixture
def character_ryu() -> CharacterRecord:
    """An HD Street Fighter character installed three days ago."""
    return CharacterRecord(
        id="ryu",
        name="Ryu",
        author="Phantom.of.the.Server",
        tags=("Street Fighter", "HD"),
        installed_at=NOW - timedelta(days=3),
        source_game="Street Fighter III",
        style="HD",
        is_hd=True,
        has_ai=True,
    )


@pytest.fixture
def character_ken() -> CharacterRecord:
    """A low-resolution Street Fighter character installed a month ago."""
    return CharacterRecord(
        id="ken",
        name="Ken Masters",
        author="Warusaki3",
        tags=("Street Fighter",),
        installed_at=NOW - timedelta(days=30),
        source_game="Street Fighter Alpha",
        style="POTS",
        is_hd=False,
        has_ai=False,
    )


@pytest.fixture
def character_unknown() -> CharacterRecord:
    """A character with no optional metadata at all."""
    return CharacterRecord(
        id="kfm",
        name="Kung Fu Man",
        author="Elecbyte",
        installed_at=NOW - timedelta(days=400),
    )


@pytest.fixture
def stage_training() -> StageRecord:
    """A wide HD stage with music."""
    return StageRecord(
        id="training",
        name="Training Room",
        author="Elecbyte",
        tags=("Training",),
        installed_at=NOW - timedelta(days=1),
        source_game="Street Fighter",
        has_music=True,
        resolution="1280x720",
        total_width=1600,
    )


@pytest.fixture
def stage_bifrost() -> StageRecord:
    """A narrow stage without music."""
    return StageRecord(
        id="bifrost",
        name="Bifrost",
        author="Cybaster",
        installed_at=NOW - timedelta(days=60),
        has_music=False,
        resolution="640x480",
        total_width=480,
    )


@pytest.fixture
def snapshot(character_ryu, character_ken, character_unknown, stage_training, stage_bifrost) -> LibrarySnapshot:
    """A small library with three characters and two stages."""
    return LibrarySnapshot(
        characters=(character_ryu, character_ken, character_unknown),
        stages=(stage_training, stage_bifrost),
        version=1,
    )
