# tests/unit/test_core/test_records.py

"""Tests for the library metadata records."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from ikemen_lab.core.records import CharacterRecord, ItemKind, LibrarySnapshot, StageRecord, as_utc


class TestRecords:
    """Tests for CharacterRecord / StageRecord / LibrarySnapshot."""

    def test_records_are_frozen(self, character_ryu) -> None:
        with pytest.raises(AttributeError):
            character_ryu.name = "Evil Ryu"  # type: ignore[misc]

    def test_kinds(self, character_ryu, stage_training) -> None:
        assert character_ryu.kind is ItemKind.CHARACTER
        assert stage_training.kind is ItemKind.STAGE

    def test_tag_lists_become_tuples(self) -> None:
        record = StageRecord(id="s", tags=["Night", "City"])
        assert record.tags == ("Night", "City")
        assert hash(record)

    def test_snapshot_normalizes_sequences(self, character_ryu, stage_training) -> None:
        snapshot = LibrarySnapshot(characters=[character_ryu], stages=[stage_training], version=3)
        assert snapshot.characters == (character_ryu,)
        assert snapshot.stages == (stage_training,)
        assert snapshot.version == 3

    def test_default_install_time_is_aware(self) -> None:
        record = CharacterRecord(id="c")
        assert record.installed_at.tzinfo is not None


class TestAsUtc:
    """Tests for as_utc()."""

    def test_naive_values_are_read_as_utc(self) -> None:
        assert as_utc(datetime(2025, 1, 1, 8, 0)) == datetime(2025, 1, 1, 8, 0, tzinfo=timezone.utc)

    def test_aware_values_are_converted(self) -> None:
        plus_two = timezone(timedelta(hours=2))
        converted = as_utc(datetime(2025, 1, 1, 10, 0, tzinfo=plus_two))
        assert converted == datetime(2025, 1, 1, 8, 0, tzinfo=timezone.utc)
        assert converted.tzinfo == timezone.utc
