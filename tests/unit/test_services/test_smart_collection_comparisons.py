# tests/unit/test_services/test_smart_collection_comparisons.py

"""Tests for per-type comparison semantics."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from ikemen_lab.services.smart_collections.comparisons import UNPARSABLE, compare, parse_target
from ikemen_lab.services.smart_collections.models import ComparisonOperator, ValueType

NOW = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)

Op = ComparisonOperator

# ========================================================================
# TESTS: STRING
# ========================================================================


class TestStringComparison:
    """Case-insensitive exact and substring matching."""

    @pytest.mark.parametrize(
        ("value", "op", "target", "expected"),
        [
            ("Ryu", Op.EQUALS, "ryu", True),
            ("Ryu", Op.EQUALS, "ry", False),
            ("Ryu", Op.NOT_EQUALS, "RYU", False),
            ("Ryu", Op.NOT_EQUALS, "Ken", True),
            ("Evil Ryu", Op.CONTAINS, "RYU", True),
            ("Evil Ryu", Op.CONTAINS, "ken", False),
            ("Evil Ryu", Op.NOT_CONTAINS, "ken", True),
            ("Evil Ryu", Op.NOT_CONTAINS, "evil", False),
        ],
    )
    def test_operators(self, value, op, target, expected) -> None:
        assert compare(ValueType.STRING, value, op, target, NOW) is expected

    @pytest.mark.parametrize("op", [Op.EQUALS, Op.NOT_EQUALS, Op.CONTAINS, Op.NOT_CONTAINS])
    def test_unknown_value_never_matches(self, op) -> None:
        assert compare(ValueType.STRING, None, op, "x", NOW) is False


# ========================================================================
# TESTS: TAG SETS
# ========================================================================


class TestTagSetComparison:
    """Superset / disjointness semantics for tag rules."""

    TAGS = frozenset({"a", "b"})

    def test_contains_requires_every_tag(self) -> None:
        assert compare(ValueType.STRING_SET, self.TAGS, Op.CONTAINS, "A", NOW) is True
        assert compare(ValueType.STRING_SET, self.TAGS, Op.CONTAINS, "a, b", NOW) is True
        assert compare(ValueType.STRING_SET, self.TAGS, Op.CONTAINS, "A,C", NOW) is False

    def test_not_contains_requires_disjoint_sets(self) -> None:
        assert compare(ValueType.STRING_SET, self.TAGS, Op.NOT_CONTAINS, "c,d", NOW) is True
        assert compare(ValueType.STRING_SET, self.TAGS, Op.NOT_CONTAINS, "c,B", NOW) is False

    def test_empty_checks_ignore_value(self) -> None:
        assert compare(ValueType.STRING_SET, frozenset(), Op.IS_EMPTY, "whatever", NOW) is True
        assert compare(ValueType.STRING_SET, self.TAGS, Op.IS_EMPTY, "", NOW) is False
        assert compare(ValueType.STRING_SET, self.TAGS, Op.IS_NOT_EMPTY, "", NOW) is True
        assert compare(ValueType.STRING_SET, frozenset(), Op.IS_NOT_EMPTY, "", NOW) is False

    @pytest.mark.parametrize("text", ["", " , ", ","])
    def test_blank_tag_list_fails_closed(self, text) -> None:
        assert parse_target(ValueType.STRING_SET, Op.CONTAINS, text) is UNPARSABLE
        assert compare(ValueType.STRING_SET, self.TAGS, Op.CONTAINS, text, NOW) is False
        assert compare(ValueType.STRING_SET, self.TAGS, Op.NOT_CONTAINS, text, NOW) is False


# ========================================================================
# TESTS: BOOLEAN
# ========================================================================


class TestBooleanComparison:
    """Boolean rules parse "true"/"false" case-insensitively."""

    @pytest.mark.parametrize("text", ["true", "TRUE", " True "])
    def test_true_variants(self, text) -> None:
        assert compare(ValueType.BOOLEAN, True, Op.EQUALS, text, NOW) is True
        assert compare(ValueType.BOOLEAN, False, Op.NOT_EQUALS, text, NOW) is True

    @pytest.mark.parametrize("text", ["yes", "1", "", "truthy"])
    def test_other_text_fails_closed(self, text) -> None:
        assert compare(ValueType.BOOLEAN, True, Op.EQUALS, text, NOW) is False
        assert compare(ValueType.BOOLEAN, False, Op.NOT_EQUALS, text, NOW) is False

    def test_unknown_flag_never_matches(self) -> None:
        assert compare(ValueType.BOOLEAN, None, Op.EQUALS, "false", NOW) is False
        assert compare(ValueType.BOOLEAN, None, Op.NOT_EQUALS, "true", NOW) is False


# ========================================================================
# TESTS: DATE
# ========================================================================


class TestDateComparison:
    """withinDays and chronological comparisons."""

    def test_within_days_inclusive_boundary(self) -> None:
        assert compare(ValueType.DATE, NOW - timedelta(days=7), Op.WITHIN_DAYS, "7", NOW) is True
        assert compare(ValueType.DATE, NOW - timedelta(days=7, seconds=1), Op.WITHIN_DAYS, "7", NOW) is False

    def test_within_zero_days(self) -> None:
        assert compare(ValueType.DATE, NOW, Op.WITHIN_DAYS, "0", NOW) is True
        assert compare(ValueType.DATE, NOW - timedelta(seconds=1), Op.WITHIN_DAYS, "0", NOW) is False

    def test_future_install_counts_as_recent(self) -> None:
        assert compare(ValueType.DATE, NOW + timedelta(hours=1), Op.WITHIN_DAYS, "1", NOW) is True

    @pytest.mark.parametrize("text", ["seven", "-1", "7.5", ""])
    def test_bad_day_count_fails_closed(self, text) -> None:
        assert compare(ValueType.DATE, NOW, Op.WITHIN_DAYS, text, NOW) is False

    def test_less_and_greater_than_are_strict(self) -> None:
        installed = datetime(2025, 6, 1, tzinfo=timezone.utc)
        assert compare(ValueType.DATE, installed, Op.LESS_THAN, "2025-06-02", NOW) is True
        assert compare(ValueType.DATE, installed, Op.LESS_THAN, "2025-06-01", NOW) is False
        assert compare(ValueType.DATE, installed, Op.GREATER_THAN, "2025-06-01", NOW) is False
        assert compare(ValueType.DATE, installed, Op.GREATER_THAN, "31.05.2025", NOW) is True

    def test_iso_datetime_with_offset(self) -> None:
        installed = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)
        # 13:30+02:00 is 11:30 UTC
        assert compare(ValueType.DATE, installed, Op.GREATER_THAN, "2025-06-01T13:30:00+02:00", NOW) is True

    def test_unparsable_date_fails_closed(self) -> None:
        assert compare(ValueType.DATE, NOW, Op.LESS_THAN, "yesterday", NOW) is False
        assert compare(ValueType.DATE, NOW, Op.GREATER_THAN, "yesterday", NOW) is False

    def test_day_count_too_large_for_timedelta_fails_closed(self) -> None:
        assert parse_target(ValueType.DATE, Op.WITHIN_DAYS, "99999999999") is UNPARSABLE
        assert compare(ValueType.DATE, NOW, Op.WITHIN_DAYS, "99999999999", NOW) is False

    def test_huge_but_representable_day_count_matches(self) -> None:
        assert compare(ValueType.DATE, NOW - timedelta(days=3650), Op.WITHIN_DAYS, "999999999", NOW) is True

    def test_date_offset_out_of_range_fails_closed(self) -> None:
        assert parse_target(ValueType.DATE, Op.LESS_THAN, "9999-12-31T23:00:00-05:00") is UNPARSABLE
        assert compare(ValueType.DATE, NOW, Op.LESS_THAN, "9999-12-31T23:00:00-05:00", NOW) is False


# ========================================================================
# TESTS: NUMBER
# ========================================================================


class TestNumberComparison:
    """Numeric comparisons on stage widths."""

    @pytest.mark.parametrize(
        ("op", "target", "expected"),
        [
            (Op.EQUALS, "1600", True),
            (Op.EQUALS, "1600.0", True),
            (Op.NOT_EQUALS, "1600", False),
            (Op.GREATER_THAN, "640", True),
            (Op.GREATER_THAN, "1600", False),
            (Op.LESS_THAN, "2000", True),
        ],
    )
    def test_operators(self, op, target, expected) -> None:
        assert compare(ValueType.NUMBER, 1600.0, op, target, NOW) is expected

    @pytest.mark.parametrize("text", ["notanumber", "", "nan", "inf"])
    def test_bad_numbers_fail_closed(self, text) -> None:
        for op in (Op.EQUALS, Op.NOT_EQUALS, Op.LESS_THAN, Op.GREATER_THAN):
            assert compare(ValueType.NUMBER, 1600.0, op, text, NOW) is False

    def test_unknown_width_never_matches(self) -> None:
        assert compare(ValueType.NUMBER, None, Op.NOT_EQUALS, "5", NOW) is False
