from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone

import pytest

from water_logger.core.exceptions import InvalidLevelError
from water_logger.core.timeutil import as_utc, to_display
from water_logger.domain.levels import parse_level
from water_logger.domain.ranges import DEFAULT_RANGE, resolve_range

UTC = timezone.utc


# ───────────── range selector ─────────────
@pytest.mark.parametrize("selector", [None, "", "1d", "7", "7days", "1M", "3m ", "1 DAY; DROP TABLE water_levels"])
def test_unknown_selectors_fall_back_to_one_day(selector):
    assert resolve_range(selector) is DEFAULT_RANGE


@pytest.mark.parametrize(
    "selector, expected",
    [
        ("7d", datetime(2026, 10, 12, 12, 0, tzinfo=UTC)),
        ("1m", datetime(2026, 9, 19, 12, 0, tzinfo=UTC)),
        ("3m", datetime(2026, 7, 19, 12, 0, tzinfo=UTC)),
        (None, datetime(2026, 10, 18, 12, 0, tzinfo=UTC)),
    ],
)
def test_lower_bounds(selector, expected):
    now = datetime(2026, 10, 19, 12, 0, tzinfo=UTC)
    assert resolve_range(selector).lower_bound(now) == expected


def test_month_bound_clamps_to_month_end():
    assert resolve_range("1m").lower_bound(datetime(2026, 3, 31, tzinfo=UTC)) == datetime(2026, 2, 28, tzinfo=UTC)
    assert resolve_range("1m").lower_bound(datetime(2028, 3, 30, tzinfo=UTC)) == datetime(2028, 2, 29, tzinfo=UTC)
    assert resolve_range("3m").lower_bound(datetime(2026, 5, 31, tzinfo=UTC)) == datetime(2026, 2, 28, tzinfo=UTC)


def test_month_bound_crosses_year():
    assert resolve_range("3m").lower_bound(datetime(2026, 1, 15, 6, tzinfo=UTC)) == datetime(2025, 10, 15, 6, tzinfo=UTC)


# ───────────── level validation ─────────────
@pytest.mark.parametrize("value", [0, 0.0, -1, -0.5, 12.5, 10**6])
def test_numeric_levels_pass_through(value):
    assert parse_level(value) == value
    assert type(parse_level(value)) is type(value)


@pytest.mark.parametrize("value", [None, True, False, "12", "", [], {}, float("nan"), float("inf"), 10**400])
def test_non_numeric_levels_are_rejected(value):
    with pytest.raises(InvalidLevelError, match="Invalid level value"):
        parse_level(value)


# ───────────── display time ─────────────
def test_display_is_ist_wall_clock():
    assert to_display(datetime(2026, 1, 1, 0, 0, 0, tzinfo=UTC)) == "01/01/2026 05:30:00"
    assert to_display(datetime(2026, 12, 31, 20, 15, 9, 999999, tzinfo=UTC)) == "01/01/2027 01:45:09"


def test_display_treats_naive_as_utc():
    assert to_display(datetime(2026, 6, 5, 7, 8, 9)) == "05/06/2026 12:38:09"


def test_display_pattern_is_fixed_width():
    text = to_display(datetime(2026, 2, 3, 4, 5, 6, tzinfo=UTC))
    assert re.fullmatch(r"\d{2}/\d{2}/\d{4} \d{2}:\d{2}:\d{2}", text)


def test_as_utc_converts_offsets():
    ist = timezone(timedelta(hours=5, minutes=30))
    assert as_utc(datetime(2026, 1, 1, 5, 30, tzinfo=ist)) == datetime(2026, 1, 1, 0, 0, tzinfo=UTC)
    assert as_utc(datetime(2026, 1, 1, 5, 30, tzinfo=ist)).tzinfo is UTC
