# tests/test_dates.py
"""Date and date-range parsing (jpevents/normalize.py)."""
from __future__ import annotations

from datetime import date, datetime

import pytest

from jpevents.normalize import parse_date, parse_date_range, today_iso

TODAY = date(2025, 6, 1)


# ---------------------------------------------------------------------------
# Single dates
# ---------------------------------------------------------------------------

class TestParseDate:
    @pytest.mark.parametrize("text,expected", [
        ("2025年1月15日", "2025-01-15"),
        ("2025年 1月 15日(水)", "2025-01-15"),
        ("2025.1.15", "2025-01-15"),
        ("2025/01/15", "2025-01-15"),
        ("2025-01-15", "2025-01-15"),
        ("開演 2025/07/01 19:00", "2025-07-01"),
        ("Jan 15, 2025", "2025-01-15"),
        ("January 15 2025", "2025-01-15"),
    ])
    def test_explicit_year(self, text, expected):
        assert parse_date(text, TODAY) == expected

    def test_japanese_month_day_in_future_keeps_year(self):
        assert parse_date("6月10日", TODAY) == "2025-06-10"

    def test_japanese_month_day_in_past_rolls_forward(self):
        assert parse_date("1月15日", TODAY) == "2026-01-15"

    def test_short_numeric_rolls_forward(self):
        assert parse_date("1/15(水)", TODAY) == "2026-01-15"

    def test_short_numeric_current_month_not_rolled(self):
        assert parse_date("6/20", TODAY) == "2025-06-20"

    def test_dotted_short_date(self):
        assert parse_date("7.12(土)", TODAY) == "2025-07-12"

    def test_english_month_without_year_rolls_forward(self):
        assert parse_date("March 3", TODAY) == "2026-03-03"

    def test_roll_forward_can_be_disabled(self):
        assert parse_date("1月15日", TODAY, roll_forward=False) == "2025-01-15"

    @pytest.mark.parametrize("text", [None, "", "   ", "近日公開", "TBA"])
    def test_unparsable_is_none(self, text):
        assert parse_date(text, TODAY) is None

    def test_today_iso_uses_reference_date(self):
        assert today_iso(TODAY) == "2025-06-01"


# ---------------------------------------------------------------------------
# Ranges
# ---------------------------------------------------------------------------

class TestParseDateRange:
    def test_same_month_end_day_only(self):
        assert parse_date_range("1月2日〜26日", TODAY) == ("2025-01-02", "2025-01-26")

    def test_same_month_with_fullwidth_tilde(self):
        assert parse_date_range("1月2日～26日", TODAY) == ("2025-01-02", "2025-01-26")

    def test_cross_month(self):
        assert parse_date_range("1月2日〜2月15日", TODAY) == ("2025-01-02", "2025-02-15")

    def test_cross_year_moves_end_only(self):
        assert parse_date_range("12月20日〜1月5日", TODAY) == ("2025-12-20", "2026-01-05")

    def test_explicit_years(self):
        assert parse_date_range("2025年1月15日〜2025年2月28日", TODAY) == ("2025-01-15", "2025-02-28")

    def test_dotted_with_weekdays(self):
        assert parse_date_range("2025.1.15(水)～2.28(金)", TODAY) == ("2025-01-15", "2025-02-28")

    def test_english_cross_month(self):
        assert parse_date_range("Jan 15 - Feb 28, 2025", TODAY) == ("2025-01-15", "2025-02-28")

    def test_english_same_month(self):
        assert parse_date_range("January 15 - 28", TODAY) == ("2025-01-15", "2025-01-28")

    def test_english_cross_year_with_trailing_year(self):
        assert parse_date_range("Dec 20 - Jan 5, 2026", TODAY) == ("2025-12-20", "2026-01-05")

    def test_single_date_has_no_end(self):
        assert parse_date_range("2025年3月1日", TODAY) == ("2025-03-01", None)

    def test_single_short_date_is_not_rolled(self):
        assert parse_date_range("3月1日", TODAY) == ("2025-03-01", None)

    def test_lone_date_year_policy_differs_from_parse_date(self):
        # card dates roll forward, run periods stay in the current year
        assert parse_date("3/5", TODAY) == "2026-03-05"
        assert parse_date_range("3/5", TODAY) == ("2025-03-05", None)

    def test_time_range_is_not_a_date_range(self):
        assert parse_date_range("2025.7.10 18:00-21:00", TODAY) == ("2025-07-10", None)

    @pytest.mark.parametrize("text", [None, "", "会期未定"])
    def test_unparsable(self, text):
        assert parse_date_range(text, TODAY) == (None, None)


# ---------------------------------------------------------------------------
# Day-first English and implausible fallbacks
# ---------------------------------------------------------------------------

LATE_TODAY = date(2026, 10, 17)


class TestDayFirstEnglish:
    def test_single_with_year(self):
        assert parse_date("15 Nov 2025", TODAY) == "2025-11-15"

    def test_single_ordinal_rolls_forward(self):
        assert parse_date("Saturday 1st February", TODAY) == "2026-02-01"

    def test_range_start_for_single_date_callers(self):
        assert parse_date("15 - 16 Nov", LATE_TODAY) == "2026-11-15"

    @pytest.mark.parametrize("text,expected", [
        ("15 - 16 Nov", ("2026-11-15", "2026-11-16")),
        ("1-3 Nov", ("2026-11-01", "2026-11-03")),
        ("15 November - 2 December 2025", ("2025-11-15", "2025-12-02")),
        ("28 Dec - 3 Jan", ("2026-12-28", "2027-01-03")),
        ("28 Dec 2026 - 3 Jan 2027", ("2026-12-28", "2027-01-03")),
    ])
    def test_ranges_keep_end(self, text, expected):
        assert parse_date_range(text, LATE_TODAY) == expected


class TestDateparserFallback:
    def test_far_future_result_is_rejected(self, monkeypatch):
        monkeypatch.setattr(
            "jpevents.normalize.dateparser.parse",
            lambda *a, **kw: datetime(2116, 11, 15),
        )
        assert parse_date("the 15th", LATE_TODAY) is None
        assert parse_date_range("the 15th", LATE_TODAY) == (None, None)

    def test_far_past_result_is_rejected(self, monkeypatch):
        monkeypatch.setattr(
            "jpevents.normalize.dateparser.parse",
            lambda *a, **kw: datetime(1990, 1, 1),
        )
        assert parse_date("the 1st", LATE_TODAY) is None

    def test_near_result_is_kept(self, monkeypatch):
        monkeypatch.setattr(
            "jpevents.normalize.dateparser.parse",
            lambda *a, **kw: datetime(2027, 3, 4),
        )
        assert parse_date("the 4th", LATE_TODAY) == "2027-03-04"
