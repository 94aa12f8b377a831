"""Unit tests for care tip interval parsing and duration conversion."""

from datetime import timedelta

import pytest

from src.core.recurrence_parser import (
    format_interval,
    normalize_time_unit,
    parse_interval,
    to_days,
    to_milliseconds,
    to_timedelta,
)
from src.domain.task import ParsedInterval, TimeUnit


@pytest.mark.unit
class TestParseInterval:
    """Tests for parse_interval."""

    def test_single_days(self):
        assert parse_interval("Gießen Sie alle 5 Tage") == ParsedInterval(min=5, max=5, unit=TimeUnit.DAYS)

    def test_range_weeks(self):
        assert parse_interval("alle 2-3 Wochen düngen") == ParsedInterval(min=2, max=3, unit=TimeUnit.WEEKS)

    def test_range_with_spaces_and_en_dash(self):
        assert parse_interval("alle 7 – 10 Tage") == ParsedInterval(min=7, max=10, unit=TimeUnit.DAYS)

    @pytest.mark.parametrize("text", ["alle 7 10 Tage", "alle 7--10 Tage", "alle 7 -- 10 Tage"])
    def test_range_separator_is_any_run_of_dashes_or_spaces(self, text):
        assert parse_interval(text) == ParsedInterval(min=7, max=10, unit=TimeUnit.DAYS)

    def test_reversed_range_keeps_written_order(self):
        assert parse_interval("alle 10-7 Tage") == ParsedInterval(min=10, max=7, unit=TimeUnit.DAYS)

    def test_two_digit_single_value_is_not_a_range(self):
        assert parse_interval("alle 10 Tage") == ParsedInterval(min=10, max=10, unit=TimeUnit.DAYS)

    def test_singular_unit(self):
        assert parse_interval("alle 1 Woche") == ParsedInterval(min=1, max=1, unit=TimeUnit.WEEKS)

    def test_months(self):
        assert parse_interval("alle 6 Monate") == ParsedInterval(min=6, max=6, unit=TimeUnit.MONTHS)

    def test_case_insensitive(self):
        assert parse_interval("ALLE 3 TAGE") == ParsedInterval(min=3, max=3, unit=TimeUnit.DAYS)

    def test_bare_number_anywhere(self):
        assert parse_interval("In 2 Wochen umtopfen") == ParsedInterval(min=2, max=2, unit=TimeUnit.WEEKS)

    def test_range_wins_over_single(self):
        result = parse_interval("Im Sommer alle 3-4 Tage, sonst alle 7 Tage")
        assert result == ParsedInterval(min=3, max=4, unit=TimeUnit.DAYS)

    def test_zero_is_returned_as_is(self):
        assert parse_interval("alle 0 Tage") == ParsedInterval(min=0, max=0, unit=TimeUnit.DAYS)

    @pytest.mark.parametrize("text", ["", "Regelmäßig gießen", "Erde feucht halten", "alle paar Tage"])
    def test_no_cadence_returns_none(self, text):
        assert parse_interval(text) is None


@pytest.mark.unit
class TestNormalizeTimeUnit:
    """Tests for normalize_time_unit."""

    @pytest.mark.parametrize(
        ("token", "expected"),
        [
            ("Tag", TimeUnit.DAYS),
            ("Tage", TimeUnit.DAYS),
            ("Woche", TimeUnit.WEEKS),
            ("wochen", TimeUnit.WEEKS),
            ("Monat", TimeUnit.MONTHS),
            ("MONATE", TimeUnit.MONTHS),
        ],
    )
    def test_known_tokens(self, token, expected):
        assert normalize_time_unit(token) == expected

    def test_unknown_token_defaults_to_days(self):
        assert normalize_time_unit("Jahre") == TimeUnit.DAYS


@pytest.mark.unit
class TestDurations:
    """Tests for converting intervals to absolute durations."""

    def test_week_is_seven_days(self):
        assert to_milliseconds(1, TimeUnit.WEEKS) == 7 * to_milliseconds(1, TimeUnit.DAYS)

    def test_month_is_thirty_days(self):
        assert to_milliseconds(1, TimeUnit.MONTHS) == 30 * to_milliseconds(1, TimeUnit.DAYS)

    def test_day_in_milliseconds(self):
        assert to_milliseconds(1, TimeUnit.DAYS) == 86_400_000

    def test_to_days(self):
        assert to_days(3, TimeUnit.WEEKS) == 21
        assert to_days(2, TimeUnit.MONTHS) == 60

    def test_to_timedelta(self):
        assert to_timedelta(2, TimeUnit.WEEKS) == timedelta(days=14)


@pytest.mark.unit
class TestFormatInterval:
    """Tests for format_interval."""

    def test_single_units(self):
        assert format_interval(1, TimeUnit.DAYS) == "täglich"
        assert format_interval(1, TimeUnit.WEEKS) == "wöchentlich"
        assert format_interval(1, TimeUnit.MONTHS) == "monatlich"

    def test_plural(self):
        assert format_interval(3, TimeUnit.DAYS) == "alle 3 Tage"
        assert format_interval(2, TimeUnit.WEEKS) == "alle 2 Wochen"
