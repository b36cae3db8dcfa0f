"""Tests for calendar_logic pure functions."""

import calendar
from datetime import date

import pytest

from calendar_logic import (
    DEFAULT_BOUNDS,
    GREGORIAN,
    Bounds,
    CalendarDate,
    DayCell,
    GregorianCalendar,
    GridOptions,
    InvalidBounds,
    InvalidDateFormat,
    calculate_grid,
    clamp_date,
    clamp_year,
    days_in_month,
    format_date,
    is_leap,
    parse_date,
)


def current_month_days(grid) -> int:
    """Count the cells that belong to the displayed month."""
    return sum(cell.belongs_to_current_month for row in grid for cell in row)


class TestIsLeap:
    """Tests for is_leap."""

    @pytest.mark.parametrize(
        "year,expected",
        [(2000, True), (1900, False), (2024, True), (2023, False), (2100, False), (2400, True)],
    )
    def test_gregorian_rule(self, year: int, expected: bool) -> None:
        assert is_leap(year) is expected

    def test_matches_calendar_module(self) -> None:
        for year in range(1800, 2401):
            assert is_leap(year) == calendar.isleap(year)


class TestDaysInMonth:
    """Tests for days_in_month (zero-based month index)."""

    def test_february_leap_year(self) -> None:
        assert days_in_month(2024, 1) == 29

    def test_february_common_year(self) -> None:
        assert days_in_month(2023, 1) == 28

    def test_century_is_not_leap(self) -> None:
        assert days_in_month(1900, 1) == 28

    def test_only_february_gets_the_leap_day(self) -> None:
        lengths = [days_in_month(2024, i) for i in range(12)]
        assert lengths == [31, 29, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31]


class TestParseDate:
    """Tests for parse_date and format_date."""

    def test_dash_string(self) -> None:
        assert parse_date("2024-2-9") == CalendarDate(2024, 2, 9)

    def test_slash_string(self) -> None:
        assert parse_date("2024/12/31") == CalendarDate(2024, 12, 31)

    def test_zero_padded_string(self) -> None:
        assert parse_date("2024-02-09") == CalendarDate(2024, 2, 9)

    def test_sequence_and_date(self) -> None:
        assert parse_date([2024, 3, 1]) == CalendarDate(2024, 3, 1)
        assert parse_date(date(2024, 3, 1)) == CalendarDate(2024, 3, 1)

    @pytest.mark.parametrize(
        "value", ["invalid", "2024-1", "2024-13-1", "2024-0-1", "2024-1-32", "2024-x-1", "", 20240101],
    )
    def test_malformed_values_raise(self, value) -> None:
        with pytest.raises(InvalidDateFormat):
            parse_date(value)

    @pytest.mark.parametrize("value", [(2024.7, 1, 1), [2024, 1.0, 1], (2024, True, 1), (2024, None, 1)])
    def test_non_integer_sequence_parts_raise(self, value) -> None:
        with pytest.raises(InvalidDateFormat):
            parse_date(value)

    def test_invalid_date_format_is_a_value_error(self) -> None:
        with pytest.raises(ValueError):
            parse_date("nope")

    def test_format_date(self) -> None:
        assert format_date(CalendarDate(2024, 2, 9)) == "2024-2-9"
        assert format_date(CalendarDate(2024, 2, 9), "/") == "2024/2/9"


class TestBounds:
    """Tests for Bounds, clamp_date and clamp_year."""

    def test_min_after_max_raises(self) -> None:
        with pytest.raises(InvalidBounds):
            Bounds(CalendarDate(2200, 1, 1), CalendarDate(1900, 1, 1))

    def test_clamp_below_minimum(self) -> None:
        assert clamp_date(CalendarDate(1899, 12, 31), DEFAULT_BOUNDS) == CalendarDate(1900, 1, 1)

    def test_clamp_above_maximum(self) -> None:
        assert clamp_date(CalendarDate(2200, 1, 2), DEFAULT_BOUNDS) == CalendarDate(2200, 1, 1)

    def test_clamp_inside_is_unchanged(self) -> None:
        assert clamp_date(CalendarDate(2024, 6, 15), DEFAULT_BOUNDS) == CalendarDate(2024, 6, 15)

    def test_clamp_compares_month_and_day_in_bound_year(self) -> None:
        bounds = Bounds(CalendarDate(2000, 6, 15), CalendarDate(2010, 3, 1))
        assert clamp_date(CalendarDate(2000, 6, 14), bounds) == CalendarDate(2000, 6, 15)
        assert clamp_date(CalendarDate(2010, 2, 28), bounds) == CalendarDate(2010, 2, 28)
        assert clamp_date(CalendarDate(2010, 3, 2), bounds) == CalendarDate(2010, 3, 1)

    def test_clamp_year(self) -> None:
        assert clamp_year(1850, DEFAULT_BOUNDS) == 1900
        assert clamp_year(2300, DEFAULT_BOUNDS) == 2200
        assert clamp_year(2024, DEFAULT_BOUNDS) == 2024


class TestGregorianCalendar:
    """Tests for the Gregorian calendar system."""

    def test_sunday_first_start_weekday(self) -> None:
        # 1 February 2024 was a Thursday
        assert GREGORIAN.start_weekday(2024, 2) == 4

    def test_monday_first_start_weekday(self) -> None:
        # 1 January 2024 was a Monday
        assert GregorianCalendar(first_weekday=calendar.MONDAY).start_weekday(2024, 1) == 0

    def test_day_abbr_rotates_with_first_weekday(self) -> None:
        assert GREGORIAN.day_abbr == ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")
        monday_first = GregorianCalendar(first_weekday=calendar.MONDAY)
        assert monday_first.day_abbr == ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


class TestCalculateGrid:
    """Tests for calculate_grid."""

    def test_leap_february_has_29_current_days(self) -> None:
        bounds = Bounds(CalendarDate(1900, 1, 1), CalendarDate(2200, 1, 1))
        grid = calculate_grid(2024, 2, bounds)
        assert current_month_days(grid) == 29

    def test_first_row_bleeds_in_previous_month(self) -> None:
        grid = calculate_grid(2024, 2)
        assert grid[0] == [
            DayCell(28, False), DayCell(29, False), DayCell(30, False), DayCell(31, False),
            DayCell(1, True), DayCell(2, True), DayCell(3, True),
        ]

    def test_previous_month_wraps_to_december(self) -> None:
        grid = calculate_grid(2024, 1)
        assert grid[0][0] == DayCell(31, False)
        assert grid[0][1] == DayCell(1, True)

    def test_month_starting_on_first_weekday_has_no_bleed_in(self) -> None:
        # 1 February 2015 was a Sunday
        grid = calculate_grid(2015, 2)
        assert grid[0] == [DayCell(d, True) for d in range(1, 8)]
        assert grid[4][0] == DayCell(1, False)
        assert grid[5][-1] == DayCell(14, False)

    def test_always_six_rows_of_seven_without_options(self) -> None:
        for year in (1900, 2015, 2024, 2199):
            for month in range(1, 13):
                grid = calculate_grid(year, month)
                assert len(grid) == 6
                assert all(len(row) == 7 for row in grid)

    def test_current_month_count_matches_month_length(self) -> None:
        for year in range(1900, 2201):
            for month in range(1, 13):
                grid = calculate_grid(year, month)
                assert current_month_days(grid) == days_in_month(year, month - 1)

    def test_days_increase_by_one_and_wrap_at_month_edges(self) -> None:
        for year in range(2020, 2026):
            for month in range(1, 13):
                cells = [cell for row in calculate_grid(year, month) for cell in row]
                for prev, cell in zip(cells, cells[1:]):
                    if prev.belongs_to_current_month == cell.belongs_to_current_month:
                        assert cell.day == prev.day + 1
                    else:
                        assert cell.day == 1

    def test_hide_last_faded_row_trims_trailing_rows(self) -> None:
        grid = calculate_grid(2024, 2, options=GridOptions(hide_last_faded_row=True))
        assert len(grid) == 5
        assert grid[-1] == [
            DayCell(25, True), DayCell(26, True), DayCell(27, True), DayCell(28, True),
            DayCell(29, True), DayCell(1, False), DayCell(2, False),
        ]

    def test_only_current_month_days_trims_to_four_rows(self) -> None:
        grid = calculate_grid(2015, 2, options=GridOptions(only_show_current_month_days=True))
        assert len(grid) == 4
        assert all(cell.belongs_to_current_month for row in grid for cell in row)

    def test_trimmed_grid_keeps_every_current_day(self) -> None:
        options = GridOptions(hide_last_faded_row=True)
        for month in range(1, 13):
            grid = calculate_grid(2024, month, options=options)
            assert len(grid) <= 6
            assert all(len(row) == 7 for row in grid)
            assert current_month_days(grid) == days_in_month(2024, month - 1)

    def test_monday_first_layout(self) -> None:
        system = GregorianCalendar(first_weekday=calendar.MONDAY)
        grid = calculate_grid(2024, 1, system=system)
        assert grid[0] == [DayCell(d, True) for d in range(1, 8)]
