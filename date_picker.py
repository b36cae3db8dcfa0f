"""Date-picker engine: on-screen month navigation and date selection.

The engine owns the state behind one rendered picker. Navigation commands
recompute the grid before returning and hand back the notifications the
host should forward to its header; the host asks :meth:`DatePicker.cell_style`
how to paint each cell.
"""

import enum
import logging
from datetime import date
from typing import NamedTuple

from calendar_logic import (
    DEFAULT_MAX_DATE,
    DEFAULT_MIN_DATE,
    GREGORIAN,
    Bounds,
    CalendarDate,
    CalendarSystem,
    DayCell,
    GregorianCalendar,
    Grid,
    GridOptions,
    calculate_grid,
    clamp_date,
    clamp_year,
    parse_date,
)

logger = logging.getLogger(__name__)

MONTH_CHANGED = "current-month-changed"
YEAR_CHANGED = "current-year-changed"


class Notification(NamedTuple):
    kind: str
    value: int


class CellStyle(enum.Enum):
    NONE = "none"
    FADE = "fade"
    TODAY = "today"
    SELECTED = "selected"
    EDGE_START = "edge_start"
    EDGE_END = "edge_end"
    IN_RANGE = "in_range"


class RangeSelection:
    """Zero, one or two selected dates; two dates are kept in ascending order."""

    __slots__ = ("_dates",)

    def __init__(self) -> None:
        self._dates: list[CalendarDate] = []

    def __len__(self) -> int:
        return len(self._dates)

    @property
    def dates(self) -> list[CalendarDate]:
        return list(self._dates)

    def add(self, d: CalendarDate) -> list[CalendarDate]:
        """Append ``d``; a third date empties the selection instead."""
        self._dates.append(CalendarDate(*d))
        if len(self._dates) == 2 and self._dates[0] > self._dates[1]:
            self._dates.reverse()
        elif len(self._dates) > 2:
            self._dates = []
        return self.dates

    def clear(self) -> None:
        self._dates = []

    def is_edge(self, d: CalendarDate) -> bool:
        if len(self._dates) != 2:
            return False
        return d == self._dates[0] or d == self._dates[1]

    def is_in_range(self, d: CalendarDate) -> bool:
        """True for days strictly between the two selected dates.

        Months and days are compared separately rather than as one
        (year, month, day) ordering; this is exact for ranges within a
        year and approximate for ranges that cross a year boundary.
        """
        if len(self._dates) != 2:
            return False
        lo, hi = self._dates
        after_lo = ((lo.year <= d[0] and lo.month < d[1])
                    or (lo.month == d[1] and lo.day < d[2]))
        before_hi = ((hi.year >= d[0] and hi.month > d[1])
                     or (hi.month == d[1] and hi.day > d[2]))
        return after_lo and before_hi


def decade_range(year: int) -> tuple[int, int]:
    """Return the first and last year of the decade containing ``year``."""
    start = year - year % 10
    return start, start + 9


class DatePicker:
    """Navigation and selection state for a single calendar widget."""

    def __init__(
        self,
        initial_date=None,
        active_date=None,
        min_date=DEFAULT_MIN_DATE,
        max_date=DEFAULT_MAX_DATE,
        range_picker: bool = False,
        options: GridOptions | None = None,
        system: CalendarSystem = GREGORIAN,
    ) -> None:
        self.bounds = Bounds(parse_date(min_date), parse_date(max_date))
        self.range_picker = range_picker
        self.options = options or GridOptions()
        self.system = system

        # Without explicit dates the picker follows the calendar day
        self._follows_today = initial_date is None
        self._active_follows_initial = active_date is None
        if initial_date is None:
            initial_date = date.today()
        self.initial_date = clamp_date(parse_date(initial_date), self.bounds)
        self.active_date = (parse_date(active_date) if active_date is not None
                            else self.initial_date)

        self._on_screen = self.initial_date
        self._selection = RangeSelection()
        self._highlighted: set[CalendarDate] = set()
        self._grid: Grid = []
        self._recalculate()

    @classmethod
    def from_settings(cls, settings: dict, initial_date=None, active_date=None) -> "DatePicker":
        """Build a picker from a :func:`settings.load_settings` dict."""
        options = GridOptions(
            only_show_current_month_days=settings["only_show_current_month_days"],
            hide_last_faded_row=settings["hide_last_faded_row"],
            highlight_today=settings["highlight_today"],
        )
        return cls(
            initial_date=initial_date,
            active_date=active_date,
            min_date=settings["min_date"],
            max_date=settings["max_date"],
            range_picker=settings["range_picker"],
            options=options,
            system=GregorianCalendar(first_weekday=settings["first_weekday"]),
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @property
    def grid(self) -> Grid:
        return self._grid

    @property
    def on_screen_state(self) -> tuple[int, int]:
        return self._on_screen.year, self._on_screen.month

    @property
    def on_screen_date(self) -> CalendarDate:
        return self._on_screen

    @property
    def selection(self) -> list[CalendarDate]:
        return self._selection.dates

    @property
    def highlighted(self) -> set[CalendarDate]:
        return set(self._highlighted)

    def is_edge(self, d: CalendarDate) -> bool:
        return self._selection.is_edge(d)

    def is_in_range(self, d: CalendarDate) -> bool:
        return self._selection.is_in_range(d)

    def is_active_date_on_screen(self) -> bool:
        return (self.active_date.year, self.active_date.month) == self.on_screen_state

    def month_name(self, month: int | None = None) -> str:
        if month is None:
            month = self._on_screen.month
        return self.system.month_names[month - 1]

    def weekday_labels(self, short: bool = False) -> tuple[str, ...]:
        labels = self.system.day_abbr
        return tuple(label[:1] for label in labels) if short else labels

    def cell_date(self, cell: DayCell) -> CalendarDate | None:
        """Return the date behind a grid cell; faded cells have none."""
        if not cell.belongs_to_current_month:
            return None
        return CalendarDate(self._on_screen.year, self._on_screen.month, cell.day)

    def cell_style(self, cell: DayCell) -> CellStyle:
        d = self.cell_date(cell)
        if d is None:
            return CellStyle.FADE
        if len(self._selection) == 2:
            lo, hi = self._selection.dates
            if d == lo:
                return CellStyle.EDGE_START
            if d == hi:
                return CellStyle.EDGE_END
            if self._selection.is_in_range(d):
                return CellStyle.IN_RANGE
            return CellStyle.NONE
        if d in self._highlighted:
            return CellStyle.SELECTED
        if (self.options.highlight_today and self.is_active_date_on_screen()
                and d.day == self.active_date.day):
            return CellStyle.TODAY
        return CellStyle.NONE

    # ------------------------------------------------------------------
    # In-bounds choices for the month / year / decade pickers
    # ------------------------------------------------------------------
    def month_choices(self) -> list[int]:
        """Months of the on-screen year that lie within the bounds."""
        year = self._on_screen.year
        lo, hi = self.bounds.min_date, self.bounds.max_date
        return [m for m in range(1, 13)
                if (lo.year, lo.month) <= (year, m) <= (hi.year, hi.month)]

    def year_choices(self) -> list[int]:
        """Years of the on-screen decade that lie within the bounds."""
        start, end = decade_range(self._on_screen.year)
        lo, hi = self.bounds.min_date.year, self.bounds.max_date.year
        return [y for y in range(start, end + 1) if lo <= y <= hi]

    def decade_choices(self) -> list[tuple[int, int]]:
        """Return ``(first_year, year_to_go_to)`` for the on-screen century.

        A decade that straddles the minimum year is entered at that year.
        """
        year = self._on_screen.year
        century = year - year % 100
        lo, hi = self.bounds.min_date.year, self.bounds.max_date.year
        return [(start, max(start, lo))
                for start in range(century, century + 100, 10)
                if start + 9 >= lo and start <= hi]

    # ------------------------------------------------------------------
    # Grid recomputation
    # ------------------------------------------------------------------
    def _recalculate(self) -> list[Notification]:
        year, month, _day = self._on_screen
        self._grid = calculate_grid(year, month, self.bounds, self.options, self.system)
        return [Notification(MONTH_CHANGED, month), Notification(YEAR_CHANGED, year)]

    def _set_year(self, year: int) -> None:
        """Move to ``year``; on a bound year the whole triple is clamped."""
        self._on_screen = self._on_screen._replace(year=year)
        if year in (self.bounds.min_date.year, self.bounds.max_date.year):
            self._on_screen = clamp_date(self._on_screen, self.bounds)

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------
    def next_month(self) -> list[Notification]:
        logger.debug("next_month from %s", self._on_screen)
        year, month, day = self._on_screen
        if month == 12:
            candidate = CalendarDate(year + 1, 1, 1)
        else:
            candidate = CalendarDate(year, month + 1, day)
        self._on_screen = clamp_date(candidate, self.bounds)
        return self._recalculate()

    def prev_month(self) -> list[Notification]:
        logger.debug("prev_month from %s", self._on_screen)
        year, month, day = self._on_screen
        if month == 1:
            candidate = CalendarDate(year - 1, 12, 1)
        else:
            candidate = CalendarDate(year, month - 1, day)
        self._on_screen = clamp_date(candidate, self.bounds)
        return self._recalculate()

    def next_year(self) -> list[Notification]:
        logger.debug("next_year from %s", self._on_screen)
        self._set_year(clamp_year(self._on_screen.year + 1, self.bounds))
        return self._recalculate()

    def prev_year(self) -> list[Notification]:
        logger.debug("prev_year from %s", self._on_screen)
        self._set_year(clamp_year(self._on_screen.year - 1, self.bounds))
        return self._recalculate()

    def next_decade(self) -> list[Notification]:
        logger.debug("next_decade from %s", self._on_screen)
        year = self._on_screen.year
        self._set_year(min(year - year % 10 + 10, self.bounds.max_date.year))
        return self._recalculate()

    def prev_decade(self) -> list[Notification]:
        """Step back one decade.

        Hitting the lower bound moves the year to the bound but leaves the
        grid as it was and emits nothing; the upper bound in
        :meth:`next_decade` recomputes as usual.
        """
        logger.debug("prev_decade from %s", self._on_screen)
        year = self._on_screen.year
        target = year - year % 10 - 10
        if target < self.bounds.min_date.year:
            self._set_year(self.bounds.min_date.year)
            return []
        self._set_year(target)
        return self._recalculate()

    def go_to_month(self, month: int) -> list[Notification]:
        logger.debug("go_to_month %d", month)
        self._on_screen = self._on_screen._replace(month=month)
        return self._recalculate()

    def go_to_year(self, year: int) -> list[Notification]:
        logger.debug("go_to_year %d", year)
        self._on_screen = self._on_screen._replace(year=year)
        return self._recalculate()

    def go_to_decade(self, start_year: int) -> list[Notification]:
        logger.debug("go_to_decade %d", start_year)
        return self.go_to_year(start_year)

    def refresh_today(self) -> None:
        """Re-read today's date when the picker was not given fixed dates."""
        if self._follows_today:
            self.initial_date = clamp_date(parse_date(date.today()), self.bounds)
        if self._active_follows_initial:
            self.active_date = self.initial_date

    def reset(self) -> list[Notification]:
        """Return to the initial date (today, unless fixed) and drop any selection."""
        self.refresh_today()
        logger.debug("reset to %s", self.initial_date)
        self._on_screen = self.initial_date
        self.clear_selection()
        return self._recalculate()

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------
    def on_day_clicked(self, d: CalendarDate) -> list[CalendarDate]:
        d = CalendarDate(*d)
        if not self.range_picker:
            self.clear_highlighting()
            self._highlighted.add(d)
            return self.selection

        self._highlighted.add(d)
        selected = self._selection.add(d)
        if not selected:
            self.clear_highlighting()
        logger.debug("selection: %s", selected)
        return selected

    def clear_highlighting(self) -> None:
        self._highlighted.clear()

    def clear_selection(self) -> None:
        self._selection.clear()
        self.clear_highlighting()


def header_title(picker: DatePicker, view: str = "calendar") -> str:
    """Return the header text for the given view."""
    year = picker.on_screen_date.year
    if view == "calendar":
        return f"{picker.month_name()} {year}"
    if view == "month_list":
        return str(year)
    if view in ("year_list", "decade_list"):
        start, end = decade_range(year)
        return f"{start}-{end}"
    logger.warning("Invalid view: %r", view)
    return ""
