"""Pure calendar calculations — no UI dependencies."""

import calendar
import logging
from dataclasses import dataclass
from datetime import date
from typing import NamedTuple, Protocol

logger = logging.getLogger(__name__)

MONTH_DAYS: tuple[int, ...] = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)
LEAP_MONTH_INDEX = 1  # February, zero-based

MONTH_NAMES: tuple[str, ...] = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)

# Monday first, matching the calendar module's weekday numbering
DAY_NAMES: tuple[str, ...] = (
    "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday",
)

GRID_ROWS = 6
GRID_COLS = 7


# --- errors -----------------------------------------------------------------

class DatePickerError(Exception):
    """Base error."""


class InvalidDateFormat(DatePickerError, ValueError):
    """Raised when a date value can't be read as a (year, month, day) triple."""


class InvalidBounds(DatePickerError, ValueError):
    """Raised when the minimum date lies after the maximum date."""


# --- data -------------------------------------------------------------------

class CalendarDate(NamedTuple):
    """A plain (year, month, day) triple; tuple order is chronological order."""

    year: int
    month: int
    day: int


class DayCell(NamedTuple):
    day: int
    belongs_to_current_month: bool


Grid = list[list[DayCell]]


@dataclass(frozen=True)
class Bounds:
    min_date: CalendarDate
    max_date: CalendarDate

    def __post_init__(self) -> None:
        if self.min_date > self.max_date:
            raise InvalidBounds(
                f"min date {format_date(self.min_date)} is after "
                f"max date {format_date(self.max_date)}")


@dataclass(frozen=True)
class GridOptions:
    only_show_current_month_days: bool = False
    hide_last_faded_row: bool = False
    highlight_today: bool = True

    @property
    def trims_trailing_rows(self) -> bool:
        return self.only_show_current_month_days or self.hide_last_faded_row


DEFAULT_MIN_DATE = CalendarDate(1900, 1, 1)
DEFAULT_MAX_DATE = CalendarDate(2200, 1, 1)
DEFAULT_BOUNDS = Bounds(DEFAULT_MIN_DATE, DEFAULT_MAX_DATE)


# --- leap years and month lengths -------------------------------------------

def is_leap(year: int) -> bool:
    """Gregorian leap-year rule."""
    return (year % 4 == 0 and year % 100 != 0) or year % 400 == 0


def days_in_month(year: int, month_index: int) -> int:
    """Return the length of a month; ``month_index`` is zero-based (0 = January)."""
    extra = 1 if month_index == LEAP_MONTH_INDEX and is_leap(year) else 0
    return MONTH_DAYS[month_index] + extra


# --- calendar systems -------------------------------------------------------

class CalendarSystem(Protocol):
    """What the grid engine needs from a calendar (Gregorian, solar, ...)."""

    month_days: tuple[int, ...]
    leap_month_index: int
    month_names: tuple[str, ...]
    first_weekday: int

    @property
    def day_abbr(self) -> tuple[str, ...]: ...

    def is_leap(self, year: int) -> bool: ...

    def days_in_month(self, year: int, month_index: int) -> int: ...

    def start_weekday(self, year: int, month: int) -> int: ...


@dataclass(frozen=True)
class GregorianCalendar:
    """Gregorian calendar over the shared module-level tables.

    ``first_weekday`` uses the :mod:`calendar` numbering (0 = Monday,
    6 = Sunday) and decides which weekday sits in grid column 0.
    """

    first_weekday: int = calendar.SUNDAY
    month_days: tuple[int, ...] = MONTH_DAYS
    leap_month_index: int = LEAP_MONTH_INDEX
    month_names: tuple[str, ...] = MONTH_NAMES

    @property
    def day_names(self) -> tuple[str, ...]:
        start = self.first_weekday % 7
        return DAY_NAMES[start:] + DAY_NAMES[:start]

    @property
    def day_abbr(self) -> tuple[str, ...]:
        return tuple(name[:3] for name in self.day_names)

    def is_leap(self, year: int) -> bool:
        return is_leap(year)

    def days_in_month(self, year: int, month_index: int) -> int:
        extra = 1 if month_index == self.leap_month_index and self.is_leap(year) else 0
        return self.month_days[month_index] + extra

    def start_weekday(self, year: int, month: int) -> int:
        """Return the grid column (0 = first day of week) of day 1."""
        return (calendar.weekday(year, month, 1) - self.first_weekday) % 7


GREGORIAN = GregorianCalendar()


# --- parsing ----------------------------------------------------------------

def parse_date(value, sep: str | None = None) -> CalendarDate:
    """Read a date given as a string (``Y-M-D`` or ``Y/M/D``), a 3-sequence or a ``date``.

    Only the shape is checked: three integers, month 1–12, day 1–31.
    """
    if isinstance(value, date):
        return CalendarDate(value.year, value.month, value.day)

    if isinstance(value, str):
        text = value.strip()
        if sep is None:
            sep = "/" if "/" in text else "-"
        parts = text.split(sep)
    elif isinstance(value, (tuple, list)):
        parts = list(value)
    else:
        raise InvalidDateFormat(f"unsupported date value: {value!r}")

    if len(parts) != 3:
        raise InvalidDateFormat(f"expected year, month and day: {value!r}")
    if not all(isinstance(p, (int, str)) and not isinstance(p, bool) for p in parts):
        raise InvalidDateFormat(f"date parts must be integers or strings: {value!r}")
    try:
        year, month, day = (int(p) for p in parts)
    except (TypeError, ValueError) as exc:
        raise InvalidDateFormat(f"non-numeric date part in {value!r}") from exc

    if not 1 <= month <= 12:
        raise InvalidDateFormat(f"month out of range in {value!r}")
    if not 1 <= day <= 31:
        raise InvalidDateFormat(f"day out of range in {value!r}")
    return CalendarDate(year, month, day)


def format_date(d: CalendarDate, sep: str = "-") -> str:
    return f"{d[0]}{sep}{d[1]}{sep}{d[2]}"


# --- bounds -----------------------------------------------------------------

def clamp_date(candidate: CalendarDate, bounds: Bounds) -> CalendarDate:
    """Return ``candidate`` pulled into ``bounds``."""
    candidate = CalendarDate(*candidate)
    if candidate < bounds.min_date:
        return bounds.min_date
    if candidate > bounds.max_date:
        return bounds.max_date
    return candidate


def clamp_year(year: int, bounds: Bounds) -> int:
    return max(bounds.min_date.year, min(year, bounds.max_date.year))


# --- grid -------------------------------------------------------------------

def calculate_grid(
    year: int,
    month: int,
    bounds: Bounds = DEFAULT_BOUNDS,
    options: GridOptions | None = None,
    system: CalendarSystem = GREGORIAN,
) -> Grid:
    """Return the day grid for the given month.

    Rows hold 7 cells each. The first row is padded with the trailing days
    of the previous month and the grid is filled with days of the next
    month until 6 rows exist. When ``options`` trims trailing rows, rows
    made up only of next-month days are left out.
    """
    options = options or GridOptions()

    start = system.start_weekday(year, month)
    current_len = system.days_in_month(year, month - 1)
    total = current_len + start

    prev_year, prev_index = year, month - 2
    if prev_index < 0:
        prev_index = 11
        prev_year = max(year - 1, bounds.min_date.year)
    prev_len = system.days_in_month(prev_year, prev_index)

    grid: Grid = []
    row = [DayCell(prev_len - start + k + 1, False) for k in range(start)]

    i = start + 1
    while len(grid) < GRID_ROWS:
        if i > total:
            row.append(DayCell(i - total, False))
        else:
            row.append(DayCell(i - start, True))
        if i % GRID_COLS == 0:
            grid.append(row)
            row = []
            if options.trims_trailing_rows and GRID_COLS * len(grid) >= total:
                break
        i += 1

    logger.debug("grid %d-%d: start=%d length=%d rows=%d",
                 year, month, start, current_len, len(grid))
    return grid

