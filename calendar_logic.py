"""Pure calendar calculations — no UI dependencies."""

from __future__ import annotations

import calendar
import logging
import uuid
from dataclasses import dataclass
from datetime import date, datetime

log = logging.getLogger("mini_date_picker.calendar_logic")

DAY_ABBR = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
MONDAY, SUNDAY = 0, 6
DEFAULT_LABEL_FORMAT = "%Y.%m"


class CalendarResolutionFailure(Exception):
    """The host calendar could not turn year/month/day into a date."""


class GregorianCalendar:
    """Host calendar capability backed by ``datetime`` and ``calendar``."""

    def today(self) -> date:
        return date.today()

    def resolve(self, year: int, month: int, day: int) -> date:
        try:
            return date(year, month, day)
        except (ValueError, OverflowError) as exc:
            raise CalendarResolutionFailure(
                f"cannot resolve {year}-{month}-{day}: {exc}") from exc

    def days_in_month(self, year: int, month: int) -> int:
        # date() range-checks the year, monthrange alone accepts year 0
        self.resolve(year, month, 1)
        return calendar.monthrange(year, month)[1]

    def weekday(self, d: date) -> int:
        """Monday = 0 … Sunday = 6."""
        return d.weekday()


_GREGORIAN = GregorianCalendar()


def as_day(d: date | None) -> date | None:
    """Drop the time-of-day from a datetime so comparisons are per calendar day."""
    if isinstance(d, datetime):
        return d.date()
    return d


@dataclass(frozen=True)
class DayCell:
    identity: str
    day: int
    date: date | None
    is_current_month: bool
    is_today: bool = False
    is_selected: bool = False

    @property
    def is_weekend(self) -> bool:
        return self.date is not None and self.date.weekday() >= 5


def prev_month(year: int, month: int) -> tuple[int, int]:
    """Return (year, month) for one month earlier."""
    if month == 1:
        return year - 1, 12
    return year, month - 1


def next_month(year: int, month: int) -> tuple[int, int]:
    """Return (year, month) for one month later."""
    if month == 12:
        return year + 1, 1
    return year, month + 1


def prev_year(year: int, month: int) -> tuple[int, int]:
    return year - 1, month


def next_year(year: int, month: int) -> tuple[int, int]:
    return year + 1, month


def build_grid(
    year: int,
    month: int,
    selected: date | None,
    today: date,
    cal: GregorianCalendar | None = None,
    label_format: str = DEFAULT_LABEL_FORMAT,
    first_weekday: int = MONDAY,
) -> tuple[str, tuple[DayCell, ...]]:
    """Return ``(label, cells)`` for the given anchor month.

    The grid is a whole number of weeks starting on ``first_weekday``
    (Monday by default): leading days from the previous month, every day of
    the anchor month, then trailing days from the next month. ``month`` must
    already be normalized to 1–12.

    If the anchor month itself cannot be resolved the result is ``("", ())``.
    """
    cal = cal or _GREGORIAN
    selected = as_day(selected)
    today = as_day(today)

    py, pm = prev_month(year, month)
    try:
        first = cal.resolve(year, month, 1)
        days_count = cal.days_in_month(year, month)
        offset = (cal.weekday(first) - first_weekday) % 7
    except CalendarResolutionFailure as exc:
        log.warning("Empty grid for %s-%s: %s", year, month, exc)
        return "", ()

    prev_days = 0
    if offset:
        try:
            prev_days = cal.days_in_month(py, pm)
        except CalendarResolutionFailure as exc:
            # Leading cells keep their day numbers but get no date;
            # monthrange accepts year 0
            log.warning("Unresolved previous month: %s", exc)
            prev_days = calendar.monthrange(py, pm)[1]

    def _cell(y: int, m: int, day: int, current: bool) -> DayCell:
        try:
            d = cal.resolve(y, m, day)
        except CalendarResolutionFailure as exc:
            log.warning("Unresolved day in grid: %s", exc)
            d = None
        return DayCell(
            identity=str(uuid.uuid4()),
            day=day,
            date=d,
            is_current_month=current,
            is_today=d is not None and d == today,
            is_selected=d is not None and selected is not None and d == selected,
        )

    cells: list[DayCell] = []

    # offset 0: the 1st opens the week, no leading days
    for day in range(prev_days - offset + 1, prev_days + 1):
        cells.append(_cell(py, pm, day, current=False))

    for day in range(1, days_count + 1):
        cells.append(_cell(year, month, day, current=True))

    ny, nm = next_month(year, month)
    day = 1
    while len(cells) % 7 != 0:
        cells.append(_cell(ny, nm, day, current=False))
        day += 1

    return format_label(first, label_format), tuple(cells)


def format_label(first: date, label_format: str = DEFAULT_LABEL_FORMAT) -> str:
    """Year-month header text, ``2022.05`` by default."""
    return first.strftime(label_format)


def weekday_headers(first_weekday: int = MONDAY) -> list[str]:
    """Column titles for a week starting on ``first_weekday``."""
    return DAY_ABBR[first_weekday:] + DAY_ABBR[:first_weekday]


def iso_week_numbers(cells: tuple[DayCell, ...] | list[DayCell]) -> list[str]:
    """Return the ISO week number for each 7-cell row of a grid.

    The row's Thursday decides, so Sunday-first rows report the week most of
    their days belong to. A row with no resolvable date yields an empty string.
    """
    weeks: list[str] = []
    for start in range(0, len(cells), 7):
        dates = [c.date for c in cells[start:start + 7] if c.date is not None]
        d = next((d for d in dates if d.weekday() == 3), dates[0] if dates else None)
        weeks.append("" if d is None else str(d.isocalendar()[1]))
    return weeks


def day_of_year(d: date) -> int:
    """Return the 1-based day-of-year for the given date."""
    return d.timetuple().tm_yday
