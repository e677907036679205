"""Date-picker state machine: anchor month, selection, navigation.

All operations are synchronous and must be called from one thread (the UI
thread of the host). Each one rebuilds the grid and notifies listeners before
it returns.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Callable

from calendar_logic import (
    DEFAULT_LABEL_FORMAT,
    MONDAY,
    DayCell,
    GregorianCalendar,
    as_day,
    build_grid,
    next_month,
    next_year,
    prev_month,
    prev_year,
)

log = logging.getLogger("mini_date_picker.calendar_engine")

GridListener = Callable[[str, tuple[DayCell, ...]], None]
SelectionListener = Callable[[date], None]


class CalendarEngine:
    """Holds the anchor month and the selected date, publishes rebuilt grids.

    ``today`` is read from the calendar once here and never refreshed.
    """

    def __init__(self, cal: GregorianCalendar | None = None,
                 label_format: str = DEFAULT_LABEL_FORMAT,
                 first_weekday: int = MONDAY) -> None:
        self._cal = cal or GregorianCalendar()
        self.label_format = label_format
        self.first_weekday = first_weekday

        self.today: date = as_day(self._cal.today())
        self.year: int = self.today.year
        self.month: int = self.today.month
        self.selected_date: date | None = None

        self._grid_listeners: list[GridListener] = []
        self._selection_listeners: list[SelectionListener] = []

        self.label: str = ""
        self.cells: tuple[DayCell, ...] = ()
        self._rebuild()

    @property
    def anchor(self) -> tuple[int, int]:
        return self.year, self.month

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------
    def add_grid_listener(self, callback: GridListener) -> None:
        """Register ``callback(label, cells)``; it receives the current grid at once."""
        self._grid_listeners.append(callback)
        callback(self.label, self.cells)

    def remove_grid_listener(self, callback: GridListener) -> None:
        self._grid_listeners.remove(callback)

    def add_selection_listener(self, callback: SelectionListener) -> None:
        self._selection_listeners.append(callback)

    def remove_selection_listener(self, callback: SelectionListener) -> None:
        self._selection_listeners.remove(callback)

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------
    def select_cell(self, identity: str) -> date | None:
        """Select the cell with ``identity`` in the current grid.

        An identity from a superseded grid is ignored.
        """
        cell = next((c for c in self.cells if c.identity == identity), None)
        if cell is None:
            log.debug("Ignoring stale cell identity %s", identity)
            return None
        self._select(cell.date)
        return cell.date

    def select_date(self, d: date) -> None:
        """Select ``d`` and show its month."""
        d = as_day(d)
        self.year, self.month = d.year, d.month
        self._select(d)

    def clear_selection(self) -> None:
        self.selected_date = None
        self._rebuild()
        self._publish_grid()

    def _select(self, d: date | None) -> None:
        log.debug("Selected %s", d)
        self.selected_date = d
        self._rebuild()
        self._publish_grid()
        if d is not None:
            for callback in list(self._selection_listeners):
                callback(d)

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------
    def go_to_previous_month(self) -> None:
        self._move(prev_month)

    def go_to_next_month(self) -> None:
        self._move(next_month)

    def go_to_previous_year(self) -> None:
        self._move(prev_year)

    def go_to_next_year(self) -> None:
        self._move(next_year)

    def go_to_today(self) -> None:
        """Show the month containing today; the selection is kept."""
        self._move(lambda _y, _m: (self.today.year, self.today.month))

    def _move(self, step: Callable[[int, int], tuple[int, int]]) -> None:
        self.year, self.month = step(self.year, self.month)
        log.debug("Anchor month now %04d-%02d", self.year, self.month)
        self._rebuild()
        self._publish_grid()

    # ------------------------------------------------------------------
    # Build / publish
    # ------------------------------------------------------------------
    def configure(self, label_format: str | None = None,
                  first_weekday: int | None = None) -> None:
        """Change display options and republish the grid."""
        if label_format is not None:
            self.label_format = label_format
        if first_weekday is not None:
            self.first_weekday = first_weekday
        self._rebuild()
        self._publish_grid()

    def _rebuild(self) -> None:
        self.label, self.cells = build_grid(
            self.year, self.month, self.selected_date, self.today,
            cal=self._cal, label_format=self.label_format,
            first_weekday=self.first_weekday,
        )

    def _publish_grid(self) -> None:
        for callback in list(self._grid_listeners):
            callback(self.label, self.cells)
