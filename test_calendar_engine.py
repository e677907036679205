from datetime import date, datetime

import pytest

from calendar_engine import CalendarEngine
from calendar_logic import CalendarResolutionFailure, GregorianCalendar


class FixedCalendar(GregorianCalendar):
    """Gregorian calendar with a pinned "today"."""

    def __init__(self, today):
        self._today = today

    def today(self):
        return self._today


class BrokenCalendar(FixedCalendar):
    def resolve(self, year, month, day):
        raise CalendarResolutionFailure("calendar misconfigured")


class Recorder:
    def __init__(self, engine):
        self.events = []
        engine.add_grid_listener(self.on_grid)
        engine.add_selection_listener(self.on_date)
        self.events.clear()

    def on_grid(self, label, cells):
        self.events.append(("grid", label, cells))

    def on_date(self, d):
        self.events.append(("date", d))


@pytest.fixture
def engine():
    return CalendarEngine(FixedCalendar(date(2022, 5, 10)))


@pytest.fixture
def recorder(engine):
    return Recorder(engine)


def _cell_for(engine, d):
    return next(c for c in engine.cells if c.date == d)


def _current_month(cells):
    return [(c.day, c.date) for c in cells if c.is_current_month]


# ------------------------------------------------------------------
# Initial state
# ------------------------------------------------------------------

def test_initial_state(engine):
    assert engine.anchor == (2022, 5)
    assert engine.today == date(2022, 5, 10)
    assert engine.selected_date is None
    assert engine.label == "2022.05"
    assert len(engine.cells) == 42


def test_today_is_flagged_once(engine):
    flagged = [c for c in engine.cells if c.is_today]
    assert [c.date for c in flagged] == [date(2022, 5, 10)]


def test_today_from_datetime_is_reduced_to_a_day():
    engine = CalendarEngine(FixedCalendar(datetime(2022, 5, 10, 23, 59)))
    assert engine.today == date(2022, 5, 10)
    assert type(engine.today) is date
    assert any(c.is_today for c in engine.cells)


def test_today_is_frozen_at_construction():
    cal = FixedCalendar(date(2022, 5, 10))
    engine = CalendarEngine(cal)
    cal._today = date(2022, 5, 11)
    engine.go_to_next_month()
    engine.go_to_previous_month()
    assert engine.today == date(2022, 5, 10)
    assert _cell_for(engine, date(2022, 5, 10)).is_today


def test_new_grid_listener_gets_current_grid(engine):
    seen = []
    engine.add_grid_listener(lambda label, cells: seen.append((label, cells)))
    assert seen == [("2022.05", engine.cells)]


# ------------------------------------------------------------------
# Navigation
# ------------------------------------------------------------------

def test_next_then_previous_restores_month(engine):
    before_label, before_cells = engine.label, engine.cells
    engine.go_to_next_month()
    assert engine.label == "2022.06"
    engine.go_to_previous_month()

    assert engine.label == before_label
    assert _current_month(engine.cells) == _current_month(before_cells)
    assert {c.identity for c in engine.cells}.isdisjoint(c.identity for c in before_cells)


def test_navigation_publishes_grid(engine, recorder):
    engine.go_to_next_month()
    assert [e[:2] for e in recorder.events] == [("grid", "2022.06")]
    assert recorder.events[0][2] is engine.cells


def test_previous_from_january_rolls_year():
    engine = CalendarEngine(FixedCalendar(date(2022, 1, 15)))
    engine.go_to_previous_month()
    assert engine.anchor == (2021, 12)
    assert engine.label == "2021.12"


def test_next_from_december_rolls_year():
    engine = CalendarEngine(FixedCalendar(date(2022, 12, 15)))
    engine.go_to_next_month()
    assert engine.anchor == (2023, 1)
    assert engine.label == "2023.01"


def test_month_stays_normalized_over_many_steps(engine):
    for _ in range(30):
        engine.go_to_next_month()
        assert 1 <= engine.month <= 12
    assert engine.anchor == (2024, 11)
    for _ in range(30):
        engine.go_to_previous_month()
    assert engine.anchor == (2022, 5)


def test_year_navigation(engine):
    engine.go_to_next_year()
    assert engine.label == "2023.05"
    engine.go_to_previous_year()
    engine.go_to_previous_year()
    assert engine.label == "2021.05"


def test_go_to_today_keeps_selection(engine):
    engine.select_cell(_cell_for(engine, date(2022, 5, 15)).identity)
    engine.go_to_next_year()
    engine.go_to_today()
    assert engine.anchor == (2022, 5)
    assert engine.selected_date == date(2022, 5, 15)


# ------------------------------------------------------------------
# Selection
# ------------------------------------------------------------------

def test_select_cell_marks_exactly_that_cell(engine, recorder):
    target = _cell_for(engine, date(2022, 5, 15))
    assert engine.select_cell(target.identity) == date(2022, 5, 15)

    assert engine.selected_date == date(2022, 5, 15)
    flagged = [c for c in engine.cells if c.is_selected]
    assert [c.date for c in flagged] == [date(2022, 5, 15)]
    assert [e[0] for e in recorder.events] == ["grid", "date"]
    assert recorder.events[1] == ("date", date(2022, 5, 15))


def test_reselect_moves_the_flag(engine):
    engine.select_cell(_cell_for(engine, date(2022, 5, 15)).identity)
    engine.select_cell(_cell_for(engine, date(2022, 5, 20)).identity)
    assert [c.date for c in engine.cells if c.is_selected] == [date(2022, 5, 20)]


def test_stale_identity_is_ignored(engine, recorder):
    stale = _cell_for(engine, date(2022, 5, 15)).identity
    engine.go_to_next_month()
    recorder.events.clear()

    assert engine.select_cell(stale) is None
    assert engine.selected_date is None
    assert recorder.events == []


def test_stale_identity_after_selection_rebuild(engine, recorder):
    old = _cell_for(engine, date(2022, 5, 20)).identity
    engine.select_cell(_cell_for(engine, date(2022, 5, 15)).identity)
    recorder.events.clear()

    engine.select_cell(old)
    assert engine.selected_date == date(2022, 5, 15)
    assert recorder.events == []


def test_selection_survives_month_round_trip(engine):
    engine.select_cell(_cell_for(engine, date(2022, 5, 15)).identity)
    engine.go_to_next_month()
    assert not any(c.is_selected for c in engine.cells)
    assert engine.selected_date == date(2022, 5, 15)

    engine.go_to_previous_month()
    assert _cell_for(engine, date(2022, 5, 15)).is_selected


def test_selected_adjacent_day_shows_in_neighbouring_grid(engine):
    engine.select_cell(_cell_for(engine, date(2022, 5, 31)).identity)
    engine.go_to_next_month()
    flagged = [c for c in engine.cells if c.is_selected]
    assert [c.date for c in flagged] == [date(2022, 5, 31)]
    assert not flagged[0].is_current_month


def test_selecting_leading_cell_keeps_anchor(engine):
    engine.select_cell(_cell_for(engine, date(2022, 4, 25)).identity)
    assert engine.anchor == (2022, 5)
    assert engine.selected_date == date(2022, 4, 25)


def test_clear_selection(engine, recorder):
    engine.select_cell(_cell_for(engine, date(2022, 5, 15)).identity)
    recorder.events.clear()

    engine.clear_selection()
    assert engine.selected_date is None
    assert not any(c.is_selected for c in engine.cells)
    assert [e[0] for e in recorder.events] == ["grid"]


def test_select_date_moves_anchor(engine, recorder):
    engine.select_date(datetime(2023, 2, 14, 9, 0))
    assert engine.anchor == (2023, 2)
    assert engine.selected_date == date(2023, 2, 14)
    assert [e[0] for e in recorder.events] == ["grid", "date"]
    assert _cell_for(engine, date(2023, 2, 14)).is_selected


# ------------------------------------------------------------------
# Listeners
# ------------------------------------------------------------------

def test_removed_listeners_are_not_called(engine):
    grids, dates = [], []

    def on_grid(label, cells):
        grids.append(label)

    engine.add_grid_listener(on_grid)
    engine.add_selection_listener(dates.append)
    engine.remove_grid_listener(on_grid)
    engine.remove_selection_listener(dates.append)

    engine.select_cell(_cell_for(engine, date(2022, 5, 15)).identity)
    assert grids == ["2022.05"]
    assert dates == []


def test_listener_errors_propagate(engine):
    def boom(_d):
        raise RuntimeError("listener failed")

    engine.add_selection_listener(boom)
    with pytest.raises(RuntimeError):
        engine.select_cell(_cell_for(engine, date(2022, 5, 15)).identity)


def test_configure_republishes(engine, recorder):
    engine.configure(label_format="%m/%Y", first_weekday=6)
    assert engine.label == "05/2022"
    assert len(engine.cells) == 35
    assert recorder.events[-1][1] == "05/2022"


# ------------------------------------------------------------------
# Resolution failures
# ------------------------------------------------------------------

def test_selecting_undated_cell_publishes_grid_only():
    engine = CalendarEngine(FixedCalendar(date(9999, 12, 1)))
    recorder = Recorder(engine)
    undated = [c for c in engine.cells if c.date is None]
    assert undated

    assert engine.select_cell(undated[0].identity) is None
    assert engine.selected_date is None
    assert [e[0] for e in recorder.events] == ["grid"]
    assert not any(c.is_selected for c in engine.cells)


def test_sunday_first_january_of_year_one_keeps_grid():
    engine = CalendarEngine(FixedCalendar(date(1, 1, 1)), first_weekday=6)
    assert len(engine.cells) == 35
    assert engine.cells[0].date is None
    assert engine.cells[1].date == date(1, 1, 1)


def test_broken_calendar_degrades_to_empty_grid():
    engine = CalendarEngine(BrokenCalendar(date(2022, 5, 10)))
    assert engine.label == ""
    assert engine.cells == ()

    engine.go_to_next_month()
    assert engine.anchor == (2022, 6)
    assert engine.cells == ()
    assert engine.select_cell("anything") is None


def test_navigating_before_year_one_gives_empty_grid():
    engine = CalendarEngine(FixedCalendar(date(1, 1, 1)))
    engine.go_to_previous_month()
    assert engine.anchor == (0, 12)
    assert (engine.label, engine.cells) == ("", ())

    engine.go_to_next_month()
    assert engine.anchor == (1, 1)
    assert len(engine.cells) == 35
