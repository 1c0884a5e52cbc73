"""Date and time-slot helpers for leaguecal.

Matches are played on one fixed weekday, one round per week, on an hourly
kickoff grid. A slot is the triple (field_id, date, "HH:MM"); two fixtures
may never share one.
"""

from datetime import date, time, timedelta
from typing import Iterable, Optional

from leaguecal.errors import SchedulingConflictError
from leaguecal.models import Fixture, Weekday


def next_play_day(d: date, play_day: Weekday = Weekday.Sun) -> date:
    """Return d if it falls on play_day, else the next play_day after it."""
    return d + timedelta(days=(play_day.value - d.weekday()) % 7)


def round_date(start: date, round_number: int) -> date:
    """Date of a 1-based round when rounds are played weekly from start."""
    return start + timedelta(days=7 * (round_number - 1))


def round_for_date(target: date, reference: date, max_rounds: int) -> int:
    """Round number a date falls in, counting whole weeks from reference.

    Clamped to [1, max_rounds].
    """
    weeks = (target - reference).days // 7
    return min(max_rounds, max(1, weeks + 1))


def format_time(t: time) -> str:
    return t.strftime("%H:%M")


def time_grid(first: time = time(7, 0), last: time = time(16, 0),
              step_minutes: int = 60) -> list[str]:
    """Kickoff times from first to last inclusive, as 'HH:MM' strings."""
    if step_minutes <= 0:
        raise ValueError("step_minutes must be positive")
    slots = []
    current = first.hour * 60 + first.minute
    end = last.hour * 60 + last.minute
    while current <= end:
        slots.append(f"{current // 60:02d}:{current % 60:02d}")
        current += step_minutes
    return slots


class OccupiedSlots:
    """Set of (field_id, date, time) slots already taken.

    Built once from the fixtures already stored, then updated locally as new
    fixtures are placed, so placing a fixture never needs another store query.
    """

    def __init__(self, grid: list[str]):
        self.grid = list(grid)
        self._taken: set[tuple[str, date, str]] = set()

    @classmethod
    def from_fixtures(cls, fixtures: Iterable[Fixture], grid: list[str],
                      exclude_id: Optional[str] = None) -> "OccupiedSlots":
        occupied = cls(grid)
        for f in fixtures:
            if exclude_id is not None and f.id == exclude_id:
                continue
            occupied.add(*f.slot_key)
        return occupied

    def __contains__(self, key: tuple[str, date, str]) -> bool:
        return key in self._taken

    def __len__(self) -> int:
        return len(self._taken)

    def add(self, field_id: str, match_date: date, match_time: str) -> None:
        self._taken.add((field_id, match_date, match_time))

    def is_free(self, field_id: str, match_date: date, match_time: str) -> bool:
        return (field_id, match_date, match_time) not in self

    def claim(self, field_id: str, match_date: date) -> str:
        """Take the earliest free kickoff on a field and date.

        Raises SchedulingConflictError when the whole grid is taken.
        """
        for t in self.grid:
            if self.is_free(field_id, match_date, t):
                self.add(field_id, match_date, t)
                return t
        raise SchedulingConflictError(field_id, match_date)


def find_conflict(existing: Iterable[Fixture], field_id: str, match_date: date,
                  match_time: str, exclude_id: Optional[str] = None
                  ) -> Optional[Fixture]:
    """Return the stored fixture holding a slot, if any.

    Used when a single match is created or edited by hand; pass the edited
    fixture's id as exclude_id so it does not conflict with itself.
    """
    for f in existing:
        if exclude_id is not None and f.id == exclude_id:
            continue
        if f.slot_key == (field_id, match_date, match_time):
            return f
    return None
