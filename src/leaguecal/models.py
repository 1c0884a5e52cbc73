"""Data models for the leaguecal season calendar generator."""

from dataclasses import dataclass, field
from datetime import date, datetime, time
from enum import Enum
from typing import Optional


class Weekday(Enum):
    Mon = 0
    Tue = 1
    Wed = 2
    Thu = 3
    Fri = 4
    Sat = 5
    Sun = 6

    @classmethod
    def from_str(cls, s: str) -> "Weekday":
        return cls[s[:3].capitalize()]


def as_date(value) -> date:
    """Coerce a stored match date (date, datetime or ISO string) to a date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


FIELD_AVAILABLE = "available"
FIELD_STATUSES = ("available", "maintenance", "reserved", "unavailable")

STATUS_SCHEDULED = "scheduled"

FAILURE_CONTINUE = "continue"
FAILURE_ABORT = "abort"


@dataclass
class Team:
    """A registered team. Read-only input to the scheduler."""
    id: str
    category_id: str
    division_id: str
    name: str = ""


@dataclass
class Field:
    """A playing field and whether it can be booked."""
    id: str
    name: str
    status: str = FIELD_AVAILABLE

    @property
    def is_available(self) -> bool:
        return self.status == FIELD_AVAILABLE


@dataclass
class Category:
    id: str
    division_id: str
    name: str = ""


@dataclass
class Referee:
    id: str
    name: str = ""


@dataclass
class Pairing:
    """Two teams meeting in a round, home side first."""
    home: str
    away: str

    def involves(self, team_id: str) -> bool:
        return team_id in (self.home, self.away)

    def reversed(self) -> "Pairing":
        return Pairing(self.away, self.home)


@dataclass
class Round:
    """A set of pairings where each team plays at most once."""
    number: int
    pairings: list[Pairing]
    bye_teams: list[str] = field(default_factory=list)


@dataclass
class Fixture:
    """A scheduled match, before or after it has been persisted."""
    season_id: str
    division_id: str
    category_id: str
    field_id: str
    home_team_id: str
    away_team_id: str
    match_date: date
    match_time: str  # "HH:MM"
    round_number: int
    is_playoff: bool = False
    status: str = STATUS_SCHEDULED
    group_number: int = 1
    referee_id: Optional[str] = None
    notes: str = ""
    id: Optional[str] = None

    @property
    def slot_key(self) -> tuple[str, date, str]:
        return (self.field_id, as_date(self.match_date), self.match_time)


@dataclass
class CalendarOptions:
    """Knobs for one generate_calendar call.

    The defaults reproduce the league's regular season: Sunday play,
    hourly kickoffs from 07:00 to 16:00, at most nine weekly rounds.
    """
    use_available_fields_only: bool = True
    use_groups: bool = False
    group_size: int = 9
    group_by_category: bool = False
    generate_by_round: bool = False
    round_number: Optional[int] = None
    reference_date: Optional[date] = None
    double_round_robin: bool = False
    max_rounds: int = 9
    play_day: Weekday = Weekday.Sun
    first_slot: time = time(7, 0)
    last_slot: time = time(16, 0)
    slot_minutes: int = 60
    failure_policy: str = FAILURE_CONTINUE
    skip_existing_pairings: bool = False
    assign_referees: bool = True
    exclude_fixture_id: Optional[str] = None


@dataclass
class FixtureFailure:
    """A fixture the store refused, with the error it raised."""
    fixture: Fixture
    error: Exception


@dataclass
class CalendarResult:
    """Outcome of one generate_calendar call."""
    created: list[Fixture] = field(default_factory=list)
    failed: list[FixtureFailure] = field(default_factory=list)
    planned: int = 0
    groups: list[list[str]] = field(default_factory=list)
    suppressed_rounds: int = 0
    skipped_pairings: int = 0
    cancelled: bool = False

    @property
    def ok(self) -> bool:
        return not self.failed and not self.cancelled

    @property
    def created_count(self) -> int:
        return len(self.created)

    @property
    def failed_count(self) -> int:
        return len(self.failed)
