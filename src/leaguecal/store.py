"""Storage interface used by the calendar generator.

The generator only reads teams, fields, categories, referees and existing
matches, and creates (or, when purging, deletes) matches. Any backend that
implements LeagueStore can be plugged in; InMemoryStore backs the CLI and
the tests.
"""

from abc import ABC, abstractmethod
from dataclasses import replace
from typing import Callable, Optional

from leaguecal.models import Category, Field, Fixture, Referee, Team


class LeagueStore(ABC):
    """Persistence operations the scheduler depends on."""

    @abstractmethod
    def list_teams_by_division(self, division_id: str) -> list[Team]:
        ...

    @abstractmethod
    def list_fields(self) -> list[Field]:
        ...

    @abstractmethod
    def list_matches(self, season_id: str) -> list[Fixture]:
        ...

    @abstractmethod
    def create_match(self, fixture: Fixture) -> str:
        """Persist a fixture and return its new id."""
        ...

    @abstractmethod
    def list_categories_by_division(self, division_id: str) -> list[Category]:
        ...

    @abstractmethod
    def delete_match(self, match_id: str) -> None:
        ...

    def list_referees(self, season_id: str) -> list[Referee]:
        return []


class InMemoryStore(LeagueStore):
    """Dict-backed store. Ids are assigned as m1, m2, ...

    fail_on is an optional predicate; when it returns True for a fixture,
    create_match raises RuntimeError instead of storing it.
    """

    def __init__(self, teams: Optional[list[Team]] = None,
                 fields: Optional[list[Field]] = None,
                 categories: Optional[list[Category]] = None,
                 referees: Optional[list[Referee]] = None,
                 matches: Optional[list[Fixture]] = None,
                 fail_on: Optional[Callable[[Fixture], bool]] = None):
        self.teams = list(teams or [])
        self.fields = list(fields or [])
        self.categories = list(categories or [])
        self.referees = list(referees or [])
        self.matches: dict[str, Fixture] = {}
        self.fail_on = fail_on
        self.create_calls = 0
        self._next_id = 1
        for m in matches or []:
            if m.id is None:
                m = replace(m, id=self._new_id())
            self.matches[m.id] = m

    def _new_id(self) -> str:
        match_id = f"m{self._next_id}"
        self._next_id += 1
        return match_id

    def list_teams_by_division(self, division_id: str) -> list[Team]:
        return [t for t in self.teams if t.division_id == division_id]

    def list_fields(self) -> list[Field]:
        return list(self.fields)

    def list_matches(self, season_id: str) -> list[Fixture]:
        return [m for m in self.matches.values() if m.season_id == season_id]

    def create_match(self, fixture: Fixture) -> str:
        self.create_calls += 1
        if self.fail_on is not None and self.fail_on(fixture):
            raise RuntimeError(
                f"store rejected {fixture.home_team_id} vs {fixture.away_team_id}"
            )
        match_id = self._new_id()
        self.matches[match_id] = replace(fixture, id=match_id)
        return match_id

    def list_categories_by_division(self, division_id: str) -> list[Category]:
        return [c for c in self.categories if c.division_id == division_id]

    def list_referees(self, season_id: str) -> list[Referee]:
        return list(self.referees)

    def delete_match(self, match_id: str) -> None:
        self.matches.pop(match_id, None)
