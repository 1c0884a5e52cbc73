"""Season calendar generation for leaguecal.

Three phases:
1. Grouping: split the division's teams into contiguous groups (optional)
2. Planning: round-robin pairings per group, then date, field, kickoff time
   and referee for every pairing, checked against the slots already booked
3. Persistence: one create_match call per planned fixture, in order

Planning finishes before the first write, so input errors and slot
exhaustion never leave a half-written calendar. Writes are not
transactional: what was created before a store failure stays created.
"""

import logging
from dataclasses import replace
from datetime import date
from typing import Optional

from leaguecal.errors import (
    InsufficientTeamsError, InvalidOptionsError, MissingCategoryError,
    NoEligibleFieldsError, PersistenceError, SchedulingError,
)
from leaguecal.models import (
    FAILURE_ABORT, FAILURE_CONTINUE, CalendarOptions, CalendarResult, Field,
    Fixture, FixtureFailure, Referee, Round, Team, as_date,
)
from leaguecal.roundrobin import generate_round_robin, pairings_for_round
from leaguecal.slots import (
    OccupiedSlots, format_time, next_play_day, round_date, round_for_date,
    time_grid,
)
from leaguecal.store import LeagueStore

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Phase 1: Grouping
# ---------------------------------------------------------------------------

def eligible_fields(fields: list[Field], available_only: bool) -> list[Field]:
    if available_only:
        return [f for f in fields if f.is_available]
    return list(fields)


def chunk(teams: list[Team], size: int) -> list[list[Team]]:
    """Contiguous chunks of at most size teams; the last may be smaller."""
    if size < 1:
        raise ValueError("group size must be at least 1")
    return [teams[i:i + size] for i in range(0, len(teams), size)]


def partition_groups(teams: list[Team], options: CalendarOptions) -> list[list[Team]]:
    """Split teams into the groups that are scheduled independently.

    With group_by_category, teams are first split by category (in order of
    first appearance) and each category is chunked on its own.
    """
    if options.group_by_category:
        by_category: dict[str, list[Team]] = {}
        for t in teams:
            by_category.setdefault(t.category_id, []).append(t)
        pools = list(by_category.values())
    else:
        pools = [list(teams)]

    groups = []
    for pool in pools:
        if options.use_groups and len(pool) > options.group_size:
            groups.extend(chunk(pool, options.group_size))
        else:
            groups.append(pool)
    return groups


# ---------------------------------------------------------------------------
# Phase 2: Planning
# ---------------------------------------------------------------------------

def group_rounds(team_ids: list[str], start: date,
                 options: CalendarOptions) -> tuple[list[tuple[Round, date]], int]:
    """Rounds to play for one group, each with its date.

    Returns ([(round, date)], suppressed_round_count).
    Full-calendar mode keeps the first max_rounds rounds of the rotation,
    one per week from start. Round-only mode returns the single round that
    start falls in, dated start.
    """
    if options.generate_by_round:
        number = options.round_number
        if number is None:
            reference = options.reference_date or date.today()
            number = round_for_date(start, reference, options.max_rounds)
        rnd = pairings_for_round(team_ids, number,
                                 double=options.double_round_robin)
        return [(rnd, start)], 0

    rounds = generate_round_robin(team_ids, double=options.double_round_robin)
    suppressed = max(0, len(rounds) - options.max_rounds)
    rounds = rounds[:options.max_rounds]
    return [(rnd, round_date(start, rnd.number)) for rnd in rounds], suppressed


class _RefereeRota:
    """Hands out referees in rotation, never one referee twice per kickoff."""

    def __init__(self, referees: list[Referee], existing: list[Fixture]):
        self.referees = referees
        self.busy: set[tuple[date, str, str]] = set()
        for f in existing:
            if f.referee_id:
                self.busy.add((as_date(f.match_date), f.match_time, f.referee_id))

    def pick(self, offset: int, match_date: date, match_time: str) -> Optional[str]:
        n = len(self.referees)
        for step in range(n):
            ref = self.referees[(offset + step) % n]
            key = (match_date, match_time, ref.id)
            if key not in self.busy:
                self.busy.add(key)
                return ref.id
        return None


def plan_calendar(season_id: str, division_id: str, groups: list[list[Team]],
                  fields: list[Field], start: date, options: CalendarOptions,
                  existing: Optional[list[Fixture]] = None,
                  default_category_id: Optional[str] = None,
                  referees: Optional[list[Referee]] = None,
                  ) -> tuple[list[Fixture], dict]:
    """Build the unsaved fixtures for all groups.

    fields must already be filtered and non-empty; start must already be
    on the play day. existing fixtures seed the occupied-slot set.

    Returns (fixtures, info) where info has suppressed_rounds and
    skipped_pairings counts.
    """
    existing = existing or []
    if options.exclude_fixture_id is not None:
        # the fixture being edited frees its slot and its referee
        existing = [f for f in existing if f.id != options.exclude_fixture_id]
    grid = time_grid(options.first_slot, options.last_slot, options.slot_minutes)
    occupied = OccupiedSlots.from_fixtures(existing, grid)
    logger.debug("%d slot(s) already booked this season", len(occupied))
    rota = _RefereeRota(referees or [], existing) if options.assign_referees else None

    already_paired: set[tuple[str, str]] = set()
    if options.skip_existing_pairings:
        already_paired = {
            (f.home_team_id, f.away_team_id) for f in existing
            if f.division_id == division_id
        }

    fixtures = []
    suppressed_total = 0
    skipped = 0

    for group_number, group in enumerate(groups, 1):
        if len(group) < 2:
            logger.warning("Group %d has %d team(s), skipped",
                           group_number, len(group))
            continue
        by_id = {t.id: t for t in group}
        rounds, suppressed = group_rounds([t.id for t in group], start, options)
        if suppressed:
            logger.warning("Group %d: %d round(s) beyond the %d-round cap dropped",
                           group_number, suppressed, options.max_rounds)
        suppressed_total += suppressed

        for rnd, match_date in rounds:
            if rnd.bye_teams:
                logger.debug("Group %d round %d: bye for %s",
                             group_number, rnd.number, ", ".join(rnd.bye_teams))
            k = 0
            for p in rnd.pairings:
                if (p.home, p.away) in already_paired:
                    skipped += 1
                    continue
                field = fields[k % len(fields)]
                match_time = occupied.claim(field.id, match_date)

                category_id = by_id[p.home].category_id or default_category_id
                if not category_id:
                    raise MissingCategoryError(
                        f"Team {p.home} has no category and division "
                        f"{division_id} has none to fall back on"
                    )

                referee_id = None
                if rota is not None and rota.referees:
                    referee_id = rota.pick(rnd.number + k, match_date, match_time)

                fixtures.append(Fixture(
                    season_id=season_id,
                    division_id=division_id,
                    category_id=category_id,
                    field_id=field.id,
                    home_team_id=p.home,
                    away_team_id=p.away,
                    match_date=match_date,
                    match_time=match_time,
                    round_number=rnd.number,
                    group_number=group_number,
                    referee_id=referee_id,
                    notes=f"Round {rnd.number} - {field.name} ({match_time})",
                ))
                k += 1

    return fixtures, {"suppressed_rounds": suppressed_total,
                      "skipped_pairings": skipped}


# ---------------------------------------------------------------------------
# Phase 3: Persistence
# ---------------------------------------------------------------------------

def persist_fixtures(store: LeagueStore, fixtures: list[Fixture],
                     result: CalendarResult, policy: str = FAILURE_CONTINUE,
                     cancel=None) -> CalendarResult:
    """Write fixtures one at a time, recording successes and failures.

    policy "continue" logs a failed write and moves on; "abort" raises
    PersistenceError at the first failure. cancel is anything with an
    is_set() method (e.g. threading.Event), checked before each write.
    """
    if policy not in (FAILURE_CONTINUE, FAILURE_ABORT):
        raise ValueError(f"Unknown failure policy: {policy}")

    for fixture in fixtures:
        if cancel is not None and cancel.is_set():
            logger.info("Cancelled after %d of %d fixtures",
                        len(result.created), len(fixtures))
            result.cancelled = True
            break
        try:
            match_id = store.create_match(fixture)
        except Exception as exc:
            logger.error("Could not create %s vs %s (round %d, %s %s): %s",
                         fixture.home_team_id, fixture.away_team_id,
                         fixture.round_number, fixture.match_date,
                         fixture.match_time, exc)
            result.failed.append(FixtureFailure(fixture, exc))
            if policy == FAILURE_ABORT:
                raise PersistenceError(
                    f"Stopped after {len(result.created)} fixtures: {exc}",
                    result=result,
                ) from exc
            continue
        result.created.append(replace(fixture, id=match_id))
        logger.debug("Created %s: %s vs %s", match_id,
                     fixture.home_team_id, fixture.away_team_id)
    return result


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------

def check_options(options: CalendarOptions) -> None:
    """Raise InvalidOptionsError unless options can yield a valid calendar."""
    problems = []
    for name in ("group_size", "max_rounds", "slot_minutes"):
        value = getattr(options, name)
        if value < 1:
            problems.append(f"{name} must be at least 1, got {value}")
    if options.round_number is not None and options.round_number < 1:
        problems.append(f"round_number must be at least 1, got {options.round_number}")
    if options.slot_minutes >= 1 and not time_grid(
            options.first_slot, options.last_slot, options.slot_minutes):
        problems.append(
            f"No kickoff times between {format_time(options.first_slot)} "
            f"and {format_time(options.last_slot)}"
        )
    if options.failure_policy not in (FAILURE_CONTINUE, FAILURE_ABORT):
        problems.append(f"Unknown failure policy: {options.failure_policy}")
    if problems:
        raise InvalidOptionsError(problems)


def generate_calendar(store: LeagueStore, season_id: str, division_id: str,
                      teams: Optional[list[Team]], start_date: date,
                      options: Optional[CalendarOptions] = None,
                      cancel=None) -> CalendarResult:
    """Generate and store the calendar for a division.

    teams defaults to every team of the division in the store. start_date is
    moved forward to the play day. Existing fixtures are never removed; call
    purge_calendar first to regenerate from scratch.
    """
    options = options or CalendarOptions()
    check_options(options)
    if teams is None:
        teams = store.list_teams_by_division(division_id)
    teams = list(teams)

    if len(teams) < 2:
        raise InsufficientTeamsError(len(teams))
    ids = [t.id for t in teams]
    if len(set(ids)) != len(ids):
        raise SchedulingError("Duplicate team ids in input")

    fields = eligible_fields(store.list_fields(), options.use_available_fields_only)
    if not fields:
        raise NoEligibleFieldsError(
            "No available fields" if options.use_available_fields_only
            else "No fields configured"
        )

    categories = store.list_categories_by_division(division_id)
    default_category_id = categories[0].id if categories else None
    referees = store.list_referees(season_id) if options.assign_referees else []
    existing = store.list_matches(season_id)

    start = next_play_day(start_date, options.play_day)
    if start != start_date:
        logger.info("Start date %s moved to %s (%s)",
                    start_date, start, options.play_day.name)

    groups = partition_groups(teams, options)
    logger.info("Generating %s for %d teams in %d group(s) from %s",
                "single round" if options.generate_by_round else "calendar",
                len(teams), len(groups), start)

    planned, info = plan_calendar(
        season_id, division_id, groups, fields, start, options,
        existing=existing,
        default_category_id=default_category_id,
        referees=referees,
    )

    result = CalendarResult(
        planned=len(planned),
        groups=[[t.id for t in g] for g in groups],
        suppressed_rounds=info["suppressed_rounds"],
        skipped_pairings=info["skipped_pairings"],
    )
    persist_fixtures(store, planned, result, options.failure_policy, cancel)

    logger.info("Calendar done: %d created, %d failed, %d planned",
                result.created_count, result.failed_count, result.planned)
    return result


def purge_calendar(store: LeagueStore, season_id: str,
                   division_id: Optional[str] = None) -> int:
    """Delete the season's stored fixtures (one division's, if given).

    Returns the number deleted.
    """
    deleted = 0
    for f in store.list_matches(season_id):
        if division_id is not None and f.division_id != division_id:
            continue
        store.delete_match(f.id)
        deleted += 1
    logger.info("Purged %d fixtures from season %s", deleted, season_id)
    return deleted

