"""League file loading and validation for leaguecal."""

import logging
from dataclasses import fields as dataclass_fields
from datetime import date, time
from pathlib import Path

import yaml

from leaguecal.errors import ConfigError
from leaguecal.models import (
    FAILURE_ABORT, FAILURE_CONTINUE, FIELD_STATUSES, CalendarOptions,
    Category, Field, Fixture, Referee, Team, Weekday,
)
from leaguecal.slots import format_time
from leaguecal.store import InMemoryStore

logger = logging.getLogger(__name__)


def parse_time(s: str) -> time:
    """Parse time strings like '5:30pm', '10am', '17:00'."""
    s_lower = s.strip().lower()

    is_pm = s_lower.endswith("pm")
    is_am = s_lower.endswith("am")

    s_clean = s_lower
    if is_pm or is_am:
        s_clean = s_clean[:-2].strip()

    if ":" in s_clean:
        parts = s_clean.split(":")
        h = int(parts[0])
        m = int(parts[1])
    else:
        h = int(s_clean)
        m = 0

    if is_pm and h < 12:
        h += 12
    elif is_am and h == 12:
        h = 0

    return time(h, m)


def parse_date(s: str) -> date:
    """Parse date string YYYY-MM-DD."""
    parts = str(s).strip().split("-")
    return date(int(parts[0]), int(parts[1]), int(parts[2]))


def as_time(value) -> time:
    """Coerce a YAML kickoff value to a time.

    Unquoted 16:00 reaches us as the sexagesimal int 960 (YAML 1.1), which
    is already minutes since midnight.
    """
    if isinstance(value, time):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return time(value // 60, value % 60)
    return parse_time(str(value))


def _parse_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("1", "true", "yes", "on")


def _convert_option(key: str, value):
    if key in ("first_slot", "last_slot"):
        return as_time(value)
    if key == "play_day":
        return Weekday.from_str(str(value))
    if key == "reference_date":
        return parse_date(value)
    if key in ("group_size", "max_rounds", "slot_minutes", "round_number"):
        return int(value)
    if key == "failure_policy":
        return str(value).lower()
    if key == "exclude_fixture_id":
        return str(value)
    return _parse_bool(value)


def parse_options(raw: dict | None) -> CalendarOptions:
    """Build CalendarOptions from the `options:` mapping of a league file.

    Unknown keys and unusable values are reported as errors; missing keys
    keep their defaults.
    """
    raw = raw or {}
    known = {f.name for f in dataclass_fields(CalendarOptions)}
    errors = [f"Unknown option: {k}" for k in sorted(set(raw) - known)]

    opts = CalendarOptions()
    for key, value in raw.items():
        if value is None or key not in known:
            continue
        try:
            setattr(opts, key, _convert_option(key, value))
        except (ValueError, TypeError, KeyError, IndexError):
            errors.append(f"Option {key} has bad value {value!r}")

    for key in ("group_size", "max_rounds", "slot_minutes"):
        if getattr(opts, key) < 1:
            errors.append(f"Option {key} must be at least 1, got {getattr(opts, key)}")
    if opts.round_number is not None and opts.round_number < 1:
        errors.append(f"Option round_number must be at least 1, got {opts.round_number}")
    if opts.first_slot > opts.last_slot:
        errors.append("Option first_slot is later than last_slot")
    if opts.failure_policy not in (FAILURE_CONTINUE, FAILURE_ABORT):
        errors.append(f"failure_policy must be continue or abort, got {opts.failure_policy}")

    if errors:
        raise ConfigError(errors)
    return opts


def load_config(path: str | Path) -> dict:
    """Load and validate a league YAML file.

    Returns dict with:
    - season: {id, name, start_date}
    - division_id: the division to schedule
    - options: CalendarOptions
    - store: InMemoryStore holding teams, fields, categories, referees
      and any existing matches
    """
    path = Path(path)
    with open(path) as f:
        raw = yaml.safe_load(f) or {}

    errors = []

    season_raw = raw.get("season") or {}
    if "start_date" not in season_raw:
        errors.append("season.start_date is required")
    season = {
        "id": str(season_raw.get("id", "season")),
        "name": season_raw.get("name", ""),
        "start_date": parse_date(season_raw["start_date"]) if "start_date" in season_raw else None,
    }
    division_id = str(raw.get("division", "default"))

    # Categories, with their teams
    categories: list[Category] = []
    teams: list[Team] = []
    for cdata in raw.get("categories", []):
        cat_id = str(cdata["id"])
        cat_division = str(cdata.get("division", division_id))
        categories.append(Category(id=cat_id, division_id=cat_division,
                                   name=cdata.get("name", cat_id)))
        teams_val = cdata.get("teams", [])
        if isinstance(teams_val, int):
            # Auto-generate team names: A1, A2, ... for teams: 2
            teams_val = [f"{cat_id}{i}" for i in range(1, teams_val + 1)]
        for tdata in teams_val:
            if isinstance(tdata, dict):
                team_id = str(tdata["id"])
                name = tdata.get("name", team_id)
            else:
                team_id = str(tdata)
                name = team_id
            teams.append(Team(id=team_id, category_id=cat_id,
                              division_id=cat_division, name=name))

    seen = set()
    for t in teams:
        if t.id in seen:
            errors.append(f"Team {t.id} is listed more than once")
        seen.add(t.id)

    # Fields
    fields: list[Field] = []
    for fdata in raw.get("fields", []):
        status = str(fdata.get("status", "available"))
        if status not in FIELD_STATUSES:
            errors.append(f"Field {fdata.get('id')} has unknown status {status}")
        fields.append(Field(id=str(fdata["id"]),
                            name=fdata.get("name", str(fdata["id"])),
                            status=status))
    field_ids = {f.id for f in fields}

    referees: list[Referee] = []
    for rdata in raw.get("referees", []):
        if isinstance(rdata, dict):
            referees.append(Referee(id=str(rdata["id"]),
                                    name=rdata.get("name", str(rdata["id"]))))
        else:
            referees.append(Referee(id=str(rdata), name=str(rdata)))

    # Matches already booked this season
    matches: list[Fixture] = []
    for mdata in raw.get("matches", []):
        for key in ("home", "away", "field", "date", "time"):
            if key not in mdata:
                errors.append(f"Match {mdata} is missing {key}")
                break
        else:
            if mdata["home"] not in seen or mdata["away"] not in seen:
                errors.append(f"Match {mdata['home']} vs {mdata['away']} has an unknown team")
            if str(mdata["field"]) not in field_ids:
                errors.append(f"Match {mdata['home']} vs {mdata['away']} uses unknown field {mdata['field']}")
            match_time = as_time(mdata["time"])
            matches.append(Fixture(
                season_id=season["id"],
                division_id=str(mdata.get("division", division_id)),
                category_id=str(mdata.get("category", "")),
                field_id=str(mdata["field"]),
                home_team_id=str(mdata["home"]),
                away_team_id=str(mdata["away"]),
                match_date=parse_date(mdata["date"]),
                match_time=format_time(match_time),
                round_number=int(mdata.get("round", 1)),
                id=str(mdata["id"]) if "id" in mdata else None,
            ))

    options = None
    try:
        options = parse_options(raw.get("options"))
    except ConfigError as e:
        errors.extend(e.errors)

    if not any(t.division_id == division_id for t in teams):
        logger.warning("No teams in division %s", division_id)

    if errors:
        raise ConfigError(errors)

    store = InMemoryStore(teams=teams, fields=fields, categories=categories,
                          referees=referees, matches=matches)

    return {
        "season": season,
        "division_id": division_id,
        "options": options,
        "store": store,
    }
