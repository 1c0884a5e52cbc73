"""Constraint validation for generated calendars.

Works on any fixture list: freshly generated, or read back from a store.
"""

import re
from collections import defaultdict
from typing import Optional

from leaguecal.models import Fixture, as_date

_HHMM = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def validate_fixtures(fixtures: list[Fixture],
                      team_ids: Optional[set[str]] = None) -> dict:
    """Validate fixtures against the calendar rules.

    Returns dict with:
    - valid: bool (True if no hard constraint violations)
    - errors: list of hard constraint violations
    - warnings: list of soft constraint issues
    """
    errors = []
    warnings = []

    slot_owner: dict[tuple, Fixture] = {}
    games_per_day = defaultdict(lambda: defaultdict(int))  # team -> date -> count
    pair_counts = defaultdict(int)  # (group, home, away) -> count

    for f in fixtures:
        h = f.home_team_id
        a = f.away_team_id
        d = as_date(f.match_date)

        if h == a:
            errors.append(f"{h} is paired with itself on {d}")

        if team_ids is not None:
            for t in (h, a):
                if t not in team_ids:
                    errors.append(f"Unknown team {t} on {d}")

        if f.round_number < 1:
            errors.append(f"{h} vs {a} has round number {f.round_number}")

        if not _HHMM.match(f.match_time or ""):
            errors.append(f"{h} vs {a} on {d} has bad kickoff time {f.match_time!r}")

        key = f.slot_key
        if key in slot_owner:
            other = slot_owner[key]
            errors.append(
                f"Field {f.field_id} double-booked on {d} at {f.match_time}: "
                f"{other.home_team_id} vs {other.away_team_id} and {h} vs {a}"
            )
        else:
            slot_owner[key] = f

        games_per_day[h][d] += 1
        games_per_day[a][d] += 1
        pair_counts[(f.group_number, h, a)] += 1

        if f.is_playoff:
            warnings.append(f"{h} vs {a} on {d} is flagged as playoff")

    for team, days in games_per_day.items():
        for d, count in days.items():
            if count > 1:
                errors.append(f"{team} plays {count} games on {d}")

    for (group, h, a), count in pair_counts.items():
        if count > 1:
            warnings.append(
                f"Group {group}: {h} hosts {a} {count} times"
            )

    return {
        "valid": len(errors) == 0,
        "errors": errors,
        "warnings": warnings,
    }


def format_validation_report(result: dict) -> str:
    """Format validation results as text."""
    lines = []
    lines.append("=" * 60)
    lines.append("CALENDAR VALIDATION REPORT")
    lines.append("=" * 60)

    if result["valid"]:
        lines.append("\nRESULT: VALID (no hard constraint violations)")
    else:
        lines.append(f"\nRESULT: INVALID ({len(result['errors'])} violations)")

    if result["errors"]:
        lines.append(f"\n--- ERRORS ({len(result['errors'])}) ---")
        for e in result["errors"]:
            lines.append(f"  ERROR: {e}")

    if result["warnings"]:
        lines.append(f"\n--- WARNINGS ({len(result['warnings'])}) ---")
        for w in result["warnings"]:
            lines.append(f"  WARN: {w}")

    return "\n".join(lines)
