"""Output formatters for generated calendars."""

import csv
from io import StringIO
from pathlib import Path

from leaguecal.models import Fixture


def _sort_key(f: Fixture):
    return (f.match_date, f.match_time, f.field_id, f.home_team_id)


def format_calendar(fixtures: list[Fixture], team_names: dict | None = None,
                    field_names: dict | None = None, title: str = "") -> str:
    """Format the calendar as text: round by round per group, then per team."""
    team_names = team_names or {}
    field_names = field_names or {}

    def _team(t):
        return team_names.get(t, t)

    def _field(fid):
        return field_names.get(fid, fid)

    lines = []
    lines.append("=" * 80)
    lines.append(title.upper() if title else "SEASON CALENDAR")
    lines.append("=" * 80)

    by_group: dict[int, dict[int, list[Fixture]]] = {}
    for f in fixtures:
        by_group.setdefault(f.group_number, {}).setdefault(f.round_number, []).append(f)

    for group_number in sorted(by_group):
        if len(by_group) > 1:
            lines.append(f"\n##### GROUP {group_number} #####")
        rounds = by_group[group_number]
        for round_number in sorted(rounds):
            games = sorted(rounds[round_number], key=_sort_key)
            d = games[0].match_date
            lines.append(f"\n--- ROUND {round_number} --- {d.strftime('%A %d/%m/%Y')}")
            for f in games:
                ref = f"  [ref {f.referee_id}]" if f.referee_id else ""
                lines.append(
                    f"    {f.match_time}  {_team(f.home_team_id):<20} vs "
                    f"{_team(f.away_team_id):<20} @ {_field(f.field_id)}{ref}"
                )

    lines.append("\n" + "=" * 80)
    lines.append("PER-TEAM CALENDARS")
    lines.append("=" * 80)

    by_team: dict[str, list[Fixture]] = {}
    for f in fixtures:
        by_team.setdefault(f.home_team_id, []).append(f)
        by_team.setdefault(f.away_team_id, []).append(f)

    for team_id in sorted(by_team):
        lines.append(f"\n{_team(team_id)}:")
        for i, f in enumerate(sorted(by_team[team_id], key=_sort_key), 1):
            is_home = f.home_team_id == team_id
            opponent = f.away_team_id if is_home else f.home_team_id
            h_a = "H" if is_home else "A"
            lines.append(
                f"  {i:>2}. R{f.round_number:<2} {f.match_date.strftime('%a %d/%m')} "
                f"{f.match_time} {h_a} vs {_team(opponent):<20} @ {_field(f.field_id)}"
            )

    return "\n".join(lines)


CSV_COLUMNS = [
    "id", "season_id", "division_id", "category_id", "group", "round",
    "date", "time", "field_id", "home_team_id", "away_team_id",
    "referee_id", "status", "notes",
]


def format_csv(fixtures: list[Fixture]) -> str:
    """Format fixtures as CSV, one row per match."""
    output = StringIO()
    writer = csv.writer(output)
    writer.writerow(CSV_COLUMNS)
    for f in sorted(fixtures, key=_sort_key):
        writer.writerow([
            f.id or "", f.season_id, f.division_id, f.category_id,
            f.group_number, f.round_number, f.match_date.isoformat(),
            f.match_time, f.field_id, f.home_team_id, f.away_team_id,
            f.referee_id or "", f.status, f.notes,
        ])
    return output.getvalue()


def write_calendar(fixtures: list[Fixture], output_prefix: str = "output",
                   team_names: dict | None = None,
                   field_names: dict | None = None, title: str = "") -> list[Path]:
    """Write calendar.txt and calendar.csv into {output_prefix}/."""
    out_dir = Path(output_prefix)
    out_dir.mkdir(parents=True, exist_ok=True)

    text_path = out_dir / "calendar.txt"
    text_path.write_text(format_calendar(fixtures, team_names, field_names, title))
    print(f"Written: {text_path}")

    csv_path = out_dir / "calendar.csv"
    csv_path.write_text(format_csv(fixtures))
    print(f"Written: {csv_path}")

    return [text_path, csv_path]
