"""Statistics and balance reporting for generated calendars."""

from collections import defaultdict

from leaguecal.models import Fixture


def compute_stats(fixtures: list[Fixture], groups: list[list[str]]) -> dict:
    """Compute per-team balance statistics.

    groups is the team-id list of each group, in group_number order (as in
    CalendarResult.groups). A bye is a round of the team's group in which
    it has no fixture.
    """
    all_teams = [t for g in groups for t in g]

    home_counts = defaultdict(int)
    away_counts = defaultdict(int)
    total_games = defaultdict(int)
    field_usage = defaultdict(int)
    matchup_counts = defaultdict(lambda: defaultdict(int))
    playing = defaultdict(set)  # (group, round) -> team ids
    dates_per_round: dict[tuple[int, int], set] = defaultdict(set)

    for f in fixtures:
        home_counts[f.home_team_id] += 1
        away_counts[f.away_team_id] += 1
        total_games[f.home_team_id] += 1
        total_games[f.away_team_id] += 1
        field_usage[f.field_id] += 1
        matchup_counts[f.home_team_id][f.away_team_id] += 1
        matchup_counts[f.away_team_id][f.home_team_id] += 1
        playing[(f.group_number, f.round_number)].update(
            (f.home_team_id, f.away_team_id))
        dates_per_round[(f.group_number, f.round_number)].add(f.match_date)

    bye_counts = {t: 0 for t in all_teams}
    for (group_number, _round), teams_playing in playing.items():
        if group_number < 1 or group_number > len(groups):
            continue
        for t in groups[group_number - 1]:
            if t not in teams_playing:
                bye_counts[t] += 1

    rounds_per_group = defaultdict(int)
    for group_number, _round in playing:
        rounds_per_group[group_number] += 1

    return {
        "all_teams": all_teams,
        "home_counts": dict(home_counts),
        "away_counts": dict(away_counts),
        "total_games": dict(total_games),
        "bye_counts": bye_counts,
        "field_usage": dict(field_usage),
        "matchup_counts": {k: dict(v) for k, v in matchup_counts.items()},
        "rounds_per_group": dict(rounds_per_group),
        "round_dates": {k: sorted(v) for k, v in dates_per_round.items()},
    }


def format_stats_report(stats: dict) -> str:
    """Format statistics into a human-readable report."""
    lines = []
    lines.append("=" * 60)
    lines.append("CALENDAR STATISTICS")
    lines.append("=" * 60)

    all_teams = stats["all_teams"]
    width = max([8] + [len(t) + 1 for t in all_teams])

    lines.append("\n--- TEAM BALANCE ---")
    lines.append(f"{'Team':<{width}} {'Home':>5} {'Away':>5} {'Total':>5} {'Diff':>5} {'Bye':>4}")
    lines.append("-" * (width + 27))
    for t in all_teams:
        h = stats["home_counts"].get(t, 0)
        a = stats["away_counts"].get(t, 0)
        tot = stats["total_games"].get(t, 0)
        bye = stats["bye_counts"].get(t, 0)
        diff = h - a
        flag = " ***" if abs(diff) > 1 else ""
        lines.append(f"{t:<{width}} {h:>5} {a:>5} {tot:>5} {diff:>+5} {bye:>4}{flag}")

    lines.append("\n--- FIELD USAGE ---")
    for field_id in sorted(stats["field_usage"]):
        lines.append(f"  {field_id:<{width}} {stats['field_usage'][field_id]:>4}")

    lines.append("\n--- ROUNDS PER GROUP ---")
    for group_number in sorted(stats["rounds_per_group"]):
        lines.append(f"  Group {group_number}: {stats['rounds_per_group'][group_number]}")

    return "\n".join(lines)
