#!/usr/bin/env python3
"""Season calendar builder.

    leaguecal [league.yaml] [--start-date YYYY-MM-DD] [-o DIR]

Loads the league file, generates the division's calendar against an
in-memory copy of the league, and writes:
  {DIR}/calendar.txt  - Round-by-round and per-team calendar
  {DIR}/calendar.csv  - One row per match
  {DIR}/stats.txt     - Validation report + balance statistics

Examples:
    leaguecal                                  # league.yaml, full calendar
    leaguecal league.yaml --double -o spring   # home and away legs
    leaguecal --by-round --round 3 --start-date 2026-03-22
    leaguecal --groups 6                       # split large pools
"""

import argparse
import logging
import sys
from pathlib import Path

from leaguecal.config import load_config, parse_date
from leaguecal.constraints import format_validation_report, validate_fixtures
from leaguecal.errors import PersistenceError, SchedulingError
from leaguecal.models import FAILURE_ABORT
from leaguecal.output import write_calendar
from leaguecal.scheduler import generate_calendar, purge_calendar
from leaguecal.stats import compute_stats, format_stats_report


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Season calendar builder",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
Exit codes:
  0  Calendar generated and valid
  1  Constraint violations, failed writes, or generation error
""",
    )
    parser.add_argument(
        "config", nargs="?", default="league.yaml",
        help="Path to league YAML file (default: league.yaml)"
    )
    parser.add_argument("--start-date", help="First match day (default: season.start_date)")
    parser.add_argument("--division", help="Division to schedule (default: from file)")
    parser.add_argument("--season", help="Season id to schedule into (default: from file)")
    parser.add_argument("--by-round", action="store_true",
                        help="Generate only the round for the start date")
    parser.add_argument("--round", type=int, dest="round_number",
                        help="Round to generate with --by-round")
    parser.add_argument("--double", action="store_true",
                        help="Add the return leg (home and away swapped)")
    parser.add_argument("--groups", type=int, metavar="SIZE",
                        help="Split teams into groups of at most SIZE")
    parser.add_argument("--all-fields", action="store_true",
                        help="Also use fields that are not marked available")
    parser.add_argument("--fail-fast", action="store_true",
                        help="Stop at the first failed write")
    parser.add_argument("--purge", action="store_true",
                        help="Delete the division's existing matches first")
    parser.add_argument(
        "--output-prefix", "-o", default="output",
        help="Output directory for generated files (default: output/)"
    )
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Show debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    config_path = args.config
    if not Path(config_path).exists():
        print(f"Error: config file {config_path} not found")
        return 1

    try:
        print(f"Loading league from {config_path}...")
        config = load_config(config_path)
        store = config["store"]
        season = config["season"]
        division_id = args.division or config["division_id"]
        if args.season:
            season["id"] = args.season

        options = config["options"]
        if args.by_round:
            options.generate_by_round = True
        if args.round_number is not None:
            options.round_number = args.round_number
        if args.double:
            options.double_round_robin = True
        if args.groups is not None:
            if args.groups < 1:
                print(f"Error: --groups must be at least 1, got {args.groups}")
                return 1
            options.use_groups = True
            options.group_size = args.groups
        if args.all_fields:
            options.use_available_fields_only = False
        if args.fail_fast:
            options.failure_policy = FAILURE_ABORT
        if options.generate_by_round and options.reference_date is None:
            # round numbers count from the season start, not from today
            options.reference_date = season["start_date"]

        start = season["start_date"]
        if args.start_date:
            try:
                start = parse_date(args.start_date)
            except (ValueError, IndexError):
                print(f"Error: --start-date {args.start_date} is not a YYYY-MM-DD date")
                return 1

        if args.purge:
            removed = purge_calendar(store, season["id"], division_id)
            print(f"  Purged {removed} existing matches")

        print(f"Generating calendar for division {division_id} from {start}...")
        result = generate_calendar(store, season["id"], division_id, None,
                                   start, options)
    except PersistenceError as e:
        print(f"Error: {e}")
        print(f"  {e.result.created_count} matches were created before the failure")
        return 1
    except SchedulingError as e:
        print(f"Error: {e}")
        return 1

    print(f"  Groups: {', '.join(str(len(g)) for g in result.groups)} teams")
    print(f"  Planned: {result.planned}, created: {result.created_count}, "
          f"failed: {result.failed_count}")
    if result.suppressed_rounds:
        print(f"  Rounds beyond the cap dropped: {result.suppressed_rounds}")
    if result.skipped_pairings:
        print(f"  Already-scheduled pairings skipped: {result.skipped_pairings}")
    for failure in result.failed:
        fx = failure.fixture
        print(f"    FAILED: {fx.home_team_id} vs {fx.away_team_id} "
              f"R{fx.round_number} {fx.match_date}: {failure.error}")

    team_names = {t.id: t.name for t in store.teams}
    field_names = {f.id: f.name for f in store.fields}

    print("\nValidating...")
    all_matches = store.list_matches(season["id"])
    validation = validate_fixtures(all_matches, team_ids=set(team_names))
    report = format_validation_report(validation)
    print(report)

    stats = compute_stats(result.created, result.groups)
    stats_text = format_stats_report(stats)
    print("\n" + stats_text)

    print("\nWriting output files...")
    write_calendar(result.created, output_prefix=args.output_prefix,
                   team_names=team_names, field_names=field_names,
                   title=season.get("name", ""))
    stats_path = Path(args.output_prefix) / "stats.txt"
    stats_path.write_text(report + "\n\n" + stats_text)
    print(f"Written: {stats_path}")

    if validation["valid"] and result.ok:
        print("\nCalendar generated successfully!")
        return 0
    print(f"\nCalendar has {len(validation['errors'])} constraint violations "
          f"and {result.failed_count} failed writes.")
    return 1


if __name__ == "__main__":
    sys.exit(main())
