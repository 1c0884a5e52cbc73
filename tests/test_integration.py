"""Integration test: load the example league, generate, validate, write."""

from datetime import date
from pathlib import Path

from leaguecal.config import load_config
from leaguecal.constraints import validate_fixtures
from leaguecal.schedule import main
from leaguecal.scheduler import generate_calendar, purge_calendar
from leaguecal.stats import compute_stats

LEAGUE_FILE = Path(__file__).resolve().parent.parent / "league.yaml"


def _generate():
    config = load_config(LEAGUE_FILE)
    store = config["store"]
    result = generate_calendar(store, config["season"]["id"], config["division_id"],
                               None, config["season"]["start_date"], config["options"])
    return config, store, result


class TestEndToEnd:
    def test_generate_and_validate(self):
        config, store, result = _generate()

        # Category A (6 teams) and B (5 teams) are scheduled as separate groups
        assert [len(g) for g in result.groups] == [6, 5]
        assert result.created_count == 15 + 10
        assert result.ok

        validation = validate_fixtures(store.list_matches(config["season"]["id"]),
                                       team_ids={t.id for t in store.teams})
        assert validation["valid"], validation["errors"]

    def test_first_round_on_sunday(self):
        _config, _store, result = _generate()
        first = min(f.match_date for f in result.created)
        assert first == date(2026, 3, 8)
        assert {f.match_date for f in result.created if f.round_number == 5} == {date(2026, 4, 5)}

    def test_existing_booking_respected(self):
        _config, _store, result = _generate()
        assert not any(
            f.field_id == "cue1" and f.match_date == date(2026, 3, 8) and f.match_time == "07:00"
            for f in result.created
        )

    def test_unavailable_field_unused(self):
        _config, _store, result = _generate()
        assert "zag2" not in {f.field_id for f in result.created}

    def test_balance(self):
        _config, _store, result = _generate()
        stats = compute_stats(result.created, result.groups)
        for t in result.groups[0]:
            assert stats["total_games"][t] == 5
        for t in result.groups[1]:
            assert stats["total_games"][t] == 4
            assert stats["bye_counts"][t] == 1

    def test_purge_then_regenerate(self):
        config, store, result = _generate()
        season_id = config["season"]["id"]
        assert purge_calendar(store, season_id, "varonil") == 25
        # the femenil booking is untouched
        assert len(store.list_matches(season_id)) == 1


class TestCli:
    def test_main_writes_outputs(self, tmp_path):
        out = tmp_path / "out"
        assert main([str(LEAGUE_FILE), "-o", str(out)]) == 0
        for name in ("calendar.txt", "calendar.csv", "stats.txt"):
            assert (out / name).exists()
        assert "ROUND 1" in (out / "calendar.txt").read_text()

    def test_missing_file(self, tmp_path):
        assert main([str(tmp_path / "nope.yaml")]) == 1

    def test_single_round(self, tmp_path):
        out = tmp_path / "out"
        code = main([str(LEAGUE_FILE), "--by-round", "--round", "2",
                     "--start-date", "2026-03-15", "-o", str(out)])
        assert code == 0
        rows = (out / "calendar.csv").read_text().strip().splitlines()
        # header, 3 matches for category A, 2 for category B
        assert len(rows) == 1 + 3 + 2

    def test_single_round_counts_from_season_start(self, tmp_path):
        out = tmp_path / "out"
        code = main([str(LEAGUE_FILE), "--by-round", "--start-date", "2026-03-22",
                     "-o", str(out)])
        assert code == 0
        rows = (out / "calendar.csv").read_text().strip().splitlines()[1:]
        # 2026-03-04 to 2026-03-22 is two whole weeks
        assert {r.split(",")[5] for r in rows} == {"3"}

    def test_bad_groups(self, tmp_path):
        assert main([str(LEAGUE_FILE), "--groups", "-2", "-o", str(tmp_path)]) == 1

    def test_bad_start_date(self, tmp_path):
        assert main([str(LEAGUE_FILE), "--start-date", "March", "-o", str(tmp_path)]) == 1

    def test_bad_round(self, tmp_path):
        code = main([str(LEAGUE_FILE), "--by-round", "--round", "0", "-o", str(tmp_path)])
        assert code == 1

    def test_bad_options_in_file(self, tmp_path):
        for bad in ("group_size: 0", "slot_minutes: 0", "play_day: Domingo",
                    "max_rounds: abc"):
            path = tmp_path / "league.yaml"
            path.write_text(
                "season: {start_date: 2026-03-04}\n"
                "categories: [{id: A, teams: 4}]\n"
                "fields: [{id: f1}]\n"
                f"options: {{{bad}}}\n"
            )
            assert main([str(path), "-o", str(tmp_path / "out")]) == 1, bad
