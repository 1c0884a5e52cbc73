"""Tests for output.py: text and CSV calendars."""

import csv
from datetime import date
from io import StringIO

from leaguecal.models import Fixture
from leaguecal.output import CSV_COLUMNS, format_calendar, format_csv, write_calendar


def _fx(home, away, rnd, d, t="07:00", field="F1", id=None):
    return Fixture(
        season_id="S1", division_id="D1", category_id="A", field_id=field,
        home_team_id=home, away_team_id=away, match_date=d, match_time=t,
        round_number=rnd, referee_id="ref1", id=id,
    )


FIXTURES = [
    _fx("A", "B", 1, date(2026, 3, 8), id="m1"),
    _fx("C", "D", 1, date(2026, 3, 8), t="08:00", id="m2"),
    _fx("A", "C", 2, date(2026, 3, 15), id="m3"),
]


class TestFormatCalendar:
    def test_rounds_and_names(self):
        text = format_calendar(FIXTURES, team_names={"A": "Halcones"},
                               field_names={"F1": "Cuemanco 1"}, title="Spring")
        assert "SPRING" in text
        assert "ROUND 1" in text
        assert "ROUND 2" in text
        assert "Halcones" in text
        assert "Cuemanco 1" in text
        assert "[ref ref1]" in text

    def test_per_team_section(self):
        text = format_calendar(FIXTURES)
        assert "PER-TEAM CALENDARS" in text
        per_team = text.split("PER-TEAM CALENDARS")[1]
        assert "H vs B" in per_team
        assert "A vs A" in per_team

    def test_single_group_has_no_group_header(self):
        assert "GROUP" not in format_calendar(FIXTURES)


class TestFormatCsv:
    def test_rows(self):
        rows = list(csv.reader(StringIO(format_csv(FIXTURES))))
        assert rows[0] == CSV_COLUMNS
        assert len(rows) == 4
        assert rows[1][0] == "m1"
        assert rows[1][6] == "2026-03-08"

    def test_sorted_by_date_and_time(self):
        rows = list(csv.reader(StringIO(format_csv(list(reversed(FIXTURES))))))
        assert [r[0] for r in rows[1:]] == ["m1", "m2", "m3"]


class TestWriteCalendar:
    def test_writes_files(self, tmp_path):
        paths = write_calendar(FIXTURES, output_prefix=str(tmp_path / "out"))
        assert [p.name for p in paths] == ["calendar.txt", "calendar.csv"]
        for p in paths:
            assert p.exists()
