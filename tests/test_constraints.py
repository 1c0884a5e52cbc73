"""Tests for constraints.py: rule checks on fixture lists."""

from datetime import date

from leaguecal.constraints import format_validation_report, validate_fixtures
from leaguecal.models import Fixture

SUN = date(2026, 3, 8)


def _fx(home, away, field="F1", d=SUN, t="07:00", rnd=1, group=1, **kwargs):
    return Fixture(
        season_id="S1", division_id="D1", category_id="A", field_id=field,
        home_team_id=home, away_team_id=away, match_date=d, match_time=t,
        round_number=rnd, group_number=group, **kwargs,
    )


class TestValidateFixtures:
    def test_clean_calendar(self):
        fixtures = [
            _fx("A", "B", field="F1"),
            _fx("C", "D", field="F2"),
            _fx("A", "C", d=date(2026, 3, 15), rnd=2),
        ]
        result = validate_fixtures(fixtures, team_ids={"A", "B", "C", "D"})
        assert result["valid"], result["errors"]
        assert result["warnings"] == []

    def test_self_pairing(self):
        result = validate_fixtures([_fx("A", "A")])
        assert not result["valid"]
        assert any("itself" in e for e in result["errors"])

    def test_double_booked_field(self):
        result = validate_fixtures([_fx("A", "B"), _fx("C", "D")])
        assert not result["valid"]
        assert any("double-booked" in e for e in result["errors"])

    def test_same_field_different_times_ok(self):
        result = validate_fixtures([_fx("A", "B"), _fx("C", "D", t="08:00")])
        assert result["valid"]

    def test_team_twice_same_day(self):
        result = validate_fixtures([_fx("A", "B"), _fx("A", "C", field="F2")])
        assert not result["valid"]
        assert any("A plays 2 games" in e for e in result["errors"])

    def test_unknown_team(self):
        result = validate_fixtures([_fx("A", "Z")], team_ids={"A", "B"})
        assert any("Unknown team Z" in e for e in result["errors"])

    def test_bad_round_number(self):
        result = validate_fixtures([_fx("A", "B", rnd=0)])
        assert not result["valid"]

    def test_bad_time(self):
        for bad in ("7:00", "25:00", "", "0700"):
            result = validate_fixtures([_fx("A", "B", t=bad)])
            assert not result["valid"], bad

    def test_repeated_hosting_warns(self):
        fixtures = [_fx("A", "B"), _fx("A", "B", d=date(2026, 3, 15), rnd=2)]
        result = validate_fixtures(fixtures)
        assert result["valid"]
        assert any("A hosts B 2 times" in w for w in result["warnings"])

    def test_return_leg_not_warned(self):
        fixtures = [_fx("A", "B"), _fx("B", "A", d=date(2026, 3, 15), rnd=2)]
        assert validate_fixtures(fixtures)["warnings"] == []

    def test_playoff_flag_warns(self):
        result = validate_fixtures([_fx("A", "B", is_playoff=True)])
        assert result["valid"]
        assert len(result["warnings"]) == 1


class TestFormatReport:
    def test_valid(self):
        text = format_validation_report({"valid": True, "errors": [], "warnings": []})
        assert "VALID" in text
        assert "ERRORS" not in text

    def test_invalid(self):
        result = validate_fixtures([_fx("A", "A")])
        text = format_validation_report(result)
        assert "INVALID" in text
        assert "ERROR:" in text
