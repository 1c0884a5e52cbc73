"""Tests for models.py: data classes and enums."""

from datetime import date, datetime, time

from leaguecal.models import (
    FAILURE_CONTINUE, CalendarOptions, CalendarResult, Field, Fixture,
    FixtureFailure, Pairing, Weekday, as_date,
)


class TestWeekday:
    def test_from_str_full(self):
        assert Weekday.from_str("Sunday") == Weekday.Sun
        assert Weekday.from_str("Saturday") == Weekday.Sat

    def test_from_str_short(self):
        assert Weekday.from_str("Wed") == Weekday.Wed

    def test_from_str_case_insensitive(self):
        assert Weekday.from_str("sun") == Weekday.Sun
        assert Weekday.from_str("MON") == Weekday.Mon

    def test_values_match_date_weekday(self):
        assert Weekday.Sun.value == date(2026, 3, 8).weekday()


class TestField:
    def test_available_by_default(self):
        assert Field("F1", "Field 1").is_available

    def test_other_statuses(self):
        for status in ("maintenance", "reserved", "unavailable"):
            assert not Field("F1", "Field 1", status).is_available


class TestPairing:
    def test_involves(self):
        p = Pairing("A", "B")
        assert p.involves("A")
        assert p.involves("B")
        assert not p.involves("C")

    def test_reversed(self):
        assert Pairing("A", "B").reversed() == Pairing("B", "A")


class TestFixture:
    def test_defaults(self):
        f = Fixture(
            season_id="S1", division_id="D1", category_id="A", field_id="F1",
            home_team_id="A", away_team_id="B", match_date=date(2026, 3, 8),
            match_time="07:00", round_number=1,
        )
        assert f.status == "scheduled"
        assert f.is_playoff is False
        assert f.id is None
        assert f.slot_key == ("F1", date(2026, 3, 8), "07:00")

    def test_slot_key_normalizes_datetime(self):
        f = Fixture("S1", "D1", "A", "F1", "A", "B", datetime(2026, 3, 8, 7, 0), "07:00", 1)
        assert f.slot_key == ("F1", date(2026, 3, 8), "07:00")


class TestCalendarOptions:
    def test_defaults(self):
        opts = CalendarOptions()
        assert opts.use_available_fields_only is True
        assert opts.use_groups is False
        assert opts.group_size == 9
        assert opts.max_rounds == 9
        assert opts.play_day == Weekday.Sun
        assert (opts.first_slot, opts.last_slot) == (time(7), time(16))
        assert opts.slot_minutes == 60
        assert opts.failure_policy == FAILURE_CONTINUE


class TestCalendarResult:
    def test_empty_is_ok(self):
        result = CalendarResult()
        assert result.ok
        assert result.created_count == 0
        assert result.failed_count == 0

    def test_failures_and_cancel(self):
        fixture = Fixture("S1", "D1", "A", "F1", "A", "B", date(2026, 3, 8), "07:00", 1)
        result = CalendarResult(failed=[FixtureFailure(fixture, RuntimeError("x"))])
        assert not result.ok
        assert result.failed_count == 1
        assert not CalendarResult(cancelled=True).ok


class TestAsDate:
    def test_values(self):
        assert as_date(date(2026, 3, 8)) == date(2026, 3, 8)
        assert as_date(datetime(2026, 3, 8, 10, 0)) == date(2026, 3, 8)
        assert as_date("2026-03-08T10:00:00") == date(2026, 3, 8)
