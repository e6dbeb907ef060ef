"""
Tests for the range hours aggregator.
"""

from datetime import date

import pendulum

from workcalc.domain.models import Holiday, Meeting, ScheduleConfig
from workcalc.domain.range_hours import RangeHoursAggregator, hours_in_period

TZ = "America/Guayaquil"


def _meeting(meeting_id: str, start: str, end: str, optional: bool = False) -> Meeting:
    return Meeting(
        id=meeting_id,
        title=f"Meeting {meeting_id}",
        start=pendulum.parse(start, tz=TZ),
        end=pendulum.parse(end, tz=TZ),
        is_optional=optional
    )


class TestRangeHoursAggregator:
    """Tests for RangeHoursAggregator."""

    def setup_method(self):
        self.aggregator = RangeHoursAggregator(ScheduleConfig())

    def test_full_week(self):
        hours = self.aggregator.hours_in_period(date(2024, 1, 15), date(2024, 1, 19))

        assert hours == 40

    def test_holidays_excluded(self):
        holidays = [
            Holiday(date=date(2024, 1, 16), name="Test Holiday"),
            Holiday(date=date(2024, 1, 18), name="Another Holiday"),
        ]

        hours = self.aggregator.hours_in_period(
            date(2024, 1, 15),
            date(2024, 1, 19),
            holidays=holidays,
            exclude_holidays=True
        )

        assert hours == 24

    def test_meetings_excluded(self):
        meetings = [
            _meeting("a", "2024-01-15 10:00", "2024-01-15 11:00"),
            _meeting("b", "2024-01-17 14:00", "2024-01-17 15:30"),
        ]

        hours = self.aggregator.hours_in_period(
            date(2024, 1, 15),
            date(2024, 1, 17),
            meetings=meetings,
            exclude_meetings=True
        )

        assert hours == 21.5

    def test_meetings_counted_outside_business_hours(self):
        meetings = [_meeting("late", "2024-01-15 20:00", "2024-01-15 21:00")]

        hours = self.aggregator.hours_in_period(date(2024, 1, 15), date(2024, 1, 15), meetings=meetings)

        assert hours == 7

    def test_optional_meetings_ignored(self):
        meetings = [_meeting("opt", "2024-01-15 10:00", "2024-01-15 11:00", optional=True)]

        hours = self.aggregator.hours_in_period(date(2024, 1, 15), date(2024, 1, 15), meetings=meetings)

        assert hours == 8

    def test_day_never_negative(self):
        meetings = [
            _meeting("offsite", "2024-01-15 08:00", "2024-01-15 20:00"),
        ]

        hours = self.aggregator.hours_in_period(date(2024, 1, 15), date(2024, 1, 16), meetings=meetings)

        assert hours == 8

    def test_flags_disable_exclusions(self):
        holidays = [Holiday(date=date(2024, 1, 16), name="Test Holiday")]
        meetings = [_meeting("a", "2024-01-15 10:00", "2024-01-15 11:00")]

        hours = self.aggregator.hours_in_period(
            date(2024, 1, 15),
            date(2024, 1, 19),
            holidays=holidays,
            meetings=meetings,
            exclude_holidays=False,
            exclude_meetings=False
        )

        assert hours == 40

    def test_weekend_only_range(self):
        assert self.aggregator.hours_in_period(date(2024, 1, 20), date(2024, 1, 21)) == 0

    def test_end_before_start(self):
        assert self.aggregator.hours_in_period(date(2024, 1, 19), date(2024, 1, 15)) == 0

    def test_accepts_datetimes(self):
        hours = hours_in_period(
            pendulum.parse("2024-01-15 13:45", tz=TZ),
            pendulum.parse("2024-01-16 08:00", tz=TZ),
            ScheduleConfig()
        )

        assert hours == 16
