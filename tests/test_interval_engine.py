"""
Tests for the interval engine.
"""

import pendulum

from workcalc.domain.interval_engine import IntervalEngine
from workcalc.domain.models import Meeting, ScheduleConfig

TZ = "America/Guayaquil"


def _at(value: str):
    return pendulum.parse(value, tz=TZ)


def _meeting(meeting_id: str, start: str, end: str, optional: bool = False) -> Meeting:
    return Meeting(
        id=meeting_id,
        title=f"Meeting {meeting_id}",
        start=_at(start),
        end=_at(end),
        is_optional=optional
    )


def _spans(intervals):
    return [(i.start.format("HH:mm"), i.end.format("HH:mm")) for i in intervals]


class TestIntervalEngine:
    """Tests for IntervalEngine."""

    def setup_method(self):
        self.engine = IntervalEngine(ScheduleConfig())
        self.monday = _at("2024-01-15 00:00")

    def test_lunch_only(self):
        """Without meetings the day is split around lunch."""
        intervals = self.engine.free_intervals(self.monday)

        assert _spans(intervals) == [("09:00", "12:00"), ("13:00", "18:00")]

    def test_meetings_are_subtracted(self):
        """
        Busy: 10:00-11:00, lunch, 15:00-16:00
        Free: 09:00-10:00, 11:00-12:00, 13:00-15:00, 16:00-18:00
        """
        meetings = [
            _meeting("b", "2024-01-15 15:00", "2024-01-15 16:00"),
            _meeting("a", "2024-01-15 10:00", "2024-01-15 11:00"),
        ]

        intervals = self.engine.free_intervals(self.monday, meetings)

        assert _spans(intervals) == [
            ("09:00", "10:00"),
            ("11:00", "12:00"),
            ("13:00", "15:00"),
            ("16:00", "18:00"),
        ]

    def test_meeting_overlapping_lunch(self):
        meetings = [_meeting("a", "2024-01-15 11:30", "2024-01-15 12:30")]

        intervals = self.engine.free_intervals(self.monday, meetings)

        assert _spans(intervals) == [("09:00", "11:30"), ("13:00", "18:00")]

    def test_nested_meetings(self):
        meetings = [
            _meeting("a", "2024-01-15 10:00", "2024-01-15 12:00"),
            _meeting("b", "2024-01-15 10:30", "2024-01-15 11:00"),
        ]

        intervals = self.engine.free_intervals(self.monday, meetings)

        assert _spans(intervals) == [("09:00", "10:00"), ("13:00", "18:00")]

    def test_meetings_outside_working_hours_are_clipped(self):
        meetings = [
            _meeting("early", "2024-01-15 08:00", "2024-01-15 10:00"),
            _meeting("late", "2024-01-15 19:00", "2024-01-15 20:00"),
        ]

        intervals = self.engine.free_intervals(self.monday, meetings)

        assert _spans(intervals) == [("10:00", "12:00"), ("13:00", "18:00")]

    def test_optional_meetings_never_block(self):
        meetings = [_meeting("opt", "2024-01-15 15:00", "2024-01-15 16:00", optional=True)]

        intervals = self.engine.free_intervals(self.monday, meetings)

        assert _spans(intervals) == [("09:00", "12:00"), ("13:00", "18:00")]

    def test_day_start_override(self):
        """Availability begins at the override on the first day."""
        intervals = self.engine.free_intervals(
            self.monday,
            day_start_override=_at("2024-01-15 12:30")
        )

        assert _spans(intervals) == [("13:00", "18:00")]

    def test_override_before_schedule_start_is_ignored(self):
        intervals = self.engine.free_intervals(
            self.monday,
            day_start_override=_at("2024-01-15 07:00")
        )

        assert _spans(intervals) == [("09:00", "12:00"), ("13:00", "18:00")]

    def test_override_after_end_yields_nothing(self):
        intervals = self.engine.free_intervals(
            self.monday,
            day_start_override=_at("2024-01-15 18:30")
        )

        assert intervals == []

    def test_fully_booked_day(self):
        meetings = [_meeting("all", "2024-01-15 08:00", "2024-01-15 19:00")]

        assert self.engine.free_intervals(self.monday, meetings) == []

    def test_intervals_are_disjoint_ordered_and_cover_capacity(self):
        """Free time equals the window minus the union of busy spans."""
        meetings = [
            _meeting("a", "2024-01-15 08:30", "2024-01-15 09:30"),
            _meeting("b", "2024-01-15 11:00", "2024-01-15 12:15"),
            _meeting("c", "2024-01-15 14:00", "2024-01-15 15:00"),
            _meeting("d", "2024-01-15 14:30", "2024-01-15 15:30"),
        ]

        intervals = self.engine.free_intervals(self.monday, meetings)

        for earlier, later in zip(intervals, intervals[1:]):
            assert earlier.end <= later.start
        assert all(i.start < i.end for i in intervals)
        # 480 minus 30 (a, clipped) minus 60 (b, outside lunch) minus 90 (c+d)
        assert self.engine.free_minutes(self.monday, meetings) == 300
