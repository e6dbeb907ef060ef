"""
Tests for domain models.
"""

from datetime import date

import pendulum
import pytest

from workcalc.domain.exceptions import ConfigurationError
from workcalc.domain.models import Holiday, Meeting, ScheduleConfig, TimeRange, parse_time

TZ = "America/Guayaquil"


class TestTimeRange:
    """Tests for TimeRange model."""

    def test_create_valid_time_range(self):
        """Test creating a valid time range."""
        start = pendulum.parse("2024-01-15 09:00", tz=TZ)
        end = pendulum.parse("2024-01-15 17:00", tz=TZ)

        tr = TimeRange(start=start, end=end)

        assert tr.start == start
        assert tr.end == end
        assert tr.duration_minutes() == 480  # 8 hours

    def test_invalid_time_range_raises_error(self):
        """Test that creating an invalid time range raises ValueError."""
        start = pendulum.parse("2024-01-15 17:00", tz=TZ)
        end = pendulum.parse("2024-01-15 09:00", tz=TZ)

        with pytest.raises(ValueError, match="Start time .* must be before end time"):
            TimeRange(start=start, end=end)


class TestParseTime:
    """Tests for HH:mm parsing."""

    def test_valid_times(self):
        assert parse_time("09:00").hour == 9
        assert parse_time("12:30").minute == 30
        assert parse_time("23:59").hour == 23

    @pytest.mark.parametrize("value", ["", "9", "24:00", "12:60", "ab:cd", "09:00:00"])
    def test_invalid_times(self, value):
        with pytest.raises(ConfigurationError):
            parse_time(value)


class TestScheduleConfig:
    """Tests for ScheduleConfig model."""

    def test_daily_working_minutes(self):
        """Nine hours minus a one hour lunch."""
        schedule = ScheduleConfig()

        assert schedule.daily_working_minutes() == 480

    def test_daily_working_minutes_short_lunch(self):
        schedule = ScheduleConfig(
            start_time="08:00",
            end_time="17:00",
            lunch_start="12:00",
            lunch_end="12:30"
        )

        assert schedule.daily_working_minutes() == 510

    def test_is_working_day(self):
        """Weekday indices run from Sunday=0 to Saturday=6."""
        schedule = ScheduleConfig(work_days={1, 2, 3, 4, 5})

        assert schedule.is_working_day(pendulum.parse("2024-01-15", tz=TZ))  # Monday
        assert schedule.is_working_day(pendulum.parse("2024-01-19", tz=TZ))  # Friday
        assert not schedule.is_working_day(pendulum.parse("2024-01-20", tz=TZ))  # Saturday
        assert not schedule.is_working_day(pendulum.parse("2024-01-21", tz=TZ))  # Sunday

    def test_sunday_is_zero(self):
        schedule = ScheduleConfig(work_days={0})

        assert schedule.is_working_day(date(2024, 1, 21))
        assert not schedule.is_working_day(date(2024, 1, 22))

    def test_end_before_start_rejected(self):
        with pytest.raises(ConfigurationError, match="must be later than start time"):
            ScheduleConfig(start_time="18:00", end_time="09:00")

    def test_inverted_lunch_rejected(self):
        with pytest.raises(ConfigurationError, match="Lunch end"):
            ScheduleConfig(lunch_start="13:00", lunch_end="12:00")

    def test_lunch_outside_window_rejected(self):
        with pytest.raises(ConfigurationError, match="must lie within"):
            ScheduleConfig(lunch_start="08:00", lunch_end="09:30")

    def test_lunch_filling_the_day_rejected(self):
        with pytest.raises(ConfigurationError, match="must leave working time"):
            ScheduleConfig(start_time="12:00", end_time="13:00")

    def test_empty_work_days_rejected(self):
        with pytest.raises(ConfigurationError, match="At least one work day"):
            ScheduleConfig(work_days=set())

    def test_out_of_range_work_days_rejected(self):
        with pytest.raises(ConfigurationError, match="between 0 and 6"):
            ScheduleConfig(work_days={1, 7})

    def test_malformed_time_rejected(self):
        with pytest.raises(ConfigurationError, match="expected HH:mm"):
            ScheduleConfig(start_time="nine")

    def test_empty_lunch_is_allowed(self):
        schedule = ScheduleConfig(lunch_start="12:00", lunch_end="12:00")
        monday = pendulum.parse("2024-01-15 09:00", tz=TZ)

        assert schedule.daily_working_minutes() == 540
        assert schedule.lunch_for_day(monday) is None

    def test_describe_work_days(self):
        schedule = ScheduleConfig(work_days={0, 1, 6})

        assert schedule.describe_work_days() == "Monday, Saturday, Sunday"


class TestHoliday:
    """Tests for Holiday model."""

    def test_date_from_string(self):
        holiday = Holiday(date="2024-01-16", name="Test Holiday")

        assert holiday.date == date(2024, 1, 16)
        assert holiday.date_key == "2024-01-16"

    def test_falls_on_ignores_time_of_day(self):
        holiday = Holiday(date=date(2024, 1, 16), name="Test Holiday")

        assert holiday.falls_on(pendulum.parse("2024-01-16 17:45", tz=TZ))
        assert not holiday.falls_on(pendulum.parse("2024-01-17 09:00", tz=TZ))


class TestMeeting:
    """Tests for Meeting model."""

    def test_duration_and_day(self):
        meeting = Meeting(
            id="m1",
            title="Planning",
            start=pendulum.parse("2024-01-15 10:00", tz=TZ),
            end=pendulum.parse("2024-01-15 11:30", tz=TZ)
        )

        assert meeting.duration_minutes() == 90
        assert meeting.starts_on(date(2024, 1, 15))
        assert not meeting.is_optional

    def test_zero_length_meeting_has_no_range(self):
        instant = pendulum.parse("2024-01-15 10:00", tz=TZ)
        meeting = Meeting(id="m1", title="Ping", start=instant, end=instant)

        assert meeting.time_range() is None
        assert meeting.duration_minutes() == 0
