"""
Working capacity of a date range.
"""

from datetime import date, datetime
from typing import Optional, Sequence

import pendulum

from .models import Holiday, Meeting, ScheduleConfig, mandatory_meetings


class RangeHoursAggregator:
    """
    Sums effective working hours between two dates (both inclusive).

    Meetings are deducted by their full duration, whether or not they fall
    inside business hours; a day never contributes less than zero.
    """

    def __init__(self, schedule: ScheduleConfig):
        self.schedule = schedule

    def hours_in_period(
        self,
        start_date: date,
        end_date: date,
        holidays: Optional[Sequence[Holiday]] = None,
        meetings: Optional[Sequence[Meeting]] = None,
        exclude_holidays: bool = True,
        exclude_meetings: bool = True
    ) -> float:
        """
        Total effective working hours in the period.

        Args:
            start_date: First calendar day of the period
            end_date: Last calendar day of the period
            holidays: Holidays that may be skipped
            meetings: Meeting occurrences that may reduce capacity
            exclude_holidays: Skip holiday dates entirely
            exclude_meetings: Deduct mandatory meetings

        Returns:
            Hours, possibly fractional
        """
        holiday_list = list(holidays or [])
        meeting_list = mandatory_meetings(meetings or [])
        daily_minutes = self.schedule.daily_working_minutes()

        current = self._as_date(start_date)
        last = self._as_date(end_date)
        total_minutes = 0

        while current <= last:
            if not self.schedule.is_working_day(current):
                current = current.add(days=1)
                continue

            if exclude_holidays and any(holiday.falls_on(current) for holiday in holiday_list):
                current = current.add(days=1)
                continue

            day_minutes = daily_minutes
            if exclude_meetings:
                day_minutes -= sum(
                    meeting.duration_minutes()
                    for meeting in meeting_list
                    if meeting.starts_on(current)
                )

            total_minutes += max(0, day_minutes)
            current = current.add(days=1)

        return total_minutes / 60

    @staticmethod
    def _as_date(value: date) -> pendulum.Date:
        if isinstance(value, datetime):
            value = value.date()
        return pendulum.date(value.year, value.month, value.day)


def hours_in_period(
    start_date: date,
    end_date: date,
    schedule: ScheduleConfig,
    holidays: Optional[Sequence[Holiday]] = None,
    meetings: Optional[Sequence[Meeting]] = None,
    exclude_holidays: bool = True,
    exclude_meetings: bool = True
) -> float:
    """Convenience wrapper around RangeHoursAggregator."""
    return RangeHoursAggregator(schedule).hours_in_period(
        start_date=start_date,
        end_date=end_date,
        holidays=holidays,
        meetings=meetings,
        exclude_holidays=exclude_holidays,
        exclude_meetings=exclude_meetings
    )
