"""
End date calculation: walk the calendar day by day until the required
amount of effective working time has been allocated.

Pure domain logic: no I/O, and the caller's holiday and meeting lists are
never modified.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Sequence, Union

from pendulum import DateTime

from .exceptions import InputError
from .interval_engine import IntervalEngine
from .models import (
    CalculationResult,
    Holiday,
    Meeting,
    ScheduleConfig,
    at_time,
    minutes_between,
)

logger = logging.getLogger(__name__)


class DayState(Enum):
    """What the day walk decided for one calendar day."""
    SKIPPED_WEEKEND = "skipped-weekend"
    SKIPPED_HOLIDAY = "skipped-holiday"
    WORKING_PARTIAL_DAY = "working-partial-day"
    WORKING_FULL_DAY = "working-full-day"
    COMPLETED = "completed"


@dataclass(frozen=True)
class FirstDay:
    """The day the calculation starts; work may begin mid-day."""
    actual_start: DateTime


@dataclass(frozen=True)
class FullDay:
    """Any later day; work begins at the schedule start."""


DayContext = Union[FirstDay, FullDay]


class EndDateCalculator:
    """
    Finds the instant at which a task of a given size is finished.

    Algorithm:
    1. Skip days outside the schedule's work days
    2. Skip holidays (when excluded) and record them
    3. Deduct mandatory meetings from the day's capacity (when excluded)
    4. Consume whole days until the remaining budget fits into one
    5. Walk that day's free intervals to find the exact completion minute
    """

    def __init__(self, schedule: ScheduleConfig):
        self.schedule = schedule
        self.interval_engine = IntervalEngine(schedule)

    def calculate_end_date(
        self,
        start_date: DateTime,
        estimated_hours: float,
        holidays: Optional[Sequence[Holiday]] = None,
        meetings: Optional[Sequence[Meeting]] = None,
        exclude_holidays: bool = True,
        exclude_meetings: bool = True
    ) -> CalculationResult:
        """
        Calculate when a task starting at start_date will be finished.

        Args:
            start_date: Instant at which work starts (may be mid-day)
            estimated_hours: Effective working hours required
            holidays: Holidays that may be skipped
            meetings: Meeting occurrences that may block time
            exclude_holidays: Skip holiday dates entirely
            exclude_meetings: Deduct mandatory meetings from working time

        Returns:
            CalculationResult with the completion instant and statistics

        Raises:
            InputError: If estimated_hours is negative or not a number
        """
        self._validate_hours(estimated_hours)

        if estimated_hours == 0:
            return CalculationResult(
                start_date=start_date,
                end_date=start_date,
                working_days=0,
                actual_working_hours=estimated_hours
            )

        holiday_list = list(holidays or [])
        meeting_list = list(meetings or [])

        remaining = round(estimated_hours * 60)
        cursor = start_date.set(second=0, microsecond=0)
        context: DayContext = FirstDay(actual_start=cursor)

        working_days = 0
        holidays_excluded: List[Holiday] = []
        meetings_excluded: Dict[str, Meeting] = {}

        while True:
            day = self._day_start(cursor, context)

            if not self.schedule.is_working_day(day):
                self._log_state(day, DayState.SKIPPED_WEEKEND)
                cursor, context = self._next_day(day)
                continue

            holiday = self._find_holiday(day, holiday_list) if exclude_holidays else None
            if holiday is not None:
                self._log_state(day, DayState.SKIPPED_HOLIDAY)
                holidays_excluded.append(holiday)
                cursor, context = self._next_day(day)
                continue

            available = self._available_minutes(day, context)
            if available <= 0:
                # Started at or after closing time; the day is not counted
                self._log_state(
                    day, DayState.WORKING_PARTIAL_DAY, available=available, remaining=remaining
                )
                cursor, context = self._next_day(day)
                continue

            # Counted before meetings are deducted, even if they fill the day
            working_days += 1

            day_meetings: List[Meeting] = []
            if exclude_meetings:
                day_meetings = self._meetings_for_day(day, context, meeting_list)
                for meeting in day_meetings:
                    meetings_excluded.setdefault(meeting.id, meeting)

            available -= sum(meeting.duration_minutes() for meeting in day_meetings)

            state = (
                DayState.WORKING_PARTIAL_DAY
                if isinstance(context, FirstDay)
                else DayState.WORKING_FULL_DAY
            )
            self._log_state(day, state, available=available, remaining=remaining)

            if available <= 0:
                cursor, context = self._next_day(day)
                continue

            if remaining <= available:
                end_date = self._completion_instant(day, context, day_meetings, remaining)
                self._log_state(end_date, DayState.COMPLETED)
                return CalculationResult(
                    start_date=start_date,
                    end_date=end_date,
                    working_days=working_days,
                    actual_working_hours=estimated_hours,
                    holidays_excluded=holidays_excluded,
                    meetings_excluded=list(meetings_excluded.values())
                )

            remaining -= available
            cursor, context = self._next_day(day)

    @staticmethod
    def _validate_hours(estimated_hours: float) -> None:
        if isinstance(estimated_hours, bool) or not isinstance(estimated_hours, (int, float)):
            raise InputError(f"Estimated hours must be a number, got {estimated_hours!r}")
        if math.isnan(estimated_hours) or math.isinf(estimated_hours):
            raise InputError(f"Estimated hours must be finite, got {estimated_hours}")
        if estimated_hours < 0:
            raise InputError(f"Estimated hours must not be negative, got {estimated_hours}")

    def _day_start(self, cursor: DateTime, context: DayContext) -> DateTime:
        if isinstance(context, FirstDay):
            return context.actual_start
        return at_time(cursor, self.schedule.start)

    def _next_day(self, day: DateTime):
        return at_time(day.add(days=1), self.schedule.start), FullDay()

    @staticmethod
    def _find_holiday(day: DateTime, holidays: List[Holiday]) -> Optional[Holiday]:
        for holiday in holidays:
            if holiday.falls_on(day):
                return holiday
        return None

    @staticmethod
    def _meetings_for_day(
        day: DateTime,
        context: DayContext,
        meetings: List[Meeting]
    ) -> List[Meeting]:
        """
        Mandatory meetings starting on this day, one per id, sorted by start.

        On the first day, meetings that ended before work started are ignored.
        """
        selected: Dict[str, Meeting] = {}

        for meeting in meetings:
            if meeting.is_optional or not meeting.starts_on(day):
                continue
            if isinstance(context, FirstDay) and meeting.end <= context.actual_start:
                continue
            selected.setdefault(meeting.id, meeting)

        return sorted(selected.values(), key=lambda meeting: meeting.start)

    def _available_minutes(self, day: DateTime, context: DayContext) -> int:
        if isinstance(context, FullDay):
            return self.schedule.daily_working_minutes()

        window = self.schedule.window_for_day(day)
        begin = max(context.actual_start, window.start)
        available = minutes_between(begin, window.end)

        # Only the part of lunch still ahead of the start is lost
        lunch = self.schedule.lunch_for_day(day)
        if lunch is not None and lunch.end > begin:
            available -= minutes_between(max(lunch.start, begin), lunch.end)

        return available

    def _completion_instant(
        self,
        day: DateTime,
        context: DayContext,
        day_meetings: List[Meeting],
        remaining: int
    ) -> DateTime:
        override = context.actual_start if isinstance(context, FirstDay) else None
        intervals = self.interval_engine.free_intervals(
            day,
            meetings=day_meetings,
            day_start_override=override
        )

        for interval in intervals:
            length = interval.duration_minutes()
            if remaining <= length:
                return interval.start.add(minutes=remaining)
            remaining -= length

        if intervals:
            return intervals[-1].end
        return day

    @staticmethod
    def _log_state(day: DateTime, state: DayState, **details) -> None:
        if details:
            logger.debug(
                "%s %s %s",
                day.to_datetime_string(),
                state.value,
                " ".join(f"{key}={value}" for key, value in details.items())
            )
        else:
            logger.debug("%s %s", day.to_datetime_string(), state.value)


def calculate_end_date(
    start_date: DateTime,
    estimated_hours: float,
    schedule: ScheduleConfig,
    holidays: Optional[Sequence[Holiday]] = None,
    meetings: Optional[Sequence[Meeting]] = None,
    exclude_holidays: bool = True,
    exclude_meetings: bool = True
) -> CalculationResult:
    """Convenience wrapper around EndDateCalculator."""
    return EndDateCalculator(schedule).calculate_end_date(
        start_date=start_date,
        estimated_hours=estimated_hours,
        holidays=holidays,
        meetings=meetings,
        exclude_holidays=exclude_holidays,
        exclude_meetings=exclude_meetings
    )
