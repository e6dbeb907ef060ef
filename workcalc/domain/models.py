"""
Domain models for schedules, exclusions and calculation results.
"""

import re
from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import FrozenSet, Iterable, List, Optional

import pendulum
from pendulum import DateTime

from .exceptions import ConfigurationError

_TIME_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})$")

WEEKDAY_NAMES = {
    0: "Sunday",
    1: "Monday",
    2: "Tuesday",
    3: "Wednesday",
    4: "Thursday",
    5: "Friday",
    6: "Saturday",
}


def parse_time(value: str) -> time:
    """
    Parse a 24-hour "HH:mm" string into a time object.

    Raises:
        ConfigurationError: If the string is not a valid wall-clock time
    """
    match = _TIME_PATTERN.match(value.strip()) if isinstance(value, str) else None
    if match is None:
        raise ConfigurationError(f"Invalid time '{value}', expected HH:mm")

    try:
        return time(hour=int(match.group(1)), minute=int(match.group(2)))
    except ValueError as exc:
        raise ConfigurationError(f"Invalid time '{value}': {exc}") from exc


def minutes_of_day(value: time) -> int:
    """Return the number of minutes since midnight."""
    return value.hour * 60 + value.minute


def weekday_index(day: date) -> int:
    """Weekday index with 0=Sunday .. 6=Saturday."""
    return day.isoweekday() % 7


def at_time(day: DateTime, wall_clock: time) -> DateTime:
    """Move a datetime to the given wall-clock time on the same day."""
    return day.set(
        hour=wall_clock.hour,
        minute=wall_clock.minute,
        second=0,
        microsecond=0
    )


def minutes_between(start: DateTime, end: DateTime) -> int:
    """Whole minutes from start to end, truncated toward zero."""
    return int((end - start).total_seconds() / 60)


@dataclass(frozen=True)
class TimeRange:
    """
    Represents an immutable time range with start and end datetime.

    Invariant: start must be before end.
    """
    start: DateTime
    end: DateTime

    def __post_init__(self):
        if self.start >= self.end:
            raise ValueError(f"Start time {self.start} must be before end time {self.end}")

    def duration_minutes(self) -> int:
        """Return the duration in minutes."""
        return minutes_between(self.start, self.end)


@dataclass(frozen=True)
class ScheduleConfig:
    """
    Immutable description of the recurring weekly work pattern.

    Times are "HH:mm" strings; work_days uses 0=Sunday .. 6=Saturday.
    All invariants are checked eagerly so a bad schedule never reaches
    the calculator.
    """
    start_time: str = "09:00"
    end_time: str = "18:00"
    lunch_start: str = "12:00"
    lunch_end: str = "13:00"
    work_days: FrozenSet[int] = frozenset({1, 2, 3, 4, 5})

    def __post_init__(self):
        object.__setattr__(self, "work_days", frozenset(self.work_days))

        start = minutes_of_day(self.start)
        end = minutes_of_day(self.end)
        lunch_start = minutes_of_day(self.lunch_start_time)
        lunch_end = minutes_of_day(self.lunch_end_time)

        if end <= start:
            raise ConfigurationError(
                f"End time {self.end_time} must be later than start time {self.start_time}"
            )
        if lunch_end < lunch_start:
            raise ConfigurationError(
                f"Lunch end {self.lunch_end} must not be before lunch start {self.lunch_start}"
            )
        if lunch_start < start or lunch_end > end:
            raise ConfigurationError(
                f"Lunch window {self.lunch_start}-{self.lunch_end} must lie within "
                f"working hours {self.start_time}-{self.end_time}"
            )
        if self.daily_working_minutes() <= 0:
            raise ConfigurationError("Lunch break must leave working time in the day")
        if not self.work_days:
            raise ConfigurationError("At least one work day is required")

        invalid_days = sorted(day for day in self.work_days if day not in range(7))
        if invalid_days:
            raise ConfigurationError(f"Work days must be between 0 and 6, got {invalid_days}")

    @property
    def start(self) -> time:
        return parse_time(self.start_time)

    @property
    def end(self) -> time:
        return parse_time(self.end_time)

    @property
    def lunch_start_time(self) -> time:
        return parse_time(self.lunch_start)

    @property
    def lunch_end_time(self) -> time:
        return parse_time(self.lunch_end)

    def daily_working_minutes(self) -> int:
        """Working minutes in a full day: the window minus the lunch break."""
        total = minutes_of_day(self.end) - minutes_of_day(self.start)
        lunch = minutes_of_day(self.lunch_end_time) - minutes_of_day(self.lunch_start_time)
        return total - lunch

    def is_working_day(self, day: date) -> bool:
        """Check if a given date falls on one of the configured weekdays."""
        return weekday_index(day) in self.work_days

    def window_for_day(self, day: DateTime) -> TimeRange:
        """The day's working window from start_time to end_time."""
        return TimeRange(start=at_time(day, self.start), end=at_time(day, self.end))

    def lunch_for_day(self, day: DateTime) -> Optional[TimeRange]:
        """The day's lunch break, or None for an empty lunch window."""
        lunch_start = at_time(day, self.lunch_start_time)
        lunch_end = at_time(day, self.lunch_end_time)
        if lunch_start >= lunch_end:
            return None
        return TimeRange(start=lunch_start, end=lunch_end)

    def describe_work_days(self) -> str:
        """Comma separated weekday names, Monday first."""
        ordered = sorted(self.work_days, key=lambda day: (day + 6) % 7)
        return ", ".join(WEEKDAY_NAMES[day] for day in ordered)


@dataclass(frozen=True)
class Holiday:
    """
    A non-working calendar date supplied by a holiday provider.

    The date is compared as a plain calendar date, without time of day.
    """
    date: date
    name: str
    type: str = "national"
    country: str = ""
    is_global: bool = True

    def __post_init__(self):
        value = self.date
        if isinstance(value, str):
            value = pendulum.parse(value).date()
        elif isinstance(value, datetime):
            value = value.date()
        # Plain date keys compare and hash the same whatever produced them
        object.__setattr__(self, "date", date(value.year, value.month, value.day))

    @property
    def date_key(self) -> str:
        return self.date.isoformat()

    def falls_on(self, day: date) -> bool:
        if isinstance(day, datetime):
            day = day.date()
        return self.date == day


@dataclass(frozen=True)
class Meeting:
    """
    A concrete meeting occurrence.

    Mandatory meetings (is_optional=False) block working time; optional
    meetings never do.
    """
    id: str
    title: str
    start: DateTime
    end: DateTime
    is_optional: bool = False

    def duration_minutes(self) -> int:
        return minutes_between(self.start, self.end)

    def starts_on(self, day: date) -> bool:
        if isinstance(day, datetime):
            day = day.date()
        return self.start.date() == day

    def time_range(self) -> Optional[TimeRange]:
        """The meeting as a TimeRange, or None when it has no duration."""
        if self.start >= self.end:
            return None
        return TimeRange(start=self.start, end=self.end)


@dataclass
class CalculationResult:
    """
    Outcome of an end date calculation.
    """
    start_date: DateTime
    end_date: DateTime
    working_days: int
    actual_working_hours: float
    holidays_excluded: List[Holiday] = field(default_factory=list)
    meetings_excluded: List[Meeting] = field(default_factory=list)


def mandatory_meetings(meetings: Iterable[Meeting]) -> List[Meeting]:
    """Filter out optional meetings, preserving order."""
    return [meeting for meeting in meetings if not meeting.is_optional]
