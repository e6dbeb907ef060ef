"""
Free working intervals within a single day.

Pure domain logic: no I/O, no state kept between calls.
"""

from typing import Iterable, List, Optional

from pendulum import DateTime

from .models import Meeting, ScheduleConfig, TimeRange


class IntervalEngine:
    """
    Splits one working day into free intervals.

    Algorithm:
    1. Collect busy spans: the lunch break plus every mandatory meeting
    2. Sort busy spans by start
    3. Sweep from the day start to the day end, emitting each gap
    """

    def __init__(self, schedule: ScheduleConfig):
        self.schedule = schedule

    def free_intervals(
        self,
        day: DateTime,
        meetings: Iterable[Meeting] = (),
        day_start_override: Optional[DateTime] = None
    ) -> List[TimeRange]:
        """
        Compute the ordered free intervals for a day.

        Args:
            day: Any instant on the calendar day
            meetings: Meetings that may block time on this day
            day_start_override: Where availability begins (first day of a
                calculation); never earlier than the schedule start

        Returns:
            Disjoint, chronologically ordered TimeRange objects
        """
        window = self.schedule.window_for_day(day)
        day_start = window.start
        if day_start_override is not None and day_start_override > day_start:
            day_start = day_start_override

        if day_start >= window.end:
            return []

        return self._subtract_busy_from_window(
            TimeRange(start=day_start, end=window.end),
            self._busy_spans(day, meetings)
        )

    def free_minutes(
        self,
        day: DateTime,
        meetings: Iterable[Meeting] = (),
        day_start_override: Optional[DateTime] = None
    ) -> int:
        """Total free minutes for a day."""
        return sum(
            interval.duration_minutes()
            for interval in self.free_intervals(day, meetings, day_start_override)
        )

    def _busy_spans(self, day: DateTime, meetings: Iterable[Meeting]) -> List[TimeRange]:
        spans: List[TimeRange] = []

        lunch = self.schedule.lunch_for_day(day)
        if lunch is not None:
            spans.append(lunch)

        for meeting in meetings:
            if meeting.is_optional:
                continue
            span = meeting.time_range()
            if span is not None:
                spans.append(span)

        return sorted(spans, key=lambda span: span.start)

    @staticmethod
    def _subtract_busy_from_window(
        window: TimeRange,
        busy_spans: List[TimeRange]
    ) -> List[TimeRange]:
        """
        Subtract busy spans from a working window, yielding free ranges.

        Example:
        Window: 09:00 - 18:00
        Busy: [12:00-13:00, 10:00-11:00]
        Result: [09:00-10:00, 11:00-12:00, 13:00-18:00]
        """
        free_ranges: List[TimeRange] = []
        cursor = window.start

        for busy in busy_spans:
            # Clip busy span to the window
            busy_start = min(max(busy.start, window.start), window.end)
            busy_end = min(max(busy.end, window.start), window.end)

            if cursor < busy_start:
                free_ranges.append(TimeRange(start=cursor, end=busy_start))

            cursor = max(cursor, busy_end)

        if cursor < window.end:
            free_ranges.append(TimeRange(start=cursor, end=window.end))

        return free_ranges
