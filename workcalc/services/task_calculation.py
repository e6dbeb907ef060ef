"""
Application service for estimating when a task will be finished.

The service resolves which holidays and meetings apply, fetches meetings
through a provider adapter and delegates the actual calculation to the
domain-level ``EndDateCalculator``. The meeting dependency is expressed as
a protocol so tests can plug in a stub.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Protocol, Sequence

from pendulum import DateTime

from ..domain.end_date_calculator import EndDateCalculator
from ..domain.models import CalculationResult, Holiday, Meeting

logger = logging.getLogger(__name__)


class MeetingProviderProtocol(Protocol):
    """Protocol describing the meeting source needed by the service."""

    async def get_meetings(self, start_time: DateTime, end_time: DateTime) -> List[Meeting]:
        """Return meeting occurrences overlapping the window."""


class TaskCalculationService:
    """
    Orchestrates meeting retrieval, exclusion selection and calculation.

    Meetings can only be fetched once the time window is known, so the end
    date is estimated twice: first with holidays only, then with the
    meetings found up to that preliminary end date.
    """

    def __init__(
        self,
        calculator: EndDateCalculator,
        meeting_provider: Optional[MeetingProviderProtocol] = None,
    ) -> None:
        self._calculator = calculator
        self._meeting_provider = meeting_provider

    async def calculate(
        self,
        *,
        start_date: DateTime,
        estimated_hours: float,
        holidays: Sequence[Holiday] = (),
        exclude_holidays: bool = True,
        exclude_meetings: bool = True,
        excluded_holiday_dates: Sequence[str] = (),
        excluded_meeting_ids: Sequence[str] = (),
    ) -> CalculationResult:
        """
        Calculate the end date with the selected exclusions applied.

        An empty ``excluded_holiday_dates`` / ``excluded_meeting_ids`` means
        every holiday / meeting is excluded; otherwise only the listed ones.
        """
        effective_holidays = self.select_holidays(
            holidays,
            exclude_holidays=exclude_holidays,
            excluded_dates=excluded_holiday_dates,
        )

        preliminary = self._calculator.calculate_end_date(
            start_date=start_date,
            estimated_hours=estimated_hours,
            holidays=effective_holidays,
            exclude_holidays=bool(effective_holidays),
            exclude_meetings=False,
        )

        meetings: List[Meeting] = []
        if exclude_meetings:
            meetings = await self.fetch_meetings(start_date, preliminary.end_date)

        effective_meetings = self.select_meetings(
            meetings,
            exclude_meetings=exclude_meetings,
            excluded_ids=excluded_meeting_ids,
        )

        logger.debug(
            "Final calculation with %d holidays and %d meetings",
            len(effective_holidays),
            len(effective_meetings),
        )

        return self._calculator.calculate_end_date(
            start_date=start_date,
            estimated_hours=estimated_hours,
            holidays=effective_holidays,
            meetings=effective_meetings,
            exclude_holidays=bool(effective_holidays),
            exclude_meetings=True,
        )

    async def fetch_meetings(self, start_date: DateTime, end_date: DateTime) -> List[Meeting]:
        """Fetch meetings in the window, or nothing without a provider."""
        if self._meeting_provider is None:
            return []
        return await self._meeting_provider.get_meetings(start_date, end_date)

    @staticmethod
    def select_holidays(
        holidays: Sequence[Holiday],
        *,
        exclude_holidays: bool,
        excluded_dates: Sequence[str],
    ) -> List[Holiday]:
        """Holidays to skip given the exclusion flag and date selection."""
        if not exclude_holidays:
            return []
        if not excluded_dates:
            return list(holidays)

        selected = set(excluded_dates)
        return [holiday for holiday in holidays if holiday.date_key in selected]

    @staticmethod
    def select_meetings(
        meetings: Sequence[Meeting],
        *,
        exclude_meetings: bool,
        excluded_ids: Sequence[str],
    ) -> List[Meeting]:
        """Meetings to deduct given the exclusion flag and id selection."""
        if not exclude_meetings:
            return []
        if not excluded_ids:
            return list(meetings)

        selected = set(excluded_ids)
        return [meeting for meeting in meetings if meeting.id in selected]
