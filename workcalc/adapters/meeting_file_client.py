"""
Meeting provider that reads already-expanded occurrences from a JSON file.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List

import pendulum
from pendulum import DateTime

from ..domain.exceptions import MeetingProviderError
from ..domain.models import Meeting

logger = logging.getLogger(__name__)


class MeetingFileClient:
    """
    Loads meetings exported from a calendar into a local JSON file.

    File format:
    [
        {
            "id": "abc123",
            "title": "Daily standup",
            "start": "2024-01-15T10:00:00",
            "end": "2024-01-15T10:15:00",
            "optional": false
        }
    ]
    """

    def __init__(self, data_file: Path, timezone: str = "America/Guayaquil"):
        """
        Initialize the client.

        Args:
            data_file: Path to the JSON file
            timezone: IANA timezone used for instants without an offset
        """
        self.data_file = data_file
        self.timezone = timezone

    async def get_meetings(self, start_time: DateTime, end_time: DateTime) -> List[Meeting]:
        """
        Load meetings overlapping the time window, sorted by start.

        Args:
            start_time: Start of the time window
            end_time: End of the time window

        Returns:
            List of Meeting objects

        Raises:
            MeetingProviderError: If the file cannot be read
        """
        meetings = [
            meeting for meeting in self.load_meetings()
            if meeting.start < end_time and meeting.end > start_time
        ]
        return sorted(meetings, key=lambda meeting: meeting.start)

    def load_meetings(self) -> List[Meeting]:
        """Parse every valid entry of the file."""
        if not self.data_file.exists():
            raise MeetingProviderError(f"Meetings file not found: {self.data_file}")

        try:
            with open(self.data_file, "r", encoding="utf-8") as f:
                events = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise MeetingProviderError(f"Could not read meetings file {self.data_file}: {exc}") from exc

        if not isinstance(events, list):
            raise MeetingProviderError("Meetings file must contain a list of events.")

        meetings: List[Meeting] = []
        for index, event in enumerate(events):
            try:
                meetings.append(self._parse_event(event, index))
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning("Skipping meeting entry %d: %s", index, exc)

        return meetings

    def _parse_event(self, event: Dict[str, Any], index: int) -> Meeting:
        start = self._parse_datetime(event["start"])
        end = self._parse_datetime(event["end"])
        if end < start:
            raise ValueError(f"end {event['end']} is before start {event['start']}")

        return Meeting(
            id=str(event.get("id") or f"meeting-{index}"),
            title=event.get("title") or "(no title)",
            start=start,
            end=end,
            is_optional=bool(event.get("optional", False))
        )

    def _parse_datetime(self, datetime_str: str) -> DateTime:
        """
        Parse an ISO 8601 string in the configured timezone.

        Instants with an explicit offset keep it, as no conversion is done.
        """
        dt = pendulum.parse(datetime_str, tz=self.timezone)

        if isinstance(dt, DateTime):
            return dt

        raise ValueError(f"Could not parse datetime: {datetime_str}")
