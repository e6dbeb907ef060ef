"""
Adapters layer - Local sources of holidays and meetings.
"""

from .holiday_provider import HolidayProvider
from .meeting_file_client import MeetingFileClient

__all__ = ["HolidayProvider", "MeetingFileClient"]
