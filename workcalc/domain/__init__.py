"""
Domain layer - Pure business logic without external dependencies.
"""

from .end_date_calculator import DayState, EndDateCalculator, calculate_end_date
from .exceptions import ConfigurationError, InputError, MeetingProviderError, WorkCalcError
from .interval_engine import IntervalEngine
from .models import CalculationResult, Holiday, Meeting, ScheduleConfig, TimeRange
from .range_hours import RangeHoursAggregator, hours_in_period

__all__ = [
    "CalculationResult",
    "ConfigurationError",
    "DayState",
    "EndDateCalculator",
    "Holiday",
    "InputError",
    "IntervalEngine",
    "Meeting",
    "MeetingProviderError",
    "RangeHoursAggregator",
    "ScheduleConfig",
    "TimeRange",
    "WorkCalcError",
    "calculate_end_date",
    "hours_in_period",
]
