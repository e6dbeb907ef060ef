"""
Domain-specific exception hierarchy for the working-time calculator.
"""


class WorkCalcError(Exception):
    """Base class for all application-level errors."""


class ConfigurationError(WorkCalcError, ValueError):
    """Raised when a work schedule is malformed."""


class InputError(WorkCalcError, ValueError):
    """Raised when calculation inputs are out of range."""


class MeetingProviderError(WorkCalcError):
    """Raised when meeting data cannot be loaded or parsed."""
