"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .task_calculation import MeetingProviderProtocol, TaskCalculationService

__all__ = ["MeetingProviderProtocol", "TaskCalculationService"]
