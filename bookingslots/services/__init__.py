"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .availability import ScheduleSourceProtocol, SlotAvailabilityService

__all__ = ["ScheduleSourceProtocol", "SlotAvailabilityService"]
