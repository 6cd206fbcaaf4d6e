"""
Domain layer - Pure business logic without external dependencies.
"""

from .hours_resolver import HoursResolver
from .models import (
    Appointment,
    BreakInterval,
    ClockTime,
    DayHours,
    HoursConfiguration,
    SlotCandidate,
    SpecialDate,
    WeekSchedule,
    Weekday,
    WorkingHours,
)
from .slot_calculator import SlotCalculator, compute_slots, filter_passed_slots
from .validation import HoursValidationError, validate_breaks, validate_business_hours

__all__ = [
    "Appointment",
    "BreakInterval",
    "ClockTime",
    "DayHours",
    "HoursConfiguration",
    "HoursResolver",
    "HoursValidationError",
    "SlotCalculator",
    "SlotCandidate",
    "SpecialDate",
    "WeekSchedule",
    "Weekday",
    "WorkingHours",
    "compute_slots",
    "filter_passed_slots",
    "validate_breaks",
    "validate_business_hours",
]
