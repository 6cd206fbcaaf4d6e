"""
Validation of break lists and weekly business hours before they are saved.

Failures are returned as values, never raised, so the caller can show them
as form errors.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Sequence

from .models import BreakInterval, ClockTime, WeekSchedule, Weekday


class ValidationCode(str, Enum):
    BREAK_OUTSIDE_HOURS = "break_outside_hours"
    BREAK_END_BEFORE_START = "break_end_before_start"
    BREAKS_OVERLAP = "breaks_overlap"
    START_NOT_BEFORE_END = "start_not_before_end"
    MISSING_TIMES = "missing_times"


_MESSAGES = {
    ValidationCode.BREAK_OUTSIDE_HOURS: "Break must be within working hours",
    ValidationCode.BREAK_END_BEFORE_START: "Break start time must be before its end time",
    ValidationCode.BREAKS_OVERLAP: "Breaks cannot overlap",
    ValidationCode.START_NOT_BEFORE_END: "Start time must be before end time",
    ValidationCode.MISSING_TIMES: "Working hours need both a start and an end time",
}


@dataclass(frozen=True)
class HoursValidationError:
    """Descriptive validation failure returned to the caller."""
    code: ValidationCode
    message: str
    day: Optional[Weekday] = None

    @classmethod
    def of(cls, code: ValidationCode) -> "HoursValidationError":
        return cls(code=code, message=_MESSAGES[code])

    def for_day(self, day: Weekday) -> "HoursValidationError":
        """Return a copy qualified with the day it applies to."""
        return replace(self, day=day, message=f"{self.message} on {day.display_name}")

    def __str__(self) -> str:
        return self.message


def validate_breaks(
    breaks: Sequence[BreakInterval],
    day_start: ClockTime,
    day_end: ClockTime,
) -> Optional[HoursValidationError]:
    """
    Validate a day's breaks against its working window.

    Breaks are checked in start order: each must lie inside the window,
    start before it ends, and begin no earlier than the previous one ended.

    Returns:
        None if all breaks pass, otherwise the first failure
    """
    last_end = day_start

    for break_item in sorted(breaks, key=lambda b: b.start_time):
        if break_item.start_time < day_start or break_item.end_time > day_end:
            return HoursValidationError.of(ValidationCode.BREAK_OUTSIDE_HOURS)

        if break_item.start_time >= break_item.end_time:
            return HoursValidationError.of(ValidationCode.BREAK_END_BEFORE_START)

        if break_item.start_time < last_end:
            return HoursValidationError.of(ValidationCode.BREAKS_OVERLAP)

        last_end = break_item.end_time

    return None


def validate_business_hours(week: WeekSchedule) -> Optional[HoursValidationError]:
    """
    Validate a full week of hours. Inactive days are skipped.

    Returns:
        None if every active day is valid, otherwise the first day-qualified failure
    """
    for day, day_hours in week:
        hours = day_hours.working_hours
        if not hours.is_active:
            continue

        if hours.start_time is None or hours.end_time is None:
            return HoursValidationError.of(ValidationCode.MISSING_TIMES).for_day(day)

        if hours.start_time >= hours.end_time:
            return HoursValidationError.of(ValidationCode.START_NOT_BEFORE_END).for_day(day)

        error = validate_breaks(day_hours.breaks, hours.start_time, hours.end_time)
        if error:
            return error.for_day(day)

    return None
