"""
Domain-specific exception hierarchy for the booking slots application.
"""


class BookingSlotsError(Exception):
    """Base class for all application-level errors."""


class ScheduleSourceError(BookingSlotsError):
    """Raised when schedule data cannot be loaded or parsed."""


class UnknownStaffError(BookingSlotsError):
    """Raised when a staff member id is not known to the schedule source."""


class UnknownServiceError(BookingSlotsError):
    """Raised when a service id is not known to the schedule source."""
