"""
Application service for computing a staff member's bookable slots.

The service fetches hours, settings and bookings through a schedule source
and delegates the slot computation to the domain-level ``SlotCalculator``.
All state is passed in explicitly, so the source can be swapped for a stub
in tests.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Protocol

import pendulum
from pendulum import DateTime

from ..domain.exceptions import UnknownServiceError, UnknownStaffError
from ..domain.hours_resolver import HoursResolver
from ..domain.models import (
    Appointment,
    Booking,
    ClockTime,
    DayHours,
    HoursConfiguration,
    MINUTES_IN_DAY,
    Service,
    SlotCandidate,
    StaffMember,
)
from ..domain.slot_calculator import SlotCalculator, filter_passed_slots
from ..domain.validation import HoursValidationError, validate_business_hours

logger = logging.getLogger(__name__)

DEFAULT_BOOKABLE_STATUSES = ("booked", "confirmed")


class ScheduleSourceProtocol(Protocol):
    """Protocol describing the data access needed by the service."""

    async def get_staff_member(self, staff_id: str) -> Optional[StaffMember]:
        """Return the staff member, or None if unknown."""

    async def get_staff_hours(self, staff_id: str) -> Optional[HoursConfiguration]:
        """Return the staff member's own hours, if configured."""

    async def get_business_hours(self) -> Optional[HoursConfiguration]:
        """Return the business hours, if configured."""

    async def get_service(self, service_id: str) -> Optional[Service]:
        """Return the service, or None if unknown."""

    async def get_appointments(
        self,
        staff_id: str,
        start_time: DateTime,
        end_time: DateTime,
    ) -> List[Booking]:
        """Return bookings starting within [start_time, end_time)."""


class SlotAvailabilityService:
    """
    Orchestrates schedule retrieval and slot calculation.
    """

    def __init__(
        self,
        schedule_source: ScheduleSourceProtocol,
        slot_calculator: SlotCalculator,
        hours_resolver: HoursResolver,
        *,
        timezone: str = "Asia/Jerusalem",
        default_duration_minutes: int = 30,
        bookable_statuses: Iterable[str] = DEFAULT_BOOKABLE_STATUSES,
    ) -> None:
        self._source = schedule_source
        self._slot_calculator = slot_calculator
        self._hours_resolver = hours_resolver
        self.timezone = timezone
        self.default_duration_minutes = default_duration_minutes
        self.bookable_statuses = frozenset(status.lower() for status in bookable_statuses)

    async def get_available_slots(
        self,
        *,
        staff_id: str,
        date: DateTime,
        service_id: Optional[str] = None,
        duration_minutes: Optional[int] = None,
        now: Optional[DateTime] = None,
    ) -> List[SlotCandidate]:
        """
        Resolve everything the engine needs for one day and compute the slots.

        Args:
            staff_id: Staff member to book
            date: Target calendar day
            service_id: Service to book; used to look up the duration
            duration_minutes: Explicit duration, overrides the service lookup
            now: When given, slots that already started today are dropped

        Raises:
            UnknownStaffError: If the staff member does not exist
            UnknownServiceError: If the service does not exist
        """
        day = self.local_day(date)
        staff = await self._get_staff(staff_id)
        duration = await self.resolve_duration(staff, service_id, duration_minutes)
        day_hours = await self.resolve_day(staff_id, day, staff=staff)
        appointments = await self.fetch_appointments(staff_id, day)

        logger.debug(
            "Computing slots for %s on %s: hours %s, %d breaks, %d appointments, rest %d, duration %d",
            staff_id,
            day.format("YYYY-MM-DD"),
            day_hours.working_hours,
            len(day_hours.breaks),
            len(appointments),
            staff.rest_time_minutes,
            duration,
        )

        slots = self.calculate_slots(
            day_hours=day_hours,
            appointments=appointments,
            rest_time_minutes=staff.rest_time_minutes,
            date=day,
            service_duration_minutes=duration,
        )

        if now is not None:
            slots = filter_passed_slots(slots, now.in_timezone(self.timezone))

        return slots

    def calculate_slots(
        self,
        *,
        day_hours: DayHours,
        appointments: List[Appointment],
        rest_time_minutes: int,
        date: DateTime,
        service_duration_minutes: int,
    ) -> List[SlotCandidate]:
        """Calculate slots from already resolved data."""
        return self._slot_calculator.compute_slots(
            working_hours=day_hours.working_hours,
            breaks=day_hours.breaks,
            appointments=appointments,
            rest_time_minutes=rest_time_minutes,
            date=date,
            service_duration_minutes=service_duration_minutes,
        )

    async def resolve_day(
        self,
        staff_id: str,
        date: DateTime,
        *,
        staff: Optional[StaffMember] = None,
    ) -> DayHours:
        """Return the hours and breaks in effect for the staff member on ``date``."""
        if staff is None:
            staff = await self._get_staff(staff_id)

        business_hours = await self._source.get_business_hours()
        staff_hours = None
        if not staff.use_business_hours:
            staff_hours = await self._source.get_staff_hours(staff_id)

        return self._hours_resolver.resolve(
            self.local_day(date),
            staff_hours=staff_hours,
            business_hours=business_hours,
            use_business_hours=staff.use_business_hours,
        )

    async def resolve_duration(
        self,
        staff: StaffMember,
        service_id: Optional[str],
        duration_minutes: Optional[int],
    ) -> int:
        """
        Pick the service duration: explicit value, then the staff member's
        duration for the service, then the service default, then the
        configured default.
        """
        if duration_minutes is not None:
            return duration_minutes

        if service_id is None:
            return self.default_duration_minutes

        service = await self._source.get_service(service_id)
        if service is None:
            raise UnknownServiceError(f"Unknown service: '{service_id}'")

        return staff.service_durations.get(service_id) or service.duration_minutes

    async def fetch_appointments(self, staff_id: str, date: DateTime) -> List[Appointment]:
        """
        Fetch the day's bookings and convert them to wall-clock appointments.

        Only bookings with a bookable status (booked/confirmed by default)
        block time.
        """
        day_start = self.local_day(date)
        day_end = day_start.add(days=1)

        bookings = await self._source.get_appointments(
            staff_id=staff_id,
            start_time=day_start,
            end_time=day_end,
        )

        return [
            self._to_appointment(booking, day_start)
            for booking in bookings
            if booking.status.lower() in self.bookable_statuses
        ]

    async def validate_hours(self, staff_id: Optional[str] = None) -> Optional[HoursValidationError]:
        """
        Validate the business hours, or a staff member's own hours.

        Returns None when there is nothing configured to validate.
        """
        if staff_id is None:
            configuration = await self._source.get_business_hours()
        else:
            await self._get_staff(staff_id)
            configuration = await self._source.get_staff_hours(staff_id)

        if configuration is None:
            return None

        return validate_business_hours(configuration.regular_hours)

    async def _get_staff(self, staff_id: str) -> StaffMember:
        staff = await self._source.get_staff_member(staff_id)
        if staff is None:
            raise UnknownStaffError(f"Unknown staff member: '{staff_id}'")
        return staff

    def local_day(self, date: DateTime) -> DateTime:
        """Midnight of ``date``'s calendar day in the business timezone."""
        return pendulum.datetime(date.year, date.month, date.day, tz=self.timezone)

    def _to_appointment(self, booking: Booking, day: DateTime) -> Appointment:
        start = booking.start.in_timezone(self.timezone)
        end = booking.end.in_timezone(self.timezone)
        if end.date() > day.date():
            # Runs past midnight: block until the last minute of the day
            end_time = ClockTime(MINUTES_IN_DAY - 1)
        else:
            end_time = ClockTime.of(end.hour, end.minute)
        return Appointment(start=ClockTime.of(start.hour, start.minute), end=end_time)
