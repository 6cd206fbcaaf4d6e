"""
Core business logic for computing bookable time slots.

Pure domain logic: no I/O, no shared state. Every call is a function of its
arguments only, so callers must pass freshly fetched appointments.
"""

from typing import List, Sequence

from pendulum import DateTime

from .models import Appointment, BreakInterval, ClockTime, SlotCandidate, WorkingHours

SLOT_STEP_MINUTES = 20


class SlotCalculator:
    """
    Calculates the slot grid for one staff member on one day.

    Algorithm:
    1. Walk the working window in fixed steps, end inclusive
    2. Tag each point as break time and/or available
    3. Keep points that are available or breaks, and leave room for the service
    4. Deduplicate by clock label
    """

    def __init__(self, step_minutes: int = SLOT_STEP_MINUTES):
        if step_minutes <= 0:
            raise ValueError(f"Slot step must be positive, got {step_minutes}")
        self.step_minutes = step_minutes

    def compute_slots(
        self,
        working_hours: WorkingHours,
        breaks: Sequence[BreakInterval],
        appointments: Sequence[Appointment],
        rest_time_minutes: int,
        date: DateTime,
        service_duration_minutes: int,
    ) -> List[SlotCandidate]:
        """
        Compute slot candidates for a service on the given date.

        Args:
            working_hours: The day's operating window
            breaks: Break intervals for the day
            appointments: Existing bookings for the staff member on the day
            rest_time_minutes: Buffer appended after every appointment
            date: Calendar day; its own hour and minute are ignored
            service_duration_minutes: Length of the service to book

        Returns:
            Ordered list of SlotCandidate objects. Empty for a closed day or
            malformed hours.

        Raises:
            ValueError: If the service duration is not positive
        """
        if service_duration_minutes <= 0:
            raise ValueError(
                f"Service duration must be positive, got {service_duration_minutes}"
            )

        if not working_hours.is_open():
            return []

        work_start = working_hours.start_time.minutes
        work_end = working_hours.end_time.minutes
        rest = rest_time_minutes or 0

        slots: List[SlotCandidate] = []
        seen_labels = set()

        current = work_start
        while current <= work_end:
            appointment_end = current + service_duration_minutes
            has_enough_time = appointment_end <= work_end

            is_break = self._is_break_time(current, breaks)
            is_available = self._is_available(
                current,
                appointment_end,
                work_start=work_start,
                work_end=work_end,
                appointments=appointments,
                rest_time_minutes=rest,
            )

            if (is_available or is_break) and has_enough_time:
                moment = ClockTime(current)
                label = str(moment)
                if label not in seen_labels:
                    seen_labels.add(label)
                    slots.append(
                        SlotCandidate(
                            time=moment.on(date),
                            available=is_available,
                            is_break=is_break,
                        )
                    )

            current += self.step_minutes

        return slots

    @staticmethod
    def _is_break_time(moment: int, breaks: Sequence[BreakInterval]) -> bool:
        return any(b.contains(ClockTime(moment)) for b in breaks)

    @staticmethod
    def _is_available(
        start: int,
        end: int,
        *,
        work_start: int,
        work_end: int,
        appointments: Sequence[Appointment],
        rest_time_minutes: int,
    ) -> bool:
        """
        Check a candidate [start, end) against working hours and bookings.

        A new appointment may not start during, end during, or fully cover an
        existing appointment extended by the rest buffer. Starting exactly when
        the buffer ends is allowed.
        """
        if start < work_start or end > work_end:
            return False

        for appointment in appointments:
            booked_start = appointment.start.minutes
            booked_end = appointment.end.minutes + rest_time_minutes

            starts_during = booked_start <= start < booked_end
            ends_during = booked_start < end <= booked_end
            spans = start <= booked_start and end >= booked_end

            if starts_during or ends_during or spans:
                return False

        return True


def compute_slots(
    working_hours: WorkingHours,
    breaks: Sequence[BreakInterval],
    appointments: Sequence[Appointment],
    rest_time_minutes: int,
    date: DateTime,
    service_duration_minutes: int,
) -> List[SlotCandidate]:
    """Compute slots on the default 20 minute grid."""
    return SlotCalculator().compute_slots(
        working_hours=working_hours,
        breaks=breaks,
        appointments=appointments,
        rest_time_minutes=rest_time_minutes,
        date=date,
        service_duration_minutes=service_duration_minutes,
    )


def filter_passed_slots(slots: Sequence[SlotCandidate], now: DateTime) -> List[SlotCandidate]:
    """Drop slots that already started when the slots are for today."""
    if not slots or not slots[0].time.is_same_day(now):
        return list(slots)
    return [slot for slot in slots if slot.time > now]
