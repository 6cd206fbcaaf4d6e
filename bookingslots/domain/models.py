"""
Domain models for working hours, breaks, appointments and slot candidates.

Clock times are kept as minutes since midnight so that every comparison in
the slot engine and the validators is plain integer arithmetic.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, List, Mapping, Optional

from pendulum import DateTime

_CLOCK_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})(?::\d{2})?$")

MINUTES_IN_HOUR = 60
MINUTES_IN_DAY = 24 * MINUTES_IN_HOUR


@dataclass(frozen=True, order=True)
class ClockTime:
    """
    Wall-clock time of day, stored as minutes since midnight.

    Invariant: 0 <= minutes < 1440.
    """
    minutes: int

    def __post_init__(self):
        if not 0 <= self.minutes < MINUTES_IN_DAY:
            raise ValueError(f"Clock time out of range: {self.minutes} minutes")

    @classmethod
    def parse(cls, value: str) -> "ClockTime":
        """
        Parse an "HH:MM" string (a trailing ":SS" is ignored).

        Raises:
            ValueError: If the string is not a valid clock time
        """
        if not isinstance(value, str):
            raise ValueError(f"Clock time must be a string, got {value!r}")

        match = _CLOCK_PATTERN.match(value.strip())
        if not match:
            raise ValueError(f"Invalid clock time: {value!r}")

        hour, minute = int(match.group(1)), int(match.group(2))
        if hour > 23 or minute > 59:
            raise ValueError(f"Invalid clock time: {value!r}")

        return cls(hour * MINUTES_IN_HOUR + minute)

    @classmethod
    def try_parse(cls, value: object) -> Optional["ClockTime"]:
        """Parse a clock time, returning None for missing or malformed input."""
        try:
            return cls.parse(value)  # type: ignore[arg-type]
        except ValueError:
            return None

    @classmethod
    def of(cls, hour: int, minute: int = 0) -> "ClockTime":
        return cls(hour * MINUTES_IN_HOUR + minute)

    @property
    def hour(self) -> int:
        return self.minutes // MINUTES_IN_HOUR

    @property
    def minute(self) -> int:
        return self.minutes % MINUTES_IN_HOUR

    def on(self, date: DateTime) -> DateTime:
        """Apply this wall-clock time to the calendar day of ``date``."""
        return date.set(hour=self.hour, minute=self.minute, second=0, microsecond=0)

    def __str__(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"


class Weekday(str, Enum):
    """Days of the week, in ``date.weekday()`` order (0=Monday)."""
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"

    @classmethod
    def for_date(cls, date: DateTime) -> "Weekday":
        return list(cls)[date.weekday()]

    @property
    def display_name(self) -> str:
        return self.value.capitalize()


@dataclass(frozen=True)
class WorkingHours:
    """
    One day's operating window.

    ``start_time``/``end_time`` are None when the stored value was missing
    or malformed; such a day yields no slots.
    """
    is_active: bool
    start_time: Optional[ClockTime]
    end_time: Optional[ClockTime]

    @classmethod
    def from_strings(cls, is_active: bool, start_time: object, end_time: object) -> "WorkingHours":
        return cls(
            is_active=is_active,
            start_time=ClockTime.try_parse(start_time),
            end_time=ClockTime.try_parse(end_time),
        )

    @classmethod
    def closed(cls) -> "WorkingHours":
        return cls(is_active=False, start_time=None, end_time=None)

    def is_open(self) -> bool:
        """True if the day is active and both bounds are well-formed."""
        return self.is_active and self.start_time is not None and self.end_time is not None

    def __str__(self) -> str:
        if not self.is_open():
            return "closed"
        return f"{self.start_time} - {self.end_time}"


@dataclass(frozen=True)
class BreakInterval:
    """A break within a day's working hours. Valid breaks have start < end."""
    start_time: ClockTime
    end_time: ClockTime
    id: Optional[str] = None

    def contains(self, moment: ClockTime) -> bool:
        """Half-open membership: start inclusive, end exclusive."""
        return self.start_time <= moment < self.end_time

    def duration_minutes(self) -> int:
        return self.end_time.minutes - self.start_time.minutes

    def __str__(self) -> str:
        return f"{self.start_time} - {self.end_time}"


@dataclass(frozen=True)
class Appointment:
    """An already-booked interval for the staff member on the target date."""
    start: ClockTime
    end: ClockTime


@dataclass(frozen=True)
class SlotCandidate:
    """
    One point on the day's slot grid.

    available=True: bookable start time.
    available=False, is_break=True: break slot shown but not bookable.
    """
    time: DateTime
    available: bool
    is_break: bool

    @property
    def label(self) -> str:
        return self.time.format("HH:mm")


@dataclass(frozen=True)
class DayHours:
    """Working hours plus breaks for a single day."""
    working_hours: WorkingHours
    breaks: List[BreakInterval] = field(default_factory=list)

    @classmethod
    def closed(cls) -> "DayHours":
        return cls(working_hours=WorkingHours.closed())


class WeekSchedule:
    """
    Regular weekly hours keyed by weekday.

    Invariant: every weekday has an entry.
    """

    def __init__(self, days: Mapping[Weekday, DayHours]):
        missing = [day.value for day in Weekday if day not in days]
        if missing:
            raise ValueError(f"Weekly schedule is missing days: {', '.join(missing)}")
        self._days: Dict[Weekday, DayHours] = {day: days[day] for day in Weekday}

    def __getitem__(self, day: Weekday) -> DayHours:
        return self._days[day]

    def __iter__(self):
        return iter(self._days.items())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, WeekSchedule):
            return NotImplemented
        return self._days == other._days

    def __repr__(self) -> str:
        return f"WeekSchedule({self._days!r})"


@dataclass(frozen=True)
class SpecialDate:
    """Calendar-specific override of the weekly pattern (e.g. holiday closure)."""
    date: str  # YYYY-MM-DD
    is_closed: bool
    start_time: Optional[ClockTime] = None
    end_time: Optional[ClockTime] = None
    note: str = ""

    def as_day_hours(self) -> DayHours:
        # Breaks are not carried over to an override day
        return DayHours(
            working_hours=WorkingHours(
                is_active=not self.is_closed,
                start_time=self.start_time,
                end_time=self.end_time,
            )
        )


@dataclass
class HoursConfiguration:
    """
    Regular weekly hours plus special-date overrides for a business or staff member.

    ``configured_days`` lists the weekdays the source actually defined; the
    other entries of ``regular_hours`` are closed placeholders that let the
    next configuration take over.
    """
    regular_hours: WeekSchedule
    special_dates: List[SpecialDate] = field(default_factory=list)
    configured_days: FrozenSet[Weekday] = field(default_factory=lambda: frozenset(Weekday))

    def find_special_date(self, date: DateTime) -> Optional[SpecialDate]:
        date_str = date.format("YYYY-MM-DD")
        for special in self.special_dates:
            if special.date == date_str:
                return special
        return None

    def day_hours_for(self, date: DateTime) -> Optional[DayHours]:
        """
        Hours for a calendar day; a special date wins over the weekday pattern.

        Returns None when neither a special date nor a configured weekday applies.
        """
        special = self.find_special_date(date)
        if special is not None:
            return special.as_day_hours()
        weekday = Weekday.for_date(date)
        if weekday not in self.configured_days:
            return None
        return self.regular_hours[weekday]


@dataclass
class StaffMember:
    """A bookable staff member and the settings the slot engine needs."""
    id: str
    name: str
    rest_time_minutes: int = 0
    use_business_hours: bool = False
    title: str = ""
    # service id -> staff-specific duration in minutes
    service_durations: Dict[str, int] = field(default_factory=dict)


@dataclass
class Service:
    """A bookable service offering."""
    id: str
    name: str
    duration_minutes: int


@dataclass(frozen=True)
class Booking:
    """A persisted appointment as stored by the booking backend."""
    staff_id: str
    start: DateTime
    end: DateTime
    status: str
