"""
Pydantic schemas for schedule data records and their conversion to domain models.

Working-hours strings are kept as-is here: a malformed day degrades to a
closed day in the slot engine. Break and special-date times must be valid.
"""

from datetime import date, datetime
from typing import Any, Dict, List, Optional

import pendulum
from pydantic import BaseModel, Field, field_validator

from ..domain.durations import parse_interval
from ..domain.models import (
    Booking,
    BreakInterval,
    ClockTime,
    DayHours,
    HoursConfiguration,
    Service,
    SpecialDate,
    StaffMember,
    WeekSchedule,
    Weekday,
    WorkingHours,
)


def _as_iso_string(value: Any) -> Any:
    # YAML loads unquoted dates and timestamps as date/datetime objects
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return value


def _validate_clock(value: Optional[str]) -> Optional[str]:
    if value is not None:
        ClockTime.parse(value)
    return value


class BreakRecord(BaseModel):
    id: Optional[str] = None
    start_time: str
    end_time: str

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time(cls, value: str) -> str:
        return _validate_clock(value)

    def to_domain(self) -> BreakInterval:
        return BreakInterval(
            start_time=ClockTime.parse(self.start_time),
            end_time=ClockTime.parse(self.end_time),
            id=self.id,
        )


class DayHoursRecord(BaseModel):
    is_active: bool = True
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    breaks: List[BreakRecord] = Field(default_factory=list)

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def drop_non_string_time(cls, value: Any) -> Any:
        # Unquoted 09:00 is read by YAML as the integer 540
        if value is not None and not isinstance(value, str):
            return None
        return value

    def to_domain(self) -> DayHours:
        return DayHours(
            working_hours=WorkingHours.from_strings(self.is_active, self.start_time, self.end_time),
            breaks=[b.to_domain() for b in self.breaks],
        )


class SpecialDateRecord(BaseModel):
    id: Optional[str] = None
    date: str
    is_closed: bool = False
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    note: str = ""

    @field_validator("date", mode="before")
    @classmethod
    def coerce_date(cls, value: Any) -> Any:
        return _as_iso_string(value)

    @field_validator("date")
    @classmethod
    def validate_date(cls, value: str) -> str:
        """Normalise to YYYY-MM-DD."""
        return pendulum.from_format(value, "YYYY-MM-DD").format("YYYY-MM-DD")

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time(cls, value: Optional[str]) -> Optional[str]:
        return _validate_clock(value)

    def to_domain(self) -> SpecialDate:
        return SpecialDate(
            date=self.date,
            is_closed=self.is_closed,
            start_time=ClockTime.try_parse(self.start_time),
            end_time=ClockTime.try_parse(self.end_time),
            note=self.note,
        )


class HoursRecord(BaseModel):
    """Regular hours keyed by weekday name plus special dates."""
    regular_hours: Dict[Weekday, DayHoursRecord] = Field(default_factory=dict)
    special_dates: List[SpecialDateRecord] = Field(default_factory=list)

    def to_domain(self) -> HoursConfiguration:
        # Days absent from the record are closed placeholders, not configured days
        days = {
            day: self.regular_hours[day].to_domain() if day in self.regular_hours else DayHours.closed()
            for day in Weekday
        }
        return HoursConfiguration(
            regular_hours=WeekSchedule(days),
            special_dates=[s.to_domain() for s in self.special_dates],
            configured_days=frozenset(self.regular_hours),
        )


class StaffSettingsRecord(BaseModel):
    rest_time: int = 0
    use_business_hours: bool = False

    @field_validator("rest_time")
    @classmethod
    def validate_rest_time(cls, value: int) -> int:
        if value < 0:
            raise ValueError("rest_time cannot be negative")
        return value


class StaffServiceRecord(BaseModel):
    service_id: str
    duration: Optional[str] = None
    is_active: bool = True


class StaffRecord(BaseModel):
    id: str
    name: str
    title: str = ""
    settings: StaffSettingsRecord = Field(default_factory=StaffSettingsRecord)
    hours: Optional[HoursRecord] = None
    services: List[StaffServiceRecord] = Field(default_factory=list)

    def to_domain(self) -> StaffMember:
        return StaffMember(
            id=self.id,
            name=self.name,
            title=self.title,
            rest_time_minutes=self.settings.rest_time,
            use_business_hours=self.settings.use_business_hours,
            service_durations={
                s.service_id: parse_interval(s.duration)
                for s in self.services
                if s.is_active and s.duration
            },
        )


class ServiceRecord(BaseModel):
    id: str
    name: str
    duration: Optional[str] = None

    def to_domain(self) -> Service:
        return Service(id=self.id, name=self.name, duration_minutes=parse_interval(self.duration))


class AppointmentRecord(BaseModel):
    staff_id: str
    start_time: str
    end_time: str
    status: str = "booked"

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def coerce_timestamp(cls, value: Any) -> Any:
        return _as_iso_string(value)

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_timestamp(cls, value: str) -> str:
        pendulum.parse(value)
        return value

    def to_domain(self, timezone: str) -> Booking:
        return Booking(
            staff_id=self.staff_id,
            start=pendulum.parse(self.start_time, tz=timezone),
            end=pendulum.parse(self.end_time, tz=timezone),
            status=self.status.lower(),
        )


class ScheduleData(BaseModel):
    """Root of the schedule data file."""
    business_hours: Optional[HoursRecord] = None
    staff: List[StaffRecord] = Field(default_factory=list)
    services: List[ServiceRecord] = Field(default_factory=list)
    appointments: List[AppointmentRecord] = Field(default_factory=list)

    @field_validator("staff")
    @classmethod
    def validate_unique_staff(cls, value: List[StaffRecord]) -> List[StaffRecord]:
        """Ensure staff ids are unique."""
        seen: set[str] = set()
        for staff in value:
            if staff.id in seen:
                raise ValueError(f"Duplicate staff id detected: {staff.id}")
            seen.add(staff.id)
        return value
