"""
Tests for hours resolution.
"""

import pendulum

from bookingslots.domain.hours_resolver import HoursResolver
from bookingslots.domain.models import (
    ClockTime,
    DayHours,
    HoursConfiguration,
    SpecialDate,
    WeekSchedule,
    Weekday,
    WorkingHours,
)

TZ = "Asia/Jerusalem"
MONDAY = pendulum.parse("2024-11-25", tz=TZ)
SATURDAY = pendulum.parse("2024-11-23", tz=TZ)


def _configuration(start: str, end: str, special_dates=()) -> HoursConfiguration:
    days = {
        day: DayHours(working_hours=WorkingHours.from_strings(True, start, end))
        for day in Weekday
    }
    return HoursConfiguration(regular_hours=WeekSchedule(days), special_dates=list(special_dates))


class TestHoursResolver:
    """Tests for HoursResolver."""

    def test_staff_hours_take_precedence(self):
        resolver = HoursResolver()

        day = resolver.resolve(
            MONDAY,
            staff_hours=_configuration("10:00", "18:00"),
            business_hours=_configuration("08:00", "20:00"),
        )

        assert str(day.working_hours) == "10:00 - 18:00"

    def test_business_hours_when_staff_has_none(self):
        resolver = HoursResolver()

        day = resolver.resolve(MONDAY, staff_hours=None, business_hours=_configuration("08:00", "20:00"))

        assert str(day.working_hours) == "08:00 - 20:00"

    def test_use_business_hours_ignores_staff_hours(self):
        resolver = HoursResolver()

        day = resolver.resolve(
            MONDAY,
            staff_hours=_configuration("10:00", "18:00"),
            business_hours=_configuration("08:00", "20:00"),
            use_business_hours=True,
        )

        assert str(day.working_hours) == "08:00 - 20:00"

    def test_special_date_in_business_hours(self):
        resolver = HoursResolver()
        holiday = SpecialDate(date="2024-11-25", is_closed=True)

        day = resolver.resolve(
            MONDAY,
            staff_hours=None,
            business_hours=_configuration("08:00", "20:00", [holiday]),
        )

        assert not day.working_hours.is_active

    def test_fallback_hours(self):
        """Without any configuration the fallback window applies."""
        resolver = HoursResolver()

        day = resolver.resolve(MONDAY, staff_hours=None, business_hours=None)

        assert str(day.working_hours) == "09:00 - 20:00"
        assert day.breaks == []

    def test_fallback_closed_day(self):
        resolver = HoursResolver()

        day = resolver.resolve(SATURDAY, staff_hours=None, business_hours=None)

        assert not day.working_hours.is_active

    def test_custom_fallback(self):
        resolver = HoursResolver(
            fallback_start=ClockTime.of(7),
            fallback_end=ClockTime.of(21),
            fallback_closed_days=[Weekday.MONDAY],
        )

        assert not resolver.resolve(MONDAY, None, None).working_hours.is_active
        assert str(resolver.resolve(SATURDAY, None, None).working_hours) == "07:00 - 21:00"

    def test_unconfigured_staff_day_falls_through_to_business_hours(self):
        """A weekday missing from the staff record uses the business hours."""
        resolver = HoursResolver()
        staff_hours = HoursConfiguration(
            regular_hours=_configuration("10:00", "18:00").regular_hours,
            configured_days=frozenset({Weekday.TUESDAY}),
        )

        day = resolver.resolve(MONDAY, staff_hours=staff_hours, business_hours=_configuration("08:00", "20:00"))

        assert str(day.working_hours) == "08:00 - 20:00"

    def test_unconfigured_day_everywhere_uses_fallback(self):
        resolver = HoursResolver()
        partial = HoursConfiguration(
            regular_hours=_configuration("10:00", "18:00").regular_hours,
            configured_days=frozenset(),
        )

        day = resolver.resolve(MONDAY, staff_hours=partial, business_hours=partial)

        assert str(day.working_hours) == "09:00 - 20:00"

    def test_special_date_applies_on_unconfigured_weekday(self):
        resolver = HoursResolver()
        staff_hours = HoursConfiguration(
            regular_hours=_configuration("10:00", "18:00").regular_hours,
            special_dates=[SpecialDate(date="2024-11-25", is_closed=True)],
            configured_days=frozenset(),
        )

        day = resolver.resolve(MONDAY, staff_hours=staff_hours, business_hours=_configuration("08:00", "20:00"))

        assert not day.working_hours.is_active
