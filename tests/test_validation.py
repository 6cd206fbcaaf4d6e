"""
Tests for break and business hours validation.
"""

from bookingslots.domain.models import BreakInterval, ClockTime, DayHours, WeekSchedule, Weekday, WorkingHours
from bookingslots.domain.validation import (
    HoursValidationError,
    ValidationCode,
    validate_breaks,
    validate_business_hours,
)

OPEN = ClockTime.of(9)
CLOSE = ClockTime.of(17)


def _break(start: str, end: str) -> BreakInterval:
    return BreakInterval(ClockTime.parse(start), ClockTime.parse(end))


def _day(start, end, breaks=(), active=True) -> DayHours:
    return DayHours(
        working_hours=WorkingHours.from_strings(active, start, end),
        breaks=list(breaks),
    )


def _week(**overrides) -> WeekSchedule:
    days = {day: DayHours.closed() for day in Weekday}
    for name, day_hours in overrides.items():
        days[Weekday(name)] = day_hours
    return WeekSchedule(days)


class TestValidateBreaks:
    """Tests for validate_breaks."""

    def test_valid_breaks(self):
        breaks = [_break("12:00", "12:30"), _break("15:00", "15:15")]

        assert validate_breaks(breaks, OPEN, CLOSE) is None

    def test_no_breaks(self):
        assert validate_breaks([], OPEN, CLOSE) is None

    def test_adjacent_breaks_are_allowed(self):
        breaks = [_break("11:00", "12:00"), _break("10:00", "11:00")]

        assert validate_breaks(breaks, OPEN, CLOSE) is None

    def test_breaks_at_day_edges_are_allowed(self):
        breaks = [_break("09:00", "09:30"), _break("16:30", "17:00")]

        assert validate_breaks(breaks, OPEN, CLOSE) is None

    def test_overlapping_breaks(self):
        """Test that overlapping breaks are rejected."""
        error = validate_breaks([_break("10:00", "11:00"), _break("10:30", "11:30")], OPEN, CLOSE)

        assert error is not None
        assert error.code == ValidationCode.BREAKS_OVERLAP

    def test_overlap_detected_regardless_of_input_order(self):
        error = validate_breaks([_break("10:30", "11:30"), _break("10:00", "11:00")], OPEN, CLOSE)

        assert error.code == ValidationCode.BREAKS_OVERLAP

    def test_break_before_opening(self):
        """Test that a break starting before the day opens is rejected."""
        error = validate_breaks([_break("08:00", "09:00")], OPEN, CLOSE)

        assert error is not None
        assert error.code == ValidationCode.BREAK_OUTSIDE_HOURS

    def test_break_after_closing(self):
        error = validate_breaks([_break("16:30", "17:30")], OPEN, CLOSE)

        assert error.code == ValidationCode.BREAK_OUTSIDE_HOURS

    def test_break_end_before_start(self):
        error = validate_breaks([_break("13:00", "12:00")], OPEN, CLOSE)

        assert error.code == ValidationCode.BREAK_END_BEFORE_START

    def test_zero_length_break(self):
        error = validate_breaks([_break("13:00", "13:00")], OPEN, CLOSE)

        assert error.code == ValidationCode.BREAK_END_BEFORE_START

    def test_error_is_value_with_message(self):
        error = validate_breaks([_break("10:00", "11:00"), _break("10:30", "11:30")], OPEN, CLOSE)

        assert isinstance(error, HoursValidationError)
        assert str(error) == "Breaks cannot overlap"
        assert error.day is None


class TestValidateBusinessHours:
    """Tests for validate_business_hours."""

    def test_valid_week(self):
        week = _week(
            monday=_day("09:00", "17:00", [_break("12:00", "13:00")]),
            friday=_day("08:00", "14:00"),
        )

        assert validate_business_hours(week) is None

    def test_start_after_end(self):
        week = _week(monday=_day("17:00", "09:00"))

        error = validate_business_hours(week)

        assert error.code == ValidationCode.START_NOT_BEFORE_END
        assert error.day == Weekday.MONDAY
        assert error.message == "Start time must be before end time on Monday"

    def test_start_equal_end(self):
        error = validate_business_hours(_week(sunday=_day("10:00", "10:00")))

        assert error.code == ValidationCode.START_NOT_BEFORE_END
        assert error.day == Weekday.SUNDAY

    def test_inactive_days_are_skipped(self):
        """Inactive days carry no constraint, even with nonsense hours."""
        week = _week(
            tuesday=_day("18:00", "08:00", [_break("07:00", "23:00")], active=False),
        )

        assert validate_business_hours(week) is None

    def test_break_errors_are_day_qualified(self):
        week = _week(
            tuesday=_day("09:00", "17:00", [_break("10:00", "11:00"), _break("10:30", "11:30")]),
        )

        error = validate_business_hours(week)

        assert error.code == ValidationCode.BREAKS_OVERLAP
        assert error.day == Weekday.TUESDAY
        assert error.message == "Breaks cannot overlap on Tuesday"

    def test_missing_times_on_active_day(self):
        week = _week(thursday=_day("09:00", "late"))

        error = validate_business_hours(week)

        assert error.code == ValidationCode.MISSING_TIMES
        assert error.day == Weekday.THURSDAY

    def test_first_failing_day_wins(self):
        week = _week(
            monday=_day("17:00", "09:00"),
            friday=_day("09:00", "17:00", [_break("08:00", "09:30")]),
        )

        assert validate_business_hours(week).day == Weekday.MONDAY
