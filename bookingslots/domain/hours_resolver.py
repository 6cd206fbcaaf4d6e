"""
Resolve the hours that apply to a staff member on a given date.
"""

import logging
from typing import List, Optional, Sequence

from pendulum import DateTime

from .models import ClockTime, DayHours, HoursConfiguration, Weekday, WorkingHours

logger = logging.getLogger(__name__)


class HoursResolver:
    """
    Picks the DayHours for a date from staff and business configurations.

    Order of precedence:
    1. Members that use business hours only look at the business configuration
    2. Otherwise the staff configuration, then the business configuration
    3. Fallback hours when no configuration provides the day
    Within a configuration, a special date wins over the weekday pattern.
    """

    def __init__(
        self,
        fallback_start: ClockTime = ClockTime.of(9),
        fallback_end: ClockTime = ClockTime.of(20),
        fallback_closed_days: Sequence[Weekday] = (Weekday.SATURDAY,),
    ):
        self.fallback_start = fallback_start
        self.fallback_end = fallback_end
        self.fallback_closed_days: List[Weekday] = list(fallback_closed_days)

    def resolve(
        self,
        date: DateTime,
        staff_hours: Optional[HoursConfiguration],
        business_hours: Optional[HoursConfiguration],
        use_business_hours: bool = False,
    ) -> DayHours:
        """Return the hours and breaks in effect on ``date``."""
        candidates = [business_hours] if use_business_hours else [staff_hours, business_hours]

        for configuration in candidates:
            if configuration is None:
                continue
            day_hours = configuration.day_hours_for(date)
            if day_hours is not None:
                return day_hours

        logger.debug("No hours configured for %s, using fallback hours", date.format("YYYY-MM-DD"))
        return self.fallback_for(date)

    def fallback_for(self, date: DateTime) -> DayHours:
        weekday = Weekday.for_date(date)
        return DayHours(
            working_hours=WorkingHours(
                is_active=weekday not in self.fallback_closed_days,
                start_time=self.fallback_start,
                end_time=self.fallback_end,
            )
        )
