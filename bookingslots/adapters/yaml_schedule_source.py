"""
Schedule source backed by a YAML data file.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional

import yaml
from pendulum import DateTime
from pydantic import ValidationError

from ..domain.exceptions import ScheduleSourceError
from ..domain.models import Booking, HoursConfiguration, Service, StaffMember
from .records import ScheduleData

logger = logging.getLogger(__name__)


class YamlScheduleSource:
    """
    Loads business hours, staff, services and appointments from a YAML file.

    The file is read once on construction; call ``reload`` to pick up
    changes. Appointments are filtered per request so every slot query sees
    the bookings as of the last load.
    """

    def __init__(
        self,
        data_file: Optional[Path] = None,
        timezone: str = "Asia/Jerusalem",
        data: Optional[Dict] = None,
    ):
        """
        Initialize the source.

        Args:
            data_file: Path to the schedule YAML file
            timezone: IANA timezone used for naive appointment timestamps
            data: Already-parsed schedule data, used instead of reading a file
        """
        if data_file is None and data is None:
            raise ScheduleSourceError("Either a data file or schedule data is required")

        self.data_file = data_file
        self.timezone = timezone
        self._data = self._validate(data, origin="<mapping>") if data is not None else self._load()

    @classmethod
    def from_mapping(cls, data: Dict, timezone: str = "Asia/Jerusalem") -> "YamlScheduleSource":
        """Build a source from already-parsed data (used by tests and tooling)."""
        return cls(timezone=timezone, data=data)

    def reload(self) -> None:
        if self.data_file is None:
            raise ScheduleSourceError("Schedule data was not loaded from a file")
        self._data = self._load()

    def _load(self) -> ScheduleData:
        if not self.data_file.exists():
            raise ScheduleSourceError(f"Schedule data file not found: {self.data_file}")

        try:
            with open(self.data_file, "r", encoding="utf-8") as f:
                raw = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ScheduleSourceError(f"Invalid YAML in {self.data_file}: {exc}") from exc

        return self._validate(raw, origin=str(self.data_file))

    @staticmethod
    def _validate(raw: object, origin: str) -> ScheduleData:
        if not isinstance(raw, dict):
            raise ScheduleSourceError(f"Schedule data in {origin} must be a mapping at the root level.")

        try:
            data = ScheduleData(**raw)
        except ValidationError as exc:
            raise ScheduleSourceError(f"Invalid schedule data in {origin}: {exc}") from exc

        logger.debug(
            "Loaded schedule data from %s: %d staff, %d services, %d appointments",
            origin,
            len(data.staff),
            len(data.services),
            len(data.appointments),
        )
        return data

    async def list_staff(self) -> List[StaffMember]:
        return [record.to_domain() for record in self._data.staff]

    async def get_staff_member(self, staff_id: str) -> Optional[StaffMember]:
        for record in self._data.staff:
            if record.id == staff_id:
                return record.to_domain()
        return None

    async def get_staff_hours(self, staff_id: str) -> Optional[HoursConfiguration]:
        for record in self._data.staff:
            if record.id == staff_id and record.hours is not None:
                return record.hours.to_domain()
        return None

    async def get_business_hours(self) -> Optional[HoursConfiguration]:
        if self._data.business_hours is None:
            return None
        return self._data.business_hours.to_domain()

    async def get_service(self, service_id: str) -> Optional[Service]:
        for record in self._data.services:
            if record.id == service_id:
                return record.to_domain()
        return None

    async def get_appointments(
        self,
        staff_id: str,
        start_time: DateTime,
        end_time: DateTime,
    ) -> List[Booking]:
        """
        Return bookings for a staff member that start within [start_time, end_time).

        Args:
            staff_id: Staff member id
            start_time: Start of the window (inclusive)
            end_time: End of the window (exclusive)

        Returns:
            List of Booking objects, any status
        """
        bookings: List[Booking] = []

        for record in self._data.appointments:
            if record.staff_id != staff_id:
                continue

            booking = record.to_domain(self.timezone)
            if start_time <= booking.start < end_time:
                bookings.append(booking)

        return bookings
