"""
Conversions between service/break durations and their stored or displayed forms.
"""

import logging
import re
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_DURATION_MINUTES = 30

_INTERVAL_PATTERN = re.compile(r"(\d+):(\d+):(\d+)")
_TEXT_PATTERN = re.compile(r"(\d+)\s*(minute|hour)s?")
_NUMERIC_PATTERN = re.compile(r"^(\d+)$")


def parse_interval(value: Optional[str], default: int = DEFAULT_DURATION_MINUTES) -> int:
    """
    Parse a PostgreSQL interval into minutes.

    Accepts "HH:MM:SS", "N minutes" / "N hours" and bare integers. A value
    with only seconds set (e.g. "00:00:45") is read as minutes.
    """
    if not value:
        return default

    text = str(value).strip()

    match = _INTERVAL_PATTERN.search(text)
    if match:
        hours, minutes, seconds = (int(part) for part in match.groups())
        if hours > 0 or minutes > 0:
            return hours * 60 + minutes
        if seconds > 0:
            return seconds

    match = _TEXT_PATTERN.search(text)
    if match:
        amount, unit = int(match.group(1)), match.group(2)
        return amount * 60 if unit == "hour" else amount

    match = _NUMERIC_PATTERN.match(text)
    if match:
        return int(match.group(1))

    logger.warning("Could not parse duration %r, using %d minutes", value, default)
    return default


def format_interval(minutes: int) -> str:
    """Format minutes as a PostgreSQL interval string (HH:MM:00)."""
    hours, remainder = divmod(minutes, 60)
    return f"{hours:02d}:{remainder:02d}:00"


def describe_duration(minutes: int) -> str:
    """Human readable duration, e.g. "1 hour" or "2 hours 15 minutes"."""
    if minutes < 60:
        return f"{minutes} minutes"
    hours, remainder = divmod(minutes, 60)
    hour_text = "1 hour" if hours == 1 else f"{hours} hours"
    return f"{hour_text} {remainder} minutes" if remainder else hour_text
