"""
Availability Resolver - Decides whether a tutor can take a lesson at a time.

This module handles:
1. Turning a requested instant into the wall-clock day and time the student
   picked, in an explicitly named timezone
2. Checking that time against the tutor's weekly windows (start inclusive,
   end exclusive)
3. Explaining a rejection with the tutor's real openings

A rejection is a normal result, not an exception.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any

import pytz

from ncert_tutor.booking.schedule import (
    DAY_NAMES,
    TimeWindow,
    WeeklyAvailability,
    normalize_schedule,
    parse_clock,
)
from ncert_tutor.config import DEFAULT_TIMEZONE
from ncert_tutor.errors import ValidationError

logger = logging.getLogger(__name__)

NOT_AVAILABLE_MESSAGE = "Tutor is not available at this time."


@dataclass
class AvailabilityResult:
    """
    Outcome of an availability check.

    Attributes:
        available: True if the time falls inside a declared window
        reason: Human-readable explanation when not available
    """
    available: bool
    reason: str | None = None


def format_12h(minutes: int) -> str:
    """Minutes after midnight as "h:mm AM/PM" (00:00 and 24:00 are 12:00 AM)."""
    hours, mins = divmod(minutes % (24 * 60), 60)
    suffix = "PM" if hours >= 12 else "AM"
    display_hour = 12 if hours % 12 == 0 else hours % 12
    return f"{display_hour}:{mins:02d} {suffix}"


def format_window(window: TimeWindow) -> str:
    return f"{format_12h(window.start_minute)} - {format_12h(window.end_minute)}"


def explain_unavailable(schedule: WeeklyAvailability, day_of_week: int) -> str:
    """
    Build the rejection message for a day.

    Lists the day's windows if it has any, otherwise the days the tutor
    does work.
    """
    day_windows = schedule.windows_for_day(day_of_week)
    if day_windows:
        slots = ", ".join(format_window(window) for window in day_windows)
        return f"{NOT_AVAILABLE_MESSAGE} Available slots for {DAY_NAMES[day_of_week].title()}: {slots}"

    days = schedule.available_days()
    if not days:
        return f"{NOT_AVAILABLE_MESSAGE} This tutor has not published any availability."

    day_list = ", ".join(DAY_NAMES[day].title() for day in days)
    return f"{NOT_AVAILABLE_MESSAGE} Please select a different day. Tutor is available on: {day_list}"


def check_availability(schedule: Any, day_of_week: int, time_of_day: str) -> AvailabilityResult:
    """
    Check a local day and time against a tutor's schedule.

    Args:
        schedule: Stored schedule in any accepted shape, or a WeeklyAvailability
        day_of_week: 0=Sunday .. 6=Saturday
        time_of_day: "HH:MM" in the tutor's wall clock

    Returns:
        AvailabilityResult; available iff some window has start <= time < end
    """
    if not 0 <= day_of_week <= 6:
        raise ValueError(f"day_of_week must be 0-6, got {day_of_week}")

    if not isinstance(schedule, WeeklyAvailability):
        schedule = normalize_schedule(schedule)

    minute = parse_clock(time_of_day)
    if any(window.contains(minute) for window in schedule.windows_for_day(day_of_week)):
        return AvailabilityResult(available=True)

    return AvailabilityResult(available=False, reason=explain_unavailable(schedule, day_of_week))


def get_timezone(timezone_name: str | None):
    """
    Look up an IANA timezone, defaulting to DEFAULT_TIMEZONE.

    Raises:
        ValidationError: If the name is not a known timezone
    """
    name = timezone_name or DEFAULT_TIMEZONE
    try:
        return pytz.timezone(name)
    except pytz.UnknownTimeZoneError as e:
        raise ValidationError(f"Unknown timezone: {name}", details={"timezone": name}) from e


def parse_instant(value: datetime | str) -> datetime:
    """Parse an ISO-8601 string ('Z' suffix allowed); datetimes pass through."""
    if isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except (AttributeError, ValueError) as e:
        raise ValidationError(f"Invalid ISO-8601 time: {value!r}") from e


def localize(value: datetime | str, timezone_name: str | None = None) -> datetime:
    """
    Express an instant as wall-clock time in the named zone.

    Aware values are converted; naive values are taken to already be wall
    clock in that zone.
    """
    tz = get_timezone(timezone_name)
    instant = parse_instant(value)
    if instant.tzinfo is None:
        return tz.localize(instant)
    return instant.astimezone(tz)


def to_local_wall_clock(value: datetime | str, timezone_name: str | None = None) -> tuple[int, str]:
    """
    Return (day_of_week, "HH:MM") for an instant in the named zone.

    day_of_week uses 0=Sunday to match stored schedules.
    """
    local = localize(value, timezone_name)
    day_of_week = (local.weekday() + 1) % 7
    return day_of_week, local.strftime("%H:%M")


class AvailabilityResolver:
    """
    Checks proposed lesson start times against tutors' schedules.

    Example:
        resolver = AvailabilityResolver()
        result = resolver.check_slot(
            tutor.availability, "2024-01-01T10:30:00+05:30", "Asia/Kolkata"
        )
        if not result.available:
            print(result.reason)
    """

    def __init__(self, default_timezone: str | None = None):
        self.default_timezone = default_timezone or DEFAULT_TIMEZONE

    def check_slot(
        self,
        schedule: Any,
        start: datetime | str,
        timezone_name: str | None = None,
    ) -> AvailabilityResult:
        """Check the lesson's start instant against the schedule."""
        day_of_week, time_of_day = to_local_wall_clock(start, timezone_name or self.default_timezone)
        result = check_availability(schedule, day_of_week, time_of_day)

        if not result.available:
            logger.info(
                "Slot rejected: %s %s (%s)",
                DAY_NAMES[day_of_week], time_of_day, timezone_name or self.default_timezone,
            )
        return result
