"""
Availability Schedule - Canonical form of a tutor's weekly availability.

Tutors' availability is stored as JSON in one of two shapes:

List form:
    [{"dayOfWeek": 1, "startTime": "09:00", "endTime": "12:00"}, ...]

Map form:
    {"monday": {"available": true, "slots": ["09:00-12:00", {"start": "14:00", "end": "16:00"}]}}

normalize_schedule() turns either shape into a WeeklyAvailability holding
TimeWindow values (minutes after midnight), so nothing downstream needs to
know which shape a tutor saved. Overlapping windows are kept as declared.
"""

import json
import logging
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)

# Index matches day_of_week: 0=Sunday .. 6=Saturday
DAY_NAMES = ("sunday", "monday", "tuesday", "wednesday", "thursday", "friday", "saturday")

MINUTES_PER_DAY = 24 * 60

_CLOCK_RE = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*$")


class ScheduleShape(str, Enum):
    """Which stored shape a schedule was normalised from."""

    LIST = "list"
    MAP = "map"
    EMPTY = "empty"


def parse_clock(text: str) -> int:
    """
    Convert "H:MM" / "HH:MM" into minutes after midnight.

    "24:00" is accepted as the end-of-day boundary.

    Raises:
        ValueError: If the text is not a valid 24-hour time
    """
    match = _CLOCK_RE.match(str(text))
    if not match:
        raise ValueError(f"Invalid time: {text!r}")

    hours, minutes = int(match.group(1)), int(match.group(2))
    if minutes > 59 or hours > 24 or (hours == 24 and minutes != 0):
        raise ValueError(f"Invalid time: {text!r}")
    return hours * 60 + minutes


def format_clock(minutes: int) -> str:
    """Minutes after midnight as zero-padded "HH:MM"."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


@dataclass(frozen=True)
class TimeWindow:
    """A half-open [start, end) window on one day of the week."""

    day_of_week: int
    start_minute: int
    end_minute: int

    def contains(self, minute: int) -> bool:
        return self.start_minute <= minute < self.end_minute

    @property
    def day_name(self) -> str:
        return DAY_NAMES[self.day_of_week]

    def __str__(self) -> str:
        return f"{self.day_name} {format_clock(self.start_minute)}-{format_clock(self.end_minute)}"


@dataclass(frozen=True)
class WeeklyAvailability:
    """All declared windows, in declaration order."""

    windows: tuple[TimeWindow, ...] = ()
    shape: ScheduleShape = ScheduleShape.EMPTY

    @property
    def is_empty(self) -> bool:
        return not self.windows

    def windows_for_day(self, day_of_week: int) -> list[TimeWindow]:
        return [window for window in self.windows if window.day_of_week == day_of_week]

    def available_days(self) -> list[int]:
        """Days (0=Sunday) with at least one window, in week order."""
        return sorted({window.day_of_week for window in self.windows})


def _make_window(day_of_week: int, start: Any, end: Any) -> TimeWindow | None:
    try:
        start_minute = parse_clock(start)
        end_minute = parse_clock(end)
    except ValueError as e:
        logger.warning("Dropping availability slot on %s: %s", DAY_NAMES[day_of_week], e)
        return None

    if start_minute >= end_minute:
        logger.warning(
            "Dropping availability slot on %s: start %s is not before end %s",
            DAY_NAMES[day_of_week], start, end,
        )
        return None
    return TimeWindow(day_of_week, start_minute, end_minute)


def _slot_bounds(slot: Any) -> tuple[Any, Any]:
    """Read start/end from a "HH:MM-HH:MM" string or a {start,end} object."""
    if isinstance(slot, str):
        start, sep, end = slot.partition("-")
        return (start, end) if sep else (slot, None)
    if isinstance(slot, Mapping):
        return (
            slot.get("startTime") or slot.get("start"),
            slot.get("endTime") or slot.get("end"),
        )
    return None, None


def _from_list(entries: Sequence) -> WeeklyAvailability:
    windows = []
    for entry in entries:
        if not isinstance(entry, Mapping):
            logger.warning("Ignoring availability entry %r: not an object", entry)
            continue

        day = entry.get("dayOfWeek")
        if isinstance(day, bool) or not isinstance(day, int) or not 0 <= day <= 6:
            logger.warning("Ignoring availability entry %r: bad dayOfWeek", entry)
            continue

        window = _make_window(day, entry.get("startTime"), entry.get("endTime"))
        if window is not None:
            windows.append(window)

    return WeeklyAvailability(tuple(windows), ScheduleShape.LIST)


def _from_map(days: Mapping) -> WeeklyAvailability:
    by_name = {str(name).lower(): value for name, value in days.items()}

    windows = []
    for day_of_week, day_name in enumerate(DAY_NAMES):
        day = by_name.get(day_name)
        if not isinstance(day, Mapping) or not day.get("available"):
            continue

        for slot in day.get("slots") or []:
            start, end = _slot_bounds(slot)
            window = _make_window(day_of_week, start, end)
            if window is not None:
                windows.append(window)

    return WeeklyAvailability(tuple(windows), ScheduleShape.MAP)


def normalize_schedule(raw: Any) -> WeeklyAvailability:
    """
    Convert any accepted stored schedule into a WeeklyAvailability.

    Args:
        raw: List-form or map-form schedule, a JSON string of either, or None

    Returns:
        WeeklyAvailability; empty when there is nothing usable
    """
    if raw is None:
        return WeeklyAvailability()
    if isinstance(raw, WeeklyAvailability):
        return raw

    if isinstance(raw, (str, bytes)):
        try:
            raw = json.loads(raw)
        except ValueError:
            logger.warning("Availability is not valid JSON; treating as empty")
            return WeeklyAvailability()

    if isinstance(raw, Mapping):
        return _from_map(raw)
    if isinstance(raw, Sequence) and not isinstance(raw, (str, bytes)):
        return _from_list(raw)

    logger.warning("Unsupported availability type %s; treating as empty", type(raw).__name__)
    return WeeklyAvailability()
