"""
Booking module - Tutor availability and lesson reservations.

This module is responsible for:
1. Normalising tutors' stored weekly schedules
2. Deciding whether a requested time is inside that schedule
3. Detecting overlap with existing bookings
4. Persisting bookings, conversations and notifications
"""

from .availability import AvailabilityResolver, AvailabilityResult, check_availability
from .conflicts import BookingConflictDetector, intervals_overlap
from .schedule import WeeklyAvailability, normalize_schedule
from .service import BookingRequest, BookingService

__all__ = [
    "AvailabilityResolver",
    "AvailabilityResult",
    "check_availability",
    "BookingConflictDetector",
    "intervals_overlap",
    "WeeklyAvailability",
    "normalize_schedule",
    "BookingRequest",
    "BookingService",
]
