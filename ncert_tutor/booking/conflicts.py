"""
Booking Conflict Detector - Finds existing bookings that overlap a new one.

Two half-open intervals [s1, e1) and [s2, e2) overlap iff s1 < e2 and s2 < e1.
Back-to-back bookings (one ends exactly when the next starts) do not clash.
Every booking counts, whatever its status.
"""

import logging
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.orm import Session

from ncert_tutor.booking.models import Booking

logger = logging.getLogger(__name__)


def intervals_overlap(start_a, end_a, start_b, end_b) -> bool:
    """True iff [start_a, end_a) and [start_b, end_b) share any instant."""
    return start_a < end_b and start_b < end_a


def as_utc(value: datetime) -> datetime:
    """Normalise to aware UTC; naive values read back from SQLite are UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class BookingConflictDetector:
    """
    Checks a tutor's persisted bookings for overlap with a proposed interval.

    The check alone cannot stop two concurrent requests from both passing;
    BookingService holds a lock on the tutor row around check and insert.
    """

    def __init__(self, db: Session):
        self.db = db

    def find_conflict(self, tutor_id: str, start: datetime, end: datetime) -> Booking | None:
        """
        Return one booking of this tutor overlapping [start, end), or None.

        Args:
            tutor_id: Tutor profile id
            start: Proposed start (aware)
            end: Proposed end (aware)
        """
        start, end = as_utc(start), as_utc(end)
        stmt = (
            select(Booking)
            .where(
                Booking.tutor_id == tutor_id,
                Booking.start_time < end,
                Booking.end_time > start,
            )
            .order_by(Booking.start_time)
            .limit(1)
        )
        conflict = self.db.execute(stmt).scalars().first()

        if conflict is not None:
            logger.info(
                "Booking conflict for tutor %s: %s-%s overlaps %s",
                tutor_id, start.isoformat(), end.isoformat(), conflict.id,
            )
        return conflict

    def has_conflict(self, tutor_id: str, start: datetime, end: datetime) -> bool:
        return self.find_conflict(tutor_id, start, end) is not None
