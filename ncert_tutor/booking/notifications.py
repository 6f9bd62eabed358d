"""
Best-effort tutor notifications for new bookings.

A notification is written after the booking has committed, in its own
session, so a failure here can never undo or fail the booking. Delivery is
retried with exponential backoff and then given up on with an error log.
"""

import logging
from datetime import datetime

from sqlalchemy.orm import Session, sessionmaker
from tenacity import before_sleep_log, retry, stop_after_attempt, wait_exponential

from ncert_tutor.booking.conflicts import as_utc
from ncert_tutor.booking.models import Booking, Notification
from ncert_tutor.config import NOTIFICATION_MAX_ATTEMPTS, NOTIFICATION_RETRY_WAIT

logger = logging.getLogger(__name__)


def booking_request_message(student_name: str, start: datetime) -> str:
    start = as_utc(start)
    return (
        f"You have a new booking request from {student_name} "
        f"for {start.strftime('%d/%m/%Y')} at {start.strftime('%H:%M')} UTC"
    )


def _write_notification(db: Session, booking_id: str, student_name: str) -> bool:
    booking = db.get(Booking, booking_id)
    if booking is None:
        logger.warning("Booking %s vanished before its notification was written", booking_id)
        return False

    db.add(
        Notification(
            user_id=booking.tutor.user_id,
            type="booking",
            title="New Booking Request",
            message=booking_request_message(student_name, booking.start_time),
        )
    )
    db.commit()
    return True


def deliver_booking_notification(
    session_factory: sessionmaker,
    booking_id: str,
    student_name: str,
    max_attempts: int | None = None,
) -> bool:
    """
    Notify the booked tutor. Never raises.

    Args:
        session_factory: Creates a fresh session per attempt
        booking_id: The committed booking
        student_name: Shown in the notification text
        max_attempts: Override NOTIFICATION_MAX_ATTEMPTS

    Returns:
        True if the notification was stored
    """
    attempts = max_attempts or NOTIFICATION_MAX_ATTEMPTS

    @retry(
        stop=stop_after_attempt(attempts),
        wait=wait_exponential(multiplier=NOTIFICATION_RETRY_WAIT),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    def attempt() -> bool:
        with session_factory() as db:
            return _write_notification(db, booking_id, student_name)

    try:
        return attempt()
    except Exception:
        logger.exception(
            "Giving up on notification for booking %s after %d attempts", booking_id, attempts
        )
        return False
