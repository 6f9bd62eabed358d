"""
Booking Service - Creates and lists tutoring session bookings.

Booking flow:
1. The caller must be a student; their profile is created on first use
2. The tutor's row is locked so concurrent requests for one tutor serialise
   (on SQLite the whole transaction holds the database write lock)
3. The start time is checked against the tutor's weekly availability
4. Existing bookings are checked for overlap
5. The booking is inserted with status "pending"
6. The student-tutor conversation is reused or created
7. Everything commits together

The tutor notification is not part of this transaction; see notifications.py.
"""

import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ncert_tutor.booking.availability import AvailabilityResolver, localize
from ncert_tutor.booking.conflicts import BookingConflictDetector, as_utc
from ncert_tutor.booking.models import (
    Booking,
    BookingStatus,
    Conversation,
    StudentProfile,
    TutorProfile,
    User,
    UserRole,
)
from ncert_tutor.config import DEFAULT_BOOKING_SUBJECT, DEFAULT_STUDENT_GRADE
from ncert_tutor.errors import (
    AuthenticationError,
    BookingConflictError,
    NotFoundError,
    PermissionDeniedError,
    SlotUnavailableError,
    ValidationError,
)

logger = logging.getLogger(__name__)

SLOT_TAKEN_MESSAGE = "This time slot is already booked"


@dataclass
class BookingRequest:
    """
    A student's request for a lesson.

    Attributes:
        tutor_id: Tutor profile id
        start_time: ISO-8601 start (aware, or naive wall clock in `timezone`)
        end_time: ISO-8601 end, same conventions
        timezone: IANA zone the student picked the time in
        subject: Lesson subject
    """
    tutor_id: str
    start_time: datetime | str
    end_time: datetime | str
    timezone: str | None = None
    subject: str | None = None


def resolve_user(db: Session, user_id: str | None) -> User:
    """
    Look up the authenticated caller.

    Raises:
        AuthenticationError: If no id was given or no such user exists
    """
    if not user_id:
        raise AuthenticationError("Unauthorized")
    user = db.get(User, user_id)
    if user is None:
        raise AuthenticationError("Unauthorized")
    return user


class BookingService:
    """
    Service for creating and listing bookings.

    Example:
        service = BookingService(db)
        booking = service.create_booking(
            user,
            BookingRequest(tutor_id, "2024-01-01T09:00:00", "2024-01-01T10:00:00", "Asia/Kolkata"),
        )
    """

    def __init__(
        self,
        db: Session,
        resolver: AvailabilityResolver | None = None,
        detector: BookingConflictDetector | None = None,
    ):
        self.db = db
        self.resolver = resolver or AvailabilityResolver()
        self.detector = detector or BookingConflictDetector(db)

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create_booking(self, user: User, request: BookingRequest) -> Booking:
        """
        Validate and persist a booking.

        Raises:
            PermissionDeniedError: If the caller is not a student
            ValidationError: If fields are missing or times are malformed
            NotFoundError: If the tutor does not exist
            SlotUnavailableError: If the start is outside the tutor's availability
            BookingConflictError: If the interval overlaps an existing booking
        """
        if user.role != UserRole.STUDENT.value:
            raise PermissionDeniedError("Only students can book sessions")

        if not request.tutor_id or not request.start_time or not request.end_time:
            raise ValidationError("Missing required fields")

        local_start = localize(request.start_time, request.timezone)
        local_end = localize(request.end_time, request.timezone)
        start, end = as_utc(local_start), as_utc(local_end)
        if end <= start:
            raise ValidationError("endTime must be after startTime")

        try:
            student = self._get_or_create_student(user)
            tutor = self._lock_tutor(request.tutor_id)
            tutor_id = tutor.id

            result = self.resolver.check_slot(tutor.availability, local_start, request.timezone)
            if not result.available:
                raise SlotUnavailableError(result.reason, details={"tutorId": tutor_id})

            if self.detector.has_conflict(tutor_id, start, end):
                raise BookingConflictError(SLOT_TAKEN_MESSAGE, details={"tutorId": tutor_id})

            booking = Booking(
                tutor_id=tutor_id,
                student_id=student.id,
                start_time=start,
                end_time=end,
                subject=request.subject or DEFAULT_BOOKING_SUBJECT,
                status=BookingStatus.PENDING.value,
            )
            self.db.add(booking)
            try:
                self.db.flush()
            except IntegrityError as e:
                raise BookingConflictError(SLOT_TAKEN_MESSAGE, details={"tutorId": tutor_id}) from e

            self._get_or_create_conversation(student.id, tutor_id)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(
            "Booking %s created: student %s with tutor %s at %s",
            booking.id, student.id, tutor_id, start.isoformat(),
        )
        return booking

    def _get_or_create_student(self, user: User) -> StudentProfile:
        student = self.db.execute(
            select(StudentProfile).where(StudentProfile.user_id == user.id)
        ).scalars().first()
        if student is not None:
            return student

        student = StudentProfile(user_id=user.id, grade=DEFAULT_STUDENT_GRADE, subjects=[])
        self.db.add(student)
        self.db.flush()
        logger.info("Created student profile %s for user %s", student.id, user.id)
        return student

    def _lock_tutor(self, tutor_id: str) -> TutorProfile:
        # FOR UPDATE serialises check-then-insert per tutor. SQLite drops the
        # clause; its engine begins every transaction IMMEDIATE instead.
        tutor = self.db.execute(
            select(TutorProfile).where(TutorProfile.id == tutor_id).with_for_update()
        ).scalars().first()
        if tutor is None:
            raise NotFoundError("Tutor not found", details={"tutorId": tutor_id})
        return tutor

    def _get_or_create_conversation(self, student_id: str, tutor_id: str) -> Conversation:
        stmt = select(Conversation).where(
            Conversation.student_id == student_id,
            Conversation.tutor_id == tutor_id,
        )
        conversation = self.db.execute(stmt).scalars().first()
        if conversation is not None:
            return conversation

        try:
            with self.db.begin_nested():
                conversation = Conversation(student_id=student_id, tutor_id=tutor_id)
                self.db.add(conversation)
        except IntegrityError:
            # Another request created the pair first
            conversation = self.db.execute(stmt).scalars().one()
        return conversation

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def list_bookings(self, user: User) -> list[Booking]:
        """
        Bookings for the caller, newest start first.

        Students see their own bookings; tutors see bookings made with them.

        Raises:
            NotFoundError: If the caller has no profile for their role
        """
        if user.role == UserRole.STUDENT.value:
            profile = self.db.execute(
                select(StudentProfile).where(StudentProfile.user_id == user.id)
            ).scalars().first()
            if profile is None:
                raise NotFoundError("Student profile not found")
            condition = Booking.student_id == profile.id
        else:
            profile = self.db.execute(
                select(TutorProfile).where(TutorProfile.user_id == user.id)
            ).scalars().first()
            if profile is None:
                raise NotFoundError("Tutor profile not found")
            condition = Booking.tutor_id == profile.id

        return list(
            self.db.execute(
                select(Booking).where(condition).order_by(Booking.start_time.desc())
            ).scalars()
        )
