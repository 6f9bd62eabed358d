"""
Booking models: users, profiles, bookings, conversations and notifications.

Bookings are self-contained records: the tutor, student and UTC start/end are
stored directly, so later edits to a tutor's availability never change an
existing booking.

Storage-level guarantees:
- one booking per (tutor, start time)
- one conversation per (student, tutor) pair
Overlap between bookings is prevented by the service, which checks and
inserts inside one locked transaction: the tutor's row is locked FOR UPDATE,
and on SQLite every transaction starts with BEGIN IMMEDIATE (see database.py).
"""

from datetime import datetime, timezone
from enum import Enum

import ulid
from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from ncert_tutor.database import Base


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(ulid.ULID())


class UserRole(str, Enum):
    STUDENT = "STUDENT"
    TUTOR = "TUTOR"


class BookingStatus(str, Enum):
    """Booking lifecycle statuses. Only PENDING is set here; tutors move it on."""

    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    CANCELLED = "cancelled"


class User(Base):
    __tablename__ = "users"

    id = Column(String(26), primary_key=True, default=_new_id)
    name = Column(String(200), nullable=False)
    email = Column(String(320), nullable=False, unique=True)
    role = Column(String(20), nullable=False, default=UserRole.STUDENT.value)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_now_utc)

    student_profile = relationship("StudentProfile", back_populates="user", uselist=False)
    tutor_profile = relationship("TutorProfile", back_populates="user", uselist=False)

    def __repr__(self) -> str:
        return f"<User {self.id} {self.role}>"


class StudentProfile(Base):
    __tablename__ = "student_profiles"

    id = Column(String(26), primary_key=True, default=_new_id)
    user_id = Column(String(26), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)
    grade = Column(String(50), nullable=False)
    subjects = Column(JSON, nullable=False, default=list)

    user = relationship("User", back_populates="student_profile")


class TutorProfile(Base):
    """
    Tutor profile with weekly availability.

    availability holds the raw stored JSON in either list or map form;
    see ncert_tutor.booking.schedule for both shapes.
    """

    __tablename__ = "tutor_profiles"

    id = Column(String(26), primary_key=True, default=_new_id)
    user_id = Column(String(26), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)
    subjects = Column(JSON, nullable=False, default=list)
    availability = Column(JSON, nullable=True)

    user = relationship("User", back_populates="tutor_profile")


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(String(26), primary_key=True, default=_new_id)
    tutor_id = Column(String(26), ForeignKey("tutor_profiles.id"), nullable=False)
    student_id = Column(String(26), ForeignKey("student_profiles.id"), nullable=False)
    start_time = Column(DateTime(timezone=True), nullable=False)
    end_time = Column(DateTime(timezone=True), nullable=False)
    subject = Column(String(100), nullable=False)
    status = Column(String(20), nullable=False, default=BookingStatus.PENDING.value)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_now_utc)

    tutor = relationship("TutorProfile")
    student = relationship("StudentProfile")

    __table_args__ = (
        UniqueConstraint("tutor_id", "start_time", name="uq_bookings_tutor_start"),
        CheckConstraint("end_time > start_time", name="ck_bookings_time_order"),
        Index("ix_bookings_tutor_window", "tutor_id", "start_time", "end_time"),
        Index("ix_bookings_student", "student_id"),
    )

    def __repr__(self) -> str:
        return f"<Booking {self.id} tutor={self.tutor_id} {self.start_time}-{self.end_time} {self.status}>"


class Conversation(Base):
    """One messaging channel per student-tutor pair, created on first booking."""

    __tablename__ = "conversations"

    id = Column(String(26), primary_key=True, default=_new_id)
    student_id = Column(String(26), ForeignKey("student_profiles.id", ondelete="CASCADE"), nullable=False)
    tutor_id = Column(String(26), ForeignKey("tutor_profiles.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_now_utc)

    __table_args__ = (
        UniqueConstraint("student_id", "tutor_id", name="uq_conversations_pair"),
    )


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(String(26), primary_key=True, default=_new_id)
    user_id = Column(String(26), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(String(50), nullable=False)
    title = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_now_utc)
