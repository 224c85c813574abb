from sqlalchemy import Column, Integer, String, ForeignKey, Text, Boolean, DateTime
from studyflow.database import Base
from studyflow.models.enums import ClassLevel, ClassType, SessionStatus, BookingStatus, enum_column
from studyflow.utils.dates import utcnow


class LanguageClass(Base):
    __tablename__ = "language_classes"

    id = Column(Integer, primary_key=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    language = Column(String, nullable=False, index=True)
    level = Column(enum_column(ClassLevel), nullable=False)
    type = Column(enum_column(ClassType), nullable=False)
    instructor_name = Column(String, nullable=False)
    location = Column(String, nullable=False)
    address = Column(String, nullable=True)
    price = Column(Integer, nullable=False)  # minor currency units
    duration = Column(Integer, nullable=False)  # minutes
    max_students = Column(Integer, nullable=False)
    current_students = Column(Integer, nullable=False, default=0)
    contact_email = Column(String, nullable=True)
    contact_phone = Column(String, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)


class ClassSession(Base):
    __tablename__ = "class_sessions"

    id = Column(Integer, primary_key=True)
    class_id = Column(Integer, ForeignKey("language_classes.id", ondelete="CASCADE"), nullable=False, index=True)
    start_time = Column(DateTime(timezone=True), nullable=False)
    end_time = Column(DateTime(timezone=True), nullable=False)
    available_spots = Column(Integer, nullable=False)
    is_recurring = Column(Boolean, nullable=False, default=False)
    recurring_pattern = Column(String, nullable=True)
    status = Column(enum_column(SessionStatus), nullable=False, default=SessionStatus.scheduled)
    created_at = Column(DateTime(timezone=True), default=utcnow)


class UserBooking(Base):
    __tablename__ = "user_bookings"

    id = Column(Integer, primary_key=True)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    session_id = Column(Integer, ForeignKey("class_sessions.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(enum_column(BookingStatus), nullable=False, default=BookingStatus.booked)
    booked_at = Column(DateTime(timezone=True), default=utcnow)
    notes = Column(Text, nullable=True)
