from sqlalchemy import Column, Integer, String, ForeignKey, Text, Boolean, DateTime, JSON
from studyflow.database import Base
from studyflow.models.enums import ReminderType, enum_column
from studyflow.utils.dates import utcnow


class UserReminder(Base):
    __tablename__ = "user_reminders"

    id = Column(Integer, primary_key=True)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(enum_column(ReminderType), nullable=False, default=ReminderType.reminder)
    title = Column(String, nullable=False)
    message = Column(Text, nullable=True)
    remind_at = Column(DateTime(timezone=True), nullable=True)
    is_read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)


class UserPreferences(Base):
    __tablename__ = "user_preferences"

    id = Column(Integer, primary_key=True)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)
    preferred_languages = Column(JSON, nullable=False, default=list)
    preferred_levels = Column(JSON, nullable=False, default=list)
    email_notifications = Column(Boolean, nullable=False, default=True)
    reminder_minutes_before = Column(Integer, nullable=False, default=60)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow)
