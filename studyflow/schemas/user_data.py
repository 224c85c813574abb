from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, NonNegativeInt, field_validator
from studyflow.models.enums import ClassLevel, ReminderType
from studyflow.schemas.base import ORMModel, UTCDateTime


class UserReminderCreate(BaseModel):
    type: ReminderType = ReminderType.reminder
    title: str
    message: Optional[str] = None
    remind_at: Optional[UTCDateTime] = None

    @field_validator("title")
    @classmethod
    def title_not_empty(cls, v):
        if not v.strip():
            raise ValueError("title cannot be empty")
        return v.strip()


class UserReminderOut(ORMModel):
    id: int
    user_id: str
    type: ReminderType
    title: str
    message: Optional[str] = None
    remind_at: Optional[datetime] = None
    is_read: bool
    created_at: Optional[datetime] = None


class UserPreferencesUpdate(BaseModel):
    preferred_languages: List[str] = []
    preferred_levels: List[ClassLevel] = []
    email_notifications: bool = True
    reminder_minutes_before: NonNegativeInt = 60


class UserPreferencesOut(ORMModel):
    id: int
    user_id: str
    preferred_languages: List[str]
    preferred_levels: List[ClassLevel]
    email_notifications: bool
    reminder_minutes_before: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
