from datetime import datetime
from typing import Optional
from pydantic import BaseModel, NonNegativeInt, PositiveInt, model_validator
from studyflow.models.enums import ClassLevel, ClassType, SessionStatus, BookingStatus
from studyflow.schemas.base import ORMModel, UTCDateTime


class LanguageClassCreate(BaseModel):
    title: str
    description: Optional[str] = None
    language: str
    level: ClassLevel
    type: ClassType
    instructor_name: str
    location: str
    address: Optional[str] = None
    price: NonNegativeInt
    duration: PositiveInt
    max_students: PositiveInt
    current_students: NonNegativeInt = 0
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    is_active: bool = True

    @model_validator(mode="after")
    def students_within_capacity(self):
        if self.current_students > self.max_students:
            raise ValueError("current_students cannot exceed max_students")
        return self


class LanguageClassOut(ORMModel):
    id: int
    title: str
    description: Optional[str] = None
    language: str
    level: ClassLevel
    type: ClassType
    instructor_name: str
    location: str
    address: Optional[str] = None
    price: int
    duration: int
    max_students: int
    current_students: int
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    is_active: bool
    created_at: Optional[datetime] = None


class ClassSessionCreate(BaseModel):
    start_time: UTCDateTime
    end_time: UTCDateTime
    # defaults to the class's remaining capacity
    available_spots: Optional[NonNegativeInt] = None
    is_recurring: bool = False
    recurring_pattern: Optional[str] = None
    status: SessionStatus = SessionStatus.scheduled

    @model_validator(mode="after")
    def ends_after_start(self):
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self


class ClassSessionOut(ORMModel):
    id: int
    class_id: int
    start_time: datetime
    end_time: datetime
    available_spots: int
    is_recurring: bool
    recurring_pattern: Optional[str] = None
    status: SessionStatus
    created_at: Optional[datetime] = None


class LanguageClassListing(LanguageClassOut):
    next_session: Optional[ClassSessionOut] = None
    available_spots: int = 0


class SessionWithClass(ClassSessionOut):
    language_class: LanguageClassOut


class UserBookingCreate(BaseModel):
    session_id: int
    notes: Optional[str] = None


class UserBookingOut(ORMModel):
    id: int
    user_id: str
    session_id: int
    status: BookingStatus
    booked_at: Optional[datetime] = None
    notes: Optional[str] = None


class BookingWithSession(UserBookingOut):
    session: SessionWithClass
