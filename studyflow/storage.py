"""Storage access layer.

``DatabaseStorage`` is the only code that reads or writes the database. Route
handlers receive an instance per request through ``get_storage`` so tests can
point it at a throwaway database.

Every user-owned lookup is scoped by an explicit ``user_id``: a row that
exists but belongs to someone else is reported exactly like a missing one
(``None`` / ``False``). Database errors are not caught here.
"""

import logging
from datetime import datetime
from typing import List, Optional, Protocol

from fastapi import Depends
from sqlalchemy import and_, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, aliased

from studyflow.database import get_db
from studyflow.errors import SessionUnavailableError
from studyflow.models.enums import BookingStatus, ClassLevel, ClassType, SessionStatus, TaskCategory, TaskPriority
from studyflow.models.language_class import ClassSession, LanguageClass, UserBooking
from studyflow.models.task import Task, TaskCollection
from studyflow.models.user import User
from studyflow.models.user_data import UserPreferences, UserReminder
from studyflow.schemas.language_class import (
    BookingWithSession,
    ClassSessionCreate,
    ClassSessionOut,
    LanguageClassCreate,
    LanguageClassListing,
    LanguageClassOut,
    SessionWithClass,
    UserBookingCreate,
    UserBookingOut,
)
from studyflow.schemas.task import TaskCollectionCreate, TaskCreate, TaskUpdate
from studyflow.schemas.user import UserUpsert
from studyflow.schemas.user_data import UserPreferencesUpdate, UserReminderCreate
from studyflow.utils.dates import utcnow

logger = logging.getLogger(__name__)


class Storage(Protocol):
    # users
    def get_user(self, id: str) -> Optional[User]: ...
    def get_user_by_email(self, email: str) -> Optional[User]: ...
    def upsert_user(self, user: UserUpsert) -> User: ...

    # tasks
    def get_tasks(
        self,
        user_id: str,
        completed: Optional[bool] = None,
        category: Optional[TaskCategory] = None,
        priority: Optional[TaskPriority] = None,
    ) -> List[Task]: ...
    def get_task(self, id: int, user_id: str) -> Optional[Task]: ...
    def create_task(self, user_id: str, task: TaskCreate) -> Task: ...
    def update_task(self, id: int, user_id: str, updates: TaskUpdate) -> Optional[Task]: ...
    def delete_task(self, id: int, user_id: str) -> bool: ...
    def complete_task(self, id: int, user_id: str) -> Optional[Task]: ...

    # task collections
    def get_task_collections(self, user_id: str) -> List[TaskCollection]: ...
    def create_task_collection(self, user_id: str, collection: TaskCollectionCreate) -> TaskCollection: ...

    # language classes
    def get_language_classes(
        self,
        language: Optional[str] = None,
        level: Optional[ClassLevel] = None,
        type: Optional[ClassType] = None,
        location: Optional[str] = None,
        max_price: Optional[int] = None,
    ) -> List[LanguageClassListing]: ...
    def get_language_class(self, id: int) -> Optional[LanguageClass]: ...
    def create_language_class(self, data: LanguageClassCreate) -> LanguageClass: ...
    def get_class_sessions(self, class_id: int) -> List[ClassSession]: ...
    def get_upcoming_sessions(
        self,
        language: Optional[str] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> List[SessionWithClass]: ...
    def create_class_session(self, class_id: int, data: ClassSessionCreate) -> Optional[ClassSession]: ...

    # bookings
    def get_user_bookings(self, user_id: str) -> List[BookingWithSession]: ...
    def create_booking(self, user_id: str, booking: UserBookingCreate) -> Optional[UserBooking]: ...
    def cancel_booking(self, booking_id: int, user_id: str) -> bool: ...

    # reminders and preferences
    def get_user_reminders(self, user_id: str, unread_only: bool = False) -> List[UserReminder]: ...
    def create_reminder(self, user_id: str, reminder: UserReminderCreate) -> UserReminder: ...
    def mark_reminder_as_read(self, reminder_id: int, user_id: str) -> bool: ...
    def get_user_preferences(self, user_id: str) -> Optional[UserPreferences]: ...
    def upsert_user_preferences(self, user_id: str, preferences: UserPreferencesUpdate) -> UserPreferences: ...


class DatabaseStorage:
    """SQLAlchemy implementation of ``Storage`` bound to one ORM session."""

    def __init__(self, db: Session):
        self.db = db

    # ------------------------------------------------------------------ users

    def get_user(self, id: str) -> Optional[User]:
        return self.db.get(User, id)

    def get_user_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    def upsert_user(self, user: UserUpsert) -> User:
        values = user.model_dump(exclude_unset=True)
        now = utcnow()
        row = self.db.get(User, user.id)
        if row is None:
            row = User(**values, created_at=now, updated_at=now)
            self.db.add(row)
        else:
            for key, value in values.items():
                setattr(row, key, value)
            row.updated_at = now
        self.db.commit()
        self.db.refresh(row)
        return row

    # ------------------------------------------------------------------ tasks

    def _owned_task(self, id: int, user_id: str):
        return self.db.query(Task).filter(Task.id == id, Task.user_id == user_id)

    def get_tasks(self, user_id, completed=None, category=None, priority=None) -> List[Task]:
        query = self.db.query(Task).filter(Task.user_id == user_id)
        if completed is not None:
            query = query.filter(Task.completed == completed)
        if category is not None:
            query = query.filter(Task.category == TaskCategory(category))
        if priority is not None:
            query = query.filter(Task.priority == TaskPriority(priority))
        return query.order_by(Task.created_at.desc(), Task.id.desc()).all()

    def get_task(self, id: int, user_id: str) -> Optional[Task]:
        return self._owned_task(id, user_id).first()

    def create_task(self, user_id: str, task: TaskCreate) -> Task:
        now = utcnow()
        new = Task(user_id=user_id, **task.model_dump(), created_at=now, updated_at=now)
        new.completed_at = now if new.completed else None
        self.db.add(new)
        self.db.commit()
        self.db.refresh(new)
        return new

    def update_task(self, id: int, user_id: str, updates: TaskUpdate) -> Optional[Task]:
        task = self.get_task(id, user_id)
        if task is None:
            return None

        values = updates.model_dump(exclude_unset=True)
        now = utcnow()
        if "completed" in values:
            if values["completed"] and not task.completed:
                task.completed_at = now
            elif not values["completed"]:
                task.completed_at = None
        for key, value in values.items():
            setattr(task, key, value)
        task.updated_at = now

        self.db.commit()
        self.db.refresh(task)
        return task

    def delete_task(self, id: int, user_id: str) -> bool:
        deleted = self._owned_task(id, user_id).delete(synchronize_session="evaluate")
        self.db.commit()
        return deleted > 0

    def complete_task(self, id: int, user_id: str) -> Optional[Task]:
        # completed_at keeps the first completion time when a task is completed again
        now = utcnow()
        result = self.db.execute(
            update(Task)
            .where(Task.id == id, Task.user_id == user_id)
            .values(completed=True, completed_at=func.coalesce(Task.completed_at, now), updated_at=now)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            self.db.rollback()
            return None
        self.db.commit()
        self.db.expire_all()
        return self.get_task(id, user_id)

    # ------------------------------------------------------- task collections

    def get_task_collections(self, user_id: str) -> List[TaskCollection]:
        return (
            self.db.query(TaskCollection)
            .filter(TaskCollection.user_id == user_id)
            .order_by(TaskCollection.generated_at.desc(), TaskCollection.id.desc())
            .all()
        )

    def create_task_collection(self, user_id: str, collection: TaskCollectionCreate) -> TaskCollection:
        new = TaskCollection(user_id=user_id, **collection.model_dump(), generated_at=utcnow())
        self.db.add(new)
        self.db.commit()
        self.db.refresh(new)
        return new

    # ------------------------------------------------------- language classes

    def get_language_classes(self, language=None, level=None, type=None, location=None, max_price=None):
        """Active classes ordered by title, each with its next scheduled session.

        The next session is picked by a ``row_number()`` window over upcoming
        scheduled sessions, so the whole listing is a single query.
        """
        now = utcnow()
        ranked = (
            select(
                ClassSession,
                func.row_number()
                .over(partition_by=ClassSession.class_id, order_by=[ClassSession.start_time, ClassSession.id])
                .label("rn"),
            )
            .where(ClassSession.start_time >= now, ClassSession.status == SessionStatus.scheduled)
            .subquery()
        )
        next_session = aliased(ClassSession, ranked)

        query = (
            self.db.query(LanguageClass, next_session)
            .outerjoin(next_session, and_(next_session.class_id == LanguageClass.id, ranked.c.rn == 1))
            .filter(LanguageClass.is_active.is_(True))
        )
        if language:
            query = query.filter(LanguageClass.language == language)
        if level is not None:
            query = query.filter(LanguageClass.level == ClassLevel(level))
        if type is not None:
            query = query.filter(LanguageClass.type == ClassType(type))
        if location:
            query = query.filter(LanguageClass.location.ilike(f"%{location}%"))
        if max_price is not None:
            query = query.filter(LanguageClass.price <= max_price)

        listings = []
        for class_row, session in query.order_by(LanguageClass.title, LanguageClass.id).all():
            listing = LanguageClassListing.model_validate(class_row)
            if session is not None:
                listing = listing.model_copy(
                    update={
                        "next_session": ClassSessionOut.model_validate(session),
                        "available_spots": session.available_spots,
                    }
                )
            listings.append(listing)
        return listings

    def get_language_class(self, id: int) -> Optional[LanguageClass]:
        return self.db.get(LanguageClass, id)

    def create_language_class(self, data: LanguageClassCreate) -> LanguageClass:
        new = LanguageClass(**data.model_dump(), created_at=utcnow())
        self.db.add(new)
        self.db.commit()
        self.db.refresh(new)
        return new

    def get_class_sessions(self, class_id: int) -> List[ClassSession]:
        return (
            self.db.query(ClassSession)
            .filter(ClassSession.class_id == class_id)
            .order_by(ClassSession.start_time, ClassSession.id)
            .all()
        )

    def get_upcoming_sessions(self, language=None, start_date=None, end_date=None) -> List[SessionWithClass]:
        query = (
            self.db.query(ClassSession, LanguageClass)
            .join(LanguageClass, ClassSession.class_id == LanguageClass.id)
            .filter(
                ClassSession.start_time >= (start_date or utcnow()),
                ClassSession.status == SessionStatus.scheduled,
                LanguageClass.is_active.is_(True),
            )
        )
        if end_date is not None:
            query = query.filter(ClassSession.start_time <= end_date)
        if language:
            query = query.filter(LanguageClass.language == language)
        rows = query.order_by(ClassSession.start_time, ClassSession.id).all()
        return [_session_with_class(session, class_row) for session, class_row in rows]

    def create_class_session(self, class_id: int, data: ClassSessionCreate) -> Optional[ClassSession]:
        class_row = self.get_language_class(class_id)
        if class_row is None:
            return None
        values = data.model_dump()
        if values["available_spots"] is None:
            values["available_spots"] = max(class_row.max_students - class_row.current_students, 0)
        new = ClassSession(class_id=class_id, **values, created_at=utcnow())
        self.db.add(new)
        self.db.commit()
        self.db.refresh(new)
        return new

    # --------------------------------------------------------------- bookings

    def get_user_bookings(self, user_id: str) -> List[BookingWithSession]:
        rows = (
            self.db.query(UserBooking, ClassSession, LanguageClass)
            .join(ClassSession, UserBooking.session_id == ClassSession.id)
            .join(LanguageClass, ClassSession.class_id == LanguageClass.id)
            .filter(UserBooking.user_id == user_id)
            .order_by(ClassSession.start_time.desc(), UserBooking.id.desc())
            .all()
        )
        return [
            BookingWithSession.model_validate(
                {**UserBookingOut.model_validate(booking).model_dump(), "session": _session_with_class(session, class_row)}
            )
            for booking, session, class_row in rows
        ]

    def create_booking(self, user_id: str, booking: UserBookingCreate) -> Optional[UserBooking]:
        """Take one spot on the session and record the booking in one transaction.

        The spot is taken by a conditional UPDATE, so concurrent attempts on
        the last spot cannot both succeed and the counter never goes below 0.
        Returns None if the session does not exist; raises
        ``SessionUnavailableError`` if it is full or not scheduled.
        """
        try:
            result = self.db.execute(
                update(ClassSession)
                .where(
                    ClassSession.id == booking.session_id,
                    ClassSession.available_spots > 0,
                    ClassSession.status == SessionStatus.scheduled,
                )
                .values(available_spots=ClassSession.available_spots - 1)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                self.db.rollback()
                if self.db.get(ClassSession, booking.session_id) is None:
                    return None
                logger.info("Booking rejected: session %s is full or not scheduled", booking.session_id)
                raise SessionUnavailableError(booking.session_id)

            new = UserBooking(
                user_id=user_id,
                session_id=booking.session_id,
                notes=booking.notes,
                status=BookingStatus.booked,
                booked_at=utcnow(),
            )
            self.db.add(new)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        # the counter was changed behind the identity map
        self.db.expire_all()
        self.db.refresh(new)
        return new

    def cancel_booking(self, booking_id: int, user_id: str) -> bool:
        """Cancel an owned, still-booked booking and give its spot back, atomically."""
        try:
            result = self.db.execute(
                update(UserBooking)
                .where(
                    UserBooking.id == booking_id,
                    UserBooking.user_id == user_id,
                    UserBooking.status == BookingStatus.booked,
                )
                .values(status=BookingStatus.cancelled)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                self.db.rollback()
                return False

            session_id = self.db.query(UserBooking.session_id).filter(UserBooking.id == booking_id).scalar()
            self.db.execute(
                update(ClassSession)
                .where(ClassSession.id == session_id)
                .values(available_spots=ClassSession.available_spots + 1)
                .execution_options(synchronize_session=False)
            )
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        self.db.expire_all()
        return True

    # ------------------------------------------------ reminders / preferences

    def get_user_reminders(self, user_id: str, unread_only: bool = False) -> List[UserReminder]:
        query = self.db.query(UserReminder).filter(UserReminder.user_id == user_id)
        if unread_only:
            query = query.filter(UserReminder.is_read.is_(False))
        return query.order_by(UserReminder.created_at.desc(), UserReminder.id.desc()).all()

    def create_reminder(self, user_id: str, reminder: UserReminderCreate) -> UserReminder:
        new = UserReminder(user_id=user_id, **reminder.model_dump(), is_read=False, created_at=utcnow())
        self.db.add(new)
        self.db.commit()
        self.db.refresh(new)
        return new

    def mark_reminder_as_read(self, reminder_id: int, user_id: str) -> bool:
        result = self.db.execute(
            update(UserReminder)
            .where(UserReminder.id == reminder_id, UserReminder.user_id == user_id)
            .values(is_read=True)
            .execution_options(synchronize_session=False)
        )
        self.db.commit()
        self.db.expire_all()
        return result.rowcount > 0

    def get_user_preferences(self, user_id: str) -> Optional[UserPreferences]:
        return self.db.query(UserPreferences).filter(UserPreferences.user_id == user_id).first()

    def upsert_user_preferences(self, user_id: str, preferences: UserPreferencesUpdate) -> UserPreferences:
        now = utcnow()
        row = self.get_user_preferences(user_id)
        if row is None:
            row = UserPreferences(user_id=user_id, **preferences.model_dump(mode="json"), created_at=now, updated_at=now)
            self.db.add(row)
        else:
            for key, value in preferences.model_dump(mode="json", exclude_unset=True).items():
                setattr(row, key, value)
            row.updated_at = now
        self.db.commit()
        self.db.refresh(row)
        return row


def _session_with_class(session: ClassSession, class_row: LanguageClass) -> SessionWithClass:
    return SessionWithClass.model_validate(
        {**ClassSessionOut.model_validate(session).model_dump(), "language_class": LanguageClassOut.model_validate(class_row)}
    )


def get_storage(db: Session = Depends(get_db)) -> Storage:
    return DatabaseStorage(db)
