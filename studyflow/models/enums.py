import enum

from sqlalchemy import Enum as SAEnum


class TaskCategory(str, enum.Enum):
    general = "general"
    work = "work"
    learning = "learning"
    personal = "personal"
    health = "health"
    finance = "finance"


class TaskPriority(str, enum.Enum):
    low = "low"
    medium = "medium"
    high = "high"
    urgent = "urgent"


class ClassLevel(str, enum.Enum):
    beginner = "beginner"
    intermediate = "intermediate"
    advanced = "advanced"


class ClassType(str, enum.Enum):
    class_ = "class"
    workshop = "workshop"
    conversation = "conversation"
    tutoring = "tutoring"


class SessionStatus(str, enum.Enum):
    scheduled = "scheduled"
    completed = "completed"
    cancelled = "cancelled"


class BookingStatus(str, enum.Enum):
    booked = "booked"
    attended = "attended"
    cancelled = "cancelled"
    no_show = "no_show"


class ReminderType(str, enum.Enum):
    reminder = "reminder"
    achievement = "achievement"
    suggestion = "suggestion"


def enum_column(enum_cls):
    """String column that stores the enum's values and only accepts listed members."""
    return SAEnum(
        enum_cls,
        native_enum=False,
        length=32,
        values_callable=lambda members: [m.value for m in members],
        validate_strings=True,
    )
