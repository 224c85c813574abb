"""Derived views over a user's task list: filtering, statistics, notifications.

Each function is one pass over an already-loaded collection.
"""

from datetime import datetime
from typing import Iterable, List, Optional

from studyflow.models.enums import ReminderType
from studyflow.schemas.progress import CategoryStat, Notification, TaskStats
from studyflow.utils.dates import as_utc, utcnow

STATUS_FILTERS = ("all", "pending", "completed")
MILESTONE_EVERY = 5


def _value(v):
    return getattr(v, "value", v)


def filter_tasks(tasks: Iterable, status: str = "all", category: Optional[str] = None, priority: Optional[str] = None) -> List:
    """Keep tasks matching every given criterion; ``None`` or ``"all"`` means no constraint."""
    if status not in STATUS_FILTERS:
        raise ValueError(f"unknown status filter: {status!r}")
    category = None if category in (None, "all") else _value(category)
    priority = None if priority in (None, "all") else _value(priority)

    result = []
    for task in tasks:
        if status == "pending" and task.completed:
            continue
        if status == "completed" and not task.completed:
            continue
        if category is not None and _value(task.category) != category:
            continue
        if priority is not None and _value(task.priority) != priority:
            continue
        result.append(task)
    return result


def compute_stats(tasks: Iterable) -> TaskStats:
    total = completed = minutes = 0
    categories = {}
    for task in tasks:
        total += 1
        minutes += task.estimated_minutes
        stat = categories.setdefault(_value(task.category), CategoryStat())
        stat.total += 1
        if task.completed:
            completed += 1
            stat.completed += 1

    return TaskStats(
        total_tasks=total,
        completed_tasks=completed,
        total_minutes=minutes,
        completion_rate=(completed / total) * 100 if total else 0.0,
        category_stats=categories,
    )


def _plural(n: int, word: str) -> str:
    return f"{n} {word}" if n == 1 else f"{n} {word}s"


def build_notifications(tasks: Iterable, now: Optional[datetime] = None) -> List[Notification]:
    """Overdue and due-today reminders plus a milestone every fifth completed task."""
    now = as_utc(now) if now is not None else utcnow()
    overdue = due_today = completed = 0

    for task in tasks:
        if task.completed:
            completed += 1
            continue
        due = as_utc(task.due_date)
        if due is None:
            continue
        if due < now:
            overdue += 1
        if due.date() == now.date():
            due_today += 1

    notifications = []
    if overdue:
        notifications.append(Notification(
            id="overdue",
            type=ReminderType.reminder,
            title="Overdue Tasks",
            message=f"You have {_plural(overdue, 'overdue task')}",
            action_text="View Tasks",
        ))
    if due_today:
        notifications.append(Notification(
            id="due-today",
            type=ReminderType.reminder,
            title="Tasks Due Today",
            message=f"{_plural(due_today, 'task')} due today",
            action_text="Start Learning",
        ))
    if completed and completed % MILESTONE_EVERY == 0:
        notifications.append(Notification(
            id=f"achievement-{completed}",
            type=ReminderType.achievement,
            title="Milestone Reached!",
            message=f"Congratulations! You've completed {completed} tasks",
        ))
    return notifications
