from typing import Dict, Optional
from pydantic import BaseModel
from studyflow.models.enums import ReminderType


class CategoryStat(BaseModel):
    total: int = 0
    completed: int = 0


class TaskStats(BaseModel):
    total_tasks: int
    completed_tasks: int
    total_minutes: int
    completion_rate: float
    category_stats: Dict[str, CategoryStat]


class Notification(BaseModel):
    id: str
    type: ReminderType
    title: str
    message: str
    action_text: Optional[str] = None
