from datetime import datetime
from typing import Optional
from pydantic import BaseModel, PositiveInt, field_validator
from studyflow.models.enums import TaskCategory, TaskPriority
from studyflow.schemas.base import ORMModel, UTCDateTime


def _clean_title(v: str) -> str:
    if not v or not v.strip():
        raise ValueError("title cannot be empty")
    return v.strip()


class TaskCreate(BaseModel):
    title: str
    description: Optional[str] = None
    category: TaskCategory = TaskCategory.general
    priority: TaskPriority = TaskPriority.medium
    estimated_minutes: PositiveInt = 30
    completed: bool = False
    due_date: Optional[UTCDateTime] = None

    @field_validator("title")
    @classmethod
    def title_not_empty(cls, v):
        return _clean_title(v)


class TaskUpdate(BaseModel):
    """Partial update: only fields present in the request body are applied."""

    title: Optional[str] = None
    description: Optional[str] = None
    category: Optional[TaskCategory] = None
    priority: Optional[TaskPriority] = None
    estimated_minutes: Optional[PositiveInt] = None
    completed: Optional[bool] = None
    due_date: Optional[UTCDateTime] = None

    @field_validator("title")
    @classmethod
    def title_not_empty(cls, v):
        if v is None:
            raise ValueError("title cannot be null")
        return _clean_title(v)

    @field_validator("category", "priority", "estimated_minutes", "completed")
    @classmethod
    def not_null(cls, v, info):
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v


class TaskOut(ORMModel):
    id: int
    user_id: str
    title: str
    description: Optional[str] = None
    category: TaskCategory
    priority: TaskPriority
    estimated_minutes: int
    completed: bool
    completed_at: Optional[datetime] = None
    due_date: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class TaskCollectionCreate(BaseModel):
    name: str
    description: Optional[str] = None
    topic: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v):
        if not v.strip():
            raise ValueError("name cannot be empty")
        return v.strip()


class TaskCollectionOut(ORMModel):
    id: int
    user_id: str
    name: str
    description: Optional[str] = None
    topic: Optional[str] = None
    generated_at: Optional[datetime] = None
