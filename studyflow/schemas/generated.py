from typing import List
from pydantic import AliasChoices, BaseModel, Field, field_validator
from studyflow.models.enums import TaskCategory, TaskPriority


class GeneratedTask(BaseModel):
    """A task proposed by the AI generator; not persisted until the user saves it."""

    title: str
    description: str = ""
    category: TaskCategory
    priority: TaskPriority
    # the model answers in camelCase, the API speaks snake_case
    estimated_minutes: int = Field(
        gt=0, validation_alias=AliasChoices("estimated_minutes", "estimatedMinutes")
    )

    @field_validator("title")
    @classmethod
    def title_not_empty(cls, v):
        if not v.strip():
            raise ValueError("title cannot be empty")
        return v.strip()

    @field_validator("estimated_minutes", mode="before")
    @classmethod
    def round_minutes(cls, v):
        if isinstance(v, float):
            return round(v)
        return v


class GenerateTasksRequest(BaseModel):
    topic: str

    @field_validator("topic")
    @classmethod
    def topic_required(cls, v):
        if not v.strip():
            raise ValueError("Topic is required")
        return v.strip()


class SuggestionsOut(BaseModel):
    suggestions: List[str]
