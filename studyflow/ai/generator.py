"""AI task generation.

Two stateless operations with different failure policies: generating tasks
for a topic is user initiated and fails loudly with ``GenerationError``;
suggesting next topics is best effort and degrades to an empty list.
"""

from __future__ import annotations

import json
import logging
from typing import List, Optional, Sequence

from pydantic import TypeAdapter, ValidationError

from studyflow.ai.client import JSONBackend, OpenAIJSONBackend
from studyflow.errors import GenerationError
from studyflow.models.enums import TaskCategory, TaskPriority
from studyflow.schemas.generated import GeneratedTask

logger = logging.getLogger(__name__)

TASKS_PER_TOPIC = 5
MAX_HISTORY_TITLES = 10
MAX_SUGGESTIONS = 3

GENERATED_TASKS_SCHEMA = {
    "type": "array",
    "items": {
        "type": "object",
        "properties": {
            "title": {"type": "string"},
            "description": {"type": "string"},
            "category": {"type": "string", "enum": [c.value for c in TaskCategory]},
            "priority": {"type": "string", "enum": [p.value for p in TaskPriority]},
            "estimatedMinutes": {"type": "number"},
        },
        "required": ["title", "description", "category", "priority", "estimatedMinutes"],
    },
}

SUGGESTIONS_SCHEMA = {"type": "array", "items": {"type": "string"}}

_generated_tasks = TypeAdapter(List[GeneratedTask])


def build_topic_prompt(topic: str) -> str:
    categories = ", ".join(c.value for c in TaskCategory)
    priorities = ", ".join(p.value for p in TaskPriority)
    return f"""Generate {TASKS_PER_TOPIC} concise, actionable tasks for learning about "{topic}".

For each task, provide:
- A clear, specific title (max 60 characters)
- A brief description explaining what to do (max 150 characters)
- A category from: {categories}
- A priority level: {priorities}
- Estimated time in minutes (15-120 minutes)

Return ONLY a JSON array with this exact format:
[
  {{
    "title": "Task title here",
    "description": "Brief description of what to do",
    "category": "learning",
    "priority": "medium",
    "estimatedMinutes": 30
  }}
]

Make tasks practical and actionable. Avoid generic advice."""


def build_suggestion_prompt(titles: Sequence[str]) -> str:
    return f"""Based on these completed tasks: {", ".join(titles)}

Suggest {MAX_SUGGESTIONS} related topics that would be good to learn next. Each suggestion should be a short phrase (2-4 words).

Return ONLY a JSON array of strings:
["Topic 1", "Topic 2", "Topic 3"]"""


class TaskGenerator:
    def __init__(self, backend: JSONBackend):
        self.backend = backend

    def generate_tasks_from_topic(self, topic: str) -> List[GeneratedTask]:
        """Return exactly five validated tasks for ``topic`` or raise ``GenerationError``."""
        try:
            return self._generate_tasks(topic)
        except GenerationError as e:
            logger.warning("Task generation for topic %r failed (%s): %s", topic, e.kind, e.detail)
            raise

    def _generate_tasks(self, topic: str) -> List[GeneratedTask]:
        try:
            raw = self.backend.complete_json(build_topic_prompt(topic), "generated_tasks", GENERATED_TASKS_SCHEMA)
        except GenerationError:
            raise
        except Exception as e:
            raise GenerationError(GenerationError.PROVIDER, f"{e.__class__.__name__}: {e}") from e

        if not raw or not raw.strip():
            raise GenerationError(GenerationError.EMPTY_RESPONSE)

        try:
            data = json.loads(raw)
        except ValueError as e:
            raise GenerationError(GenerationError.MALFORMED_JSON, str(e)) from e

        if not isinstance(data, list) or len(data) != TASKS_PER_TOPIC:
            got = len(data) if isinstance(data, list) else type(data).__name__
            raise GenerationError(GenerationError.WRONG_COUNT, f"expected {TASKS_PER_TOPIC} tasks, got {got}")

        try:
            return _generated_tasks.validate_python(data)
        except ValidationError as e:
            raise GenerationError(GenerationError.INVALID_TASK, str(e)) from e

    def generate_task_suggestions(self, completed_titles: Sequence[str]) -> List[str]:
        """Suggest up to three follow-up topics; any failure yields ``[]``."""
        titles = [t for t in completed_titles if t and t.strip()][:MAX_HISTORY_TITLES]
        if not titles:
            return []

        try:
            raw = self.backend.complete_json(build_suggestion_prompt(titles), "topic_suggestions", SUGGESTIONS_SCHEMA)
            data = json.loads(raw) if raw else []
        except Exception:
            # suggestions are optional; never surface provider trouble to the caller
            logger.warning("Suggestion generation failed", exc_info=True)
            return []

        if not isinstance(data, list):
            logger.info("Suggestion response was not a list (%s)", type(data).__name__)
            return []
        suggestions = [s.strip() for s in data if isinstance(s, str) and s.strip()]
        return suggestions[:MAX_SUGGESTIONS]


_generator: Optional[TaskGenerator] = None


def get_task_generator() -> TaskGenerator:
    global _generator
    if _generator is None:
        _generator = TaskGenerator(OpenAIJSONBackend())
    return _generator
