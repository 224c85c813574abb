# tests/fakes.py

from __future__ import annotations

import json
from types import SimpleNamespace
from typing import Any


class FakeBackend:
    """
    Deterministic JSONBackend for generator tests.

    - Captures calls for assertions
    - Returns queued responses in order ("" once the queue is empty)
    - Raises ``error`` instead when one is set
    """

    def __init__(self, *responses: str, error: Exception | None = None) -> None:
        self.responses = list(responses)
        self.error = error
        self.calls: list[tuple[str, str, dict[str, Any]]] = []

    def queue(self, *responses: str) -> None:
        self.responses.extend(responses)

    def complete_json(self, prompt: str, schema_name: str, schema: dict[str, Any]) -> str:
        self.calls.append((prompt, schema_name, schema))
        if self.error is not None:
            raise self.error
        return self.responses.pop(0) if self.responses else ""


def generated_tasks_json(count: int = 5, **overrides: Any) -> str:
    """JSON text shaped like the model's answer (camelCase minutes)."""
    tasks = []
    for i in range(count):
        task = {
            "title": f"Practice step {i + 1}",
            "description": f"Do exercise {i + 1}",
            "category": "learning",
            "priority": "medium",
            "estimatedMinutes": 30 + i * 15,
        }
        task.update(overrides)
        tasks.append(task)
    return json.dumps(tasks)


class MemoryStorage:
    """
    Dict-backed stand-in for the storage interface, covering users and task reads.

    Anything else raises AttributeError, so a route that reaches further fails loudly.
    """

    def __init__(self) -> None:
        self.users: dict[str, Any] = {}
        self.tasks: list[Any] = []

    def add_user(self, user_id: str) -> None:
        self.users[user_id] = SimpleNamespace(id=user_id, email=f"{user_id}@example.com")

    def add_task(self, user_id: str, **fields: Any) -> None:
        fields.setdefault("category", "general")
        fields.setdefault("priority", "medium")
        fields.setdefault("estimated_minutes", 30)
        fields.setdefault("completed", False)
        fields.setdefault("due_date", None)
        self.tasks.append(SimpleNamespace(id=len(self.tasks) + 1, user_id=user_id, **fields))

    def get_user(self, id: str) -> Any:
        return self.users.get(id)

    def get_tasks(self, user_id: str, completed=None, category=None, priority=None) -> list[Any]:
        return [
            t for t in self.tasks
            if t.user_id == user_id and (completed is None or t.completed == completed)
        ]
