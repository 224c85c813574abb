import json
from datetime import datetime, timedelta, UTC

import pytest

from .fakes import generated_tasks_json


def _create(client, headers, **body):
    body.setdefault("title", "Review flashcards")
    r = client.post("/api/tasks", json=body, headers=headers)
    assert r.status_code == 201, r.text
    return r.json()


def test_task_journey(client, auth):
    task = _create(client, auth, title="  Learn verbs ", category="learning", priority="high", estimated_minutes=45)
    assert task["title"] == "Learn verbs"
    assert task["completed"] is False
    assert task["completed_at"] is None

    r = client.get(f"/api/tasks/{task['id']}", headers=auth)
    assert r.status_code == 200
    assert r.json() == task

    r = client.patch(f"/api/tasks/{task['id']}", json={"description": "Irregular ones"}, headers=auth)
    assert r.status_code == 200
    assert r.json()["description"] == "Irregular ones"
    assert r.json()["priority"] == "high"

    r = client.patch(f"/api/tasks/{task['id']}/complete", headers=auth)
    assert r.status_code == 200
    assert r.json()["completed"] is True
    assert r.json()["completed_at"] is not None

    r = client.delete(f"/api/tasks/{task['id']}", headers=auth)
    assert r.status_code == 200
    assert r.json() == {"detail": "Task deleted"}
    assert client.get(f"/api/tasks/{task['id']}", headers=auth).status_code == 404
    assert client.delete(f"/api/tasks/{task['id']}", headers=auth).status_code == 404


def test_tasks_are_private(client, signup):
    owner = signup()
    other = signup()
    task = _create(client, owner, title="mine")

    assert client.get("/api/tasks", headers=other).json() == []
    assert client.get(f"/api/tasks/{task['id']}", headers=other).status_code == 404
    assert client.patch(f"/api/tasks/{task['id']}", json={"title": "x"}, headers=other).status_code == 404
    assert client.patch(f"/api/tasks/{task['id']}/complete", headers=other).status_code == 404
    assert client.delete(f"/api/tasks/{task['id']}", headers=other).status_code == 404

    r = client.get(f"/api/tasks/{task['id']}", headers=owner)
    assert r.json()["title"] == "mine"
    assert r.json()["completed"] is False


def test_list_filters(client, auth):
    work = _create(client, auth, title="Report", category="work", priority="urgent")
    health = _create(client, auth, title="Run", category="health")
    client.patch(f"/api/tasks/{health['id']}/complete", headers=auth)

    def ids(**params):
        r = client.get("/api/tasks", params=params, headers=auth)
        assert r.status_code == 200
        return [t["id"] for t in r.json()]

    assert ids() == [health["id"], work["id"]]
    assert ids(completed="true") == [health["id"]]
    assert ids(completed="false") == [work["id"]]
    assert ids(category="work", priority="urgent") == [work["id"]]
    assert ids(category="finance") == []


@pytest.mark.parametrize(
    "body",
    [
        {"title": ""},
        {"title": "   "},
        {"title": "ok", "category": "cooking"},
        {"title": "ok", "priority": "asap"},
        {"title": "ok", "estimated_minutes": 0},
        {"description": "no title"},
    ],
)
def test_invalid_task_is_400(client, auth, body):
    r = client.post("/api/tasks", json=body, headers=auth)
    assert r.status_code == 400
    assert r.json()["detail"]


def test_patch_rejects_nulls_and_unknown_values(client, auth):
    task = _create(client, auth)
    assert client.patch(f"/api/tasks/{task['id']}", json={"title": None}, headers=auth).status_code == 400
    assert client.patch(f"/api/tasks/{task['id']}", json={"category": "cooking"}, headers=auth).status_code == 400
    assert client.patch("/api/tasks/999", json={"title": "x"}, headers=auth).status_code == 404


@pytest.mark.parametrize("field", ["category", "priority", "estimated_minutes", "completed"])
def test_patch_null_keeps_required_fields(client, auth, field):
    task = _create(client, auth, estimated_minutes=40)
    r = client.patch(f"/api/tasks/{task['id']}", json={field: None}, headers=auth)
    assert r.status_code == 400

    unchanged = client.get(f"/api/tasks/{task['id']}", headers=auth).json()
    assert unchanged[field] == task[field]
    assert unchanged["estimated_minutes"] == 40


def test_patch_completed_sets_and_clears_completed_at(client, auth):
    task = _create(client, auth)
    done = client.patch(f"/api/tasks/{task['id']}", json={"completed": True}, headers=auth).json()
    assert done["completed_at"] is not None
    reopened = client.patch(f"/api/tasks/{task['id']}", json={"completed": False}, headers=auth).json()
    assert reopened["completed_at"] is None


def test_due_date_round_trips_in_utc(client, auth):
    task = _create(client, auth, due_date="2030-01-15T10:00:00+01:00")
    assert datetime.fromisoformat(task["due_date"].replace("Z", "+00:00")) == datetime(2030, 1, 15, 9, 0, tzinfo=UTC)


def test_stats_and_notifications(client, auth):
    a = _create(client, auth, title="a", estimated_minutes=30)
    _create(client, auth, title="b", estimated_minutes=45, category="work",
            due_date=(datetime.now(UTC) - timedelta(days=3)).isoformat())
    client.patch(f"/api/tasks/{a['id']}/complete", headers=auth)

    stats = client.get("/api/stats", headers=auth).json()
    assert stats["completion_rate"] == 50
    assert stats["total_minutes"] == 75
    assert stats["category_stats"]["general"] == {"total": 1, "completed": 1}
    assert stats["category_stats"]["work"] == {"total": 1, "completed": 0}

    notifications = client.get("/api/notifications", headers=auth).json()
    assert [n["id"] for n in notifications] == ["overdue"]
    assert notifications[0]["message"] == "You have 1 overdue task"


def test_collections(client, auth):
    assert client.get("/api/collections", headers=auth).json() == []
    r = client.post("/api/collections", json={"name": "Spanish", "topic": "Spanish verbs"}, headers=auth)
    assert r.status_code == 201
    assert r.json()["generated_at"] is not None
    assert [c["name"] for c in client.get("/api/collections", headers=auth).json()] == ["Spanish"]
    assert client.post("/api/collections", json={"name": " "}, headers=auth).status_code == 400


def test_task_routes_require_auth(client):
    assert client.get("/api/tasks").status_code == 401
    assert client.post("/api/tasks", json={"title": "x"}).status_code == 401
    assert client.get("/api/stats").status_code == 401


# --- AI endpoints --------------------------------------------------------------


def test_generate_tasks(client, auth, backend):
    backend.queue(generated_tasks_json())
    r = client.post("/api/generate-tasks", json={"topic": "Spanish verbs"}, headers=auth)
    assert r.status_code == 200
    tasks = r.json()
    assert len(tasks) == 5
    assert tasks[0]["estimated_minutes"] == 30
    assert '"Spanish verbs"' in backend.calls[0][0]

    # generated tasks are only proposals until saved
    assert client.get("/api/tasks", headers=auth).json() == []
    saved = _create(client, auth, **{k: tasks[0][k] for k in ("title", "description", "category", "priority", "estimated_minutes")})
    assert saved["title"] == tasks[0]["title"]


def test_generate_tasks_failure_hides_the_cause(client, auth, backend):
    backend.queue(generated_tasks_json(count=3))
    r = client.post("/api/generate-tasks", json={"topic": "Spanish verbs"}, headers=auth)
    assert r.status_code == 500
    assert r.json() == {"detail": "Failed to generate tasks"}


def test_generate_tasks_requires_topic(client, auth, backend):
    assert client.post("/api/generate-tasks", json={"topic": "   "}, headers=auth).status_code == 400
    assert client.post("/api/generate-tasks", json={}, headers=auth).status_code == 400
    assert backend.calls == []


def test_suggestions_from_completed_tasks(client, auth, backend):
    assert client.get("/api/suggestions", headers=auth).json() == {"suggestions": []}
    assert backend.calls == []

    task = _create(client, auth, title="Learn verbs")
    _create(client, auth, title="Not done yet")
    client.patch(f"/api/tasks/{task['id']}/complete", headers=auth)
    backend.queue(json.dumps(["Subjunctive", "Podcasts", "Travel", "Idioms"]))

    r = client.get("/api/suggestions", headers=auth)
    assert r.status_code == 200
    assert r.json() == {"suggestions": ["Subjunctive", "Podcasts", "Travel"]}
    prompt = backend.calls[0][0]
    assert "Learn verbs" in prompt
    assert "Not done yet" not in prompt


def test_suggestions_degrade_to_empty(client, auth, backend):
    task = _create(client, auth, title="Learn verbs")
    client.patch(f"/api/tasks/{task['id']}/complete", headers=auth)
    backend.error = RuntimeError("provider down")

    r = client.get("/api/suggestions", headers=auth)
    assert r.status_code == 200
    assert r.json() == {"suggestions": []}
