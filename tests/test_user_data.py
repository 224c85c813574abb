from studyflow.schemas.user_data import UserPreferencesUpdate, UserReminderCreate


def test_reminders_api(client, auth, signup):
    r = client.post(
        "/api/reminders",
        json={"title": " Spanish class tomorrow ", "message": "Bring the workbook", "remind_at": "2030-05-01T08:00:00Z"},
        headers=auth,
    )
    assert r.status_code == 201
    reminder = r.json()
    assert reminder["title"] == "Spanish class tomorrow"
    assert reminder["type"] == "reminder"
    assert reminder["is_read"] is False

    second = client.post("/api/reminders", json={"title": "Well done", "type": "achievement"}, headers=auth).json()
    assert [x["id"] for x in client.get("/api/reminders", headers=auth).json()] == [second["id"], reminder["id"]]

    other = signup()
    assert client.patch(f"/api/reminders/{reminder['id']}/read", headers=other).status_code == 404
    assert client.get("/api/reminders", headers=other).json() == []

    r = client.patch(f"/api/reminders/{reminder['id']}/read", headers=auth)
    assert r.status_code == 200
    unread = client.get("/api/reminders", params={"unread_only": "true"}, headers=auth).json()
    assert [x["id"] for x in unread] == [second["id"]]

    assert client.post("/api/reminders", json={"title": ""}, headers=auth).status_code == 400
    assert client.post("/api/reminders", json={"title": "x", "type": "nag"}, headers=auth).status_code == 400


def test_preferences_api(client, auth):
    assert client.get("/api/preferences", headers=auth).status_code == 404

    r = client.put(
        "/api/preferences",
        json={"preferred_languages": ["Spanish", "French"], "preferred_levels": ["beginner"]},
        headers=auth,
    )
    assert r.status_code == 200
    prefs = r.json()
    assert prefs["preferred_languages"] == ["Spanish", "French"]
    assert prefs["preferred_levels"] == ["beginner"]
    assert prefs["email_notifications"] is True
    assert prefs["reminder_minutes_before"] == 60

    r = client.put("/api/preferences", json={"email_notifications": False}, headers=auth)
    assert r.json()["id"] == prefs["id"]
    assert r.json()["email_notifications"] is False
    assert r.json()["preferred_languages"] == ["Spanish", "French"]
    assert client.get("/api/preferences", headers=auth).json()["email_notifications"] is False

    assert client.put("/api/preferences", json={"preferred_levels": ["expert"]}, headers=auth).status_code == 400
    assert client.put("/api/preferences", json={"reminder_minutes_before": -5}, headers=auth).status_code == 400


def test_reminders_and_preferences_require_auth(client):
    assert client.get("/api/reminders").status_code == 401
    assert client.get("/api/preferences").status_code == 401


def test_storage_reminders_are_scoped(storage, alice, bob):
    reminder = storage.create_reminder(alice.id, UserReminderCreate(title="Practice"))
    assert storage.mark_reminder_as_read(reminder.id, bob.id) is False
    assert storage.mark_reminder_as_read(reminder.id, alice.id) is True
    assert storage.get_user_reminders(alice.id)[0].is_read is True
    assert storage.get_user_reminders(alice.id, unread_only=True) == []
    assert storage.get_user_reminders(bob.id) == []


def test_storage_preferences_upsert(storage, alice):
    assert storage.get_user_preferences(alice.id) is None
    created = storage.upsert_user_preferences(alice.id, UserPreferencesUpdate(preferred_levels=["advanced"]))
    updated = storage.upsert_user_preferences(alice.id, UserPreferencesUpdate(reminder_minutes_before=15))

    assert updated.id == created.id
    assert updated.preferred_levels == ["advanced"]
    assert updated.reminder_minutes_before == 15
