from typing import List
from fastapi import APIRouter, Depends, HTTPException, Query
from studyflow.schemas.user_data import UserPreferencesOut, UserPreferencesUpdate, UserReminderCreate, UserReminderOut
from studyflow.storage import Storage, get_storage
from studyflow.utils.auth import get_current_user_id

router = APIRouter(prefix="/api", tags=["reminders", "preferences"])


@router.get("/reminders", response_model=List[UserReminderOut])
def list_reminders(
    unread_only: bool = Query(False),
    user_id: str = Depends(get_current_user_id),
    storage: Storage = Depends(get_storage),
):
    return storage.get_user_reminders(user_id, unread_only=unread_only)


@router.post("/reminders", response_model=UserReminderOut, status_code=201)
def create_reminder(
    reminder: UserReminderCreate,
    user_id: str = Depends(get_current_user_id),
    storage: Storage = Depends(get_storage),
):
    return storage.create_reminder(user_id, reminder)


@router.patch("/reminders/{reminder_id}/read")
def mark_reminder_read(reminder_id: int, user_id: str = Depends(get_current_user_id), storage: Storage = Depends(get_storage)):
    if not storage.mark_reminder_as_read(reminder_id, user_id):
        raise HTTPException(status_code=404, detail="Reminder not found")
    return {"detail": "Reminder marked as read"}


@router.get("/preferences", response_model=UserPreferencesOut)
def get_preferences(user_id: str = Depends(get_current_user_id), storage: Storage = Depends(get_storage)):
    preferences = storage.get_user_preferences(user_id)
    if not preferences:
        raise HTTPException(status_code=404, detail="Preferences not found")
    return preferences


@router.put("/preferences", response_model=UserPreferencesOut)
def put_preferences(
    preferences: UserPreferencesUpdate,
    user_id: str = Depends(get_current_user_id),
    storage: Storage = Depends(get_storage),
):
    return storage.upsert_user_preferences(user_id, preferences)
