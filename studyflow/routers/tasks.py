from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from studyflow.models.enums import TaskCategory, TaskPriority
from studyflow.progress import build_notifications, compute_stats
from studyflow.schemas.progress import Notification, TaskStats
from studyflow.schemas.task import TaskCreate, TaskUpdate, TaskOut, TaskCollectionCreate, TaskCollectionOut
from studyflow.storage import Storage, get_storage
from studyflow.utils.auth import get_current_user_id

router = APIRouter(prefix="/api", tags=["tasks"])

TASK_NOT_FOUND = "Task not found"


@router.get("/tasks", response_model=List[TaskOut])
def list_tasks(
    completed: Optional[bool] = Query(None),
    category: Optional[TaskCategory] = Query(None),
    priority: Optional[TaskPriority] = Query(None),
    user_id: str = Depends(get_current_user_id),
    storage: Storage = Depends(get_storage),
):
    return storage.get_tasks(user_id, completed=completed, category=category, priority=priority)


@router.get("/tasks/{task_id}", response_model=TaskOut)
def get_task(task_id: int, user_id: str = Depends(get_current_user_id), storage: Storage = Depends(get_storage)):
    task = storage.get_task(task_id, user_id)
    if not task:
        raise HTTPException(status_code=404, detail=TASK_NOT_FOUND)
    return task


@router.post("/tasks", response_model=TaskOut, status_code=201)
def create_task(task: TaskCreate, user_id: str = Depends(get_current_user_id), storage: Storage = Depends(get_storage)):
    return storage.create_task(user_id, task)


@router.patch("/tasks/{task_id}", response_model=TaskOut)
def update_task(
    task_id: int,
    updates: TaskUpdate,
    user_id: str = Depends(get_current_user_id),
    storage: Storage = Depends(get_storage),
):
    task = storage.update_task(task_id, user_id, updates)
    if not task:
        raise HTTPException(status_code=404, detail=TASK_NOT_FOUND)
    return task


@router.delete("/tasks/{task_id}")
def delete_task(task_id: int, user_id: str = Depends(get_current_user_id), storage: Storage = Depends(get_storage)):
    if not storage.delete_task(task_id, user_id):
        raise HTTPException(status_code=404, detail=TASK_NOT_FOUND)
    return {"detail": "Task deleted"}


@router.patch("/tasks/{task_id}/complete", response_model=TaskOut)
def complete_task(task_id: int, user_id: str = Depends(get_current_user_id), storage: Storage = Depends(get_storage)):
    task = storage.complete_task(task_id, user_id)
    if not task:
        raise HTTPException(status_code=404, detail=TASK_NOT_FOUND)
    return task


@router.get("/stats", response_model=TaskStats)
def task_stats(user_id: str = Depends(get_current_user_id), storage: Storage = Depends(get_storage)):
    return compute_stats(storage.get_tasks(user_id))


@router.get("/notifications", response_model=List[Notification])
def notifications(user_id: str = Depends(get_current_user_id), storage: Storage = Depends(get_storage)):
    return build_notifications(storage.get_tasks(user_id))


@router.get("/collections", response_model=List[TaskCollectionOut])
def list_collections(user_id: str = Depends(get_current_user_id), storage: Storage = Depends(get_storage)):
    return storage.get_task_collections(user_id)


@router.post("/collections", response_model=TaskCollectionOut, status_code=201)
def create_collection(
    collection: TaskCollectionCreate,
    user_id: str = Depends(get_current_user_id),
    storage: Storage = Depends(get_storage),
):
    return storage.create_task_collection(user_id, collection)
