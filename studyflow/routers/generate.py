import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException
from studyflow.ai.generator import MAX_HISTORY_TITLES, TaskGenerator, get_task_generator
from studyflow.errors import GenerationError
from studyflow.schemas.generated import GeneratedTask, GenerateTasksRequest, SuggestionsOut
from studyflow.storage import Storage, get_storage
from studyflow.utils.auth import get_current_user_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["ai"])


@router.post("/generate-tasks", response_model=List[GeneratedTask])
def generate_tasks(
    body: GenerateTasksRequest,
    user_id: str = Depends(get_current_user_id),
    generator: TaskGenerator = Depends(get_task_generator),
):
    try:
        return generator.generate_tasks_from_topic(body.topic)
    except GenerationError as e:
        # detail stays in the server log
        logger.error("Generating tasks for user %s failed: %s", user_id, e.kind)
        raise HTTPException(status_code=500, detail="Failed to generate tasks")


@router.get("/suggestions", response_model=SuggestionsOut)
def suggestions(
    user_id: str = Depends(get_current_user_id),
    storage: Storage = Depends(get_storage),
    generator: TaskGenerator = Depends(get_task_generator),
):
    completed = storage.get_tasks(user_id, completed=True)
    titles = [task.title for task in completed[:MAX_HISTORY_TITLES]]
    return {"suggestions": generator.generate_task_suggestions(titles)}
