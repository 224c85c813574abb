from datetime import datetime
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from studyflow.models.enums import ClassLevel, ClassType
from studyflow.utils.dates import to_utc
from studyflow.schemas.language_class import (
    ClassSessionCreate,
    ClassSessionOut,
    LanguageClassCreate,
    LanguageClassListing,
    LanguageClassOut,
    SessionWithClass,
)
from studyflow.storage import Storage, get_storage
from studyflow.utils.auth import get_current_user_id

router = APIRouter(prefix="/api", tags=["classes"])

CLASS_NOT_FOUND = "Class not found"


@router.get("/classes", response_model=List[LanguageClassListing])
def list_classes(
    language: Optional[str] = Query(None),
    level: Optional[ClassLevel] = Query(None),
    type: Optional[ClassType] = Query(None),
    location: Optional[str] = Query(None, description="Case-insensitive substring of the location"),
    max_price: Optional[int] = Query(None, ge=0, description="Inclusive, in minor currency units"),
    storage: Storage = Depends(get_storage),
):
    return storage.get_language_classes(language=language, level=level, type=type, location=location, max_price=max_price)


@router.post("/classes", response_model=LanguageClassOut, status_code=201)
def create_class(
    data: LanguageClassCreate,
    user_id: str = Depends(get_current_user_id),
    storage: Storage = Depends(get_storage),
):
    return storage.create_language_class(data)


@router.get("/classes/{class_id}", response_model=LanguageClassOut)
def get_class(class_id: int, storage: Storage = Depends(get_storage)):
    class_row = storage.get_language_class(class_id)
    if not class_row:
        raise HTTPException(status_code=404, detail=CLASS_NOT_FOUND)
    return class_row


@router.get("/classes/{class_id}/sessions", response_model=List[ClassSessionOut])
def list_class_sessions(class_id: int, storage: Storage = Depends(get_storage)):
    if not storage.get_language_class(class_id):
        raise HTTPException(status_code=404, detail=CLASS_NOT_FOUND)
    return storage.get_class_sessions(class_id)


@router.post("/classes/{class_id}/sessions", response_model=ClassSessionOut, status_code=201)
def create_class_session(
    class_id: int,
    data: ClassSessionCreate,
    user_id: str = Depends(get_current_user_id),
    storage: Storage = Depends(get_storage),
):
    session = storage.create_class_session(class_id, data)
    if not session:
        raise HTTPException(status_code=404, detail=CLASS_NOT_FOUND)
    return session


@router.get("/sessions/upcoming", response_model=List[SessionWithClass])
def upcoming_sessions(
    language: Optional[str] = Query(None),
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
    storage: Storage = Depends(get_storage),
):
    return storage.get_upcoming_sessions(
        language=language,
        start_date=to_utc(start_date) if start_date else None,
        end_date=to_utc(end_date) if end_date else None,
    )
