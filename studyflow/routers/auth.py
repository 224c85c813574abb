import logging
import uuid
from fastapi import APIRouter, Depends, HTTPException
from studyflow.schemas.user import UserCreate, UserLogin, UserOut, UserUpsert, TokenOut
from studyflow.storage import Storage, get_storage
from studyflow.utils.auth import hash_password, verify_password, create_token, get_current_user_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/register", response_model=UserOut, status_code=201)
def register(user: UserCreate, storage: Storage = Depends(get_storage)):
    if storage.get_user_by_email(user.email):
        raise HTTPException(status_code=400, detail="Email already exists")

    try:
        hashed = hash_password(user.password)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    new_user = storage.upsert_user(UserUpsert(
        id=uuid.uuid4().hex,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        profile_image_url=user.profile_image_url,
        password_hash=hashed,
    ))
    logger.info("Registered user %s", new_user.id)
    return new_user


@router.post("/login", response_model=TokenOut)
def login(user: UserLogin, storage: Storage = Depends(get_storage)):
    db_user = storage.get_user_by_email(user.email)
    if not db_user or not verify_password(user.password, db_user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid credentials")

    # refresh the user record on every login
    storage.upsert_user(UserUpsert(id=db_user.id))
    return {"token": create_token({"sub": db_user.id})}


@router.get("/user", response_model=UserOut)
def current_user(user_id: str = Depends(get_current_user_id), storage: Storage = Depends(get_storage)):
    user = storage.get_user(user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user
