from datetime import datetime
from typing import Optional
from pydantic import BaseModel, EmailStr, field_validator
from studyflow.schemas.base import ORMModel

# bcrypt only looks at the first 72 bytes
MAX_PASSWORD_BYTES = 72


def check_password_length(password: str) -> str:
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"password too long: must be at most {MAX_PASSWORD_BYTES} bytes when UTF-8 encoded")
    return password


class UserCreate(BaseModel):
    email: EmailStr
    password: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None

    @field_validator("password")
    @classmethod
    def password_usable(cls, v: str) -> str:
        if not v:
            raise ValueError("password cannot be empty")
        return check_password_length(v)


class UserLogin(BaseModel):
    email: EmailStr
    password: str


class UserUpsert(BaseModel):
    """Insert-or-update payload keyed by id; only fields that are set get written."""

    id: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None
    password_hash: Optional[str] = None


class UserOut(ORMModel):
    id: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class TokenOut(BaseModel):
    token: str
