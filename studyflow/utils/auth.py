from datetime import datetime, timedelta, UTC
from typing import Optional
from fastapi import Depends, Header, HTTPException, Query
from jose import jwt, JWTError, ExpiredSignatureError
from passlib.context import CryptContext
from studyflow.config import SECRET_KEY, ALGORITHM
from studyflow.schemas.user import check_password_length
from studyflow.storage import Storage, get_storage

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str):
    """Hash a password; raises ValueError past the bcrypt byte limit."""
    return pwd_context.hash(check_password_length(password))


def verify_password(plain, hashed):
    """Check ``plain`` against a stored hash.

    Inputs bcrypt rejects and users without a hash both count as a mismatch,
    so callers answer with an authentication failure rather than an error.
    """
    if not hashed:
        return False
    try:
        return pwd_context.verify(plain, hashed)
    except ValueError:
        return False


def create_token(data: dict):
    claims = dict(data)
    # looked up per call so changes to studyflow.config.ACCESS_TOKEN_EXPIRE_MINUTES apply
    import studyflow.config as _cfg
    expire = datetime.now(UTC) + timedelta(minutes=_cfg.ACCESS_TOKEN_EXPIRE_MINUTES)
    claims["exp"] = int(expire.timestamp())  # exp is a Unix timestamp (RFC 7519)
    return jwt.encode(claims, SECRET_KEY, algorithm=ALGORITHM)


def _extract_token(authorization: Optional[str], token_query: Optional[str]) -> Optional[str]:
    """Return token from Authorization header (Bearer ...) or token query param.
    Header has precedence.
    """
    if authorization:
        parts = authorization.split()
        if len(parts) == 2 and parts[0].lower() == "bearer":
            return parts[1]
    return token_query


def get_current_user_id(
    authorization: Optional[str] = Header(None),
    token: Optional[str] = Query(None, include_in_schema=False),
    storage: Storage = Depends(get_storage),
) -> str:
    """FastAPI dependency resolving the caller's user id from a JWT, or 401.

    A token whose user no longer exists is rejected like an invalid one.
    """
    tok = _extract_token(authorization, token)
    if not tok:
        raise HTTPException(status_code=401, detail="Not authenticated", headers={"WWW-Authenticate": "Bearer"})
    try:
        # jwt.decode validates exp automatically
        payload = jwt.decode(tok, SECRET_KEY, algorithms=[ALGORITHM])
    except ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token has expired")
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid token")
    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(status_code=401, detail="Invalid token: missing user")
    if storage.get_user(user_id) is None:
        raise HTTPException(status_code=401, detail="Unknown user")
    return user_id
