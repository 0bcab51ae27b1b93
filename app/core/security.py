import logging
from typing import Optional

from fastapi import Cookie, Depends, HTTPException, Response
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import get_db
from app.core.exceptions import HashingError
from app.core.sessions import SessionStore, get_session_store
from app.models.user_db.user_db import User

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

SESSION_MAX_AGE = settings.SESSION_TTL_DAYS * 24 * 60 * 60


# Password hashing
def hash_password(password: str) -> str:
    try:
        return pwd_context.hash(password)
    except (ValueError, TypeError, RuntimeError) as exc:
        raise HashingError("Error hashing password") from exc


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        # unrecognized or corrupt stored hash
        return False


# Session cookie
def set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=SESSION_MAX_AGE,
        path="/",
        httponly=True,
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(key=settings.SESSION_COOKIE_NAME, path="/")


def get_session_token(
    askify_session: Optional[str] = Cookie(default=None, alias=settings.SESSION_COOKIE_NAME),
) -> Optional[str]:
    return askify_session


def get_current_user(
    token: Optional[str] = Depends(get_session_token),
    sessions: SessionStore = Depends(get_session_store),
    db: Session = Depends(get_db),
) -> User:
    if not token:
        raise HTTPException(status_code=401, detail="Unauthorized")

    user_id = sessions.resolve(token)
    if user_id is None:
        raise HTTPException(status_code=401, detail="Unauthorized")

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        # account removed while the session was still live
        sessions.revoke(token)
        raise HTTPException(status_code=401, detail="Unauthorized")

    return user
