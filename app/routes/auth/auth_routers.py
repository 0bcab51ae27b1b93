import logging

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.exceptions import ConflictError, HashingError
from app.core.security import (
    verify_password,
    set_session_cookie,
    clear_session_cookie,
    get_session_token,
    get_current_user,
)
from app.core.sessions import SessionStore, get_session_store
from app.models.user_db.user_db import User
from app.models.user_db.user_db_crud import create_user, get_user_by_email
from app.schemas.login.login_base import SignupRequest, LoginRequest
from app.schemas.users.user_base import AuthResponse, UserOut

logger = logging.getLogger(__name__)

auth_router = APIRouter(prefix="/api", tags=["Auth"])


@auth_router.post("/signup", response_model=AuthResponse)
def signup(
    payload: SignupRequest,
    response: Response,
    db: Session = Depends(get_db),
    sessions: SessionStore = Depends(get_session_store),
):
    if not payload.email or not payload.password:
        raise HTTPException(status_code=400, detail="Email and password are required")

    if get_user_by_email(db, payload.email):
        raise HTTPException(status_code=400, detail="User already exists")

    try:
        user = create_user(db, payload.email, payload.password, payload.name)
    except ConflictError as exc:
        logger.info("Error creating user: %s", exc)
        raise HTTPException(status_code=400, detail="User already exists")
    except HashingError:
        raise HTTPException(status_code=500, detail="Error hashing password")

    set_session_cookie(response, sessions.create(user.id))
    return AuthResponse(user=UserOut.model_validate(user))


@auth_router.post("/login", response_model=AuthResponse)
def login(
    payload: LoginRequest,
    response: Response,
    db: Session = Depends(get_db),
    sessions: SessionStore = Depends(get_session_store),
):
    user = get_user_by_email(db, payload.email)
    if not user or not verify_password(payload.password, user.hashed_password):
        logger.info("Failed login attempt")
        raise HTTPException(status_code=401, detail="Invalid credentials")

    set_session_cookie(response, sessions.create(user.id))
    return AuthResponse(user=UserOut.model_validate(user))


@auth_router.post("/logout")
def logout(
    response: Response,
    token: str | None = Depends(get_session_token),
    sessions: SessionStore = Depends(get_session_store),
):
    if token:
        sessions.revoke(token)
    clear_session_cookie(response)
    return {"status": "ok"}


@auth_router.get("/user-profile", response_model=UserOut)
def user_profile(current_user: User = Depends(get_current_user)):
    return current_user
