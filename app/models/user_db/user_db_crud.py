from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from app.models.user_db.user_db import User
from app.core.exceptions import ConflictError
from app.core.security import hash_password


def default_name_for(email: str) -> str:
    return email.split("@")[0]


def create_user(db: Session, email: str, password: str, name: str | None = None) -> User:
    db_user = User(
        email=email,
        name=name or default_name_for(email),
        hashed_password=hash_password(password),
    )
    db.add(db_user)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError(f"User {email} already exists") from exc
    db.refresh(db_user)
    return db_user


def get_user_by_email(db: Session, email: str):
    return db.query(User).filter(User.email == email).first()


def get_user_by_id(db: Session, user_id: int):
    return db.query(User).filter(User.id == user_id).first()
