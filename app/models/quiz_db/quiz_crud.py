import json
import logging
from datetime import datetime
from typing import Any, List, Optional

from sqlalchemy import and_
from sqlalchemy.dialects import mysql, postgresql, sqlite
from sqlalchemy.orm import Session

from app.models.quiz_db.quiz_attempt_db import QuizAttempt
from app.models.quiz_db.quiz_db import Quiz
from app.schemas.quiz.quiz_base import Question, QuizDetail, QuizHistoryItem, dump_questions

logger = logging.getLogger(__name__)

_UPSERT_COLUMNS = ("answers_json", "score", "is_complete")


def _loads(raw: Optional[str]) -> Any:
    if not raw:
        return None
    try:
        return json.loads(raw)
    except ValueError:
        return None


def count_questions(questions_json: Optional[str]) -> int:
    questions = _loads(questions_json)
    return len(questions) if isinstance(questions, list) else 0


def create_quiz(db: Session, user_id: int, prompt: str, questions: List[Question]) -> Quiz:
    quiz = Quiz(
        user_id=user_id,
        prompt=prompt,
        questions_json=json.dumps(dump_questions(questions)),
    )
    db.add(quiz)
    db.commit()
    db.refresh(quiz)
    return quiz


def get_user_quiz(db: Session, user_id: int, quiz_id: int) -> Optional[Quiz]:
    return db.query(Quiz).filter(Quiz.id == quiz_id, Quiz.user_id == user_id).first()


def get_user_attempt(db: Session, user_id: int, quiz_id: int) -> Optional[QuizAttempt]:
    return (
        db.query(QuizAttempt)
        .filter(QuizAttempt.quiz_id == quiz_id, QuizAttempt.user_id == user_id)
        .first()
    )


def save_attempt(
    db: Session,
    user_id: int,
    quiz_id: int,
    answers_json: Optional[str],
    score: int,
    is_complete: bool,
) -> None:
    """Insert the attempt for (user, quiz) or overwrite the existing one.

    Runs as a single INSERT ... ON CONFLICT (ON DUPLICATE KEY on MySQL)
    statement against the (user_id, quiz_id) unique constraint. ``completed_at`` moves to now
    whenever ``is_complete`` is true and is otherwise left untouched, so a
    finished attempt stays finished-at even if it is saved again as
    incomplete.
    """
    now = datetime.utcnow()
    values = dict(
        user_id=user_id,
        quiz_id=quiz_id,
        answers_json=answers_json,
        score=score,
        is_complete=is_complete,
        started_at=now,
        completed_at=now if is_complete else None,
    )
    columns = _UPSERT_COLUMNS + (("completed_at",) if is_complete else ())

    dialect = db.get_bind().dialect.name
    if dialect == "mysql":
        stmt = mysql.insert(QuizAttempt).values(**values)
        stmt = stmt.on_duplicate_key_update({name: stmt.inserted[name] for name in columns})
    else:
        insert = postgresql.insert if dialect == "postgresql" else sqlite.insert
        stmt = insert(QuizAttempt).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=["user_id", "quiz_id"],
            set_={name: stmt.excluded[name] for name in columns},
        )
    db.execute(stmt)
    db.commit()


def list_history(db: Session, user_id: int) -> List[QuizHistoryItem]:
    rows = (
        db.query(Quiz, QuizAttempt)
        .outerjoin(
            QuizAttempt,
            and_(QuizAttempt.quiz_id == Quiz.id, QuizAttempt.user_id == user_id),
        )
        .filter(Quiz.user_id == user_id)
        .order_by(Quiz.created_at.desc(), Quiz.id.desc())
        .all()
    )

    history = []
    for quiz, attempt in rows:
        history.append(
            QuizHistoryItem(
                quiz_id=quiz.id,
                prompt=quiz.prompt,
                score=(attempt.score or 0) if attempt else 0,
                date=quiz.created_at,
                is_complete=bool(attempt.is_complete) if attempt else False,
                total_questions=count_questions(quiz.questions_json),
                questions_json=quiz.questions_json,
            )
        )
    return history


def get_quiz_detail(db: Session, user_id: int, quiz_id: int) -> Optional[QuizDetail]:
    quiz = get_user_quiz(db, user_id, quiz_id)
    if not quiz:
        return None

    questions = _loads(quiz.questions_json)
    if questions is None:
        logger.warning("Quiz %s has unreadable questions_json", quiz.id)

    attempt = get_user_attempt(db, user_id, quiz.id)
    if not attempt:
        return QuizDetail(quiz_id=quiz.id, prompt=quiz.prompt, questions=questions, date=quiz.created_at)

    return QuizDetail(
        quiz_id=quiz.id,
        prompt=quiz.prompt,
        questions=questions,
        user_answers=_loads(attempt.answers_json),
        score=attempt.score or 0,
        is_complete=bool(attempt.is_complete),
        date=quiz.created_at,
    )
