from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import get_db
from app.core.exceptions import GenerationError
from app.core.security import get_current_user
from app.models.quiz_db.quiz_crud import (
    create_quiz,
    get_user_quiz,
    save_attempt,
    list_history,
    get_quiz_detail,
)
from app.models.user_db.user_db import User
from app.schemas.quiz.quiz_base import (
    MAX_ID,
    QuizRequest,
    SaveQuizRequest,
    SaveQuizResponse,
    SaveQuizAttemptRequest,
    QuizHistoryItem,
    QuizDetail,
)
from app.services.quiz_generator import generate_quiz

quiz_router = APIRouter(prefix="/api", tags=["Quiz"])


@quiz_router.post("/generate-quiz")
def generate(quiz_in: QuizRequest):
    if not settings.OPENAI_API_KEY:
        raise HTTPException(status_code=500, detail="OpenAI API key not configured")

    try:
        return generate_quiz(
            topic=quiz_in.topic,
            difficulty=quiz_in.difficulty,
            count=quiz_in.question_count,
            quiz_type=quiz_in.quiz_type,
            api_key=settings.OPENAI_API_KEY,
        )
    except GenerationError as exc:
        raise HTTPException(status_code=500, detail=exc.message)


@quiz_router.post("/save-quiz", response_model=SaveQuizResponse)
def save_quiz(
    quiz_in: SaveQuizRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    quiz = create_quiz(db, current_user.id, quiz_in.prompt, quiz_in.questions)
    return {"quiz_id": quiz.id}


@quiz_router.post("/save-quiz-attempt")
def save_quiz_attempt(
    attempt_in: SaveQuizAttemptRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if not get_user_quiz(db, current_user.id, attempt_in.quiz_id):
        raise HTTPException(status_code=404, detail="Quiz not found")

    save_attempt(
        db,
        user_id=current_user.id,
        quiz_id=attempt_in.quiz_id,
        answers_json=attempt_in.answers_json,
        score=attempt_in.score,
        is_complete=attempt_in.is_complete,
    )
    return {"status": "ok"}


@quiz_router.get("/quiz-history", response_model=List[QuizHistoryItem])
def quiz_history(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return list_history(db, current_user.id)


@quiz_router.get("/quiz-detail", response_model=QuizDetail)
def quiz_detail(
    quiz_id: int = Query(..., alias="id", ge=1, le=MAX_ID),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    detail = get_quiz_detail(db, current_user.id, quiz_id)
    if not detail:
        raise HTTPException(status_code=404, detail="Quiz not found")
    return detail
