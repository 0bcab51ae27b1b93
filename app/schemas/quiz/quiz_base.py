import json
from datetime import datetime
from typing import Any, List, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter, field_validator

# largest id an INTEGER/BIGINT primary key can hold
MAX_ID = 2**63 - 1


class Question(BaseModel):
    question: str
    options: List[str]
    correctAnswer: str
    explanation: Optional[str] = None

    class Config:
        # keys the generator may add beyond these are kept as-is
        extra = "allow"


QuestionList = TypeAdapter(List[Question])


def dump_questions(questions: List[Question]) -> List[dict]:
    return [q.model_dump(exclude_unset=True) for q in questions]


class QuizRequest(BaseModel):
    topic: str
    difficulty: str = "Medium"
    question_count: int = Field(default=5, alias="questionCount", ge=1)
    quiz_type: str = Field(default="Multiple Choice", alias="quizType")

    class Config:
        populate_by_name = True


class SaveQuizRequest(BaseModel):
    prompt: str
    questions: List[Question]


class SaveQuizResponse(BaseModel):
    quiz_id: int


class SaveQuizAttemptRequest(BaseModel):
    quiz_id: int = Field(ge=1, le=MAX_ID)
    answers_json: Optional[str] = None
    score: int = 0
    is_complete: bool = False

    @field_validator("answers_json", mode="before")
    @classmethod
    def serialize_answers(cls, value: Union[str, dict, list, None]) -> Optional[str]:
        if value is None or isinstance(value, str):
            return value
        return json.dumps(value)


class QuizHistoryItem(BaseModel):
    quiz_id: int
    prompt: str
    score: int
    date: datetime
    is_complete: bool
    total_questions: int
    questions_json: str


class QuizDetail(BaseModel):
    quiz_id: int
    prompt: str
    questions: Any = None
    user_answers: Any = None
    score: int = 0
    is_complete: bool = False
    date: datetime
