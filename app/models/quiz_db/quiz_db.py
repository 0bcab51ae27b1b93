from datetime import datetime
from sqlalchemy import Column, Integer, Text, DateTime, ForeignKey
from app.core.database import Base


class Quiz(Base):
    __tablename__ = "quizzes"

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    prompt = Column(Text, nullable=False)
    questions_json = Column(Text, nullable=False)  # [{ question, options, correctAnswer, explanation }]
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
