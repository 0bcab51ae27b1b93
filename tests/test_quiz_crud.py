from types import SimpleNamespace

import pytest
from sqlalchemy.dialects import mysql

from app.core import database

from app.models.quiz_db.quiz_attempt_db import QuizAttempt
from app.models.quiz_db.quiz_crud import (
    count_questions,
    create_quiz,
    get_quiz_detail,
    list_history,
    save_attempt,
)
from app.models.user_db.user_db_crud import create_user
from app.core.exceptions import ConflictError
from app.schemas.quiz.quiz_base import Question


@pytest.fixture()
def owner(db_session):
    return create_user(db_session, "owner@x.com", "pw")


@pytest.fixture()
def quiz(db_session, owner):
    questions = [Question(question="Q?", options=["a", "b"], correctAnswer="a")]
    return create_quiz(db_session, owner.id, "Letters", questions)


def _attempts(db_session):
    db_session.expire_all()
    return db_session.query(QuizAttempt).all()


def test_create_user_conflict_on_duplicate_email(db_session, owner):
    with pytest.raises(ConflictError):
        create_user(db_session, "owner@x.com", "other", "Other")


def test_first_complete_save_sets_completed_at(db_session, owner, quiz):
    save_attempt(db_session, owner.id, quiz.id, '{"0": "a"}', 1, True)

    (attempt,) = _attempts(db_session)
    assert attempt.is_complete is True
    assert attempt.completed_at is not None


def test_completed_at_is_sticky(db_session, owner, quiz):
    save_attempt(db_session, owner.id, quiz.id, '{"0": "b"}', 0, False)
    (attempt,) = _attempts(db_session)
    assert attempt.completed_at is None

    save_attempt(db_session, owner.id, quiz.id, '{"0": "a"}', 1, True)
    (attempt,) = _attempts(db_session)
    completed_at = attempt.completed_at
    assert completed_at is not None

    save_attempt(db_session, owner.id, quiz.id, '{"0": "b"}', 0, False)
    (attempt,) = _attempts(db_session)
    assert attempt.is_complete is False
    assert attempt.score == 0
    assert attempt.answers_json == '{"0": "b"}'
    assert attempt.completed_at == completed_at


def test_started_at_survives_updates(db_session, owner, quiz):
    save_attempt(db_session, owner.id, quiz.id, None, 0, False)
    (attempt,) = _attempts(db_session)
    started_at = attempt.started_at

    save_attempt(db_session, owner.id, quiz.id, "{}", 1, True)
    (attempt,) = _attempts(db_session)
    assert attempt.started_at == started_at


def test_detail_without_attempt_is_zero_valued(db_session, owner, quiz):
    detail = get_quiz_detail(db_session, owner.id, quiz.id)
    assert detail.score == 0
    assert detail.is_complete is False
    assert detail.user_answers is None
    assert detail.questions == [{"question": "Q?", "options": ["a", "b"], "correctAnswer": "a"}]


def test_detail_for_wrong_owner_is_none(db_session, quiz):
    other = create_user(db_session, "other@x.com", "pw")
    assert get_quiz_detail(db_session, other.id, quiz.id) is None


def test_history_for_owner(db_session, owner, quiz):
    (item,) = list_history(db_session, owner.id)
    assert item.quiz_id == quiz.id
    assert item.total_questions == 1


def test_count_questions_degrades_to_zero():
    assert count_questions('[{"question": "a"}, {"question": "b"}]') == 2
    assert count_questions("not json") == 0
    assert count_questions('{"question": "a"}') == 0
    assert count_questions("") == 0
    assert count_questions(None) == 0


class _CapturingSession:
    """Looks like a MySQL-bound session and keeps the executed statement."""

    def __init__(self):
        self.statements = []
        self.committed = False

    def get_bind(self):
        return SimpleNamespace(dialect=SimpleNamespace(name="mysql"))

    def execute(self, stmt):
        self.statements.append(stmt)

    def commit(self):
        self.committed = True


def _mysql_sql(stmt):
    return str(stmt.compile(dialect=mysql.dialect()))


def test_mysql_upsert_uses_on_duplicate_key():
    db = _CapturingSession()
    save_attempt(db, 1, 2, "{}", 3, True)

    (stmt,) = db.statements
    sql = _mysql_sql(stmt)
    assert "ON DUPLICATE KEY UPDATE" in sql
    update_clause = sql.split("ON DUPLICATE KEY UPDATE", 1)[1]
    assert "completed_at" in update_clause
    assert "started_at" not in update_clause
    assert db.committed


def test_mysql_incomplete_save_leaves_completed_at_alone():
    db = _CapturingSession()
    save_attempt(db, 1, 2, "{}", 0, False)

    update_clause = _mysql_sql(db.statements[0]).split("ON DUPLICATE KEY UPDATE", 1)[1]
    assert "completed_at" not in update_clause
    assert "score" in update_clause


def test_build_engine_rejects_databases_without_upsert(monkeypatch):
    fake_engine = SimpleNamespace(dialect=SimpleNamespace(name="mssql"))
    monkeypatch.setattr(database, "create_engine", lambda url, **kwargs: fake_engine)

    with pytest.raises(RuntimeError, match="Unsupported database"):
        database.build_engine("mssql+pyodbc://user@host/db")
