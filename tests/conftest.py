"""
Shared fixtures: in-memory database, API client and data builders
"""
import os

# Must be set before the app modules create their engine
os.environ["DATABASE_URL"] = "sqlite://"

from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from app import models  # noqa: F401
from app.database import Base, SessionLocal, engine
from app.main import app as fastapi_app
from app.models.enums import QuestionType, QuizStatus
from app.schemas.question import QuestionCreate
from app.schemas.quiz import QuizCreate, QuizQuestionAssignment
from app.services.question_service import question_service
from app.services.quiz_service import quiz_service

ADMIN_HEADERS = {"X-User-Id": "admin-1", "X-User-Role": "ADMIN"}


def user_headers(user_id="student-1"):
    return {"X-User-Id": user_id, "X-User-Role": "USER"}


DEFAULT_QUESTIONS = {
    QuestionType.SINGLE_CHOICE: (["Paris", "London", "Berlin"], ["Paris"]),
    QuestionType.MULTI_SELECT: (["A", "B", "C", "D"], ["A", "C"]),
    QuestionType.TRUE_FALSE: (["True", "False"], ["True"]),
    QuestionType.FILL_IN_BLANK: ([], ["Paris"]),
}


class FakeClock:
    """Controllable replacement for utcnow"""

    def __init__(self, now=None):
        self.now = now or datetime(2026, 3, 1, 9, 0, 0)

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest.fixture(autouse=True)
def schema():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    with TestClient(fastapi_app) as test_client:
        yield test_client


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_question(db):
    def _make(question_type=QuestionType.SINGLE_CHOICE, options=None, correct=None, points=1.0, title=None):
        default_options, default_correct = DEFAULT_QUESTIONS[question_type]
        data = QuestionCreate(
            title=title or f"{question_type.value.lower()} question",
            content="Answer the question",
            type=question_type,
            options=default_options if options is None else options,
            correct_answers=default_correct if correct is None else correct,
            points=points,
        )
        return question_service.create_question(db, data)

    return _make


@pytest.fixture
def make_quiz(db):
    """
    Build a quiz; questions may be Question rows or (Question, points override) pairs
    """
    def _make(questions=(), status=QuizStatus.PUBLISHED, title="Geography", **policy):
        quiz = quiz_service.create_quiz(
            db, QuizCreate(title=title, status=status, **policy), creator_id="admin-1"
        )
        assignments = []
        for item in questions:
            question, points = item if isinstance(item, tuple) else (item, None)
            assignments.append(QuizQuestionAssignment(question_id=question.id, points=points))
        if assignments:
            quiz = quiz_service.add_questions(db, quiz.id, assignments)
        return quiz

    return _make
