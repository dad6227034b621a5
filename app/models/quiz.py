"""
Quiz models - quiz policy and its ordered question list
"""
from sqlalchemy import (
    Column, String, Text, Float, Integer, Boolean, Enum, TIMESTAMP, Uuid,
    ForeignKey, UniqueConstraint, func
)
from sqlalchemy.orm import relationship
from app.database import Base
from app.models.enums import QuizStatus, DifficultyLevel
import uuid


class Quiz(Base):
    """
    Quizzes table - policy fields applied by the attempt orchestrator
    """
    __tablename__ = "quizzes"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    title = Column(String(255), nullable=False)
    description = Column(Text)
    status = Column(Enum(QuizStatus, name="quiz_status"), nullable=False, default=QuizStatus.DRAFT)
    difficulty = Column(
        Enum(DifficultyLevel, name="difficulty_level"),
        nullable=False,
        default=DifficultyLevel.MEDIUM
    )
    time_limit = Column(Integer)  # minutes
    max_attempts = Column(Integer)
    negative_marking = Column(Boolean, nullable=False, default=False)
    negative_points = Column(Float)  # penalty per wrong answer
    random_order = Column(Boolean, nullable=False, default=False)
    show_answers = Column(Boolean, nullable=False, default=False)
    check_answer_enabled = Column(Boolean, nullable=False, default=False)
    start_time = Column(TIMESTAMP)
    end_time = Column(TIMESTAMP)
    creator_id = Column(String(64))
    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())

    quiz_questions = relationship(
        "QuizQuestion",
        back_populates="quiz",
        order_by="QuizQuestion.order",
        cascade="all, delete-orphan"
    )
    attempts = relationship("QuizAttempt", back_populates="quiz", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Quiz(id={self.id}, title={self.title}, status={self.status})>"


class QuizQuestion(Base):
    """
    Quiz questions table - explicit order index and per-quiz point override
    """
    __tablename__ = "quiz_questions"
    __table_args__ = (
        UniqueConstraint("quiz_id", "question_id", name="uq_quiz_question"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    quiz_id = Column(Uuid(as_uuid=True), ForeignKey("quizzes.id", ondelete="CASCADE"), nullable=False, index=True)
    question_id = Column(Uuid(as_uuid=True), ForeignKey("questions.id", ondelete="CASCADE"), nullable=False)
    order = Column(Integer, nullable=False)
    points = Column(Float)  # None falls back to Question.points

    quiz = relationship("Quiz", back_populates="quiz_questions")
    question = relationship("Question", lazy="joined")

    @property
    def effective_points(self) -> float:
        return self.points if self.points is not None else self.question.points

    def __repr__(self):
        return f"<QuizQuestion(quiz_id={self.quiz_id}, question_id={self.question_id}, order={self.order})>"
