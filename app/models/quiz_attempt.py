"""
QuizAttempt model - one user's run through one quiz
"""
from sqlalchemy import Column, String, Float, Integer, Boolean, Enum, JSON, TIMESTAMP, Uuid, ForeignKey, Index, func, text
from sqlalchemy.orm import relationship
from app.database import Base
from app.models.enums import AttemptStatus
import uuid


class QuizAttempt(Base):
    """
    Quiz attempts table - lifecycle state, timing and aggregate score
    """
    __tablename__ = "quiz_attempts"
    __table_args__ = (
        # At most one running attempt per user and quiz
        Index(
            "uq_quiz_attempts_in_progress",
            "user_id",
            "quiz_id",
            unique=True,
            postgresql_where=text("status = 'IN_PROGRESS'"),
            sqlite_where=text("status = 'IN_PROGRESS'"),
        ),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(String(64), nullable=False, index=True)
    quiz_id = Column(Uuid(as_uuid=True), ForeignKey("quizzes.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(
        Enum(AttemptStatus, name="attempt_status"),
        nullable=False,
        default=AttemptStatus.NOT_STARTED,
        index=True
    )
    question_order = Column(JSON)  # question ids as presented to the user
    score = Column(Float)
    total_points = Column(Float)
    time_taken = Column(Integer)  # seconds
    time_exceeded = Column(Boolean, nullable=False, default=False)
    started_at = Column(TIMESTAMP)
    submitted_at = Column(TIMESTAMP)
    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())

    quiz = relationship("Quiz", back_populates="attempts")
    answers = relationship("QuizAnswer", back_populates="attempt", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<QuizAttempt(user_id={self.user_id}, quiz_id={self.quiz_id}, status={self.status}, score={self.score})>"
