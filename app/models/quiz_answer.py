"""
QuizAnswer model - latest answer per (attempt, question)
"""
from sqlalchemy import Column, Text, Float, Integer, Boolean, TIMESTAMP, Uuid, ForeignKey, UniqueConstraint, func
from sqlalchemy.orm import relationship
from app.database import Base
import uuid


class QuizAnswer(Base):
    """
    Quiz answers table - unique per attempt and question, overwritten on re-answer
    """
    __tablename__ = "quiz_answers"
    __table_args__ = (
        UniqueConstraint("attempt_id", "question_id", name="uq_attempt_question"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    attempt_id = Column(Uuid(as_uuid=True), ForeignKey("quiz_attempts.id", ondelete="CASCADE"), nullable=False, index=True)
    question_id = Column(Uuid(as_uuid=True), ForeignKey("questions.id", ondelete="CASCADE"), nullable=False)
    user_answer = Column(Text, nullable=False)
    is_correct = Column(Boolean)
    points_earned = Column(Float)
    time_spent = Column(Integer)  # seconds
    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())

    attempt = relationship("QuizAttempt", back_populates="answers")
    question = relationship("Question")

    def __repr__(self):
        return f"<QuizAnswer(attempt_id={self.attempt_id}, question_id={self.question_id}, correct={self.is_correct})>"
