"""
Question model - authored question definitions
"""
from sqlalchemy import Column, String, Text, Float, Boolean, Enum, JSON, TIMESTAMP, Uuid, func
from app.config import settings
from app.database import Base
from app.models.enums import QuestionType, DifficultyLevel
import uuid


class Question(Base):
    """
    Questions table - prompt, options and the delimiter-encoded correct answer
    """
    __tablename__ = "questions"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    type = Column(Enum(QuestionType, name="question_type"), nullable=False)
    options = Column(JSON, nullable=False, default=list)  # ["Paris", "London"]
    correct_answer = Column(Text, nullable=False)  # "A|C" for multi-select
    explanation = Column(Text)
    difficulty = Column(
        Enum(DifficultyLevel, name="difficulty_level"),
        nullable=False,
        default=DifficultyLevel.MEDIUM
    )
    points = Column(Float, nullable=False, default=1.0)
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())

    @property
    def correct_answers(self):
        """Correct answer tokens, split at the storage edge"""
        if self.type == QuestionType.MULTI_SELECT:
            delimiter = settings.MULTI_SELECT_DELIMITER
            return [token.strip() for token in self.correct_answer.split(delimiter) if token.strip()]
        return [self.correct_answer]

    @correct_answers.setter
    def correct_answers(self, values):
        self.correct_answer = settings.MULTI_SELECT_DELIMITER.join(values)

    def __repr__(self):
        return f"<Question(id={self.id}, type={self.type}, title={self.title})>"
