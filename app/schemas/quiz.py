"""
Pydantic schemas for quiz authoring
"""
from pydantic import BaseModel, Field, field_validator, model_validator
from typing import List, Optional
from uuid import UUID
from datetime import datetime

from app.models.enums import QuizStatus, DifficultyLevel
from app.schemas.question import QuestionResponse
from app.utils.timeutils import to_naive_utc


class QuizPolicy(BaseModel):
    """Policy fields shared by create and update"""
    time_limit: Optional[int] = Field(None, gt=0, description="Time limit in minutes")
    max_attempts: Optional[int] = Field(None, gt=0)
    negative_marking: Optional[bool] = None
    negative_points: Optional[float] = Field(None, ge=0, description="Penalty per wrong answer")
    random_order: Optional[bool] = None
    show_answers: Optional[bool] = None
    check_answer_enabled: Optional[bool] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None

    @field_validator("start_time", "end_time")
    @classmethod
    def store_as_utc(cls, value):
        return to_naive_utc(value)

    @model_validator(mode="after")
    def check_window(self):
        if self.start_time and self.end_time and self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self


class QuizCreate(QuizPolicy):
    """Schema for creating a quiz"""
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    status: QuizStatus = QuizStatus.DRAFT
    difficulty: DifficultyLevel = DifficultyLevel.MEDIUM
    negative_marking: bool = False
    random_order: bool = False
    show_answers: bool = False
    check_answer_enabled: bool = False


class QuizUpdate(QuizPolicy):
    """Partial quiz update"""
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    status: Optional[QuizStatus] = None
    difficulty: Optional[DifficultyLevel] = None


class QuizResponse(BaseModel):
    """Quiz with policy fields"""
    id: UUID
    title: str
    description: Optional[str] = None
    status: QuizStatus
    difficulty: DifficultyLevel
    time_limit: Optional[int] = None
    max_attempts: Optional[int] = None
    negative_marking: bool
    negative_points: Optional[float] = None
    random_order: bool
    show_answers: bool
    check_answer_enabled: bool
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    creator_id: Optional[str] = None
    question_count: int = 0
    total_points: float = 0.0

    class Config:
        from_attributes = True


class QuizQuestionResponse(BaseModel):
    """A question as assigned to a quiz"""
    question_id: UUID
    order: int
    points: Optional[float] = None  # per-quiz override
    effective_points: float
    question: QuestionResponse

    class Config:
        from_attributes = True


class QuizDetailResponse(QuizResponse):
    """Quiz plus its ordered questions"""
    questions: List[QuizQuestionResponse]


class QuizQuestionAssignment(BaseModel):
    question_id: UUID
    points: Optional[float] = Field(None, gt=0)


class QuizQuestionsAdd(BaseModel):
    """Questions to append to a quiz, in the given order"""
    questions: List[QuizQuestionAssignment] = Field(..., min_length=1)


class QuizQuestionsReorder(BaseModel):
    """Full new ordering of a quiz's questions"""
    question_ids: List[UUID] = Field(..., min_length=1)


class QuizQuestionUpdate(BaseModel):
    """Set (or clear with null) the per-quiz point override"""
    points: Optional[float] = Field(None, gt=0)
