"""
Pydantic schemas for quiz attempts, answers and results
"""
from pydantic import BaseModel, Field
from typing import List, Optional
from uuid import UUID
from datetime import datetime

from app.models.enums import AttemptStatus, QuestionType


class AttemptQuestion(BaseModel):
    """Question as presented to a quiz taker - no correct answers"""
    question_id: UUID
    position: int
    title: str
    content: str
    type: QuestionType
    options: List[str]
    points: float


class SavedAnswer(BaseModel):
    """Answer stored on an attempt"""
    question_id: UUID
    user_answer: str
    time_spent: Optional[int] = None
    is_correct: Optional[bool] = None  # only revealed when the quiz allows it


class AnswerSubmission(BaseModel):
    """Schema for answering one question"""
    question_id: UUID
    user_answer: str = Field(..., min_length=1, description="Answer text; 'A|C' for multi-select")
    time_spent: Optional[int] = Field(None, ge=0, description="Seconds spent on the question")


class AnswerResponse(BaseModel):
    """Response after saving an answer"""
    message: str
    question_id: UUID
    is_correct: Optional[bool] = None


class QuizSubmitRequest(BaseModel):
    """Final submission, optionally carrying answers not yet saved"""
    answers: List[AnswerSubmission] = Field(default_factory=list)


class AttemptSummary(BaseModel):
    """Attempt row without questions"""
    id: UUID
    quiz_id: UUID
    user_id: str
    status: AttemptStatus
    score: Optional[float] = None
    total_points: Optional[float] = None
    time_taken: Optional[int] = None
    time_exceeded: bool = False
    started_at: Optional[datetime] = None
    submitted_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class AttemptResponse(AttemptSummary):
    """Attempt with the questions in presented order and saved answers"""
    quiz_title: str
    deadline: Optional[datetime] = None
    questions: List[AttemptQuestion]
    answers: List[SavedAnswer]


class AnswerBreakdown(BaseModel):
    """Grading details for a single question"""
    question_id: UUID
    title: str
    content: str
    options: List[str]
    user_answer: Optional[str] = None
    correct_answers: List[str]
    is_correct: bool
    points_earned: float
    max_points: float
    explanation: Optional[str] = None


class AttemptResult(BaseModel):
    """Result of a submitted attempt"""
    attempt_id: UUID
    quiz_id: UUID
    quiz_title: str
    score: float
    total_points: float
    score_display: str  # "8.5/10.0"
    percentage: float
    time_taken: Optional[int] = None
    time_exceeded: bool
    submitted_at: datetime
    show_answers: bool
    answers: Optional[List[AnswerBreakdown]] = None
