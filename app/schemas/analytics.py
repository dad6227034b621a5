"""
Pydantic schemas for analytics endpoints
"""
from pydantic import BaseModel
from typing import List, Optional
from uuid import UUID
from datetime import datetime

from app.models.enums import AttemptStatus


class LeaderboardEntry(BaseModel):
    """One ranked submitted attempt"""
    rank: int
    attempt_id: UUID
    user_id: str
    score: float
    total_points: float
    time_taken: int
    submitted_at: Optional[datetime] = None


class ResultMatrixRow(BaseModel):
    """Per-attempt result line for admins"""
    attempt_id: UUID
    user_id: str
    status: AttemptStatus
    score: float
    time_taken: int
    answered: int
    errors: int
    submitted_at: Optional[datetime] = None


class QuestionStats(BaseModel):
    """How a question fared across submitted attempts"""
    question_id: UUID
    title: str
    order: int
    answered: int
    correct: int
    correct_rate: float


class QuizSummary(BaseModel):
    """Aggregate analytics for a quiz"""
    quiz_id: UUID
    quiz_title: str
    submitted_attempts: int
    unique_users: int
    avg_score: float
    avg_percentage: float
    avg_time_taken: int
    questions: List[QuestionStats]
