"""
Quiz result analytics API endpoints (admin)
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List
from uuid import UUID
import logging

from app.api.deps import CurrentUser, require_admin
from app.database import get_db
from app.schemas.analytics import LeaderboardEntry, ResultMatrixRow, QuizSummary
from app.services.analytics_service import analytics_service

router = APIRouter(prefix="/api/admin/analytics", tags=["analytics"])
logger = logging.getLogger(__name__)


@router.get("/quizzes/{quiz_id}/leaderboard", response_model=List[LeaderboardEntry])
async def get_leaderboard(
    quiz_id: UUID,
    db: Session = Depends(get_db),
    admin: CurrentUser = Depends(require_admin)
):
    """
    Submitted attempts ranked by score

    Ties go to the earlier submission.
    """
    logger.info(f"Fetching leaderboard for quiz {quiz_id}")
    return analytics_service.get_leaderboard(db, quiz_id)


@router.get("/quizzes/{quiz_id}/result-matrix", response_model=List[ResultMatrixRow])
async def get_result_matrix(
    quiz_id: UUID,
    db: Session = Depends(get_db),
    admin: CurrentUser = Depends(require_admin)
):
    """
    Every attempt on the quiz with status, score, time and error count
    """
    logger.info(f"Fetching result matrix for quiz {quiz_id}")
    return analytics_service.get_result_matrix(db, quiz_id)


@router.get("/quizzes/{quiz_id}/summary", response_model=QuizSummary)
async def get_quiz_summary(
    quiz_id: UUID,
    db: Session = Depends(get_db),
    admin: CurrentUser = Depends(require_admin)
):
    """
    Aggregate results for a quiz

    Returns:
    - Submitted attempts and unique users
    - Average score, percentage and time taken
    - Correct rate per question
    """
    return analytics_service.get_quiz_summary(db, quiz_id)
