"""
Quiz attempt API endpoints - start, answer, submit, results
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List, Optional
from uuid import UUID
import logging

from app.api.deps import CurrentUser, get_current_user
from app.database import get_db
from app.schemas.attempt import (
    AnswerSubmission,
    AnswerResponse,
    AttemptResponse,
    AttemptResult,
    AttemptSummary,
    QuizSubmitRequest,
)
from app.services.attempt_service import attempt_service

router = APIRouter(prefix="/api", tags=["attempts"])
logger = logging.getLogger(__name__)


@router.post("/quizzes/{quiz_id}/attempts", response_model=AttemptResponse, status_code=201)
async def start_attempt(
    quiz_id: UUID,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(get_current_user)
):
    """
    Start an attempt at a quiz

    - Fails with 409 if an attempt is already in progress, the quiz is outside
      its active window, or the maximum number of attempts is used up
    - Questions come back in presentation order (shuffled if the quiz says so)
    """
    attempt = attempt_service.start_attempt(db, user.id, quiz_id)
    return attempt_service.describe_attempt(db, attempt)


@router.get("/attempts", response_model=List[AttemptSummary])
async def list_attempts(
    quiz_id: Optional[UUID] = None,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(get_current_user)
):
    """The caller's attempts, newest first"""
    return attempt_service.list_attempts(db, user.id, quiz_id=quiz_id)


@router.get("/attempts/{attempt_id}", response_model=AttemptResponse)
async def get_attempt(
    attempt_id: UUID,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(get_current_user)
):
    attempt = attempt_service.get_attempt(db, user.id, attempt_id)
    return attempt_service.describe_attempt(db, attempt)


@router.put("/attempts/{attempt_id}/answers", response_model=AnswerResponse)
async def save_answer(
    attempt_id: UUID,
    submission: AnswerSubmission,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(get_current_user)
):
    """
    Save (or overwrite) the answer to one question

    Correctness is only returned when the quiz has check_answer_enabled.
    """
    answer = attempt_service.answer_question(db, user.id, attempt_id, submission)
    reveal = answer.attempt.quiz.check_answer_enabled

    return AnswerResponse(
        message="Answer saved successfully",
        question_id=answer.question_id,
        is_correct=answer.is_correct if reveal else None
    )


@router.post("/attempts/{attempt_id}/submit", response_model=AttemptResult)
async def submit_attempt(
    attempt_id: UUID,
    payload: Optional[QuizSubmitRequest] = None,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(get_current_user)
):
    """
    Submit an attempt and get the result

    Unanswered questions score zero but still count toward the total.
    A second submit is rejected with 409 invalid_state.
    """
    answers = payload.answers if payload else []
    attempt = attempt_service.submit_attempt(db, user.id, attempt_id, answers)
    return attempt_service.get_result(db, user.id, attempt.id)


@router.get("/attempts/{attempt_id}/result", response_model=AttemptResult)
async def get_result(
    attempt_id: UUID,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(get_current_user)
):
    return attempt_service.get_result(db, user.id, attempt_id)
