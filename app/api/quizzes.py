"""
Quiz authoring API endpoints (admin)
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Any, Dict, List, Optional
from uuid import UUID
import logging

from app.api.deps import CurrentUser, require_admin
from app.database import get_db
from app.models import Quiz, QuizQuestion
from app.models.enums import QuizStatus, DifficultyLevel
from app.schemas.question import QuestionResponse
from app.schemas.quiz import (
    QuizCreate,
    QuizUpdate,
    QuizResponse,
    QuizDetailResponse,
    QuizQuestionResponse,
    QuizQuestionsAdd,
    QuizQuestionsReorder,
    QuizQuestionUpdate,
)
from app.services.quiz_service import quiz_service


router = APIRouter(prefix="/api/admin/quizzes", tags=["quizzes"])
logger = logging.getLogger(__name__)


def _quiz_data(quiz: Quiz) -> Dict[str, Any]:
    data = QuizResponse.model_validate(quiz).model_dump()
    data["question_count"] = len(quiz.quiz_questions)
    data["total_points"] = quiz_service.total_points(quiz)
    return data


def _entry_data(entry: QuizQuestion) -> Dict[str, Any]:
    return {
        "question_id": entry.question_id,
        "order": entry.order,
        "points": entry.points,
        "effective_points": entry.effective_points,
        "question": QuestionResponse.model_validate(entry.question),
    }


def _quiz_detail(quiz: Quiz) -> QuizDetailResponse:
    return QuizDetailResponse(
        **_quiz_data(quiz),
        questions=[_entry_data(entry) for entry in quiz.quiz_questions],
    )


@router.post("", response_model=QuizDetailResponse, status_code=201)
async def create_quiz(
    data: QuizCreate,
    db: Session = Depends(get_db),
    admin: CurrentUser = Depends(require_admin),
):
    """
    Create a quiz

    Policy fields:
    - time_limit (minutes), max_attempts
    - negative_marking with negative_points per wrong answer
    - random_order, show_answers, check_answer_enabled
    - start_time / end_time active window
    """
    quiz = quiz_service.create_quiz(db, data, creator_id=admin.id)
    return _quiz_detail(quiz)


@router.get("", response_model=List[QuizResponse])
async def list_quizzes(
    status: Optional[QuizStatus] = None,
    offset: int = Query(0, ge=0),
    limit: int = Query(50, ge=1),
    db: Session = Depends(get_db),
    admin: CurrentUser = Depends(require_admin),
):
    quizzes = quiz_service.list_quizzes(db, status=status, offset=offset, limit=limit)
    return [QuizResponse(**_quiz_data(quiz)) for quiz in quizzes]


@router.get("/{quiz_id}", response_model=QuizDetailResponse)
async def get_quiz(
    quiz_id: UUID,
    db: Session = Depends(get_db),
    admin: CurrentUser = Depends(require_admin),
):
    return _quiz_detail(quiz_service.get_quiz(db, quiz_id))


@router.patch("/{quiz_id}", response_model=QuizDetailResponse)
async def update_quiz(
    quiz_id: UUID,
    data: QuizUpdate,
    db: Session = Depends(get_db),
    admin: CurrentUser = Depends(require_admin),
):
    return _quiz_detail(quiz_service.update_quiz(db, quiz_id, data))


@router.delete("/{quiz_id}", status_code=204)
async def delete_quiz(
    quiz_id: UUID,
    db: Session = Depends(get_db),
    admin: CurrentUser = Depends(require_admin),
):
    """Delete a quiz together with its question list, attempts and answers"""
    logger.info(f"Admin {admin.id} deleting quiz {quiz_id}")
    quiz_service.delete_quiz(db, quiz_id)


@router.get("/{quiz_id}/questions", response_model=List[QuizQuestionResponse])
async def list_quiz_questions(
    quiz_id: UUID,
    db: Session = Depends(get_db),
    admin: CurrentUser = Depends(require_admin),
):
    quiz = quiz_service.get_quiz(db, quiz_id)
    return [_entry_data(entry) for entry in quiz.quiz_questions]


@router.post("/{quiz_id}/questions", response_model=QuizDetailResponse)
async def add_quiz_questions(
    quiz_id: UUID,
    data: QuizQuestionsAdd,
    db: Session = Depends(get_db),
    admin: CurrentUser = Depends(require_admin),
):
    """Append questions to the end of the quiz, with optional point overrides"""
    return _quiz_detail(quiz_service.add_questions(db, quiz_id, data.questions))


@router.put("/{quiz_id}/questions/reorder", response_model=QuizDetailResponse)
async def reorder_quiz_questions(
    quiz_id: UUID,
    data: QuizQuestionsReorder,
    db: Session = Depends(get_db),
    admin: CurrentUser = Depends(require_admin),
):
    """Persist a new question order; must list every assigned question once"""
    return _quiz_detail(quiz_service.reorder_questions(db, quiz_id, data.question_ids))


@router.patch("/{quiz_id}/questions/{question_id}", response_model=QuizQuestionResponse)
async def update_quiz_question(
    quiz_id: UUID,
    question_id: UUID,
    data: QuizQuestionUpdate,
    db: Session = Depends(get_db),
    admin: CurrentUser = Depends(require_admin),
):
    entry = quiz_service.update_quiz_question(db, quiz_id, question_id, data.points)
    return _entry_data(entry)


@router.delete("/{quiz_id}/questions/{question_id}", response_model=QuizDetailResponse)
async def remove_quiz_question(
    quiz_id: UUID,
    question_id: UUID,
    db: Session = Depends(get_db),
    admin: CurrentUser = Depends(require_admin),
):
    return _quiz_detail(quiz_service.remove_question(db, quiz_id, question_id))


@router.get("/{quiz_id}/available-questions", response_model=List[QuestionResponse])
async def available_questions(
    quiz_id: UUID,
    difficulty: Optional[DifficultyLevel] = None,
    search: Optional[str] = None,
    db: Session = Depends(get_db),
    admin: CurrentUser = Depends(require_admin),
):
    """Active questions that are not yet part of the quiz"""
    return quiz_service.available_questions(db, quiz_id, difficulty=difficulty, search=search)
