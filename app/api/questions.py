"""
Question bank API endpoints (admin)
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from uuid import UUID
import logging

from app.api.deps import CurrentUser, require_admin
from app.database import get_db
from app.models.enums import QuestionType, DifficultyLevel
from app.schemas.question import QuestionCreate, QuestionUpdate, QuestionResponse
from app.services.question_service import question_service

router = APIRouter(prefix="/api/admin/questions", tags=["questions"])
logger = logging.getLogger(__name__)


@router.post("", response_model=QuestionResponse, status_code=201)
async def create_question(
    data: QuestionCreate,
    db: Session = Depends(get_db),
    admin: CurrentUser = Depends(require_admin)
):
    """
    Author a new question

    - Single-choice: at least 2 options, one correct
    - Multi-select: at least 3 options, correct answers are a subset
    - True/false: exactly 2 options
    - Fill-in-blank: no options, one accepted answer
    """
    logger.info(f"Admin {admin.id} creating {data.type.value} question")
    return question_service.create_question(db, data)


@router.get("", response_model=List[QuestionResponse])
async def list_questions(
    type: Optional[QuestionType] = None,
    difficulty: Optional[DifficultyLevel] = None,
    is_active: Optional[bool] = None,
    search: Optional[str] = None,
    offset: int = Query(0, ge=0),
    limit: int = Query(50, ge=1),
    db: Session = Depends(get_db),
    admin: CurrentUser = Depends(require_admin)
):
    """List questions, newest first"""
    return question_service.list_questions(
        db,
        question_type=type,
        difficulty=difficulty,
        is_active=is_active,
        search=search,
        offset=offset,
        limit=limit
    )


@router.get("/{question_id}", response_model=QuestionResponse)
async def get_question(
    question_id: UUID,
    db: Session = Depends(get_db),
    admin: CurrentUser = Depends(require_admin)
):
    return question_service.get_question(db, question_id)


@router.patch("/{question_id}", response_model=QuestionResponse)
async def update_question(
    question_id: UUID,
    data: QuestionUpdate,
    db: Session = Depends(get_db),
    admin: CurrentUser = Depends(require_admin)
):
    """Partially update a question; the merged result must still be valid"""
    return question_service.update_question(db, question_id, data)


@router.delete("/{question_id}", response_model=QuestionResponse)
async def deactivate_question(
    question_id: UUID,
    db: Session = Depends(get_db),
    admin: CurrentUser = Depends(require_admin)
):
    """Deactivate a question; existing answers keep referring to it"""
    return question_service.deactivate_question(db, question_id)
