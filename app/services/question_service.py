"""
Question authoring service
"""
import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import settings
from app.exceptions import NotFoundError, ValidationError
from app.models import Question
from app.models.enums import QuestionType, DifficultyLevel
from app.schemas.question import (
    QuestionCreate, QuestionUpdate, question_shape_errors, normalize_correct_answers
)

logger = logging.getLogger(__name__)


class QuestionService:
    """CRUD over the question bank; deletion only deactivates"""

    def create_question(self, db: Session, data: QuestionCreate) -> Question:
        question = Question(
            title=data.title,
            content=data.content,
            type=data.type,
            options=list(data.options),
            explanation=data.explanation,
            difficulty=data.difficulty,
            points=data.points,
            is_active=True
        )
        question.correct_answers = data.correct_answers

        try:
            db.add(question)
            db.commit()
            db.refresh(question)
        except SQLAlchemyError as e:
            logger.error(f"Failed to create question: {str(e)}")
            db.rollback()
            raise

        logger.info(f"Question created: {question.id} ({question.type.value})")
        return question

    def get_question(self, db: Session, question_id: UUID) -> Question:
        question = db.query(Question).filter(Question.id == question_id).first()
        if not question:
            raise NotFoundError(f"Question {question_id} not found")
        return question

    def list_questions(
        self,
        db: Session,
        question_type: Optional[QuestionType] = None,
        difficulty: Optional[DifficultyLevel] = None,
        is_active: Optional[bool] = None,
        search: Optional[str] = None,
        offset: int = 0,
        limit: int = 50
    ) -> List[Question]:
        query = db.query(Question)

        if question_type:
            query = query.filter(Question.type == question_type)
        if difficulty:
            query = query.filter(Question.difficulty == difficulty)
        if is_active is not None:
            query = query.filter(Question.is_active == is_active)
        if search:
            pattern = f"%{search}%"
            query = query.filter(or_(Question.title.ilike(pattern), Question.content.ilike(pattern)))

        limit = min(limit, settings.MAX_PAGE_SIZE)
        return query.order_by(Question.created_at.desc()).offset(offset).limit(limit).all()

    def update_question(self, db: Session, question_id: UUID, data: QuestionUpdate) -> Question:
        """
        Apply a partial update

        Type, options and correct answers are validated together on the merged
        result so a change to one cannot break the others.
        """
        question = self.get_question(db, question_id)
        changes = data.model_dump(exclude_unset=True)

        question_type = changes.get("type") or question.type
        options = changes["options"] if changes.get("options") is not None else list(question.options)
        if changes.get("correct_answers") is not None:
            correct_answers = normalize_correct_answers(question_type, changes["correct_answers"])
        else:
            correct_answers = question.correct_answers

        errors = question_shape_errors(question_type, options, correct_answers)
        if errors:
            raise ValidationError("; ".join(errors))

        for field in ("title", "content", "explanation", "difficulty", "points", "is_active"):
            if field in changes and (changes[field] is not None or field == "explanation"):
                setattr(question, field, changes[field])
        question.type = question_type
        question.options = options
        question.correct_answers = correct_answers

        try:
            db.commit()
            db.refresh(question)
        except SQLAlchemyError as e:
            logger.error(f"Failed to update question {question_id}: {str(e)}")
            db.rollback()
            raise

        logger.info(f"Question updated: {question_id}")
        return question

    def deactivate_question(self, db: Session, question_id: UUID) -> Question:
        question = self.get_question(db, question_id)
        question.is_active = False
        db.commit()
        db.refresh(question)
        logger.info(f"Question deactivated: {question_id}")
        return question


# Global instance
question_service = QuestionService()
