"""
Quiz authoring service - quiz policy and question assignment/ordering
"""
import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import settings
from app.exceptions import ConflictError, NotFoundError, ValidationError
from app.models import Question, Quiz, QuizQuestion
from app.models.enums import QuizStatus, DifficultyLevel
from app.schemas.quiz import QuizCreate, QuizUpdate, QuizQuestionAssignment

logger = logging.getLogger(__name__)


class QuizService:
    """Service for quiz CRUD and the ordered question list of a quiz"""

    def create_quiz(self, db: Session, data: QuizCreate, creator_id: str) -> Quiz:
        quiz = Quiz(**data.model_dump(), creator_id=creator_id)

        try:
            db.add(quiz)
            db.commit()
            db.refresh(quiz)
        except SQLAlchemyError as e:
            logger.error(f"Failed to create quiz: {str(e)}")
            db.rollback()
            raise

        logger.info(f"Quiz created: {quiz.id} by {creator_id}")
        return quiz

    def get_quiz(self, db: Session, quiz_id: UUID) -> Quiz:
        quiz = db.query(Quiz).filter(Quiz.id == quiz_id).first()
        if not quiz:
            raise NotFoundError(f"Quiz {quiz_id} not found")
        return quiz

    def list_quizzes(
        self,
        db: Session,
        status: Optional[QuizStatus] = None,
        offset: int = 0,
        limit: int = 50
    ) -> List[Quiz]:
        query = db.query(Quiz)
        if status:
            query = query.filter(Quiz.status == status)
        limit = min(limit, settings.MAX_PAGE_SIZE)
        return query.order_by(Quiz.created_at.desc()).offset(offset).limit(limit).all()

    def update_quiz(self, db: Session, quiz_id: UUID, data: QuizUpdate) -> Quiz:
        quiz = self.get_quiz(db, quiz_id)
        changes = data.model_dump(exclude_unset=True)

        for field, value in changes.items():
            if value is None and field in ("title", "status", "difficulty", "negative_marking",
                                           "random_order", "show_answers", "check_answer_enabled"):
                continue
            setattr(quiz, field, value)

        if quiz.start_time and quiz.end_time and quiz.end_time <= quiz.start_time:
            db.rollback()
            raise ValidationError("end_time must be after start_time")

        db.commit()
        db.refresh(quiz)
        logger.info(f"Quiz updated: {quiz_id} ({', '.join(sorted(changes))})")
        return quiz

    def delete_quiz(self, db: Session, quiz_id: UUID) -> None:
        quiz = self.get_quiz(db, quiz_id)
        try:
            db.delete(quiz)
            db.commit()
        except SQLAlchemyError as e:
            logger.error(f"Failed to delete quiz {quiz_id}: {str(e)}")
            db.rollback()
            raise
        logger.info(f"Quiz deleted: {quiz_id}")

    def add_questions(
        self,
        db: Session,
        quiz_id: UUID,
        assignments: List[QuizQuestionAssignment]
    ) -> Quiz:
        """Append questions after the current last position"""
        quiz = self.get_quiz(db, quiz_id)

        requested = [a.question_id for a in assignments]
        if len(set(requested)) != len(requested):
            raise ValidationError("Duplicate question ids in request")

        assigned = {qq.question_id for qq in quiz.quiz_questions}
        already = [str(qid) for qid in requested if qid in assigned]
        if already:
            raise ConflictError(f"Questions already in quiz: {', '.join(already)}")

        questions = db.query(Question).filter(
            Question.id.in_(requested),
            Question.is_active.is_(True)
        ).all()
        if len(questions) != len(requested):
            found = {q.id for q in questions}
            missing = [str(qid) for qid in requested if qid not in found]
            raise NotFoundError(f"Active questions not found: {', '.join(missing)}")

        next_order = len(quiz.quiz_questions) + 1
        for offset, assignment in enumerate(assignments):
            quiz.quiz_questions.append(QuizQuestion(
                question_id=assignment.question_id,
                order=next_order + offset,
                points=assignment.points
            ))

        db.commit()
        db.refresh(quiz)
        logger.info(f"Added {len(assignments)} questions to quiz {quiz_id}")
        return quiz

    def remove_question(self, db: Session, quiz_id: UUID, question_id: UUID) -> Quiz:
        """Remove a question and renumber the remaining ones from 1"""
        quiz = self.get_quiz(db, quiz_id)
        entry = self._find_entry(quiz, question_id)

        quiz.quiz_questions.remove(entry)
        for index, remaining in enumerate(quiz.quiz_questions, start=1):
            remaining.order = index

        db.commit()
        db.refresh(quiz)
        logger.info(f"Removed question {question_id} from quiz {quiz_id}")
        return quiz

    def reorder_questions(self, db: Session, quiz_id: UUID, question_ids: List[UUID]) -> Quiz:
        """Persist a new order; the ids must be exactly the assigned questions"""
        quiz = self.get_quiz(db, quiz_id)
        by_question = {qq.question_id: qq for qq in quiz.quiz_questions}

        if len(question_ids) != len(by_question) or set(question_ids) != set(by_question):
            raise ValidationError("Reorder must list every question of the quiz exactly once")

        for index, question_id in enumerate(question_ids, start=1):
            by_question[question_id].order = index

        db.commit()
        db.refresh(quiz)
        logger.info(f"Reordered {len(question_ids)} questions in quiz {quiz_id}")
        return quiz

    def update_quiz_question(
        self,
        db: Session,
        quiz_id: UUID,
        question_id: UUID,
        points: Optional[float]
    ) -> QuizQuestion:
        quiz = self.get_quiz(db, quiz_id)
        entry = self._find_entry(quiz, question_id)
        entry.points = points
        db.commit()
        db.refresh(entry)
        return entry

    def available_questions(
        self,
        db: Session,
        quiz_id: UUID,
        difficulty: Optional[DifficultyLevel] = None,
        search: Optional[str] = None
    ) -> List[Question]:
        """Active questions not yet assigned to the quiz"""
        quiz = self.get_quiz(db, quiz_id)
        assigned = [qq.question_id for qq in quiz.quiz_questions]

        query = db.query(Question).filter(Question.is_active.is_(True))
        if assigned:
            query = query.filter(Question.id.notin_(assigned))
        if difficulty:
            query = query.filter(Question.difficulty == difficulty)
        if search:
            pattern = f"%{search}%"
            query = query.filter(or_(Question.title.ilike(pattern), Question.content.ilike(pattern)))

        return query.order_by(Question.created_at.desc()).all()

    @staticmethod
    def total_points(quiz: Quiz) -> float:
        return float(sum(qq.effective_points for qq in quiz.quiz_questions))

    @staticmethod
    def _find_entry(quiz: Quiz, question_id: UUID) -> QuizQuestion:
        for entry in quiz.quiz_questions:
            if entry.question_id == question_id:
                return entry
        raise NotFoundError(f"Question {question_id} is not part of quiz {quiz.id}")


# Global instance
quiz_service = QuizService()
