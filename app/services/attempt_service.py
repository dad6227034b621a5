"""
Quiz attempt service - start, answer and submit a quiz attempt

State machine per (user, quiz): NOT_STARTED -> IN_PROGRESS -> SUBMITTED.
SUBMITTED is terminal; answers are frozen once an attempt leaves IN_PROGRESS.
"""
import logging
import random
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.config import settings
from app.exceptions import (
    ConflictError, InvalidStateError, NotFoundError, QuizServiceError, ValidationError
)
from app.models import Quiz, QuizAttempt, QuizAnswer, QuizQuestion, SystemSetting
from app.models.enums import AttemptStatus, QuizStatus
from app.schemas.attempt import AnswerSubmission
from app.services.grading_service import GradingService, grading_service
from app.services.quiz_service import quiz_service
from app.utils.timeutils import utcnow

logger = logging.getLogger(__name__)


class AttemptService:
    """
    Orchestrates a user's attempt at a quiz

    Policies applied from the quiz:
    - Active window (start_time / end_time)
    - Max attempts (falls back to the system default)
    - Time limit (falls back to the system default)
    - Negative marking, random question order, check-answer and show-answers
    """

    def __init__(self, grader: GradingService = grading_service, clock: Callable[[], datetime] = utcnow):
        self.grader = grader
        self.clock = clock

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start_attempt(self, db: Session, user_id: str, quiz_id: UUID) -> QuizAttempt:
        """
        Begin an attempt for the user

        Reuses the user's NOT_STARTED attempt (created on enrollment) when there
        is one, otherwise creates a new attempt row.

        Raises:
            NotFoundError: quiz does not exist
            ConflictError: quiz closed, attempt already running, attempts used up
            ValidationError: quiz has no questions
        """
        quiz = db.query(Quiz).filter(Quiz.id == quiz_id).first()
        if not quiz:
            raise NotFoundError(f"Quiz {quiz_id} not found")

        now = self.clock()
        self._check_available(quiz, now)

        if not quiz.quiz_questions:
            raise ValidationError("Quiz has no questions")

        attempts = db.query(QuizAttempt).filter(
            QuizAttempt.user_id == user_id,
            QuizAttempt.quiz_id == quiz_id
        ).order_by(QuizAttempt.created_at).all()

        if any(a.status == AttemptStatus.IN_PROGRESS for a in attempts):
            logger.warning(f"User {user_id} already has an attempt in progress for quiz {quiz_id}")
            raise ConflictError("An attempt is already in progress for this quiz")

        max_attempts = self._max_attempts(db, quiz)
        submitted = sum(1 for a in attempts if a.status == AttemptStatus.SUBMITTED)
        if max_attempts is not None and submitted >= max_attempts:
            logger.warning(f"User {user_id} exhausted {max_attempts} attempts for quiz {quiz_id}")
            raise ConflictError(f"Maximum number of attempts ({max_attempts}) reached")

        attempt = next((a for a in attempts if a.status == AttemptStatus.NOT_STARTED), None)
        if attempt is None:
            attempt = QuizAttempt(user_id=user_id, quiz_id=quiz_id)
            db.add(attempt)

        order = [str(qq.question_id) for qq in quiz.quiz_questions]
        if quiz.random_order:
            random.shuffle(order)

        attempt.status = AttemptStatus.IN_PROGRESS
        attempt.started_at = now
        attempt.question_order = order
        attempt.time_exceeded = False

        try:
            db.commit()
        except IntegrityError:
            # A concurrent start won the one-in-progress-per-user unique index
            db.rollback()
            logger.warning(f"Concurrent start for user {user_id} on quiz {quiz_id}")
            raise ConflictError("An attempt is already in progress for this quiz")
        db.refresh(attempt)

        logger.info(f"Attempt {attempt.id} started: user={user_id}, quiz={quiz_id}")
        return attempt

    def answer_question(
        self,
        db: Session,
        user_id: str,
        attempt_id: UUID,
        submission: AnswerSubmission
    ) -> QuizAnswer:
        """
        Grade and save an answer; re-answering overwrites the previous one

        Raises:
            NotFoundError: no in-progress attempt, or question not in the quiz
            InvalidStateError: the time limit has run out
            ValidationError: blank answer
        """
        attempt = self._get_in_progress(db, user_id, attempt_id)

        try:
            answer = self._save_answer(db, attempt, submission, enforce_deadline=True)
            db.commit()
        except IntegrityError:
            # Lost an insert race on (attempt_id, question_id); the row exists now
            db.rollback()
            logger.warning(f"Concurrent answer for attempt {attempt_id}, retrying as update")
            attempt = self._get_in_progress(db, user_id, attempt_id)
            answer = self._save_answer(db, attempt, submission, enforce_deadline=True)
            db.commit()

        db.refresh(answer)
        return answer

    def submit_attempt(
        self,
        db: Session,
        user_id: str,
        attempt_id: UUID,
        answers: Optional[List[AnswerSubmission]] = None
    ) -> QuizAttempt:
        """
        Finalize an attempt and compute its score

        Score is the sum of points earned over saved answers; the total counts
        every question assigned to the quiz, answered or not.

        Raises:
            NotFoundError: attempt does not exist for this user
            InvalidStateError: attempt is not in progress (e.g. already submitted)
        """
        attempt = self._get_owned(db, user_id, attempt_id)
        if attempt.status != AttemptStatus.IN_PROGRESS:
            raise InvalidStateError(f"Attempt is {attempt.status.value}, not IN_PROGRESS")

        quiz = attempt.quiz
        now = self.clock()

        try:
            for submission in answers or []:
                self._save_answer(db, attempt, submission, enforce_deadline=False)
                db.flush()
        except IntegrityError:
            db.rollback()
            raise ConflictError("Answers changed concurrently, please submit again")
        except QuizServiceError:
            db.rollback()
            raise

        # Answers to questions removed from the quiz mid-attempt do not count
        assigned = [qq.question_id for qq in quiz.quiz_questions]
        earned = [
            a.points_earned or 0.0
            for a in db.query(QuizAnswer).filter(
                QuizAnswer.attempt_id == attempt.id,
                QuizAnswer.question_id.in_(assigned)
            ).all()
        ]
        score = self.grader.total(earned)
        total_points = quiz_service.total_points(quiz)
        time_taken = int((now - attempt.started_at).total_seconds()) if attempt.started_at else 0
        deadline = self.deadline(db, attempt)
        time_exceeded = deadline is not None and now > deadline

        # Compare-and-swap so only one submit can win
        updated = db.query(QuizAttempt).filter(
            QuizAttempt.id == attempt.id,
            QuizAttempt.status == AttemptStatus.IN_PROGRESS
        ).update({
            QuizAttempt.status: AttemptStatus.SUBMITTED,
            QuizAttempt.score: score,
            QuizAttempt.total_points: total_points,
            QuizAttempt.time_taken: time_taken,
            QuizAttempt.time_exceeded: time_exceeded,
            QuizAttempt.submitted_at: now,
        }, synchronize_session=False)

        if updated == 0:
            db.rollback()
            raise InvalidStateError("Attempt was already submitted")

        db.commit()
        db.refresh(attempt)

        logger.info(
            f"Attempt {attempt.id} submitted: score={score:.2f}/{total_points:.2f}, "
            f"time_taken={time_taken}s, time_exceeded={time_exceeded}"
        )
        return attempt

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_attempt(self, db: Session, user_id: str, attempt_id: UUID) -> QuizAttempt:
        return self._get_owned(db, user_id, attempt_id)

    def list_attempts(self, db: Session, user_id: str, quiz_id: Optional[UUID] = None) -> List[QuizAttempt]:
        query = db.query(QuizAttempt).filter(QuizAttempt.user_id == user_id)
        if quiz_id:
            query = query.filter(QuizAttempt.quiz_id == quiz_id)
        return query.order_by(QuizAttempt.created_at.desc()).all()

    def deadline(self, db: Session, attempt: QuizAttempt) -> Optional[datetime]:
        time_limit = attempt.quiz.time_limit
        if time_limit is None:
            defaults = db.query(SystemSetting).first()
            time_limit = defaults.default_quiz_time_limit if defaults else None
        if time_limit is None or attempt.started_at is None:
            return None
        return attempt.started_at + timedelta(minutes=time_limit)

    def describe_attempt(self, db: Session, attempt: QuizAttempt) -> Dict[str, Any]:
        """Attempt view for the quiz taker; hides correct answers"""
        quiz = attempt.quiz
        reveal = quiz.check_answer_enabled or (
            attempt.status == AttemptStatus.SUBMITTED and quiz.show_answers
        )

        questions = [
            {
                "question_id": entry.question_id,
                "position": position,
                "title": entry.question.title,
                "content": entry.question.content,
                "type": entry.question.type,
                "options": list(entry.question.options or []),
                "points": entry.effective_points,
            }
            for position, entry in enumerate(self._presented(attempt), start=1)
        ]
        answers = [
            {
                "question_id": a.question_id,
                "user_answer": a.user_answer,
                "time_spent": a.time_spent,
                "is_correct": a.is_correct if reveal else None,
            }
            for a in attempt.answers
        ]

        return {
            "id": attempt.id,
            "quiz_id": attempt.quiz_id,
            "user_id": attempt.user_id,
            "status": attempt.status,
            "score": attempt.score,
            "total_points": attempt.total_points,
            "time_taken": attempt.time_taken,
            "time_exceeded": attempt.time_exceeded,
            "started_at": attempt.started_at,
            "submitted_at": attempt.submitted_at,
            "quiz_title": quiz.title,
            "deadline": self.deadline(db, attempt),
            "questions": questions,
            "answers": answers,
        }

    def get_result(self, db: Session, user_id: str, attempt_id: UUID) -> Dict[str, Any]:
        """
        Result of a submitted attempt

        The per-question breakdown (with correct answers and explanations) is
        only included when the quiz has show_answers enabled.
        """
        attempt = self._get_owned(db, user_id, attempt_id)
        if attempt.status != AttemptStatus.SUBMITTED:
            raise InvalidStateError("Results are available after the attempt is submitted")

        quiz = attempt.quiz
        score = attempt.score or 0.0
        total_points = attempt.total_points or 0.0
        percentage = (score / total_points * 100) if total_points > 0 else 0.0

        breakdown = None
        if quiz.show_answers:
            saved = {a.question_id: a for a in attempt.answers}
            breakdown = []
            for entry in self._presented(attempt):
                answer = saved.get(entry.question_id)
                question = entry.question
                breakdown.append({
                    "question_id": entry.question_id,
                    "title": question.title,
                    "content": question.content,
                    "options": list(question.options or []),
                    "user_answer": answer.user_answer if answer else None,
                    "correct_answers": question.correct_answers,
                    "is_correct": bool(answer and answer.is_correct),
                    "points_earned": (answer.points_earned or 0.0) if answer else 0.0,
                    "max_points": entry.effective_points,
                    "explanation": question.explanation,
                })

        return {
            "attempt_id": attempt.id,
            "quiz_id": quiz.id,
            "quiz_title": quiz.title,
            "score": round(score, 2),
            "total_points": round(total_points, 2),
            "score_display": f"{score:.1f}/{total_points:.1f}",
            "percentage": round(percentage, 2),
            "time_taken": attempt.time_taken,
            "time_exceeded": attempt.time_exceeded,
            "submitted_at": attempt.submitted_at,
            "show_answers": quiz.show_answers,
            "answers": breakdown,
        }

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _save_answer(
        self,
        db: Session,
        attempt: QuizAttempt,
        submission: AnswerSubmission,
        enforce_deadline: bool
    ) -> QuizAnswer:
        """Grade the submission and upsert it keyed by (attempt, question)"""
        if not submission.user_answer.strip():
            raise ValidationError("Answer is required")

        quiz = attempt.quiz
        entry = next((qq for qq in quiz.quiz_questions if qq.question_id == submission.question_id), None)
        if entry is None:
            raise NotFoundError(f"Question {submission.question_id} is not part of this quiz")

        if enforce_deadline and settings.ENFORCE_TIME_LIMIT:
            deadline = self.deadline(db, attempt)
            if deadline is not None and self.clock() > deadline:
                raise InvalidStateError("Time limit for this attempt has expired")

        result = self.grader.grade_question(
            entry.question,
            submission.user_answer,
            points=entry.effective_points,
            negative_marking=quiz.negative_marking,
            penalty=quiz.negative_points
        )

        answer = db.query(QuizAnswer).filter(
            QuizAnswer.attempt_id == attempt.id,
            QuizAnswer.question_id == submission.question_id
        ).first()
        if answer is None:
            answer = QuizAnswer(attempt_id=attempt.id, question_id=submission.question_id)
            db.add(answer)

        answer.user_answer = submission.user_answer
        answer.is_correct = result.is_correct
        answer.points_earned = result.points_earned
        answer.time_spent = submission.time_spent

        logger.debug(
            f"Answer saved: attempt={attempt.id}, question={submission.question_id}, "
            f"correct={result.is_correct}"
        )
        return answer

    def _get_owned(self, db: Session, user_id: str, attempt_id: UUID) -> QuizAttempt:
        attempt = db.query(QuizAttempt).filter(
            QuizAttempt.id == attempt_id,
            QuizAttempt.user_id == user_id
        ).first()
        if not attempt:
            raise NotFoundError(f"Attempt {attempt_id} not found")
        return attempt

    def _get_in_progress(self, db: Session, user_id: str, attempt_id: UUID) -> QuizAttempt:
        attempt = db.query(QuizAttempt).filter(
            QuizAttempt.id == attempt_id,
            QuizAttempt.user_id == user_id,
            QuizAttempt.status == AttemptStatus.IN_PROGRESS
        ).first()
        if not attempt:
            raise NotFoundError("No active quiz attempt found")
        return attempt

    @staticmethod
    def _check_available(quiz: Quiz, now: datetime) -> None:
        if quiz.status != QuizStatus.PUBLISHED:
            raise ConflictError("Quiz is not published")
        if quiz.start_time and now < quiz.start_time:
            raise ConflictError("Quiz has not opened yet")
        if quiz.end_time and now > quiz.end_time:
            raise ConflictError("Quiz has closed")

    @staticmethod
    def _max_attempts(db: Session, quiz: Quiz) -> Optional[int]:
        if quiz.max_attempts is not None:
            return quiz.max_attempts
        defaults = db.query(SystemSetting).first()
        return defaults.max_quiz_attempts if defaults else None

    @staticmethod
    def _presented(attempt: QuizAttempt) -> List[QuizQuestion]:
        """Quiz questions in the order shown for this attempt"""
        entries = list(attempt.quiz.quiz_questions)
        if not attempt.question_order:
            return entries

        by_id = {str(qq.question_id): qq for qq in entries}
        ordered = [by_id.pop(qid) for qid in attempt.question_order if qid in by_id]
        # Questions added to the quiz after the attempt started go last
        ordered.extend(qq for qq in entries if str(qq.question_id) in by_id)
        return ordered


# Global instance
attempt_service = AttemptService()
