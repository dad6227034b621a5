"""
Analytics service for quiz results - leaderboard, result matrix, summary
"""
import logging
from collections import defaultdict
from datetime import datetime
from typing import Any, Dict, List
from uuid import UUID

from sqlalchemy.orm import Session

from app.models import QuizAttempt, QuizAnswer
from app.models.enums import AttemptStatus
from app.services.quiz_service import quiz_service

logger = logging.getLogger(__name__)


class AnalyticsService:
    """Service for generating quiz result analytics"""

    def get_leaderboard(self, db: Session, quiz_id: UUID) -> List[Dict[str, Any]]:
        """
        Rank submitted attempts for a quiz

        Ordering: highest score first, earlier submission breaks ties.
        """
        quiz_service.get_quiz(db, quiz_id)

        attempts = db.query(QuizAttempt).filter(
            QuizAttempt.quiz_id == quiz_id,
            QuizAttempt.status == AttemptStatus.SUBMITTED
        ).order_by(
            QuizAttempt.score.desc(),
            QuizAttempt.submitted_at.asc()
        ).all()

        return [
            {
                "rank": rank,
                "attempt_id": attempt.id,
                "user_id": attempt.user_id,
                "score": attempt.score or 0.0,
                "total_points": attempt.total_points or 0.0,
                "time_taken": attempt.time_taken or 0,
                "submitted_at": attempt.submitted_at or attempt.created_at,
            }
            for rank, attempt in enumerate(attempts, start=1)
        ]

    def get_result_matrix(self, db: Session, quiz_id: UUID) -> List[Dict[str, Any]]:
        """
        Per-attempt results for every attempt on the quiz

        Errors are answered questions that were graded incorrect.
        """
        quiz_service.get_quiz(db, quiz_id)

        attempts = db.query(QuizAttempt).filter(
            QuizAttempt.quiz_id == quiz_id
        ).all()
        # Newest submission first; unsubmitted attempts last
        attempts.sort(key=lambda a: a.submitted_at or datetime.min, reverse=True)

        matrix = []
        for attempt in attempts:
            answered = len(attempt.answers)
            correct = sum(1 for answer in attempt.answers if answer.is_correct)
            matrix.append({
                "attempt_id": attempt.id,
                "user_id": attempt.user_id,
                "status": attempt.status,
                "score": attempt.score or 0.0,
                "time_taken": attempt.time_taken or 0,
                "answered": answered,
                "errors": answered - correct,
                "submitted_at": attempt.submitted_at,
            })

        return matrix

    def get_quiz_summary(self, db: Session, quiz_id: UUID) -> Dict[str, Any]:
        """
        Aggregate figures over submitted attempts

        Returns:
            Dictionary with attempt counts, averages and per-question correct rates
        """
        quiz = quiz_service.get_quiz(db, quiz_id)

        attempts = db.query(QuizAttempt).filter(
            QuizAttempt.quiz_id == quiz_id,
            QuizAttempt.status == AttemptStatus.SUBMITTED
        ).all()

        total = len(attempts)
        unique_users = len({a.user_id for a in attempts})

        if attempts:
            avg_score = sum(a.score or 0.0 for a in attempts) / total
            percentages = [
                (a.score or 0.0) / a.total_points * 100
                for a in attempts if a.total_points
            ]
            avg_percentage = sum(percentages) / len(percentages) if percentages else 0.0
            avg_time = sum(a.time_taken or 0 for a in attempts) // total
        else:
            avg_score = avg_percentage = 0.0
            avg_time = 0

        question_stats = self._question_stats(db, quiz, [a.id for a in attempts])

        logger.info(f"Summary for quiz {quiz_id}: {total} submitted attempts")

        return {
            "quiz_id": quiz.id,
            "quiz_title": quiz.title,
            "submitted_attempts": total,
            "unique_users": unique_users,
            "avg_score": round(avg_score, 2),
            "avg_percentage": round(avg_percentage, 2),
            "avg_time_taken": avg_time,
            "questions": question_stats,
        }

    def _question_stats(self, db: Session, quiz, attempt_ids: List[UUID]) -> List[Dict[str, Any]]:
        """Answered/correct counts per quiz question"""
        answered = defaultdict(int)
        correct = defaultdict(int)

        if attempt_ids:
            answers = db.query(QuizAnswer).filter(QuizAnswer.attempt_id.in_(attempt_ids)).all()
            for answer in answers:
                answered[answer.question_id] += 1
                if answer.is_correct:
                    correct[answer.question_id] += 1

        stats = []
        for entry in quiz.quiz_questions:
            count = answered[entry.question_id]
            stats.append({
                "question_id": entry.question_id,
                "title": entry.question.title,
                "order": entry.order,
                "answered": count,
                "correct": correct[entry.question_id],
                "correct_rate": round(correct[entry.question_id] / count, 2) if count else 0.0,
            })

        return stats


# Global instance
analytics_service = AnalyticsService()
