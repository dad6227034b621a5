"""
Answer grading service
Single-choice / true-false / fill-in-blank: trimmed, case-insensitive match
Multi-select: set equality of delimiter-separated tokens, all-or-nothing
"""
import logging
from typing import Iterable, List, NamedTuple, Optional, Set

from app.config import settings
from app.models import Question
from app.models.enums import QuestionType

logger = logging.getLogger(__name__)


class GradeResult(NamedTuple):
    is_correct: bool
    points_earned: float


class GradingService:
    """
    Pure grading of one submitted answer against one question

    Strategy:
    - Exact-match types: compare normalized strings
    - Multi-select: compare token sets, no partial credit
    - Negative marking: a wrong answer earns minus the quiz penalty
    """

    def __init__(self, delimiter: str = None):
        self.delimiter = delimiter or settings.MULTI_SELECT_DELIMITER

    def grade(
        self,
        question_type: QuestionType,
        correct_answers: Iterable[str],
        submitted_answer: Optional[str],
        points: float,
        negative_marking: bool = False,
        penalty: Optional[float] = None
    ) -> GradeResult:
        """
        Grade a single answer

        Args:
            question_type: Type of the question being answered
            correct_answers: Correct tokens (one for exact-match types)
            submitted_answer: Raw answer string; 'A|C' for multi-select
            points: Points awarded for a correct answer
            negative_marking: Whether the quiz penalises wrong answers
            penalty: Points deducted per wrong answer

        Returns:
            GradeResult(is_correct, points_earned)
        """
        is_correct = self.is_correct(question_type, correct_answers, submitted_answer)

        if is_correct:
            return GradeResult(True, float(points))
        if negative_marking and penalty:
            return GradeResult(False, -float(penalty))
        return GradeResult(False, 0.0)

    def grade_question(
        self,
        question: Question,
        submitted_answer: Optional[str],
        points: Optional[float] = None,
        negative_marking: bool = False,
        penalty: Optional[float] = None
    ) -> GradeResult:
        """Grade against a Question model; points default to the question's own value"""
        return self.grade(
            question.type,
            question.correct_answers,
            submitted_answer,
            question.points if points is None else points,
            negative_marking=negative_marking,
            penalty=penalty
        )

    def is_correct(
        self,
        question_type: QuestionType,
        correct_answers: Iterable[str],
        submitted_answer: Optional[str]
    ) -> bool:
        if submitted_answer is None or not submitted_answer.strip():
            return False

        if question_type == QuestionType.MULTI_SELECT:
            expected = self.tokens(correct_answers)
            return bool(expected) and self.split(submitted_answer) == expected

        expected = list(correct_answers)
        if len(expected) != 1:
            logger.warning(f"{question_type.value} question has {len(expected)} correct answers")
            return False
        return self._normalize(submitted_answer) == self._normalize(expected[0])

    def split(self, answer: str) -> Set[str]:
        """Split a delimiter-joined answer into its set of non-empty tokens"""
        return self.tokens(answer.split(self.delimiter))

    def join(self, tokens: Iterable[str]) -> str:
        return self.delimiter.join(tokens)

    @staticmethod
    def tokens(values: Iterable[str]) -> Set[str]:
        return {value.strip() for value in values if value and value.strip()}

    @staticmethod
    def _normalize(value: str) -> str:
        return value.strip().lower()

    @staticmethod
    def total(points: List[float], allow_negative: bool = None) -> float:
        """Sum earned points, clamping at zero unless negative totals are allowed"""
        if allow_negative is None:
            allow_negative = settings.ALLOW_NEGATIVE_SCORE
        score = float(sum(points))
        if not allow_negative and score < 0:
            return 0.0
        return score


# Global instance
grading_service = GradingService()
