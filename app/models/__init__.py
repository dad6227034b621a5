"""
Database models package
"""
from app.models.question import Question
from app.models.quiz import Quiz, QuizQuestion
from app.models.quiz_attempt import QuizAttempt
from app.models.quiz_answer import QuizAnswer
from app.models.system_setting import SystemSetting

__all__ = ["Question", "Quiz", "QuizQuestion", "QuizAttempt", "QuizAnswer", "SystemSetting"]
