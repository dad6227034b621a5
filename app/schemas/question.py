"""
Pydantic schemas for question authoring
"""
from pydantic import BaseModel, Field, model_validator
from typing import List, Optional, Union
from uuid import UUID
from datetime import datetime

from app.config import settings
from app.models.enums import QuestionType, DifficultyLevel


MIN_OPTIONS = {
    QuestionType.SINGLE_CHOICE: 2,
    QuestionType.MULTI_SELECT: 3,
    QuestionType.TRUE_FALSE: 2,
}


def question_shape_errors(
    question_type: QuestionType,
    options: List[str],
    correct_answers: List[str]
) -> List[str]:
    """
    Check option counts and correct-answer membership for a question type

    Returns a list of human-readable problems; empty when the question is valid.
    """
    errors = []
    delimiter = settings.MULTI_SELECT_DELIMITER

    if not correct_answers:
        errors.append("At least one correct answer is required")

    if any(not option.strip() for option in options):
        errors.append("Options must not be blank")
    if len(set(options)) != len(options):
        errors.append("Options must be unique")

    if question_type == QuestionType.FILL_IN_BLANK:
        if options:
            errors.append("Fill-in-blank questions take no options")
    elif question_type == QuestionType.TRUE_FALSE and len(options) != 2:
        errors.append("True/false questions must have exactly 2 options")
    elif len(options) < MIN_OPTIONS[question_type]:
        errors.append(
            f"{question_type.value} questions need at least {MIN_OPTIONS[question_type]} options"
        )

    if question_type == QuestionType.MULTI_SELECT:
        if any(delimiter in option for option in options):
            errors.append(f"Multi-select options must not contain '{delimiter}'")
    elif len(correct_answers) > 1:
        errors.append(f"{question_type.value} questions have exactly one correct answer")

    if question_type != QuestionType.FILL_IN_BLANK:
        for answer in correct_answers:
            if answer not in options:
                errors.append(f'Correct answer "{answer}" must be one of the options')

    return errors


def normalize_correct_answers(question_type: QuestionType, value) -> List[str]:
    """Accept a list or a delimiter-joined string; strip tokens and drop blanks"""
    if isinstance(value, str):
        if question_type == QuestionType.MULTI_SELECT:
            value = value.split(settings.MULTI_SELECT_DELIMITER)
        else:
            value = [value]
    return [token.strip() for token in value if token and token.strip()]


def split_joined_answers(data):
    """Split a 'A|C' correct_answers string when the payload names its type"""
    if isinstance(data, dict) and isinstance(data.get("correct_answers"), str):
        try:
            question_type = QuestionType(data.get("type"))
        except ValueError:
            return data
        data = dict(data)
        data["correct_answers"] = normalize_correct_answers(question_type, data["correct_answers"])
    return data


class QuestionCreate(BaseModel):
    """Schema for authoring a new question"""
    title: str = Field(..., min_length=1, max_length=255)
    content: str = Field(..., min_length=1, description="Question prompt")
    type: QuestionType
    options: List[str] = Field(default_factory=list)
    correct_answers: List[str] = Field(..., description="Correct option(s); a set for multi-select")
    explanation: Optional[str] = None
    difficulty: DifficultyLevel = DifficultyLevel.MEDIUM
    points: float = Field(1.0, gt=0)

    @model_validator(mode="before")
    @classmethod
    def split_joined_answer(cls, data):
        return split_joined_answers(data)

    @model_validator(mode="after")
    def check_shape(self):
        self.correct_answers = normalize_correct_answers(self.type, self.correct_answers)
        errors = question_shape_errors(self.type, self.options, self.correct_answers)
        if errors:
            raise ValueError("; ".join(errors))
        return self


class QuestionUpdate(BaseModel):
    """Partial update; the merged question is re-validated by the service"""
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    content: Optional[str] = Field(None, min_length=1)
    type: Optional[QuestionType] = None
    options: Optional[List[str]] = None
    # A joined string without a type is split by the service using the stored type
    correct_answers: Optional[Union[List[str], str]] = None
    explanation: Optional[str] = None
    difficulty: Optional[DifficultyLevel] = None
    points: Optional[float] = Field(None, gt=0)
    is_active: Optional[bool] = None

    @model_validator(mode="before")
    @classmethod
    def split_joined_answer(cls, data):
        return split_joined_answers(data)


class QuestionResponse(BaseModel):
    """Full question including correct answers (admin view)"""
    id: UUID
    title: str
    content: str
    type: QuestionType
    options: List[str]
    correct_answers: List[str]
    explanation: Optional[str] = None
    difficulty: DifficultyLevel
    points: float
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
