"""
Question authoring tests - type invariants and partial updates
"""
import pytest
from pydantic import ValidationError as SchemaValidationError

from app.exceptions import NotFoundError, ValidationError
from app.models.enums import QuestionType
from app.schemas.question import QuestionCreate, QuestionUpdate
from app.services.question_service import question_service


def build(question_type, options, correct):
    return QuestionCreate(
        title="Question",
        content="Prompt",
        type=question_type,
        options=options,
        correct_answers=correct,
    )


def test_multi_select_accepts_joined_string():
    data = build(QuestionType.MULTI_SELECT, ["A", "B", "C"], "C| A")

    assert data.correct_answers == ["C", "A"]


@pytest.mark.parametrize("question_type, options, correct, message", [
    (QuestionType.TRUE_FALSE, ["True", "False", "Maybe"], ["True"], "exactly 2 options"),
    (QuestionType.MULTI_SELECT, ["A", "B"], ["A"], "at least 3 options"),
    (QuestionType.SINGLE_CHOICE, ["Paris"], ["Paris"], "at least 2 options"),
    (QuestionType.SINGLE_CHOICE, ["Paris", "Rome"], ["Berlin"], "must be one of the options"),
    (QuestionType.MULTI_SELECT, ["A", "B", "C"], ["A", "Z"], '"Z" must be one of the options'),
    (QuestionType.SINGLE_CHOICE, ["Paris", "Rome"], ["Paris", "Rome"], "exactly one correct answer"),
    (QuestionType.FILL_IN_BLANK, ["Paris"], ["Paris"], "take no options"),
    (QuestionType.FILL_IN_BLANK, [], ["  "], "At least one correct answer"),
    (QuestionType.MULTI_SELECT, ["A|B", "C", "D"], ["C"], "must not contain"),
])
def test_invalid_question_shapes_are_rejected(question_type, options, correct, message):
    with pytest.raises(SchemaValidationError) as exc_info:
        build(question_type, options, correct)

    assert message in str(exc_info.value)


def test_create_stores_delimiter_joined_answer(db):
    question = question_service.create_question(
        db, build(QuestionType.MULTI_SELECT, ["A", "B", "C", "D"], ["A", "C"])
    )

    assert question.correct_answer == "A|C"
    assert question.correct_answers == ["A", "C"]
    assert question.is_active


def test_update_revalidates_merged_question(db, make_question):
    question = make_question(QuestionType.SINGLE_CHOICE)

    with pytest.raises(ValidationError, match="must be one of the options"):
        question_service.update_question(db, question.id, QuestionUpdate(options=["London", "Berlin"]))


def test_update_changes_type_with_matching_fields(db, make_question):
    question = make_question(QuestionType.SINGLE_CHOICE)

    updated = question_service.update_question(db, question.id, QuestionUpdate(
        type=QuestionType.TRUE_FALSE,
        options=["True", "False"],
        correct_answers=["False"],
        points=2.5,
    ))

    assert updated.type == QuestionType.TRUE_FALSE
    assert updated.correct_answers == ["False"]
    assert updated.points == 2.5
    assert updated.title == question.title


def test_update_accepts_joined_string_using_stored_type(db, make_question):
    question = make_question(QuestionType.MULTI_SELECT)

    updated = question_service.update_question(db, question.id, QuestionUpdate(correct_answers="D| B"))

    assert updated.correct_answers == ["D", "B"]


def test_update_splits_joined_string_for_new_type():
    data = QuestionUpdate(type=QuestionType.MULTI_SELECT, correct_answers="A|C")

    assert data.correct_answers == ["A", "C"]


def test_deactivate_keeps_row(db, make_question):
    question = make_question()

    question_service.deactivate_question(db, question.id)

    assert question_service.get_question(db, question.id).is_active is False


def test_unknown_question_is_not_found(db):
    import uuid

    with pytest.raises(NotFoundError):
        question_service.get_question(db, uuid.uuid4())


def test_list_filters_by_type_and_search(db, make_question):
    make_question(QuestionType.SINGLE_CHOICE, title="Rivers of Europe")
    make_question(QuestionType.MULTI_SELECT, title="Prime numbers")

    multi = question_service.list_questions(db, question_type=QuestionType.MULTI_SELECT)
    rivers = question_service.list_questions(db, search="rivers")

    assert [q.title for q in multi] == ["Prime numbers"]
    assert [q.title for q in rivers] == ["Rivers of Europe"]
