"""
Quiz authoring tests - question assignment, ordering and point overrides
"""
import pytest

from app.exceptions import ConflictError, NotFoundError, ValidationError
from app.models.enums import QuestionType
from app.schemas.quiz import QuizUpdate, QuizQuestionAssignment
from app.services.question_service import question_service
from app.services.quiz_service import quiz_service


def question_ids(quiz):
    return [entry.question_id for entry in quiz.quiz_questions]


def orders(quiz):
    return [entry.order for entry in quiz.quiz_questions]


def test_add_questions_appends_in_order(db, make_question, make_quiz):
    first, second, third = make_question(), make_question(), make_question()
    quiz = make_quiz([first])

    quiz = quiz_service.add_questions(db, quiz.id, [
        QuizQuestionAssignment(question_id=second.id),
        QuizQuestionAssignment(question_id=third.id, points=4),
    ])

    assert question_ids(quiz) == [first.id, second.id, third.id]
    assert orders(quiz) == [1, 2, 3]
    assert quiz.quiz_questions[2].effective_points == 4


def test_adding_assigned_question_conflicts(db, make_question, make_quiz):
    question = make_question()
    quiz = make_quiz([question])

    with pytest.raises(ConflictError):
        quiz_service.add_questions(db, quiz.id, [QuizQuestionAssignment(question_id=question.id)])


def test_inactive_question_cannot_be_added(db, make_question, make_quiz):
    question = make_question()
    question_service.deactivate_question(db, question.id)
    quiz = make_quiz()

    with pytest.raises(NotFoundError):
        quiz_service.add_questions(db, quiz.id, [QuizQuestionAssignment(question_id=question.id)])


def test_reorder_rewrites_order_indexes(db, make_question, make_quiz):
    first, second, third = make_question(), make_question(), make_question()
    quiz = make_quiz([first, second, third])

    quiz = quiz_service.reorder_questions(db, quiz.id, [third.id, first.id, second.id])

    assert question_ids(quiz) == [third.id, first.id, second.id]
    assert orders(quiz) == [1, 2, 3]


def test_reorder_must_be_a_permutation(db, make_question, make_quiz):
    first, second = make_question(), make_question()
    quiz = make_quiz([first, second])

    with pytest.raises(ValidationError):
        quiz_service.reorder_questions(db, quiz.id, [first.id])
    with pytest.raises(ValidationError):
        quiz_service.reorder_questions(db, quiz.id, [first.id, first.id])


def test_remove_question_renumbers_the_rest(db, make_question, make_quiz):
    first, second, third = make_question(), make_question(), make_question()
    quiz = make_quiz([first, second, third])

    quiz = quiz_service.remove_question(db, quiz.id, first.id)

    assert question_ids(quiz) == [second.id, third.id]
    assert orders(quiz) == [1, 2]


def test_point_override_and_total(db, make_question, make_quiz):
    five = make_question(points=5)
    ten = make_question(points=1)
    quiz = make_quiz([five, (ten, 10)])

    assert quiz_service.total_points(quiz) == 15

    quiz_service.update_quiz_question(db, quiz.id, ten.id, None)
    db.refresh(quiz)

    assert quiz_service.total_points(quiz) == 6


def test_available_questions_excludes_assigned_and_inactive(db, make_question, make_quiz):
    assigned = make_question(title="Assigned")
    free = make_question(QuestionType.TRUE_FALSE, title="Free")
    retired = make_question(title="Retired")
    question_service.deactivate_question(db, retired.id)
    quiz = make_quiz([assigned])

    available = quiz_service.available_questions(db, quiz.id)

    assert [q.id for q in available] == [free.id]


def test_update_rejects_inverted_window(db, make_quiz):
    from datetime import datetime

    quiz = make_quiz(start_time=datetime(2026, 1, 10))

    with pytest.raises(ValidationError):
        quiz_service.update_quiz(db, quiz.id, QuizUpdate(end_time=datetime(2026, 1, 1)))


def test_delete_quiz_removes_it(db, make_question, make_quiz):
    quiz = make_quiz([make_question()])

    quiz_service.delete_quiz(db, quiz.id)

    with pytest.raises(NotFoundError):
        quiz_service.get_quiz(db, quiz.id)
