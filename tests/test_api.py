"""
API tests - full attempt flow over HTTP, error envelope, identity and maintenance mode
"""
import pytest

from conftest import ADMIN_HEADERS, user_headers


def create_question(client, **overrides):
    payload = {
        "title": "Capital of France",
        "content": "Which city is the capital of France?",
        "type": "SINGLE_CHOICE",
        "options": ["Paris", "London", "Berlin"],
        "correct_answers": ["Paris"],
        "points": 5,
    }
    payload.update(overrides)
    response = client.post("/api/admin/questions", json=payload, headers=ADMIN_HEADERS)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def published_quiz(client):
    """Published quiz with a 5-point single-choice and a 10-point multi-select question"""
    single = create_question(client)
    multi = create_question(
        client,
        title="Primary colours",
        type="MULTI_SELECT",
        options=["Red", "Green", "Blue", "Yellow"],
        correct_answers="Red|Blue|Yellow",
        points=10,
    )

    response = client.post("/api/admin/quizzes", json={
        "title": "General knowledge",
        "status": "PUBLISHED",
        "negative_marking": True,
        "negative_points": 2,
        "show_answers": True,
    }, headers=ADMIN_HEADERS)
    assert response.status_code == 201, response.text
    quiz = response.json()

    response = client.post(f"/api/admin/quizzes/{quiz['id']}/questions", json={
        "questions": [{"question_id": single["id"]}, {"question_id": multi["id"]}]
    }, headers=ADMIN_HEADERS)
    assert response.status_code == 200, response.text

    return response.json(), single, multi


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_quiz_detail_reports_totals(client, published_quiz):
    quiz, single, multi = published_quiz

    assert quiz["question_count"] == 2
    assert quiz["total_points"] == 15
    assert [q["question_id"] for q in quiz["questions"]] == [single["id"], multi["id"]]
    assert multi["correct_answers"] == ["Red", "Blue", "Yellow"]


def test_full_attempt_flow(client, published_quiz):
    quiz, single, multi = published_quiz
    headers = user_headers()

    response = client.post(f"/api/quizzes/{quiz['id']}/attempts", headers=headers)
    assert response.status_code == 201, response.text
    attempt = response.json()
    assert attempt["status"] == "IN_PROGRESS"
    assert "correct_answers" not in attempt["questions"][0]

    response = client.put(f"/api/attempts/{attempt['id']}/answers", json={
        "question_id": single["id"], "user_answer": " paris "
    }, headers=headers)
    assert response.status_code == 200
    assert response.json()["is_correct"] is None

    response = client.put(f"/api/attempts/{attempt['id']}/answers", json={
        "question_id": multi["id"], "user_answer": "Blue|Red"
    }, headers=headers)
    assert response.status_code == 200

    response = client.post(f"/api/attempts/{attempt['id']}/submit", headers=headers)
    assert response.status_code == 200, response.text
    result = response.json()
    assert result["score"] == 3.0
    assert result["total_points"] == 15.0
    assert result["score_display"] == "3.0/15.0"
    assert [item["is_correct"] for item in result["answers"]] == [True, False]

    response = client.post(f"/api/attempts/{attempt['id']}/submit", headers=headers)
    assert response.status_code == 409
    assert response.json()["error"] == "invalid_state"

    response = client.get(f"/api/attempts/{attempt['id']}/result", headers=headers)
    assert response.json()["score"] == 3.0


def test_double_start_returns_conflict_envelope(client, published_quiz):
    quiz, _, _ = published_quiz
    client.post(f"/api/quizzes/{quiz['id']}/attempts", headers=user_headers())

    response = client.post(f"/api/quizzes/{quiz['id']}/attempts", headers=user_headers())

    assert response.status_code == 409
    body = response.json()
    assert body["error"] == "conflict"
    assert body["status_code"] == 409
    assert "in progress" in body["message"]


def test_answer_without_active_attempt_is_404(client, published_quiz):
    _, single, _ = published_quiz
    import uuid

    response = client.put(f"/api/attempts/{uuid.uuid4()}/answers", json={
        "question_id": single["id"], "user_answer": "Paris"
    }, headers=user_headers())

    assert response.status_code == 404
    assert response.json()["error"] == "not_found"


def test_missing_question_id_is_rejected(client, published_quiz):
    quiz, _, _ = published_quiz
    attempt = client.post(f"/api/quizzes/{quiz['id']}/attempts", headers=user_headers()).json()

    response = client.put(f"/api/attempts/{attempt['id']}/answers", json={
        "user_answer": "Paris"
    }, headers=user_headers())

    assert response.status_code == 422


def test_submit_with_answers_in_body(client, published_quiz):
    quiz, single, multi = published_quiz
    attempt = client.post(f"/api/quizzes/{quiz['id']}/attempts", headers=user_headers()).json()

    response = client.post(f"/api/attempts/{attempt['id']}/submit", json={
        "answers": [
            {"question_id": single["id"], "user_answer": "Paris"},
            {"question_id": multi["id"], "user_answer": "Yellow|Red|Blue"},
        ]
    }, headers=user_headers())

    assert response.status_code == 200
    assert response.json()["score"] == 15.0


def test_requests_without_identity_are_unauthorized(client):
    response = client.get("/api/attempts")

    assert response.status_code == 401
    assert response.json()["error"] == "http_error"


def test_admin_routes_reject_users(client):
    response = client.get("/api/admin/questions", headers=user_headers())

    assert response.status_code == 403


def test_invalid_question_shape_is_422(client):
    response = client.post("/api/admin/questions", json={
        "title": "Is water wet?",
        "content": "True or false",
        "type": "TRUE_FALSE",
        "options": ["True", "False", "Maybe"],
        "correct_answers": ["True"],
    }, headers=ADMIN_HEADERS)

    assert response.status_code == 422


def test_invalid_question_update_is_400(client):
    question = create_question(client)

    response = client.patch(f"/api/admin/questions/{question['id']}", json={
        "correct_answers": ["Madrid"]
    }, headers=ADMIN_HEADERS)

    assert response.status_code == 400
    assert response.json()["error"] == "validation_error"


def test_reorder_endpoint(client, published_quiz):
    quiz, single, multi = published_quiz

    response = client.put(f"/api/admin/quizzes/{quiz['id']}/questions/reorder", json={
        "question_ids": [multi["id"], single["id"]]
    }, headers=ADMIN_HEADERS)

    assert response.status_code == 200
    assert [(q["question_id"], q["order"]) for q in response.json()["questions"]] == [
        (multi["id"], 1), (single["id"], 2)
    ]


def test_leaderboard_endpoint(client, published_quiz):
    quiz, single, _ = published_quiz
    for user_id, text in (("ann", "Paris"), ("ben", "Rome")):
        attempt = client.post(f"/api/quizzes/{quiz['id']}/attempts", headers=user_headers(user_id)).json()
        client.post(f"/api/attempts/{attempt['id']}/submit", json={
            "answers": [{"question_id": single["id"], "user_answer": text}]
        }, headers=user_headers(user_id))

    response = client.get(f"/api/admin/analytics/quizzes/{quiz['id']}/leaderboard", headers=ADMIN_HEADERS)

    assert response.status_code == 200
    assert [(row["user_id"], row["score"]) for row in response.json()] == [("ann", 5.0), ("ben", -2.0)]


def test_maintenance_mode_blocks_users_but_not_admins(client, published_quiz):
    quiz, _, _ = published_quiz
    response = client.patch("/api/admin/settings", json={"maintenance_mode": True}, headers=ADMIN_HEADERS)
    assert response.status_code == 200

    blocked = client.post(f"/api/quizzes/{quiz['id']}/attempts", headers=user_headers())
    assert blocked.status_code == 503
    assert blocked.json()["error"] == "maintenance"

    assert client.get("/health").status_code == 200
    assert client.get("/api/settings").json()["maintenance_mode"] is True
    assert client.get("/api/attempts", headers=ADMIN_HEADERS).status_code == 200

    client.patch("/api/admin/settings", json={"maintenance_mode": False}, headers=ADMIN_HEADERS)
    assert client.post(f"/api/quizzes/{quiz['id']}/attempts", headers=user_headers()).status_code == 201


def test_unreadable_maintenance_flag_lets_requests_through(client, published_quiz, monkeypatch):
    from sqlalchemy.exc import SQLAlchemyError
    from app.services.settings_service import settings_service

    def broken(db):
        raise SQLAlchemyError("settings table unavailable")

    quiz, _, _ = published_quiz
    monkeypatch.setattr(settings_service, "is_maintenance_mode", broken)

    response = client.post(f"/api/quizzes/{quiz['id']}/attempts", headers=user_headers())

    assert response.status_code == 201
