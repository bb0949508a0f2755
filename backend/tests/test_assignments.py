"""Tests for assignment endpoints."""
from fastapi import status

from synthesis.ai import AIResponseError, AIServiceError
from synthesis.models import Assignment, AssignmentFormat, AssignmentStatus


def _mcq(question, correct=0):
    return {"question": question, "options": ["a", "b", "c", "d"], "correct_index": correct}


def test_create_assignment_from_topic(client, auth_headers, fake_ai):
    fake_ai.queue({"title": "Kubernetes basics", "prompt": "Explain pods and services.", "type": "case_study"})

    response = client.post("/assignments", json={"topic": "  Kubernetes  "}, headers=auth_headers)

    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["title"] == "Kubernetes basics"
    assert data["type"] == "case_study"
    assert data["status"] == "draft"
    assert data["topic"] == "Kubernetes"
    assert data["rubric_id"] == "rubric-case-study"
    assert data["resource_ids"] == []
    assert "Topic: Kubernetes" in fake_ai.calls[0]["user"]


def test_create_assignment_with_resources(client, sample_resource, auth_headers, fake_ai):
    fake_ai.queue({"title": "Energy", "prompt": "Write about energy.", "type": "long_form"})

    response = client.post(
        "/assignments",
        json={"topic": "Photosynthesis", "resource_ids": [sample_resource.id]},
        headers=auth_headers,
    )

    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["resource_ids"] == [sample_resource.id]
    assert response.json()["rubric_id"] == "rubric-long-form"
    assert "Photosynthesis notes (Biology, Photosynthesis)" in fake_ai.calls[0]["user"]


def test_create_assignment_format_forces_type(client, auth_headers, fake_ai):
    fake_ai.queue({"title": "Quiz", "prompt": "Answer.", "type": "long_form"})

    response = client.post(
        "/assignments", json={"topic": "Networking", "format": "mixed_format"}, headers=auth_headers,
    )

    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["type"] == "instant_mcq"
    assert data["format"] == "mixed_format"
    assert data["rubric_id"] is None


def test_create_assignment_fills_missing_fields(client, auth_headers, fake_ai):
    fake_ai.queue({"type": "something-else"})

    response = client.post("/assignments", json={"topic": "Graph theory"}, headers=auth_headers)

    data = response.json()
    assert data["title"] == "Assignment: Graph theory"
    assert "Graph theory" in data["prompt"]
    assert data["type"] == "long_form"


def test_create_assignment_rejects_foreign_resource(client, sample_resource, other_headers, fake_ai):
    response = client.post(
        "/assignments", json={"topic": "Stolen", "resource_ids": [sample_resource.id]}, headers=other_headers,
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert fake_ai.calls == []


def test_create_assignment_validation(client, auth_headers):
    assert client.post("/assignments", json={"topic": "   "}, headers=auth_headers).status_code == 400
    assert client.post("/assignments", json={}, headers=auth_headers).status_code == 400
    response = client.post("/assignments", json={"topic": "x", "format": "poem"}, headers=auth_headers)
    assert response.status_code == 400


def test_create_assignment_ai_outage(client, db_session, auth_headers, fake_ai):
    fake_ai.queue(AIServiceError("timeout"))

    response = client.post("/assignments", json={"topic": "Kubernetes"}, headers=auth_headers)

    assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
    assert response.headers["retry-after"]
    assert "try again" in response.json()["detail"].lower()
    assert db_session.query(Assignment).count() == 0


def test_list_assignments_with_status_filter(client, db_session, long_form_assignment, quiz_assignment, auth_headers):
    quiz_assignment.status = AssignmentStatus.submitted
    db_session.commit()

    response = client.get("/assignments", headers=auth_headers)
    assert response.status_code == status.HTTP_200_OK
    assert {a["id"] for a in response.json()["items"]} == {long_form_assignment.id, quiz_assignment.id}

    response = client.get("/assignments", params={"status": "submitted"}, headers=auth_headers)
    assert [a["id"] for a in response.json()["items"]] == [quiz_assignment.id]

    response = client.get("/assignments", params={"status": "archived"}, headers=auth_headers)
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_assignments_are_private(client, long_form_assignment, other_headers):
    assert client.get(f"/assignments/{long_form_assignment.id}", headers=other_headers).status_code == 404
    assert client.get(f"/assignments/{long_form_assignment.id}/rubric", headers=other_headers).status_code == 404
    assert client.get("/assignments", headers=other_headers).json()["items"] == []


def test_get_rubric(client, long_form_assignment, quiz_assignment, auth_headers):
    response = client.get(f"/assignments/{long_form_assignment.id}/rubric", headers=auth_headers)
    assert response.status_code == status.HTTP_200_OK
    rubric = response.json()["rubric"]
    assert rubric["id"] == "rubric-long-form"
    assert [c["id"] for c in rubric["criteria"]] == ["c1", "c2", "c3", "c4"]

    response = client.get(f"/assignments/{quiz_assignment.id}/rubric", headers=auth_headers)
    assert response.json() == {"rubric": None}


class TestQuizGeneration:
    def test_generate_quiz(self, client, quiz_assignment, auth_headers, fake_ai):
        fake_ai.queue({"items": [_mcq(f"Question {i}?", i % 4) for i in range(6)]})

        response = client.post(f"/assignments/{quiz_assignment.id}/quiz", headers=auth_headers)

        assert response.status_code == status.HTTP_200_OK
        items = response.json()["items"]
        assert [item["id"] for item in items] == ["q1", "q2", "q3", "q4", "q5"]
        assert all(item["type"] == "mcq" for item in items)
        assert "Photosynthesis quiz" in fake_ai.calls[0]["user"]

    def test_generate_quiz_includes_linked_text(self, client, db_session, quiz_assignment, sample_resource,
                                                auth_headers, fake_ai):
        quiz_assignment.resource_ids = [sample_resource.id]
        db_session.commit()
        fake_ai.queue({"items": [_mcq(f"Q{i}?") for i in range(5)]})

        client.post(f"/assignments/{quiz_assignment.id}/quiz", headers=auth_headers)

        assert "chemical energy stored in glucose" in fake_ai.calls[0]["user"]

    def test_generate_mixed_quiz(self, client, db_session, quiz_assignment, auth_headers, fake_ai):
        quiz_assignment.format = AssignmentFormat.mixed_format
        db_session.commit()
        fake_ai.queue({"items": [
            _mcq("Q1?"), _mcq("Q2?"), _mcq("Q3?"),
            {"type": "short_answer", "question": "Explain chlorophyll."},
            {"type": "short_answer", "question": "  "},
        ]})

        response = client.post(f"/assignments/{quiz_assignment.id}/quiz", headers=auth_headers)

        items = response.json()["items"]
        assert len(items) == 4
        assert items[3] == {
            "id": "q4", "type": "short_answer", "question": "Explain chlorophyll.",
            "options": None, "correct_index": None,
        }
        assert "short-answer" in fake_ai.calls[0]["system"]

    def test_quiz_only_for_instant_mcq(self, client, long_form_assignment, auth_headers, fake_ai):
        response = client.post(f"/assignments/{long_form_assignment.id}/quiz", headers=auth_headers)
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert fake_ai.calls == []

    def test_quiz_needs_context(self, client, db_session, quiz_assignment, auth_headers):
        quiz_assignment.title = "Q"
        quiz_assignment.prompt = None
        quiz_assignment.topic = None
        db_session.commit()

        response = client.post(f"/assignments/{quiz_assignment.id}/quiz", headers=auth_headers)

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_quiz_generation_failure(self, client, quiz_assignment, auth_headers, fake_ai):
        fake_ai.queue(AIResponseError("bad json"))

        response = client.post(f"/assignments/{quiz_assignment.id}/quiz", headers=auth_headers)

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE

    def test_quiz_with_no_usable_items(self, client, quiz_assignment, auth_headers, fake_ai):
        fake_ai.queue({"items": [{"question": "Broken", "options": ["only one"], "correct_index": 3}]})

        response = client.post(f"/assignments/{quiz_assignment.id}/quiz", headers=auth_headers)

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE


class TestEvaluateShortAnswers:
    def test_evaluate(self, client, quiz_assignment, auth_headers, fake_ai):
        fake_ai.queue({"evaluations": [
            {"index": 0, "evaluation": "Good.", "score": 90},
            {"index": 1, "evaluation": "Vague.", "score": 140},
        ]})

        response = client.post(
            f"/assignments/{quiz_assignment.id}/evaluate-short-answers",
            json={"short_answers": [
                {"question": "What is ATP?", "user_answer": "Energy currency."},
                {"question": "Where?", "user_answer": "Somewhere."},
            ]},
            headers=auth_headers,
        )

        assert response.status_code == status.HTTP_200_OK
        evaluations = response.json()["evaluations"]
        assert evaluations[0]["evaluation"] == "Good."
        assert evaluations[0]["score"] == 90
        assert evaluations[1]["score"] == 100

    def test_evaluate_caps_at_fifteen(self, client, quiz_assignment, auth_headers, fake_ai):
        fake_ai.queue({"evaluations": []})
        answers = [{"question": f"Q{i}", "user_answer": "A"} for i in range(20)]

        response = client.post(
            f"/assignments/{quiz_assignment.id}/evaluate-short-answers",
            json={"short_answers": answers},
            headers=auth_headers,
        )

        evaluations = response.json()["evaluations"]
        assert len(evaluations) == 15
        assert evaluations[0]["score"] == 70

    def test_evaluate_requires_answers(self, client, quiz_assignment, auth_headers):
        response = client.post(
            f"/assignments/{quiz_assignment.id}/evaluate-short-answers",
            json={"short_answers": []},
            headers=auth_headers,
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_evaluate_outage(self, client, quiz_assignment, auth_headers, fake_ai):
        fake_ai.queue(AIServiceError("down"))

        response = client.post(
            f"/assignments/{quiz_assignment.id}/evaluate-short-answers",
            json={"short_answers": [{"question": "Q", "user_answer": "A"}]},
            headers=auth_headers,
        )

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
