"""Tests for the candidate REST endpoints."""

from datetime import timedelta

import pytest

from conftest import create_link


@pytest.mark.asyncio
async def test_open_assessment(client, link):
    response = await client.get(f"/api/take/{link.link_token}")

    assert response.status_code == 200
    data = response.json()
    assert data["candidate"] == {"name": "Carla Candidate", "email": "cand@example.com"}
    assert data["assessment"]["title"] == "Python Basics"
    assert data["assessment"]["total_time"] == 10
    assert data["assessment"]["time_per_question"] == 2
    assert [q["id"] for q in data["assessment"]["questions"]] == ["q1", "q2", "q3"]
    for question in data["assessment"]["questions"]:
        assert "correct_answer" not in question
        assert len(question["options"]) == 4


@pytest.mark.asyncio
async def test_open_unknown_link(client, link):
    response = await client.get("/api/take/unknown-token")

    assert response.status_code == 404
    assert response.json()["detail"] == {"error": "Assessment unavailable", "reason": "not_found"}


@pytest.mark.asyncio
async def test_open_expired_link(client, db, assessment):
    expired = await create_link(db, assessment, token="expired", expires_in=timedelta(minutes=-1))

    response = await client.get(f"/api/take/{expired.link_token}")

    assert response.status_code == 410
    assert response.json()["detail"]["reason"] == "expired"


@pytest.mark.asyncio
async def test_submit_and_reopen(client, link):
    payload = {
        "answers": [
            {"question_id": "q1", "selected_answer": 0},
            {"question_id": "q2", "selected_answer": 3},
        ],
        "time_taken": 4,
    }

    response = await client.post(f"/api/take/{link.link_token}/submit", json=payload)

    assert response.status_code == 200
    data = response.json()
    assert data["score"] == 1
    assert data["total_questions"] == 3
    assert data["time_taken"] == 4
    assert [a["selected_answer"] for a in data["answers"]] == [0, 3, -1]

    reopened = await client.get(f"/api/take/{link.link_token}")
    assert reopened.status_code == 409
    assert reopened.json()["detail"]["reason"] == "already_completed"


@pytest.mark.asyncio
async def test_resubmit_conflicts(client, link):
    payload = {"answers": [{"question_id": "q1", "selected_answer": 0}], "time_taken": 1}

    first = await client.post(f"/api/take/{link.link_token}/submit", json=payload)
    second = await client.post(f"/api/take/{link.link_token}/submit", json=payload)

    assert first.status_code == 200
    assert second.status_code == 409
    assert second.json()["detail"] == {
        "error": "Assessment unavailable", "reason": "already_completed"}


@pytest.mark.asyncio
async def test_client_score_is_ignored(client, link):
    payload = {
        "answers": [{"question_id": "q1", "selected_answer": 3}],
        "time_taken": 1,
        "score": 3,
    }

    response = await client.post(f"/api/take/{link.link_token}/submit", json=payload)

    assert response.status_code == 200
    assert response.json()["score"] == 0


@pytest.mark.asyncio
async def test_submit_rejects_malformed_answers(client, link):
    payload = {"answers": [{"question_id": "q1", "selected_answer": -5}], "time_taken": 1}

    response = await client.post(f"/api/take/{link.link_token}/submit", json=payload)

    assert response.status_code == 422
