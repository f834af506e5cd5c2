"""
Tests for the admin endpoints.

Tests:
- Login and current user
- Assessment CRUD and locking
- Link generation and invitation
- Results and dashboard stats
- Question bank
"""

import pytest

from conftest import make_questions
from quizlink.core.exceptions import TransportFailureError
from quizlink.models.user import UserRole
from quizlink.repositories.user_repo import create_user


def assessment_payload(**overrides):
    payload = {
        "title": "SQL Fundamentals",
        "description": "Joins and indexes",
        "total_time": 15,
        "time_per_question": 3,
        "questions": [q.model_dump() for q in make_questions()],
    }
    payload.update(overrides)
    return payload


class TestAuth:

    @pytest.mark.asyncio
    async def test_login(self, client, admin):
        response = await client.post("/api/auth/login", json={"email": "ADMIN@example.com"})

        assert response.status_code == 200
        data = response.json()
        assert data["token"]
        assert data["user"]["email"] == "admin@example.com"
        assert data["user"]["role"] == "admin"

    @pytest.mark.asyncio
    async def test_login_unknown_email(self, client, admin):
        response = await client.post("/api/auth/login", json={"email": "nobody@example.com"})
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_login_rejects_candidates(self, client, db):
        await create_user(db, "Carl Candidate", "carl@example.com", role=UserRole.candidate)

        response = await client.post("/api/auth/login", json={"email": "carl@example.com"})
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_me(self, client, admin_headers):
        response = await client.get("/api/auth/me", headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["full_name"] == "Ada Admin"

    @pytest.mark.asyncio
    async def test_requires_token(self, client, admin):
        response = await client.get("/api/assessments/")
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_invalid_token(self, client, admin):
        response = await client.get(
            "/api/assessments/", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401


class TestAssessments:

    @pytest.mark.asyncio
    async def test_create_and_list(self, client, admin_headers):
        created = await client.post("/api/assessments/", json=assessment_payload(), headers=admin_headers)

        assert created.status_code == 201
        body = created.json()
        assert body["title"] == "SQL Fundamentals"
        assert len(body["questions"]) == 3

        listed = await client.get("/api/assessments/", headers=admin_headers)
        assert [a["assessment_id"] for a in listed.json()] == [body["assessment_id"]]

    @pytest.mark.asyncio
    async def test_create_rejects_bad_question(self, client, admin_headers):
        questions = [q.model_dump() for q in make_questions()]
        questions[0]["correct_answer"] = 4

        response = await client.post(
            "/api/assessments/", json=assessment_payload(questions=questions), headers=admin_headers)

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_create_requires_questions(self, client, admin_headers):
        response = await client.post(
            "/api/assessments/", json=assessment_payload(questions=[]), headers=admin_headers)
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_other_admin_forbidden(self, client, db, assessment):
        from quizlink.core.security import create_access_token
        other = await create_user(db, "Otto Other", "otto@example.com")
        headers = {"Authorization": f"Bearer {create_access_token({'sub': other.email})}"}

        response = await client.get(f"/api/assessments/{assessment.assessment_id}", headers=headers)
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_update_before_links(self, client, admin_headers, assessment):
        response = await client.put(
            f"/api/assessments/{assessment.assessment_id}",
            json={"title": "Python Advanced", "total_time": 20},
            headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["title"] == "Python Advanced"
        assert response.json()["total_time"] == 20
        assert response.json()["time_per_question"] == 2

    @pytest.mark.asyncio
    async def test_locked_once_link_exists(self, client, admin_headers, assessment, link):
        updated = await client.put(
            f"/api/assessments/{assessment.assessment_id}",
            json={"title": "Changed"}, headers=admin_headers)
        deleted = await client.delete(
            f"/api/assessments/{assessment.assessment_id}", headers=admin_headers)

        assert updated.status_code == 409
        assert deleted.status_code == 409

    @pytest.mark.asyncio
    async def test_delete(self, client, admin_headers, assessment):
        response = await client.delete(
            f"/api/assessments/{assessment.assessment_id}", headers=admin_headers)
        assert response.status_code == 200

        missing = await client.get(
            f"/api/assessments/{assessment.assessment_id}", headers=admin_headers)
        assert missing.status_code == 404


class TestLinks:

    @pytest.mark.asyncio
    async def test_generate_link(self, client, admin_headers, assessment, notifier):
        response = await client.post(
            f"/api/assessments/{assessment.assessment_id}/generate-link",
            json={"candidate_email": "Jane.Doe@Example.com", "candidate_name": "Jane Doe"},
            headers=admin_headers)

        assert response.status_code == 201
        data = response.json()
        token = data["link"]["link_token"]
        assert len(token) == 32
        assert data["link"]["candidate_email"] == "jane.doe@example.com"
        assert data["link"]["is_used"] is False
        assert data["assessment_url"].endswith(f"/take/{token}")
        assert data["invitation_sent"] is True
        notifier.send_assessment_invitation.assert_called_once()
        kwargs = notifier.send_assessment_invitation.call_args.kwargs
        assert kwargs["assessment_url"] == data["assessment_url"]
        assert kwargs["expiry_hours"] == 48

        opened = await client.get(f"/api/take/{token}")
        assert opened.status_code == 200

    @pytest.mark.asyncio
    async def test_generate_link_when_email_fails(self, client, admin_headers, assessment, notifier):
        notifier.send_assessment_invitation.side_effect = TransportFailureError("down")

        response = await client.post(
            f"/api/assessments/{assessment.assessment_id}/generate-link",
            json={"candidate_email": "jane@example.com", "candidate_name": "Jane Doe"},
            headers=admin_headers)

        assert response.status_code == 201
        assert response.json()["invitation_sent"] is False

    @pytest.mark.asyncio
    async def test_list_links(self, client, admin_headers, assessment, link):
        response = await client.get(
            f"/api/assessments/{assessment.assessment_id}/links", headers=admin_headers)

        assert response.status_code == 200
        assert [l["link_token"] for l in response.json()] == [link.link_token]


class TestResults:

    @pytest.mark.asyncio
    async def test_results_and_dashboard(self, client, admin_headers, assessment, link):
        await client.post(
            f"/api/take/{link.link_token}/submit",
            json={"answers": [{"question_id": "q1", "selected_answer": 0},
                              {"question_id": "q2", "selected_answer": 1}],
                  "time_taken": 3})

        results = await client.get(
            f"/api/assessments/{assessment.assessment_id}/results", headers=admin_headers)

        assert results.status_code == 200
        rows = results.json()
        assert len(rows) == 1
        assert rows[0]["candidate_name"] == "Carla Candidate"
        assert rows[0]["score"] == 2
        assert rows[0]["percentage_score"] == 66.7

        stats = await client.get("/api/dashboard/stats", headers=admin_headers)
        assert stats.json() == {
            "total_assessments": 1,
            "active_links": 0,
            "completed": 1,
            "avg_score": "67%",
        }

    @pytest.mark.asyncio
    async def test_dashboard_empty(self, client, admin_headers):
        stats = await client.get("/api/dashboard/stats", headers=admin_headers)

        assert stats.status_code == 200
        assert stats.json() == {
            "total_assessments": 0, "active_links": 0, "completed": 0, "avg_score": "0%"}


class TestQuestionBank:

    @staticmethod
    def item(**overrides):
        data = {
            "question_text": "What does len([]) return?",
            "options": ["0", "1", "None", "Error"],
            "correct_answer": 0,
            "category": "python",
            "difficulty": "easy",
            "tags": ["builtins"],
        }
        data.update(overrides)
        return data

    @pytest.mark.asyncio
    async def test_crud(self, client, admin_headers):
        created = await client.post("/api/questions/", json=self.item(), headers=admin_headers)
        assert created.status_code == 201
        question_id = created.json()["question_id"]

        updated = await client.put(
            f"/api/questions/{question_id}", json={"difficulty": "medium"}, headers=admin_headers)
        assert updated.status_code == 200
        assert updated.json()["difficulty"] == "medium"

        deleted = await client.delete(f"/api/questions/{question_id}", headers=admin_headers)
        assert deleted.status_code == 200

        missing = await client.delete(f"/api/questions/{question_id}", headers=admin_headers)
        assert missing.status_code == 404

    @pytest.mark.asyncio
    async def test_filters(self, client, admin_headers):
        await client.post("/api/questions/", json=self.item(), headers=admin_headers)
        await client.post("/api/questions/", json=self.item(category="sql"), headers=admin_headers)
        await client.post(
            "/api/questions/", json=self.item(category="sql", difficulty="hard"), headers=admin_headers)

        sql = await client.get("/api/questions/?category=sql", headers=admin_headers)
        hard = await client.get("/api/questions/?category=sql&difficulty=hard", headers=admin_headers)

        assert len(sql.json()) == 2
        assert len(hard.json()) == 1

    @pytest.mark.asyncio
    async def test_update_out_of_range_answer(self, client, admin_headers):
        created = await client.post("/api/questions/", json=self.item(), headers=admin_headers)
        question_id = created.json()["question_id"]

        response = await client.put(
            f"/api/questions/{question_id}", json={"correct_answer": 9}, headers=admin_headers)

        assert response.status_code == 400
