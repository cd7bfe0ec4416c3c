"""HTTP API tests — catalog, session flow, learner records."""

from __future__ import annotations

import pytest
from httpx import AsyncClient

from tests.fakes import auth_headers

TXID = "e3" * 32
ADDRESS = "tb1qw508d6qejxtdg4y5r3zarvary0c5xw7kxpjzsx"


async def _start(client: AsyncClient, module_id: int = 1, headers: dict | None = None) -> dict:
    response = await client.post(f"/api/v1/modules/{module_id}/sessions", headers=headers or {})
    assert response.status_code == 201, response.text
    return response.json()


async def _pass_quiz(client: AsyncClient, sid: str, answers: list[int], headers: dict | None = None) -> None:
    headers = headers or {}
    navigate = f"/api/v1/sessions/{sid}/navigate"
    assert (await client.post(navigate, json={"target": "questions"}, headers=headers)).status_code == 200
    for i, option in enumerate(answers):
        response = await client.post(
            f"/api/v1/sessions/{sid}/questions/{i}/answer", json={"option_index": option}, headers=headers
        )
        assert response.status_code == 200
    assert (await client.post(navigate, json={"target": "tasks"}, headers=headers)).status_code == 200


class TestCatalog:
    @pytest.mark.asyncio
    async def test_list_modules(self, client: AsyncClient):
        response = await client.get("/api/v1/modules")
        assert response.status_code == 200
        modules = response.json()
        assert [m["id"] for m in modules] == [1, 2, 3, 4, 5]
        assert modules[0]["task_count"] == 2

    @pytest.mark.asyncio
    async def test_detail_hides_answers(self, client: AsyncClient):
        response = await client.get("/api/v1/modules/2")
        assert response.status_code == 200
        data = response.json()
        assert data["requires_login"] is True
        assert "correct_answer" not in data["questions"][0]
        assert "hints" not in data["tasks"][0]
        assert data["tasks"][0]["hint_count"] == 4
        assert data["tasks"][0]["external_links"][0]["url"] == "https://signet.bc-2.jp/"

    @pytest.mark.asyncio
    async def test_mining_module_detail(self, client: AsyncClient):
        data = (await client.get("/api/v1/modules/4")).json()
        assert data["requires_login"] is True
        assert data["badge_name"] == "Mining Apprentice"
        assert [t["validation_type"] for t in data["tasks"]] == ["transaction", "amount"]

    @pytest.mark.asyncio
    async def test_unknown_module(self, client: AsyncClient):
        response = await client.get("/api/v1/modules/42")
        assert response.status_code == 404
        assert response.json() == {"detail": "Module not found"}


class TestGuestSession:
    @pytest.mark.asyncio
    async def test_start_session(self, client: AsyncClient):
        data = await _start(client)
        assert data["guest"] is True
        assert data["section"] == "intro"
        assert data["tasks"]["current_task_index"] == 0
        assert data["quiz"]["total"] == 4

    @pytest.mark.asyncio
    async def test_login_required_module(self, client: AsyncClient):
        response = await client.post("/api/v1/modules/2/sessions")
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_skipping_quiz_conflicts(self, client: AsyncClient):
        sid = (await _start(client))["session_id"]
        response = await client.post(f"/api/v1/sessions/{sid}/navigate", json={"target": "tasks"})
        assert response.status_code == 409
        assert "Invalid transition" in response.json()["detail"]

    @pytest.mark.asyncio
    async def test_tasks_locked_until_task_phase(self, client: AsyncClient):
        sid = (await _start(client))["session_id"]
        submit = await client.post(f"/api/v1/sessions/{sid}/tasks/0/submit", json={"input": TXID})
        assert submit.status_code == 409
        assert "tasks section" in submit.json()["detail"]
        assert (await client.post(f"/api/v1/sessions/{sid}/tasks/advance")).status_code == 409
        assert (await client.post(f"/api/v1/sessions/{sid}/tasks/hints")).status_code == 409

        state = (await client.get(f"/api/v1/sessions/{sid}")).json()
        assert state["tasks"]["completed_count"] == 0
        assert state["tasks"]["items"][0]["status"] != "completed"

    @pytest.mark.asyncio
    async def test_unknown_section_is_422(self, client: AsyncClient):
        sid = (await _start(client))["session_id"]
        response = await client.post(f"/api/v1/sessions/{sid}/navigate", json={"target": "bonus"})
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_answer_reports_correctness(self, client: AsyncClient):
        sid = (await _start(client))["session_id"]
        await client.post(f"/api/v1/sessions/{sid}/navigate", json={"target": "questions"})
        response = await client.post(f"/api/v1/sessions/{sid}/questions/0/answer", json={"option_index": 0})
        data = response.json()
        assert data["correct"] is False
        assert data["correct_answer"] == 2

        missing = await client.post(f"/api/v1/sessions/{sid}/questions/9/answer", json={"option_index": 0})
        assert missing.status_code == 404

    @pytest.mark.asyncio
    async def test_full_module_walkthrough(self, client: AsyncClient):
        sid = (await _start(client))["session_id"]
        await _pass_quiz(client, sid, [2, 1, 1, 1])

        rejected = await client.post(f"/api/v1/sessions/{sid}/tasks/0/submit", json={"input": "xyz"})
        assert rejected.json()["result"]["success"] is False
        assert rejected.json()["session"]["tasks"]["items"][0]["status"] == "in_progress"

        accepted = await client.post(f"/api/v1/sessions/{sid}/tasks/0/submit", json={"input": TXID})
        body = accepted.json()
        assert body["result"]["verdict"] == "unverified"
        assert body["session"]["tasks"]["items"][0]["status"] == "completed"

        advanced = await client.post(f"/api/v1/sessions/{sid}/tasks/advance")
        assert advanced.json()["moved"] is True

        await client.post(f"/api/v1/sessions/{sid}/tasks/1/submit", json={"input": "0.06"})
        done = await client.post(f"/api/v1/sessions/{sid}/tasks/complete")
        data = done.json()
        assert data["all_completed"] is True
        assert data["session"]["section"] == "completed"
        assert data["session"]["badge_eligible"] is True
        assert data["session"]["badge_earned"] is False  # guests are not persisted

    @pytest.mark.asyncio
    async def test_submit_future_task_is_noop(self, client: AsyncClient):
        sid = (await _start(client))["session_id"]
        await _pass_quiz(client, sid, [0, 0, 0, 0])
        response = await client.post(f"/api/v1/sessions/{sid}/tasks/1/submit", json={"input": "0.06"})
        assert response.status_code == 200
        body = response.json()
        assert body["result"] is None
        assert body["session"]["tasks"]["items"][1]["status"] == "not_started"

    @pytest.mark.asyncio
    async def test_manual_hint_after_two_attempts(self, client: AsyncClient):
        sid = (await _start(client))["session_id"]
        await _pass_quiz(client, sid, [2, 1, 1, 1])

        denied = await client.post(f"/api/v1/sessions/{sid}/tasks/hints")
        assert denied.json()["granted"] is False

        for _ in range(2):
            await client.post(f"/api/v1/sessions/{sid}/tasks/0/submit", json={"input": "nope"})
        granted = await client.post(f"/api/v1/sessions/{sid}/tasks/hints")
        body = granted.json()
        assert body["granted"] is True
        assert body["session"]["tasks"]["items"][0]["revealed_hints"] == [
            "The hash is a 64-character sequence (numbers and letters)"
        ]

    @pytest.mark.asyncio
    async def test_restart_and_close(self, client: AsyncClient):
        sid = (await _start(client))["session_id"]
        await _pass_quiz(client, sid, [2, 1, 1, 1])
        restarted = await client.post(f"/api/v1/sessions/{sid}/restart")
        assert restarted.json()["section"] == "intro"
        assert restarted.json()["quiz"]["answers"] == []

        assert (await client.delete(f"/api/v1/sessions/{sid}")).status_code == 204
        assert (await client.get(f"/api/v1/sessions/{sid}")).status_code == 404

    @pytest.mark.asyncio
    async def test_unknown_session(self, client: AsyncClient):
        response = await client.get("/api/v1/sessions/does-not-exist")
        assert response.status_code == 404
        assert response.json() == {"detail": "Session not found"}


class TestLearnerRecords:
    @pytest.mark.asyncio
    async def test_progress_requires_auth(self, client: AsyncClient):
        assert (await client.get("/api/v1/progress")).status_code in (401, 403)

    @pytest.mark.asyncio
    async def test_invalid_token_rejected(self, client: AsyncClient):
        response = await client.get("/api/v1/badges", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_learner_completes_module_2(self, client: AsyncClient, learner_headers: dict):
        data = await _start(client, module_id=2, headers=learner_headers)
        assert data["guest"] is False
        sid = data["session_id"]
        await _pass_quiz(client, sid, [1, 2, 2], headers=learner_headers)

        tasks = f"/api/v1/sessions/{sid}/tasks"
        await client.post(f"{tasks}/0/submit", json={"input": ADDRESS}, headers=learner_headers)
        await client.post(f"{tasks}/advance", headers=learner_headers)
        await client.post(f"{tasks}/1/submit", json={"input": TXID}, headers=learner_headers)
        done = (await client.post(f"{tasks}/complete", headers=learner_headers)).json()
        assert done["session"]["badge_earned"] is True

        progress = (await client.get("/api/v1/progress", headers=learner_headers)).json()
        assert progress["modules"][0]["module_id"] == 2
        assert progress["modules"][0]["completed"] is True
        assert progress["modules"][0]["questions_score"] == 3

        badges = (await client.get("/api/v1/badges", headers=learner_headers)).json()
        assert badges["total_earned"] == 1
        assert badges["earned"][0]["badge_name"] == "Key Guardian"

        other = (await client.get("/api/v1/badges", headers=auth_headers("someone-else"))).json()
        assert other["total_earned"] == 0

    @pytest.mark.asyncio
    async def test_learner_resumes_progress(self, client: AsyncClient, learner_headers: dict):
        sid = (await _start(client, headers=learner_headers))["session_id"]
        await _pass_quiz(client, sid, [2, 1, 1, 1], headers=learner_headers)
        await client.post(f"/api/v1/sessions/{sid}/tasks/0/submit", json={"input": TXID}, headers=learner_headers)
        await client.delete(f"/api/v1/sessions/{sid}", headers=learner_headers)

        resumed = await _start(client, headers=learner_headers)
        assert resumed["quiz"]["complete"] is True
        assert resumed["tasks"]["current_task_index"] == 1
        assert resumed["tasks"]["items"][0]["last_result"]["message"] == "Completed in a previous session."

    @pytest.mark.asyncio
    async def test_session_of_another_learner_is_forbidden(self, client: AsyncClient, learner_headers: dict):
        sid = (await _start(client, headers=learner_headers))["session_id"]

        as_guest = await client.post(f"/api/v1/sessions/{sid}/navigate", json={"target": "questions"})
        assert as_guest.status_code == 403
        assert as_guest.json() == {"detail": "Session belongs to another learner"}

        other = auth_headers("someone-else")
        assert (await client.get(f"/api/v1/sessions/{sid}", headers=other)).status_code == 403
        assert (await client.delete(f"/api/v1/sessions/{sid}", headers=other)).status_code == 403

        own = await client.get(f"/api/v1/sessions/{sid}", headers=learner_headers)
        assert own.status_code == 200
        assert own.json()["section"] == "intro"
