import pytest
from fastapi.testclient import TestClient

import api
from auth import Member, get_current_member, get_optional_member
from config import Settings
from core.errors import PersistenceFailure
from core.respondent import ViewerTier
from fixtures.sample_responses import leaning_answers, uniform_answers
from storage.memory_store import InMemoryLeadSink, InMemoryResponseStore

MEMBER = Member(id="m-1", email="member@example.com", tier=ViewerTier.FREE)


class BrokenStore(InMemoryResponseStore):
    async def list_results(self, member_id, assessment_id=None):
        raise PersistenceFailure("down")


@pytest.fixture
def store():
    return InMemoryResponseStore()


@pytest.fixture
def leads():
    return InMemoryLeadSink()


@pytest.fixture
def client(store, leads, monkeypatch):
    monkeypatch.setattr(api, "settings", Settings(save_backoff_seconds=0))
    api.app.dependency_overrides[api.get_store] = lambda: store
    api.app.dependency_overrides[api.get_leads] = lambda: leads
    yield TestClient(api.app)
    api.app.dependency_overrides.clear()


@pytest.fixture
def member_client(client):
    api.app.dependency_overrides[get_current_member] = lambda: MEMBER
    api.app.dependency_overrides[get_optional_member] = lambda: MEMBER
    return client


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_list_assessments(client):
    ids = [a["id"] for a in client.get("/assessments").json()["assessments"]]
    assert ids == [
        "spiritual-gifts", "seasonal", "prophetic-expression",
        "ministry-calling", "redemptive-gifts", "spiritual-maturity",
    ]


def test_questions(client):
    body = client.get("/assessments/seasonal/questions").json()
    assert len(body["questions"]) == 15
    assert body["questions"][0]["scale"] == {"low": 1, "high": 5}
    assert client.get("/assessments/unknown/questions").status_code == 404


class TestGuestSubmission:
    def test_complete_submission(self, client, store):
        response = client.post("/guest/assessment/seasonal", json={"answers": leaning_answers("seasonal", "fall")})
        assert response.status_code == 200

        body = response.json()
        assert body["results"]["primary_result"] == "Fall - Season of Transition"
        assert body["results"]["growth_areas"] is None
        assert body["results"]["upgrade_prompt"] == "create_account"
        assert body["saved"] is True
        assert body["result_id"] in store.results

    def test_string_answers_are_accepted(self, client):
        answers = {k: str(v) for k, v in uniform_answers("seasonal").items()}
        assert client.post("/guest/assessment/seasonal", json={"answers": answers}).status_code == 200

    def test_incomplete_lists_missing_questions(self, client):
        answers = uniform_answers("seasonal")
        del answers["3"]
        response = client.post("/guest/assessment/seasonal", json={"answers": answers})
        assert response.status_code == 400
        assert response.json()["detail"]["missing"] == ["3"]

    def test_out_of_range_answer(self, client):
        answers = uniform_answers("seasonal")
        answers["3"] = 6
        assert client.post("/guest/assessment/seasonal", json={"answers": answers}).status_code == 400

    def test_unknown_assessment(self, client):
        response = client.post("/guest/assessment/nope", json={"answers": {"1": 3}})
        assert response.status_code == 404


class TestMemberSubmission:
    def test_requires_authentication(self, client):
        response = client.post("/member/assessment/seasonal", json={"answers": uniform_answers("seasonal")})
        assert response.status_code == 401

    def test_retake_and_comparison(self, member_client):
        url = "/member/assessment/spiritual-maturity"
        first = member_client.post(url, json={"answers": uniform_answers("spiritual-maturity", 3)}).json()
        second = member_client.post(url, json={"answers": uniform_answers("spiritual-maturity", 4)}).json()

        assert first["retake_number"] == 1
        assert first["is_retake"] is False
        assert second["retake_number"] == 2
        assert second["is_retake"] is True
        assert second["comparison"]["summary"] == "You've grown 20% in spiritual maturity"
        assert second["results"]["growth_areas"]
        assert second["results"]["upgrade_prompt"] == "become_partner"

    def test_history(self, member_client):
        for value in (3, 4):
            member_client.post("/member/assessment/seasonal", json={"answers": uniform_answers("seasonal", value)})

        body = member_client.get("/member/assessments/history").json()
        assert body["summary"]["total_completions"] == 2
        assert body["assessment_history"][0]["times_completed"] == 2

    def test_storage_outage_is_503(self, member_client):
        api.app.dependency_overrides[api.get_store] = lambda: BrokenStore()
        response = member_client.get("/member/assessments/history")
        assert response.status_code == 503


class TestProgress:
    def test_save_load_clear_with_email(self, client):
        url = "/assessments/seasonal/progress"
        saved = client.post(url, json={"answers": {"1": 4, "2": 2}, "current_question": 2, "email": "A@B.co"})
        assert saved.status_code == 200
        assert saved.json()["current_question"] == 2

        loaded = client.get(url, params={"email": "a@b.co"}).json()
        assert loaded["answers"] == {"1": 4, "2": 2}
        assert loaded["current_question"] == 2
        assert loaded["has_progress"] is True

        assert client.delete(url, params={"email": "a@b.co"}).status_code == 200
        assert client.get(url, params={"email": "a@b.co"}).json()["has_progress"] is False

    def test_member_progress(self, member_client, store):
        member_client.post("/assessments/seasonal/progress", json={"answers": {"1": 5}, "current_question": 1})
        assert ("seasonal", "member:m-1") in store.progress

    def test_requires_identity(self, client):
        response = client.post("/assessments/seasonal/progress", json={"answers": {"1": 4}})
        assert response.status_code == 401

    def test_invalid_answer(self, client):
        response = client.post(
            "/assessments/seasonal/progress",
            json={"answers": {"1": 0}, "email": "a@b.co"},
        )
        assert response.status_code == 400


class TestLeads:
    def test_capture(self, client, leads):
        response = client.post("/assessments/spiritual-gifts/lead", json={"email": "New@Example.com"})
        assert response.status_code == 200
        assert leads.leads == [
            {"email": "new@example.com", "source": "assessment-progress: spiritual-gifts", "status": "new"}
        ]

    def test_invalid_email(self, client):
        assert client.post("/assessments/seasonal/lead", json={"email": "nope"}).status_code == 400


class TestResults:
    def test_guest_result_is_public(self, client):
        result_id = client.post(
            "/guest/assessment/seasonal", json={"answers": uniform_answers("seasonal")}
        ).json()["result_id"]
        body = client.get(f"/results/{result_id}").json()
        assert body["results"]["viewer_tier"] == "anonymous"

    def test_member_result_is_private(self, member_client):
        result_id = member_client.post(
            "/member/assessment/seasonal", json={"answers": uniform_answers("seasonal")}
        ).json()["result_id"]
        assert member_client.get(f"/results/{result_id}").json()["results"]["viewer_tier"] == "free"

        api.app.dependency_overrides[get_optional_member] = lambda: None
        assert member_client.get(f"/results/{result_id}").status_code == 404

    def test_unknown_result(self, client):
        assert client.get("/results/does-not-exist").status_code == 404
