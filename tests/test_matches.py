import pytest
from fastapi.testclient import TestClient


@pytest.fixture
def test_app():
    from fastapi import FastAPI
    from talentmatch.routers import matches

    app = FastAPI()
    app.include_router(matches.router, prefix="/match")
    return app


@pytest.fixture
def client(test_app):
    return TestClient(test_app)


@pytest.fixture
def job():
    return {
        "job_id": "job-1",
        "title": "Backend Engineer",
        "skills": ["python", "aws"],
        "min_experience": 3,
        "embedding": [1.0, 0.0],
    }


@pytest.fixture
def candidates():
    return [
        {"candidate_id": "B", "skills": ["python", "aws"], "years_experience": 5, "embedding": [1.0, 0.0]},
        {"candidate_id": "A", "skills": ["python", "aws"], "years_experience": 5, "embedding": [1.0, 0.0]},
        {"candidate_id": "C", "skills": [], "years_experience": 0},
        {"candidate_id": "D", "skills": ["aws"], "years_experience": 1, "embedding": [1.0, 0.0, 0.0]},
    ]


class TestMatchRouter:
    """Test cases for scoring, shortlist and bulk decision endpoints"""

    def test_score_end_to_end(self, client, job):
        candidate = {
            "candidate_id": "cand-1",
            "skills": ["Python", "React"],
            "years_experience": 4,
            "embedding": [0.8, 0.6],
        }

        response = client.post("/match/score", json={"job": job, "candidate": candidate})

        assert response.status_code == 200
        data = response.json()
        assert data["overall"] == pytest.approx(0.66)
        assert data["sub_scores"]["skills"] == 0.5
        assert data["matched_skills"] == ["python"]
        assert data["missing_skills"] == ["aws"]
        assert data["explanation"]

    def test_score_dimension_mismatch(self, client, job):
        candidate = {"candidate_id": "cand-1", "embedding": [1.0, 0.0, 0.0]}
        response = client.post("/match/score", json={"job": job, "candidate": candidate})
        assert response.status_code == 400
        assert response.json()["detail"]["error"]["error_code"] == "DIMENSION_MISMATCH"

    def test_score_closed_job(self, client, job):
        job["status"] = "closed"
        candidate = {"candidate_id": "cand-1", "skills": ["python"], "years_experience": 4, "embedding": [1.0, 0.0]}

        response = client.post("/match/score", json={"job": job, "candidate": candidate})

        assert response.status_code == 400
        assert response.json()["detail"]["error"]["error_code"] == "INVALID_ARGUMENT"

    def test_shortlist(self, client, job, candidates):
        response = client.post("/match/shortlist", json={"job": job, "candidates": candidates, "top_n": 2})

        assert response.status_code == 200
        data = response.json()
        assert [r["candidate_id"] for r in data["results"]] == ["A", "B"]
        assert [r["rank"] for r in data["results"]] == [1, 2]
        assert data["total_evaluated"] == 4
        assert [s["item_id"] for s in data["skipped"]] == ["D"]

    def test_shortlist_rejects_zero_top_n(self, client, job, candidates):
        response = client.post("/match/shortlist", json={"job": job, "candidates": candidates, "top_n": 0})
        assert response.status_code == 422

    def test_shortlist_without_candidates(self, client, job):
        response = client.post("/match/shortlist", json={"job": job, "candidates": [], "top_n": 3})
        assert response.status_code == 404
        assert response.json()["detail"]["error"]["error_code"] == "EMPTY_INPUT"

    def test_shortlist_closed_job(self, client, job, candidates):
        job["status"] = "closed"
        response = client.post("/match/shortlist", json={"job": job, "candidates": candidates, "top_n": 3})
        assert response.status_code == 400

    def test_bulk_decision(self, client, job, candidates):
        response = client.post("/match/bulk-decision", json={"job": job, "candidates": candidates, "top_n": 1})

        assert response.status_code == 200
        data = response.json()
        assert data["selected"] == ["A"]
        assert data["rejected"] == ["B", "C"]
        assert data["selected_count"] == 1
        assert data["rejected_count"] == 2
        assert [s["item_id"] for s in data["skipped"]] == ["D"]

    def test_bulk_decision_zero_rejects_all(self, client, job, candidates):
        response = client.post("/match/bulk-decision", json={"job": job, "candidates": candidates, "top_n": 0})
        assert response.status_code == 200
        assert response.json()["selected"] == []
        assert response.json()["rejected"] == ["A", "B", "C"]

    def test_invalid_payload(self, client, job):
        response = client.post("/match/score", json={"job": job})
        assert response.status_code == 422

    def test_bulk_decision_reports_decisions(self, client, job, candidates):
        response = client.post("/match/bulk-decision", json={"job": job, "candidates": candidates, "top_n": 2})

        assert response.status_code == 200
        assert response.json()["decisions"] == {
            "A": "selected",
            "B": "selected",
            "C": "rejected",
            "D": "pending",
        }

    def test_reject_pending(self, client):
        statuses = {"A": "selected", "B": "pending", "C": "rejected", "D": "pending"}
        response = client.post("/match/reject-pending", json={"job_id": "job-1", "statuses": statuses})

        assert response.status_code == 200
        data = response.json()
        assert data["rejected_count"] == 2
        assert data["decisions"] == {"A": "selected", "B": "rejected", "C": "rejected", "D": "rejected"}

    def test_reject_pending_unknown_status(self, client):
        response = client.post("/match/reject-pending", json={"job_id": "job-1", "statuses": {"A": "maybe"}})
        assert response.status_code == 422
