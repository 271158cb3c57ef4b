"""
Tests for the synthesis and theme endpoints.
"""

from deckwright.domain.exceptions import UpstreamReason, UpstreamUnavailable
from tests._helpers.fakes import plan_json

BRIEF = {
    "title": "Intro to Photosynthesis",
    "language": "en",
    "outline": "light reactions; dark reactions; products",
}


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_request_id_echoed(self, client):
        response = client.get("/health", headers={"X-Request-ID": "req-42"})

        assert response.headers["X-Request-ID"] == "req-42"

    def test_request_id_generated_when_absent(self, client):
        first = client.get("/health").headers["X-Request-ID"]
        second = client.get("/health").headers["X-Request-ID"]

        assert len(first) == 32
        assert first != second


class TestThemesEndpoint:
    def test_free_listing(self, client):
        response = client.get("/api/v1/themes", params={"tier": "free"})

        assert response.status_code == 200
        data = response.json()
        assert data["tier"] == "free"
        available = [t["key"] for t in data["themes"] if t["available"]]
        assert available == ["minimal", "modern"]

    def test_pro_listing(self, client):
        data = client.get("/api/v1/themes?tier=pro").json()

        assert {t["key"] for t in data["themes"] if t["available"]} == {
            "minimal",
            "modern",
            "corporate",
            "colorful",
            "creative",
        }


class TestSynthesizePlanEndpoint:
    def test_plan_with_mock_client(self, client):
        response = client.post("/api/v1/plans", json=BRIEF)

        assert response.status_code == 200
        data = response.json()
        assert data["projectTitle"] == "Intro to Photosynthesis"
        assert 3 <= len(data["slides"]) <= 30
        assert "speakerNotes" in data["slides"][2]
        assert "bullets" not in data["slides"][0]

    def test_invalid_brief(self, client):
        response = client.post("/api/v1/plans", json={"title": "x"})

        assert response.status_code == 422
        body = response.json()
        assert body["error"] == "VALIDATION_ERROR"
        assert any(issue["path"].endswith("language") for issue in body["issues"])

    def test_synthesis_failed(self, client, use_scripted_llm):
        bad = '{"projectTitle": "X", "slides": []}'
        use_scripted_llm.queue(bad, bad)

        response = client.post("/api/v1/plans", json=BRIEF)

        assert response.status_code == 502
        body = response.json()
        assert body["error"] == "SYNTHESIS_FAILED"
        assert "slides" in [issue["path"] for issue in body["issues"]]
        assert use_scripted_llm.calls == 2

    def test_rate_limited(self, client, use_scripted_llm):
        use_scripted_llm.queue(
            UpstreamUnavailable(UpstreamReason.RATE_LIMITED, detail="raw 429 text", retry_after=12)
        )

        response = client.post("/api/v1/plans", json=BRIEF)

        assert response.status_code == 429
        assert response.headers["Retry-After"] == "12"
        body = response.json()
        assert body["retryAfterSeconds"] == 12
        assert "raw 429 text" not in response.text

    def test_quota_exceeded_is_unavailable(self, client, use_scripted_llm):
        use_scripted_llm.queue(UpstreamUnavailable(UpstreamReason.QUOTA_EXCEEDED))

        response = client.post("/api/v1/plans", json=BRIEF)

        assert response.status_code == 503
        assert response.json()["error"] == "UPSTREAM_UNAVAILABLE"

    def test_refinement_failure_is_invisible(self, client, use_scripted_llm):
        use_scripted_llm.queue(plan_json(), "not json at all")

        response = client.post("/api/v1/plans", json=BRIEF)

        assert response.status_code == 200
        assert response.json()["projectTitle"] == "Deck Under Test"


class TestCommentEndpoint:
    def test_comment(self, client):
        response = client.post("/api/v1/plans/comment", json=BRIEF)

        assert response.status_code == 200
        assert response.json()["comment"]
