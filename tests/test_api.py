"""Integration tests for the HTTP routes and response envelopes."""

from fastapi.testclient import TestClient

from app.api.v1.endpoints.auth import get_current_user
from tests.conftest import NOW, OTHER_TEACHER_ID, STUDENT_1, STUDENT_2, TEACHER_ID, make_article


def seed_articles(store) -> None:
    store.add_article(make_article("article-a", "A"))
    store.add_article(make_article("article-b", "B"))


class TestTrackingRoutes:

    def test_track_session_returns_running_totals(self, client: TestClient, store) -> None:
        seed_articles(store)
        client.act_as(STUDENT_1)

        client.post("/api/v1/tracking", json={"articleId": "article-a", "duration": 60})
        response = client.post(
            "/api/v1/tracking",
            json={
                "articleId": "article-a",
                "duration": 90,
                "sessionStart": "2024-03-15T10:20:00Z",
                "sessionEnd": "2024-03-15T10:21:30Z",
            },
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "View tracked successfully"
        assert body["analytics"]["totalViews"] == 2
        assert body["analytics"]["totalDuration"] == 150
        assert body["analytics"]["lastViewed"].startswith("2024-03-15T10:30:00")

    def test_track_view_returns_aggregate(self, client: TestClient, store) -> None:
        seed_articles(store)
        client.act_as(STUDENT_1)

        response = client.post("/api/v1/analytics/track", json={"articleId": "article-b", "duration": 12.6})

        assert response.status_code == 200
        aggregate = response.json()["analytics"]
        assert aggregate["articleId"] == "article-b"
        assert aggregate["studentId"] == STUDENT_1
        assert aggregate["views"] == 1
        assert aggregate["duration"] == 13
        assert len(aggregate["sessionData"]) == 1

    def test_both_call_shapes_share_one_aggregate(self, client: TestClient, store) -> None:
        seed_articles(store)
        client.act_as(STUDENT_1)

        client.post("/api/v1/analytics/track", json={"articleId": "article-a", "duration": 10})
        response = client.post("/api/v1/tracking", json={"articleId": "article-a", "duration": 20})

        assert response.json()["analytics"]["totalViews"] == 2
        assert response.json()["analytics"]["totalDuration"] == 30

    def test_unknown_article_is_not_found(self, client: TestClient, store) -> None:
        client.act_as(STUDENT_1)

        response = client.post("/api/v1/tracking", json={"articleId": "nope", "duration": 10})

        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Article not found"}

    def test_malformed_article_id_is_client_error(self, client: TestClient) -> None:
        response = client.post("/api/v1/tracking", json={"articleId": "../etc", "duration": 10})

        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_trailing_newline_in_article_id_is_client_error(self, client: TestClient, store) -> None:
        seed_articles(store)

        response = client.post("/api/v1/tracking", json={"articleId": "article-a\n", "duration": 10})

        assert response.status_code == 400
        assert response.json() == {"success": False, "message": "Invalid article ID"}

    def test_missing_article_id_is_client_error(self, client: TestClient) -> None:
        response = client.post("/api/v1/tracking", json={"duration": 10})

        assert response.status_code == 400
        assert response.json()["success"] is False
        assert "articleId" in response.json()["message"]

    def test_negative_duration_is_rejected(self, client: TestClient, store) -> None:
        seed_articles(store)

        response = client.post("/api/v1/tracking", json={"articleId": "article-a", "duration": -5})

        assert response.status_code == 400

    def test_article_stats_for_owner(self, client: TestClient, store) -> None:
        seed_articles(store)
        client.act_as(STUDENT_1)
        client.post("/api/v1/tracking", json={"articleId": "article-a", "duration": 120})

        client.act_as(TEACHER_ID)
        response = client.get("/api/v1/tracking/article/article-a")

        assert response.status_code == 200
        stats = response.json()["stats"]
        assert stats["articleTitle"] == "A"
        assert stats["uniqueStudents"] == 1
        assert stats["studentStats"][0]["studentName"] == "Sam Student"
        assert stats["studentStats"][0]["duration"] == 2
        assert stats["studentStats"][0]["sessions"] == 1

    def test_article_stats_for_non_owner(self, client: TestClient, store) -> None:
        seed_articles(store)
        client.act_as(OTHER_TEACHER_ID)

        response = client.get("/api/v1/tracking/article/article-a")

        assert response.status_code == 404
        assert response.json()["success"] is False

    def test_student_progress(self, client: TestClient, store) -> None:
        seed_articles(store)
        client.act_as(STUDENT_2)
        client.post("/api/v1/tracking", json={"articleId": "article-a", "duration": 60})
        client.post("/api/v1/tracking", json={"articleId": "article-b", "duration": 60})

        response = client.get("/api/v1/tracking/student")

        progress = response.json()["progress"]
        assert progress["totalArticlesRead"] == 2
        assert progress["totalTimeSpent"] == 2
        assert progress["categoryStats"]["Science"]["articlesRead"] == 2
        assert len(progress["recentActivity"]) == 2


class TestAnalyticsRoutes:

    def test_teacher_dashboard(self, client: TestClient, store) -> None:
        seed_articles(store)
        client.act_as(STUDENT_1)
        client.post("/api/v1/tracking", json={"articleId": "article-a", "duration": 120})
        client.act_as(STUDENT_2)
        client.post("/api/v1/tracking", json={"articleId": "article-a", "duration": 60})
        client.post("/api/v1/tracking", json={"articleId": "article-b", "duration": 30})

        client.act_as(TEACHER_ID)
        response = client.get("/api/v1/analytics")

        assert response.status_code == 200
        analytics = response.json()["analytics"]
        assert analytics["overview"] == {"totalArticles": 2, "totalViews": 3, "totalStudents": 2}
        assert analytics["articlesVsViews"] == [{"title": "A", "views": 2}, {"title": "B", "views": 1}]
        assert analytics["mostViewedCategories"] == [{"category": "Science", "views": 3}]
        assert analytics["studentWiseProgress"][0]["studentName"] == "Alex Student"
        assert analytics["dailyEngagement"][-1] == {"date": NOW.date().isoformat(), "views": 3}

    def test_empty_teacher_dashboard(self, client: TestClient) -> None:
        client.act_as(OTHER_TEACHER_ID)

        analytics = client.get("/api/v1/analytics").json()["analytics"]

        assert analytics["overview"] == {"totalArticles": 0, "totalViews": 0, "totalStudents": 0}
        assert [day["views"] for day in analytics["dailyEngagement"]] == [0] * 7

    def test_student_dashboard(self, client: TestClient, store) -> None:
        seed_articles(store)
        client.act_as(STUDENT_1)
        client.post("/api/v1/tracking", json={"articleId": "article-b", "duration": 240})

        response = client.get("/api/v1/analytics/student")

        analytics = response.json()["analytics"]
        assert analytics["overview"] == {"totalArticlesRead": 1, "totalTimeSpent": 4}
        assert analytics["timePerCategory"] == [{"category": "Science", "time": 240}]
        assert analytics["recentArticles"][0]["articleId"] == {"title": "B", "category": "Science"}


class TestAuthentication:

    def test_missing_token_is_unauthorized(self, client: TestClient) -> None:
        from main import app

        del app.dependency_overrides[get_current_user]

        response = client.get("/api/v1/analytics")

        assert response.status_code == 401
        assert response.json() == {"success": False, "message": "Authentication required"}

    def test_health_check_is_public(self, client: TestClient) -> None:
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestErrorEnvelope:

    def test_unexpected_failure_is_enveloped(self, client: TestClient) -> None:
        from main import app
        from app.api.deps import get_reading_store

        def unavailable_store():
            raise RuntimeError("Firebase not initialized")

        app.dependency_overrides[get_reading_store] = unavailable_store

        with TestClient(app, raise_server_exceptions=False) as failing_client:
            response = failing_client.get("/api/v1/analytics")

        assert response.status_code == 500
        assert response.headers["content-type"].startswith("application/json")
        assert response.json() == {"success": False, "message": "Internal server error"}

    def test_unknown_route_is_enveloped(self, client: TestClient) -> None:
        response = client.get("/api/v1/nowhere")

        assert response.status_code == 404
        assert response.json()["success"] is False
