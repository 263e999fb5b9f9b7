"""Integration tests for the HTTP API."""

from uuid import uuid4

import pytest


def as_user(profile):
    return {"X-User-Id": str(profile.id)}


JOB_BODY = {
    "title": "Return library books",
    "price": 700,
    "urgency": "ASAP",
    "location": "Main Library",
    "category": "Errands",
}


@pytest.mark.integration
class TestJobEndpoints:
    async def test_post_job(self, http_client, poster):
        response = await http_client.post(
            "/jobs", json=JOB_BODY, headers=as_user(poster)
        )

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "open"
        assert data["poster_id"] == str(poster.id)
        assert data["assigned_to"] is None
        assert data["price"] == 700

    async def test_missing_identity_is_rejected(self, http_client):
        response = await http_client.post("/jobs", json=JOB_BODY)

        assert response.status_code == 401
        assert response.json()["type"] == "http_error"

    async def test_malformed_identity_is_rejected(self, http_client):
        response = await http_client.post(
            "/jobs", json=JOB_BODY, headers={"X-User-Id": "not-a-uuid"}
        )

        assert response.status_code == 401

    async def test_non_integer_price(self, http_client, poster):
        response = await http_client.post(
            "/jobs", json={**JOB_BODY, "price": "700"}, headers=as_user(poster)
        )

        assert response.status_code == 400
        assert response.json()["type"] == "validation_error"

    async def test_non_positive_price(self, http_client, poster):
        response = await http_client.post(
            "/jobs", json={**JOB_BODY, "price": 0}, headers=as_user(poster)
        )

        assert response.status_code == 400
        body = response.json()
        assert set(body) == {"error", "message", "type"}
        assert body["type"] == "validation_error"

    async def test_accept_then_conflict(
        self, http_client, open_job, helper, make_profile
    ):
        latecomer = await make_profile("Latecomer")

        first = await http_client.post(
            f"/jobs/{open_job.id}/assign", headers=as_user(helper)
        )
        second = await http_client.post(
            f"/jobs/{open_job.id}/assign", headers=as_user(latecomer)
        )

        assert first.status_code == 200
        assert first.json()["assigned_to"] == str(helper.id)
        assert second.status_code == 409
        assert second.json()["type"] == "already_assigned"

    async def test_accept_for_someone_else(self, http_client, open_job, helper, poster):
        response = await http_client.post(
            f"/jobs/{open_job.id}/assign",
            json={"helper_id": str(uuid4())},
            headers=as_user(helper),
        )

        assert response.status_code == 403
        assert response.json()["type"] == "unauthorized"

    async def test_self_accept_notifies_poster(
        self, http_client, open_job, poster, helper
    ):
        response = await http_client.post(
            f"/jobs/{open_job.id}/assign", headers=as_user(helper)
        )
        poster_count = await http_client.get(
            "/notifications/unread-count", headers=as_user(poster)
        )
        helper_count = await http_client.get(
            "/notifications/unread-count", headers=as_user(helper)
        )

        assert response.status_code == 200
        assert poster_count.json()["count"] == 1
        assert helper_count.json()["count"] == 0

    async def test_poster_assigns_helper(self, http_client, open_job, poster, helper):
        response = await http_client.post(
            f"/jobs/{open_job.id}/assign",
            json={"helper_id": str(helper.id)},
            headers=as_user(poster),
        )
        inbox = await http_client.get("/notifications", headers=as_user(helper))
        poster_count = await http_client.get(
            "/notifications/unread-count", headers=as_user(poster)
        )

        assert response.status_code == 200
        assert response.json()["assigned_to"] == str(helper.id)
        assert [n["type"] for n in inbox.json()] == ["job_assigned"]
        assert poster_count.json()["count"] == 0

    async def test_delete_job(self, http_client, open_job, poster):
        response = await http_client.delete(
            f"/jobs/{open_job.id}", headers=as_user(poster)
        )
        after = await http_client.get(f"/jobs/{open_job.id}")

        assert response.status_code == 204
        assert after.status_code == 404

    async def test_delete_someone_elses_job(self, http_client, open_job, helper):
        response = await http_client.delete(
            f"/jobs/{open_job.id}", headers=as_user(helper)
        )

        assert response.status_code == 403

    async def test_delete_in_progress_job_is_conflict(
        self, http_client, in_progress_job, poster
    ):
        response = await http_client.delete(
            f"/jobs/{in_progress_job.id}", headers=as_user(poster)
        )

        assert response.status_code == 409
        assert response.json()["type"] == "invalid_transition"

    async def test_complete_by_helper_is_forbidden(
        self, http_client, in_progress_job, helper
    ):
        response = await http_client.post(
            f"/jobs/{in_progress_job.id}/complete", headers=as_user(helper)
        )

        assert response.status_code == 403

    async def test_complete_open_job_is_conflict(self, http_client, open_job, poster):
        response = await http_client.post(
            f"/jobs/{open_job.id}/complete", headers=as_user(poster)
        )

        assert response.status_code == 409
        assert response.json()["type"] == "invalid_transition"

    async def test_unknown_job(self, http_client):
        response = await http_client.get(f"/jobs/{uuid4()}")

        assert response.status_code == 404
        assert response.json()["type"] == "not_found"

    async def test_feed_and_search(self, http_client, open_job):
        feed = await http_client.get("/jobs/feed")
        search = await http_client.get(
            "/jobs/search", params={"query": "boxes", "sort_by": "price_high"}
        )

        assert [job["id"] for job in feed.json()] == [str(open_job.id)]
        assert search.status_code == 200
        assert [job["id"] for job in search.json()] == [str(open_job.id)]

    async def test_search_with_inverted_price_range(self, http_client):
        response = await http_client.get(
            "/jobs/search", params={"min_price": 500, "max_price": 100}
        )

        assert response.status_code == 400


@pytest.mark.integration
class TestRatingEndpoints:
    async def test_rate_and_list(self, http_client, completed_job, poster, helper):
        body = {
            "job_id": str(completed_job.id),
            "rated_user_id": str(helper.id),
            "rating_type": "poster_to_helper",
            "value": 5,
            "review": "Spotless",
        }

        created = await http_client.post("/ratings", json=body, headers=as_user(poster))
        duplicate = await http_client.post(
            "/ratings", json=body, headers=as_user(poster)
        )
        listed = await http_client.get(f"/users/{helper.id}/ratings")
        stats = await http_client.get(f"/profiles/{helper.id}/stats")

        assert created.status_code == 201
        assert created.json()["rater_id"] == str(poster.id)
        assert duplicate.status_code == 409
        assert duplicate.json()["type"] == "duplicate_rating"
        assert [r["review"] for r in listed.json()] == ["Spotless"]
        assert stats.json()["average_rating"] == 5.0
        assert stats.json()["total_ratings"] == 1

    async def test_has_rated_flag(self, http_client, completed_job, poster, helper):
        before = await http_client.get(f"/users/{poster.id}/jobs")
        await http_client.post(
            "/ratings",
            json={
                "job_id": str(completed_job.id),
                "rated_user_id": str(helper.id),
                "rating_type": "poster_to_helper",
                "value": 4,
            },
            headers=as_user(poster),
        )
        after = await http_client.get(f"/users/{poster.id}/jobs")
        gigs = await http_client.get(f"/users/{helper.id}/gigs")

        assert before.json()[0]["has_rated"] is False
        assert after.json()[0]["has_rated"] is True
        assert gigs.json()[0]["has_rated"] is False


@pytest.mark.integration
class TestProfileAndNotificationEndpoints:
    async def test_register_and_rename(self, http_client):
        headers = {"X-User-Id": str(uuid4())}

        registered = await http_client.put(
            "/profiles/me",
            json={"email": "s1900042@campus.example.edu"},
            headers=headers,
        )
        renamed = await http_client.patch(
            "/profiles/me", json={"display_name": " Robin "}, headers=headers
        )

        assert registered.status_code == 200
        assert registered.json()["name"] == "1900042"
        assert renamed.json()["display_name"] == "Robin"

    async def test_notification_flow(self, http_client, in_progress_job, poster):
        headers = as_user(poster)

        count = await http_client.get("/notifications/unread-count", headers=headers)
        listed = await http_client.get("/notifications", headers=headers)
        notification_id = listed.json()[0]["id"]
        read = await http_client.post(
            f"/notifications/{notification_id}/read", headers=headers
        )
        after = await http_client.get("/notifications/unread-count", headers=headers)

        assert count.json()["count"] == 1
        assert listed.json()[0]["type"] == "job_assigned"
        assert read.json()["is_read"] is True
        assert after.json()["count"] == 0

    async def test_foreign_notification_is_forbidden(
        self, http_client, in_progress_job, helper, poster
    ):
        listed = await http_client.get("/notifications", headers=as_user(poster))
        notification_id = listed.json()[0]["id"]

        response = await http_client.post(
            f"/notifications/{notification_id}/read", headers=as_user(helper)
        )

        assert response.status_code == 403


@pytest.mark.integration
class TestHealthEndpoints:
    async def test_liveness(self, http_client):
        response = await http_client.get("/health/live")

        assert response.status_code == 200

    async def test_readiness(self, http_client):
        response = await http_client.get("/health/ready")

        assert response.status_code == 200

    async def test_metrics(self, http_client):
        response = await http_client.get("/health/metrics")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")

    async def test_detailed_reports_database(self, http_client):
        response = await http_client.get("/health/detailed")

        data = response.json()["data"]
        assert data["status"] == "healthy"
        assert data["components"]["database"]["status"] == "healthy"
