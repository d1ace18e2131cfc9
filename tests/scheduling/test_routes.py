import pytest

from conftest import seed_store


WEEK = "2025-01-20"
AVAILABILITY_URL = f"/api/v1/stores/1/availability/{WEEK}"
SCHEDULES_URL = f"/api/v1/stores/1/schedules/{WEEK}"


def slots(*pairs):
    return [{"day_of_week": d, "shift_template_id": t} for d, t in pairs]


def submit_everyone(client):
    responses = [
        client.post(AVAILABILITY_URL, json={"worker_id": worker_id, "slots": slots(slot)})
        for worker_id, slot in ((1, (0, 1)), (2, (1, 1)), (3, (2, 2)))
    ]
    assert all(r.status_code == 200 for r in responses)
    return responses[-1].json()


class TestHealth:

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}


class TestAvailabilityRoutes:

    def test_submit(self, client, db):
        seed_store(db)
        response = client.post(AVAILABILITY_URL, json={"worker_id": 1, "slots": slots((0, 1), (1, 1))})

        assert response.status_code == 200
        body = response.json()
        assert body["entries_saved"] == 2
        assert body["status"] == {"complete": False, "total_active": 3, "submitted_distinct": 1}
        assert body["auto_schedule"] is None

    def test_last_submission_generates(self, client, db):
        seed_store(db)
        body = submit_everyone(client)

        outcome = body["auto_schedule"]
        assert outcome["recorded"] is True
        assert outcome["generation_id"] is not None
        assert outcome["result"]["stats"]["coverage_percent"] == 100.0
        assert len(outcome["result"]["assignments"]) == 3
        assert outcome["result"]["warnings"] == []

    def test_last_submission_with_bad_stored_data_still_saves(self, client, db):
        seed_store(db, requirements=[(0, 1, 1), (1, 99, 1)])
        body = submit_everyone(client)

        assert body["entries_saved"] == 1
        assert body["status"]["complete"] is True
        assert body["auto_schedule"]["recorded"] is False
        assert body["auto_schedule"]["skip_reason"] == "INVALID_INPUT"
        assert client.get(f"{SCHEDULES_URL}/generation").status_code == 404

    def test_status(self, client, db):
        seed_store(db)
        client.post(AVAILABILITY_URL, json={"worker_id": 2, "slots": slots((1, 1))})

        response = client.get(f"{AVAILABILITY_URL}/status")

        assert response.status_code == 200
        assert response.json()["submitted_distinct"] == 1

    def test_recall(self, client, db):
        seed_store(db)
        client.post(AVAILABILITY_URL, json={"worker_id": 1, "slots": slots((0, 1), (1, 1))})

        response = client.delete(AVAILABILITY_URL, params={"worker_id": 1})

        assert response.status_code == 200
        assert response.json() == {"entries_removed": 2}

    def test_override(self, client, db):
        seed_store(db)
        response = client.put(
            f"{AVAILABILITY_URL}/override",
            json={"worker_id": 3, "slots": slots((2, 2)), "reason": "Paper form", "submitted_by_user_id": 7},
        )
        assert response.status_code == 200
        assert response.json()["entries_saved"] == 1

    def test_override_requires_reason(self, client, db):
        seed_store(db)
        response = client.put(f"{AVAILABILITY_URL}/override", json={"worker_id": 3, "slots": slots((2, 2))})
        assert response.status_code == 422

    def test_rejects_non_monday(self, client, db):
        seed_store(db)
        response = client.post(
            "/api/v1/stores/1/availability/2025-01-21",
            json={"worker_id": 1, "slots": slots((0, 1))},
        )
        assert response.status_code == 400

    def test_rejects_unknown_template(self, client, db):
        seed_store(db)
        response = client.post(AVAILABILITY_URL, json={"worker_id": 1, "slots": slots((0, 42))})
        assert response.status_code == 400

    def test_rejects_bad_day(self, client, db):
        seed_store(db)
        response = client.post(AVAILABILITY_URL, json={"worker_id": 1, "slots": slots((7, 1))})
        assert response.status_code == 422

    def test_unknown_store(self, client, db):
        response = client.post(
            f"/api/v1/stores/99/availability/{WEEK}",
            json={"worker_id": 1, "slots": slots((0, 1))},
        )
        assert response.status_code == 404


class TestScheduleRoutes:

    def test_preview(self, client, db):
        seed_store(db)
        client.post(AVAILABILITY_URL, json={"worker_id": 1, "slots": slots((0, 1))})

        response = client.post(f"{SCHEDULES_URL}/preview")

        assert response.status_code == 200
        body = response.json()
        assert body["recorded"] is False
        assert body["generation_id"] is None
        assert body["result"]["stats"]["total_shifts_filled"] == 1
        types = [w["type"] for w in body["result"]["warnings"]]
        assert types.count("understaffed") == 2

    def test_preview_skip_reason(self, client, db):
        seed_store(db, requirements=[])
        body = client.post(f"{SCHEDULES_URL}/preview").json()
        assert body["skip_reason"] == "NO_REQUIREMENTS"
        assert body["result"] is None

    def test_apply_then_fetch_generation(self, client, db):
        seed_store(db)
        assert client.get(f"{SCHEDULES_URL}/generation").status_code == 404
        client.post(AVAILABILITY_URL, json={"worker_id": 1, "slots": slots((0, 1))})

        applied = client.post(f"{SCHEDULES_URL}/apply").json()
        response = client.get(f"{SCHEDULES_URL}/generation")

        assert response.status_code == 200
        body = response.json()
        assert body["id"] == applied["generation_id"]
        assert body["is_auto_generated"] is False
        assert body["total_warnings"] == 2
        assert body["warnings"][0]["type"] == "understaffed"
        assert body["warnings"][0]["severity"] == "critical"
        assert body["stats"]["total_shifts_required"] == 3
        assert body["needs_review"] is True
        assert body["resolved_warnings"] == []

    def test_duplicate_auto_run_reports_already_run(self, client, db):
        seed_store(db)
        submit_everyone(client)

        response = client.post(AVAILABILITY_URL, json={"worker_id": 1, "slots": slots((0, 1), (4, 1))})

        assert response.json()["auto_schedule"]["skip_reason"] == "ALREADY_RUN"


class TestReviewRoutes:

    @pytest.fixture
    def generation_id(self, client, db):
        seed_store(db, requirements=[(0, 1, 2), (1, 1, 2), (2, 2, 1)])
        return submit_everyone(client)["auto_schedule"]["generation_id"]

    def test_review_badge_cleared_by_viewing(self, client, generation_id):
        assert client.get("/api/v1/stores/1/schedule-review").json() == {"store_id": 1, "needs_review": True}

        response = client.post(f"/api/v1/schedule-generations/{generation_id}/viewed")

        assert response.status_code == 200
        assert response.json()["has_been_viewed"] is True
        assert response.json()["needs_review"] is False
        assert client.get("/api/v1/stores/1/schedule-review").json()["needs_review"] is False

    def test_resolve(self, client, generation_id):
        response = client.post(f"/api/v1/schedule-generations/{generation_id}/resolve", json={"indices": [0]})
        assert response.status_code == 200
        assert response.json()["resolved_warnings"] == [0]

        response = client.post(f"/api/v1/schedule-generations/{generation_id}/resolve", json={})
        assert response.json()["resolved_warnings"] == [0, 1]

    def test_resolve_out_of_range(self, client, generation_id):
        response = client.post(f"/api/v1/schedule-generations/{generation_id}/resolve", json={"indices": [5]})
        assert response.status_code == 400

    def test_generation_not_found(self, client, db):
        assert client.post("/api/v1/schedule-generations/404/viewed").status_code == 404
        assert client.post("/api/v1/schedule-generations/404/resolve", json={}).status_code == 404

    def test_review_unknown_store(self, client, db):
        assert client.get("/api/v1/stores/99/schedule-review").status_code == 404
