"""
Tests for the onboarding HTTP API.
"""

import base64

import pytest
from fastapi.testclient import TestClient

from campus_match.web.app import app
from campus_match.web.auth import get_current_user
from onboarding.api import get_committer, get_db
from onboarding.commit import ProfileCommitter

from conftest import FakeStore, FakeUploader


@pytest.fixture
def client(store, uploader, user):
    app.dependency_overrides[get_db] = lambda: store
    app.dependency_overrides[get_current_user] = lambda: user
    app.dependency_overrides[get_committer] = lambda: ProfileCommitter(store, uploader)
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def submission():
    return {
        "name": "Alex",
        "class_year": "2026",
        "major": "History",
        "bio": "Trail runner",
        "contact_preference": "instagram",
        "photos": [
            {"filename": "alex.jpg", "data": base64.b64encode(b"\xff\xd8\xff").decode()},
        ],
        "gender": "female",
        "gender_preference": "everyone",
        "vibe": "roam",
        "interests": ["Hiking", "Bouldering"],
        "clubs": ["Debate"],
        "building_id": 42,
    }


class TestOptions:

    def test_options(self, client):
        response = client.get("/api/onboarding/options")

        assert response.status_code == 200
        data = response.json()
        assert data["interests"] == ["Chess", "Hiking", "Running"]
        assert data["clubs"] == ["A Cappella", "Chess Club", "Debate"]
        assert len(data["buildings"]) == 3
        assert len(data["vibes"]) == 6
        assert data["notice"] is None

    def test_options_degraded(self, client, store):
        store.fail("interests", "select")

        response = client.get("/api/onboarding/options")

        assert response.status_code == 200
        assert response.json()["notice"] == "Failed to load options"
        assert response.json()["buildings"] == []


class TestNearest:

    def test_nearest_building(self, client):
        response = client.post(
            "/api/onboarding/location/nearest",
            json={"latitude": 40.3497, "longitude": -74.6575},
        )

        assert response.status_code == 200
        assert response.json()["building"]["name"] == "Firestone Library"
        assert response.json()["distance_meters"] < 50

    def test_no_buildings(self, client):
        app.dependency_overrides[get_db] = lambda: FakeStore()

        response = client.post(
            "/api/onboarding/location/nearest",
            json={"latitude": 40.0, "longitude": -74.0},
        )

        assert response.status_code == 404

    def test_rejects_out_of_range(self, client):
        response = client.post(
            "/api/onboarding/location/nearest",
            json={"latitude": 123.0, "longitude": 0.0},
        )
        assert response.status_code == 422


class TestComplete:

    def test_complete(self, client, store, submission):
        response = client.post("/api/onboarding/complete", json=submission)

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Profile complete!"
        assert body["profile"]["vibe"] == "Down to Roam"
        assert body["profile"]["building"] == "Nassau Hall"
        assert body["profile"]["role"] == "current_student"
        assert body["profile"]["photo_urls"] == [
            "https://res.cloudinary.com/demo/image/upload/alex.jpg",
        ]

        user_id = store.rows("users")[0]["id"]
        assert store.linked_names(user_id, "interest") == {"Hiking", "Bouldering"}
        assert store.linked_names(user_id, "club") == {"Debate"}

    def test_resubmit_updates_links(self, client, store, submission):
        client.post("/api/onboarding/complete", json=submission)
        submission["interests"] = ["Chess"]

        response = client.post("/api/onboarding/complete", json=submission)

        assert response.status_code == 200
        assert len(store.rows("users")) == 1
        user_id = store.rows("users")[0]["id"]
        assert store.linked_names(user_id, "interest") == {"Chess"}

    def test_unmet_step_names_the_step(self, client, store, submission):
        submission["clubs"] = []

        response = client.post("/api/onboarding/complete", json=submission)

        assert response.status_code == 422
        assert response.json()["detail"] == {
            "step": "interests",
            "message": "Select at least one interest and one club",
        }
        assert store.rows("users") == []

    def test_invalid_edit_rejected(self, client, submission):
        submission["vibe"] = "brunch"

        response = client.post("/api/onboarding/complete", json=submission)

        assert response.status_code == 422
        assert response.json()["detail"] == "Unknown vibe: brunch"

    def test_unknown_building(self, client, submission):
        submission["building_id"] = 999

        response = client.post("/api/onboarding/complete", json=submission)

        assert response.status_code == 422

    def test_store_failure(self, client, store, submission):
        store.fail("users", "insert")

        response = client.post("/api/onboarding/complete", json=submission)

        assert response.status_code == 502
        assert response.json()["detail"] == "Error completing profile"

    def test_requires_auth(self, store, submission):
        app.dependency_overrides[get_db] = lambda: store
        try:
            response = TestClient(app).post("/api/onboarding/complete", json=submission)
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 401
