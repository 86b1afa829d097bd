"""Tests for the HTTP API."""

import pytest
from fastapi.testclient import TestClient

from surplus_match.api.server import create_app
from surplus_match.matching import FoodMatcher, MatcherConfig, MatchingSession

PASTA = {
    "name": "Chicken Alfredo Pasta",
    "restaurant_name": "Mama Mia Restaurant",
    "type": "hot",
    "preparation_time": 1.0,
    "temperature": 150,
    "location": "Downtown",
}


@pytest.fixture
def client():
    session = MatchingSession(matcher=FoodMatcher(MatcherConfig(normalize_by_factor_count=False)))
    return TestClient(create_app(session))


def _add_person(client, **overrides):
    body = {"name": "John Smith", "location": "Downtown"}
    body.update(overrides)
    return client.post("/api/people", json=body).json()


def test_add_food_scores_item(client):
    resp = client.post("/api/food", json=PASTA)
    assert resp.status_code == 200
    data = resp.json()
    assert data["id"].startswith("food_")
    assert data["safety_score"]["letter_grade"] == "A"
    assert data["safety_score"]["score"] == 92.5

    listed = client.get("/api/food").json()
    assert [item["id"] for item in listed] == [data["id"]]


def test_add_food_validation(client):
    body = dict(PASTA)
    del body["temperature"]
    assert client.post("/api/food", json=body).status_code == 422


def test_remove_food(client):
    food_id = client.post("/api/food", json=PASTA).json()["id"]
    assert client.delete(f"/api/food/{food_id}").json() == {"removed": True}
    assert client.delete(f"/api/food/{food_id}").status_code == 404


def test_people_lifecycle(client):
    person = _add_person(client, preferred_food_type="hot", dietary_restrictions=["nuts"])
    assert person["max_distance"] == 10
    assert person["dietary_restrictions"] == ["nuts"]

    resp = client.post(f"/api/people/{person['id']}/deactivate")
    assert resp.json()["is_active"] is False
    assert client.get("/api/people").json() == []

    resp = client.post(f"/api/people/{person['id']}/reactivate")
    assert resp.json()["is_active"] is True
    assert len(client.get("/api/people").json()) == 1


def test_unknown_person_returns_404(client):
    assert client.post("/api/people/nobody/deactivate").status_code == 404
    assert client.post("/api/people/nobody/reactivate").status_code == 404


def test_safety_score_endpoint(client):
    resp = client.post("/api/safety-score", json={
        "type": "cold",
        "preparation_time": 6,
        "temperature": 35,
        "handling": {
            "staff_trained": False,
            "protocols_followed": False,
            "gloves_used": False,
            "clean_surfaces": False,
        },
    })
    data = resp.json()
    assert data["score"] == 50.0
    assert data["letter_grade"] == "F"
    assert "Handling compliance issues detected" in data["details"]


def test_run_matching(client):
    food_id = client.post("/api/food", json=PASTA).json()["id"]
    person = _add_person(client)

    resp = client.post("/api/matches")
    assert resp.status_code == 200
    data = resp.json()
    assert data["success"] is True
    assert data["matches"][0]["food_id"] == food_id
    assert data["matches"][0]["person_id"] == person["id"]
    assert data["stats"]["match_rate"] == 100.0

    refs = client.get("/api/matches").json()
    assert refs == [{
        "food_id": food_id,
        "person_id": person["id"],
        "match_id": f"match_{food_id}_{person['id']}",
    }]


def test_run_matching_with_claim(client):
    client.post("/api/food", json=PASTA)
    _add_person(client)

    resp = client.post("/api/matches", json={"claim": True})
    assert resp.json()["success"] is True
    assert client.get("/api/food").json() == []


def test_remove_match(client):
    food_id = client.post("/api/food", json=PASTA).json()["id"]
    person = _add_person(client)
    client.post("/api/matches")

    assert client.delete(f"/api/matches/{food_id}/{person['id']}").json() == {"removed": True}
    assert client.get("/api/matches").json() == []
    assert client.delete(f"/api/matches/{food_id}/{person['id']}").status_code == 404


def test_stats(client):
    client.post("/api/food", json=PASTA)
    client.post("/api/food", json=dict(PASTA, type="frozen", temperature=10))

    data = client.get("/api/stats").json()
    assert data["food"]["total"] == 2
    assert data["food"]["type_counts"] == {"hot": 1, "frozen": 1}
    assert data["people"]["total"] == 0
    assert data["matching"]["total_food"] == 2
    assert "More people needed - consider promoting the app" in data["suggestions"]
