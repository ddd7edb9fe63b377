# unit_tests/test_api_app.py
"""
Unit Tests for the FastAPI Backend
==================================
Run with: python -m pytest unit_tests/test_api_app.py -v

Runs fully offline: the Gemini dependency is overridden with a client
that has no credential, so every request takes the fallback path.
"""

import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from api.app import app, get_gemini_client


@pytest.fixture
def client(make_client):
    app.dependency_overrides[get_gemini_client] = lambda: make_client(available=False)
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "online"
    assert body["gemini"] is False


def test_nutrition_analyze(client):
    response = client.post("/api/v1/nutrition/analyze", json={"description": "apple"})

    assert response.status_code == 200
    body = response.json()
    assert body["source"] == "fallback"
    assert body["nutrition"]["portionSize"] == "1 serving"
    assert body["nutrition"]["calories"] == 150


def test_nutrition_requires_description(client):
    response = client.post("/api/v1/nutrition/analyze", json={"description": "  "})
    assert response.status_code == 400


def test_recipes_generate(client):
    response = client.post(
        "/api/v1/recipes/generate",
        json={"ingredients": "eggs, spinach", "meal_types": {"breakfast": True}},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["meal_types"] == ["breakfast"]
    assert len(body["recipes"]) == 2
    assert "cookingTime" in body["recipes"][0]


def test_recipes_require_ingredients(client):
    response = client.post("/api/v1/recipes/generate", json={"ingredients": ""})
    assert response.status_code == 400


def test_energy(client):
    response = client.post(
        "/api/v1/energy",
        json={"age": 30, "sex": "male", "height_cm": 180, "weight_kg": 80},
    )
    assert response.status_code == 200
    assert response.json()["bmr"] == 1780

    bad = client.post(
        "/api/v1/energy",
        json={"age": 30, "sex": "male", "height_cm": 180, "weight_kg": 80,
              "activity_level": "couch"},
    )
    assert bad.status_code == 400


def test_energy_activity_levels(client):
    response = client.get("/api/v1/energy/activity-levels")
    assert response.json()[0] == "sedentary"
