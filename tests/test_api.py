from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from brandbox.config import Settings
from brandbox.main import app, get_generator
from brandbox.services.copy_generator import CopyGenerator


@pytest.fixture
def client():
    generator = CopyGenerator(Settings())
    app.dependency_overrides[get_generator] = lambda: generator
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_generate_fallback_scenario(client):
    res = client.post(
        "/api/generate",
        json={"product": "Pumpkin Spice Cold Brew", "category": "Beverage", "tone": "playful"},
    )
    assert res.status_code == 200
    data = res.json()
    assert data["provider"] == "fallback"
    assert data["demo"] is True
    assert "pumpkin spice cold brew" in data["copy"]["tagline"].lower()
    assert "#beverage" in data["copy"]["hashtags"]
    assert data["copy"]["shortDescription"]
    assert data["imageDataUrl"].startswith("data:image/svg+xml;base64,")
    assert data["photoUrls"] == []
    assert len(data["fallbackImages"]) == 4
    assert data["message"]


def test_generate_is_deterministic_over_http(client):
    body = {"product": "Widget", "category": "Gadget", "keyBenefit": "tidy cables", "includeImage": False}
    first = client.post("/api/generate", json=body).json()
    second = client.post("/api/generate", json=body).json()
    assert first["copy"] == second["copy"]
    assert first["imageDataUrl"] is None
    assert first["fallbackImages"] == []


@pytest.mark.parametrize("body", [{"product": ""}, {"product": "   "}, {"category": "Beverage"}])
def test_generate_rejects_missing_product(client, body):
    res = client.post("/api/generate", json=body)
    assert res.status_code == 400
    assert res.json() == {"detail": "Missing product"}


def test_generate_unexpected_error_is_500(client):
    class Exploding:
        def generate(self, brief):
            raise RuntimeError("boom")

    app.dependency_overrides[get_generator] = lambda: Exploding()
    res = client.post("/api/generate", json={"product": "Widget"})
    assert res.status_code == 500
    assert res.json() == {"detail": "Server error"}


def test_generate_internal_value_error_is_500(client):
    class Broken:
        def generate(self, brief):
            raise ValueError("bad template state")

    app.dependency_overrides[get_generator] = lambda: Broken()
    res = client.post("/api/generate", json={"product": "Widget"})
    assert res.status_code == 500
    assert res.json() == {"detail": "Server error"}


def test_diag(client):
    res = client.get("/api/diag")
    assert res.status_code == 200
    data = res.json()
    assert data["willUse"] == "fallback"
    assert data["providers"] == []
    assert data["hasOpenAI"] is False


def test_debug(client):
    res = client.post("/api/debug", json={"product": "Widget"})
    assert res.status_code == 200
    data = res.json()
    assert data["attempts"] == []
    assert "widget" in data["baseline"]["tagline"].lower()

    assert client.post("/api/debug", json={}).status_code == 400
