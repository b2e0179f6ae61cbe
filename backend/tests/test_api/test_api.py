"""Tests for API endpoints (no LLM calls)."""

from __future__ import annotations

import io
import json

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from cue.api import generate as generate_module
from cue.config import settings
from cue.dependencies import get_render_settings
from cue.engine.errors import SurfaceAllocationError
from cue.engine.tiling import plan_tiles
from cue.main import app
from tests.conftest import SMALL_SETTINGS


client = TestClient(app)


@pytest.fixture(autouse=True)
def small_limits():
    app.dependency_overrides[get_render_settings] = lambda: SMALL_SETTINGS
    yield
    app.dependency_overrides.clear()


def _events(body: str) -> list[tuple[str, dict]]:
    events = []
    for block in body.strip().split("\n\n"):
        lines = block.split("\n")
        name = lines[0].removeprefix("event: ")
        data = json.loads(lines[1].removeprefix("data: "))
        events.append((name, data))
    return events


def test_health():
    response = client.get("/api/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["version"] == "0.1.0"


def test_generate_png():
    response = client.get("/api/generate", params={"width": 120, "height": 100, "seed": 1})
    assert response.status_code == 200
    assert response.headers["content-type"] == "image/png"
    assert response.headers["content-disposition"] == 'inline; filename="cue-120x100.png"'
    image = Image.open(io.BytesIO(response.content))
    assert image.size == (120, 100)
    assert image.mode == "RGBA"


def test_generate_clamps_dimensions():
    response = client.get("/api/generate", params={"width": 5, "height": 130, "seed": 2, "valence": 4})
    assert response.status_code == 200
    assert 'filename="cue-100x130.png"' in response.headers["content-disposition"]
    assert Image.open(io.BytesIO(response.content)).size == (100, 130)


def test_generate_is_deterministic_for_seed():
    params = {"width": 110, "height": 100, "seed": 9, "arousal": 0.8}
    a = client.get("/api/generate", params=params)
    b = client.get("/api/generate", params=params)
    assert a.content == b.content


def test_generate_stream_events():
    response = client.get("/api/generate/stream", params={"width": 150, "height": 110, "seed": 3})
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/event-stream")

    events = _events(response.text)
    names = [name for name, _ in events]
    n_tiles = len(plan_tiles(150, 110, 64))
    assert names == ["progress"] * n_tiles + ["result", "done"]

    progress = [data for name, data in events if name == "progress"]
    assert [p["index"] for p in progress] == list(range(n_tiles))
    assert progress[-1]["fraction"] == 1.0

    result = events[-2][1]
    assert (result["width"], result["height"]) == (150, 110)
    assert result["regions"] >= 1
    assert len(result["png_base64"]) > 0


def test_allocation_failure_maps_to_507(monkeypatch):
    def fail(*args, **kwargs):
        raise SurfaceAllocationError(9000, 8000, "out of memory")

    monkeypatch.setattr(generate_module, "generate", fail)
    response = client.get("/api/generate", params={"width": 9000, "height": 8000})
    assert response.status_code == 507
    data = response.json()
    assert data["width"] == 9000
    assert data["height"] == 8000


def test_stream_reports_errors(monkeypatch):
    def fail(*args, **kwargs):
        raise SurfaceAllocationError(300, 200)

    monkeypatch.setattr(generate_module, "generate", fail)
    response = client.get("/api/generate/stream", params={"width": 300, "height": 200})
    names = [name for name, _ in _events(response.text)]
    assert names == ["error", "done"]


def test_sentiment_without_api_key(monkeypatch):
    monkeypatch.setattr(settings, "anthropic_api_key", "")
    response = client.post("/api/sentiment", json={"prompt": "a quiet winter morning"})
    assert response.status_code == 200
    data = response.json()
    assert data["fallback"] is True
    assert (data["valence"], data["arousal"], data["focus"]) == (0.5, 0.5, 0.5)
