"""Tests for the habitt HTTP endpoints."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from api.app import app
from api.services import settings_store
from api.services.habit_renderer import DEFAULT_MARK


client = TestClient(app)


@pytest.fixture(autouse=True)
def _isolated_store(monkeypatch, tmp_path):
    store = settings_store.SettingsStore(tmp_path / "settings.json")
    monkeypatch.setattr(settings_store, "STORE", store)
    monkeypatch.setenv("AUTH_ENABLED", "false")
    return store


def test_health() -> None:
    resp = client.get("/__health")
    assert resp.status_code == 200
    assert resp.json() == {"ok": True}


def test_render_returns_table_and_html() -> None:
    resp = client.post("/v1/habitt/render", json={"source": "[month: 2021-01] (15,✅)(20)"})
    assert resp.status_code == 200
    data = resp.json()

    assert data["ok"] is True
    assert data["error"] is None
    table = data["table"]
    assert table["title"] == "2021-01"
    assert table["weekday_labels"][0] == "SUN"
    assert [c["day"] for c in table["weeks"][0]] == [None, None, None, None, None, 1, 2]
    assert table["weeks"][0][0]["disabled"] is True
    cells = {c["day"]: c for week in table["weeks"] for c in week if c["day"]}
    assert cells[15]["mark"] == "✅"
    assert cells[20]["mark"] == DEFAULT_MARK
    assert cells[16]["checked"] is False
    assert data["html"].startswith('<table class="habitt"')


def test_render_missing_month() -> None:
    resp = client.post("/v1/habitt/render", json={"source": "(1)"})
    assert resp.status_code == 200
    data = resp.json()
    assert data["ok"] is False
    assert data["table"] is None
    assert data["error"] == "Fail: Month not found. e.g. [month: 2021-01]"
    assert data["error_kind"] == "missing_month"


def test_render_overrides_are_not_persisted(_isolated_store) -> None:
    resp = client.post(
        "/v1/habitt/render",
        json={"source": "[month: 2021-01]", "settings": {"startOfWeek": 1}},
    )
    assert resp.json()["table"]["weekday_labels"][0] == "MON"
    assert _isolated_store.get().start_of_week == 0
    assert not _isolated_store.path.exists()


def test_render_invalid_override_is_422() -> None:
    resp = client.post(
        "/v1/habitt/render",
        json={"source": "[month: 2021-01]", "settings": {"startOfWeek": 12}},
    )
    assert resp.status_code == 422


def test_render_html_endpoint() -> None:
    resp = client.post("/v1/habitt/render.html", json={"source": "[month: nope]"})
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/html")
    assert resp.text == '<div class="habitt-error">Fail: Invalid Date [month: nope]</div>'


def test_document_endpoint() -> None:
    md = "intro\n\n```habitt\n[month: 2021-02]\n```\n"
    resp = client.post("/v1/habitt/document", json={"markdown": md})
    data = resp.json()
    assert data["blocks"] == 1
    assert data["markdown"].startswith("intro\n\n<table")


def test_settings_round_trip(_isolated_store) -> None:
    resp = client.get("/v1/settings")
    assert resp.status_code == 200
    assert resp.json()["startOfWeek"] == 0
    assert resp.json()["Sunday"] == "SUN"

    resp = client.patch("/v1/settings", json={"startOfWeek": 1, "Monday": "Mo"})
    assert resp.status_code == 200
    assert resp.json()["Monday"] == "Mo"
    assert _isolated_store.path.exists()

    render = client.post("/v1/habitt/render", json={"source": "[month: 2021-01]"})
    assert render.json()["table"]["weekday_labels"][0] == "Mo"

    resp = client.delete("/v1/settings")
    assert resp.json()["startOfWeek"] == 0


def test_settings_patch_rejects_invalid_week_start() -> None:
    resp = client.patch("/v1/settings", json={"startOfWeek": -1})
    assert resp.status_code == 422
    assert client.get("/v1/settings").json()["startOfWeek"] == 0
