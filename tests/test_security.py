from fastapi.testclient import TestClient
from api.app import app
from api.services import settings_store


def _payload():
    return {"source": "[month: 2021-01]"}


def test_open_by_default(monkeypatch):
    monkeypatch.setenv("AUTH_ENABLED", "false")
    with TestClient(app, raise_server_exceptions=False) as client:
        r = client.post("/v1/habitt/render", json=_payload())
    assert r.status_code == 200


def test_reject_without_key(monkeypatch):
    monkeypatch.setenv("AUTH_ENABLED", "true")
    with TestClient(app, raise_server_exceptions=False) as client:
        r = client.post("/v1/habitt/render", json=_payload())
    assert r.status_code == 401


def test_reject_with_invalid_key(monkeypatch):
    monkeypatch.setenv("AUTH_ENABLED", "true")
    monkeypatch.setenv("API_KEYS", "valid123")
    with TestClient(app, raise_server_exceptions=False) as client:
        r = client.post(
            "/v1/habitt/render",
            headers={"Authorization": "Bearer nope"},
            json=_payload(),
        )
    assert r.status_code == 403


def test_allow_with_valid_key(monkeypatch, tmp_path):
    monkeypatch.setenv("AUTH_ENABLED", "true")
    monkeypatch.setenv("API_KEYS", "other, valid123")
    monkeypatch.setattr(settings_store, "STORE", settings_store.SettingsStore(tmp_path / "s.json"))
    with TestClient(app, raise_server_exceptions=False) as client:
        r = client.post(
            "/v1/habitt/render",
            headers={"Authorization": "Bearer valid123"},
            json=_payload(),
        )
    assert r.status_code == 200
    assert r.json()["ok"] is True


def test_health_skips_auth(monkeypatch):
    monkeypatch.setenv("AUTH_ENABLED", "true")
    with TestClient(app, raise_server_exceptions=False) as client:
        r = client.get("/__health")
    assert r.status_code == 200


def test_access_log_line(monkeypatch, capsys):
    monkeypatch.setenv("AUTH_ENABLED", "false")
    monkeypatch.setenv("LOGGING_ENABLED", "true")
    with TestClient(app, raise_server_exceptions=False) as client:
        client.get("/__health")
    out = capsys.readouterr().out
    assert '"endpoint": "/__health"' in out
    assert '"status": 200' in out


def test_access_log_never_contains_the_key(monkeypatch, capsys, tmp_path):
    monkeypatch.setenv("AUTH_ENABLED", "true")
    monkeypatch.setenv("API_KEYS", "secret-key")
    monkeypatch.setenv("LOGGING_ENABLED", "true")
    monkeypatch.setattr(settings_store, "STORE", settings_store.SettingsStore(tmp_path / "s.json"))
    with TestClient(app, raise_server_exceptions=False) as client:
        r = client.get("/v1/settings", headers={"Authorization": "Bearer secret-key"})
    assert r.status_code == 200
    out = capsys.readouterr().out
    assert '"endpoint": "/v1/settings"' in out
    assert "secret-key" not in out
