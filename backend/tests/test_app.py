import logging

from fastapi.testclient import TestClient

from officer_duty.core.logging_config import ApiJsonFormatter, build_logging_config
from officer_duty.main import app

from conftest import auth_headers


def test_health_is_not_prefixed(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Server is running"}


def test_unknown_route_uses_envelope(client):
    response = client.get("/api/nowhere")

    assert response.status_code == 404
    assert response.json()["success"] is False


def test_validation_errors_are_flattened(client, admin):
    response = client.post(
        "/api/duty-assignments",
        json={"date": "not-a-date"},
        headers=auth_headers(admin),
    )

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Validation failed"
    assert "user_id is required" in body["errors"]
    assert "task_location is required" in body["errors"]


def test_unhandled_errors_become_500(client, officer, monkeypatch, caplog):
    from officer_duty.services import notification_service

    def explode(*args, **kwargs):
        raise RuntimeError("database on fire")

    monkeypatch.setattr(notification_service, "list_notifications", explode)
    safe_client = TestClient(app, raise_server_exceptions=False)

    with caplog.at_level(logging.ERROR, logger="officer_duty.main"):
        response = safe_client.get("/api/notifications/me", headers=auth_headers(officer))

    assert response.status_code == 500
    assert response.json() == {"success": False, "message": "Internal server error"}
    assert "database on fire" not in response.text
    assert any("Unhandled error" in record.getMessage() for record in caplog.records)


def test_logging_config_switches_formatter():
    standard = build_logging_config("INFO", "standard")
    structured = build_logging_config("DEBUG", "json")

    assert standard["handlers"]["console"]["formatter"] == "standard"
    assert structured["handlers"]["console"]["formatter"] == "json"
    assert structured["formatters"]["json"]["()"] is ApiJsonFormatter
    assert structured["loggers"][""]["level"] == "DEBUG"
