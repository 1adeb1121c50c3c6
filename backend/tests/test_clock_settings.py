from datetime import time

import pytest
from sqlalchemy.exc import IntegrityError

from officer_duty.models.clock_settings import ClockSettings

from conftest import auth_headers


def test_get_when_nothing_configured(client, officer):
    response = client.get("/api/clock-settings", headers=auth_headers(officer))

    assert response.status_code == 200
    assert response.json() == {"success": True, "data": None, "message": "Clock settings not configured"}


def test_admin_creates_settings(client, admin):
    response = client.post(
        "/api/clock-settings",
        json={"clock_in_start_time": "08:00", "clock_out_start_time": "17:00"},
        headers=auth_headers(admin),
    )

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["clock_in_start_time"] == "08:00:00"
    assert data["clock_out_start_time"] == "17:00:00"
    assert data["is_active"] is True
    assert data["created_by"] == admin.id


def test_both_times_are_required(client, admin):
    response = client.post(
        "/api/clock-settings",
        json={"clock_in_start_time": "08:00"},
        headers=auth_headers(admin),
    )

    assert response.status_code == 400
    assert response.json()["message"] == "clock_out_start_time is required"


def test_only_admin_manages_settings(client, supervisor, officer):
    payload = {"clock_in_start_time": "08:00", "clock_out_start_time": "17:00"}
    for user in (supervisor, officer):
        response = client.post("/api/clock-settings", json=payload, headers=auth_headers(user))
        assert response.status_code == 403


def test_creating_settings_deactivates_previous(client, db, admin, make_clock_settings):
    first = make_clock_settings("08:00", "17:00")

    response = client.post(
        "/api/clock-settings",
        json={"clock_in_start_time": "07:00", "clock_out_start_time": "15:00"},
        headers=auth_headers(admin),
    )

    assert response.status_code == 201
    db.expire_all()
    active = db.query(ClockSettings).filter(ClockSettings.is_active == True).all()  # noqa: E712
    assert [row.id for row in active] == [response.json()["data"]["id"]]
    assert db.get(ClockSettings, first.id).is_active is False

    current = client.get("/api/clock-settings", headers=auth_headers(admin)).json()["data"]
    assert current["clock_in_start_time"] == "07:00:00"


def test_database_rejects_second_active_row(db, make_clock_settings):
    make_clock_settings("08:00", "17:00")

    db.add(ClockSettings(
        clock_in_start_time=time(9, 0),
        clock_out_start_time=time(18, 0),
        is_active=True,
    ))
    with pytest.raises(IntegrityError):
        db.commit()
    db.rollback()


def test_inactive_rows_may_pile_up(db, make_clock_settings):
    make_clock_settings("08:00", "17:00", is_active=False)
    make_clock_settings("09:00", "18:00", is_active=False)
    make_clock_settings("10:00", "19:00")

    assert db.query(ClockSettings).count() == 3


def test_update_defaults_to_latest_row(client, db, admin, make_clock_settings):
    make_clock_settings("08:00", "17:00", is_active=False)
    latest = make_clock_settings("09:00", "18:00")

    response = client.put(
        "/api/clock-settings",
        json={"clock_out_start_time": "19:30"},
        headers=auth_headers(admin),
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["id"] == latest.id
    assert data["clock_out_start_time"] == "19:30:00"
    assert data["updated_by"] == admin.id


def test_activating_a_row_deactivates_others(client, db, admin, make_clock_settings):
    old = make_clock_settings("08:00", "17:00", is_active=False)
    current = make_clock_settings("09:00", "18:00")

    response = client.put(
        "/api/clock-settings",
        json={"id": old.id, "is_active": True},
        headers=auth_headers(admin),
    )

    assert response.status_code == 200
    db.expire_all()
    assert db.get(ClockSettings, old.id).is_active is True
    assert db.get(ClockSettings, current.id).is_active is False


def test_admin_adds_inactive_row_beside_active_one(client, db, admin):
    headers = auth_headers(admin)
    active = client.post(
        "/api/clock-settings",
        json={"clock_in_start_time": "08:00", "clock_out_start_time": "17:00"},
        headers=headers,
    )
    inactive = client.post(
        "/api/clock-settings",
        json={"clock_in_start_time": "09:00", "clock_out_start_time": "18:00", "is_active": False},
        headers=headers,
    )

    assert active.status_code == 201
    assert inactive.status_code == 201
    assert inactive.json()["data"]["is_active"] is False

    current = client.get("/api/clock-settings", headers=headers).json()["data"]
    assert current["id"] == active.json()["data"]["id"]
    db.expire_all()
    assert db.get(ClockSettings, inactive.json()["data"]["id"]).active_marker is None


def test_update_without_rows(client, admin):
    response = client.put("/api/clock-settings", json={"is_active": False}, headers=auth_headers(admin))

    assert response.status_code == 404
    assert response.json()["message"] == "Clock settings not found. Please create settings first."


def test_availability_reports_window(client, clock, officer, make_clock_settings):
    make_clock_settings("08:00", "17:00")

    inside = client.get("/api/clock-settings/availability", headers=auth_headers(officer)).json()["data"]
    clock.set(18, 0)
    after = client.get("/api/clock-settings/availability", headers=auth_headers(officer)).json()["data"]

    assert inside["can_clock_in"] is True
    assert inside["can_clock_out"] is False
    assert inside["state"] == "active"
    assert inside["message"] == "You can clock in now"
    assert inside["clock_settings"]["clock_in_start_time"] == "08:00:00"
    assert after["can_clock_in"] is False
    assert after["can_clock_out"] is True


def test_availability_with_only_disabled_rows(client, officer, make_clock_settings):
    make_clock_settings("08:00", "17:00", is_active=False)

    data = client.get("/api/clock-settings/availability", headers=auth_headers(officer)).json()["data"]

    assert data["state"] == "disabled"
    assert data["message"] == "Clock settings are currently disabled"
    assert data["clock_settings"]["is_active"] is False


def test_history_lists_rows_newest_first(client, admin):
    headers = auth_headers(admin)
    client.post(
        "/api/clock-settings",
        json={"clock_in_start_time": "08:00", "clock_out_start_time": "17:00"},
        headers=headers,
    )
    client.post(
        "/api/clock-settings",
        json={"clock_in_start_time": "07:00", "clock_out_start_time": "16:00"},
        headers=headers,
    )

    response = client.get("/api/clock-settings/history", headers=headers)

    assert response.status_code == 200
    data = response.json()["data"]
    assert [row["clock_in_start_time"] for row in data] == ["07:00:00", "08:00:00"]
    assert [row["is_active"] for row in data] == [True, False]
    assert data[0]["created_by"]["username"] == admin.username
    assert data[0]["updated_by"] is None


def test_history_is_admin_only(client, supervisor):
    response = client.get("/api/clock-settings/history", headers=auth_headers(supervisor))
    assert response.status_code == 403


def test_get_and_delete_by_id(client, admin, make_clock_settings):
    row = make_clock_settings("08:00", "17:00")
    headers = auth_headers(admin)

    assert client.get(f"/api/clock-settings/{row.id}", headers=headers).status_code == 200
    assert client.delete(f"/api/clock-settings/{row.id}", headers=headers).status_code == 200
    assert client.get(f"/api/clock-settings/{row.id}", headers=headers).status_code == 404
