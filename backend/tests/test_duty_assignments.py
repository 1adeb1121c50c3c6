from datetime import date

from officer_duty.models.duty_assignment import DutyAssignment
from officer_duty.models.notification import DUTY_ASSIGNED, Notification

from conftest import auth_headers


def _add_assignment(db, officer, department=None, status="pending", day=4):
    assignment = DutyAssignment(
        user_id=officer.id,
        date=date(2024, 3, day),
        officer_name=officer.full_name or officer.username,
        department=department or officer.department,
        task_location="Main gate",
        status=status,
    )
    db.add(assignment)
    db.commit()
    return assignment


def test_supervisor_assigns_duty_in_department(client, db, supervisor, officer):
    response = client.post(
        "/api/duty-assignments",
        json={"user_id": officer.id, "date": "2024-03-05", "task_location": "North checkpoint"},
        headers=auth_headers(supervisor),
    )

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["officer_name"] == "Olivia North"
    assert data["department"] == "North"
    assert data["status"] == "pending"
    assert data["user"]["username"] == officer.username

    notification = db.query(Notification).filter(Notification.user_id == officer.id).one()
    assert notification.event_type == DUTY_ASSIGNED
    assert notification.reference_id == data["id"]


def test_officer_name_falls_back_to_username(client, admin, make_user):
    nameless = make_user("nameless", department="East")

    response = client.post(
        "/api/duty-assignments",
        json={"user_id": nameless.id, "date": "2024-03-05", "task_location": "East dock"},
        headers=auth_headers(admin),
    )

    assert response.json()["data"]["officer_name"] == "nameless"


def test_supervisor_cannot_assign_other_department(client, supervisor, other_officer):
    response = client.post(
        "/api/duty-assignments",
        json={"user_id": other_officer.id, "date": "2024-03-05", "task_location": "South gate"},
        headers=auth_headers(supervisor),
    )

    assert response.status_code == 403
    assert response.json()["message"] == "Access denied to this department"


def test_supervisor_cannot_assign_foreign_officer_under_own_department(client, db, supervisor, other_officer):
    response = client.post(
        "/api/duty-assignments",
        json={
            "user_id": other_officer.id,
            "date": "2024-03-05",
            "task_location": "North checkpoint",
            "department": "North",
        },
        headers=auth_headers(supervisor),
    )

    assert response.status_code == 403
    assert response.json()["message"] == "Access denied to this department"
    db.expire_all()
    assert db.query(DutyAssignment).count() == 0
    assert db.query(Notification).count() == 0


def test_assignee_must_exist(client, admin):
    response = client.post(
        "/api/duty-assignments",
        json={"user_id": 999, "date": "2024-03-05", "task_location": "Anywhere"},
        headers=auth_headers(admin),
    )

    assert response.status_code == 404
    assert response.json()["message"] == "User not found"


def test_assignee_must_be_officer(client, admin, supervisor):
    response = client.post(
        "/api/duty-assignments",
        json={"user_id": supervisor.id, "date": "2024-03-05", "task_location": "Anywhere"},
        headers=auth_headers(admin),
    )

    assert response.status_code == 400
    assert response.json()["message"] == "User must be an officer"


def test_task_location_is_required(client, admin, officer):
    response = client.post(
        "/api/duty-assignments",
        json={"user_id": officer.id, "date": "2024-03-05"},
        headers=auth_headers(admin),
    )

    assert response.status_code == 400
    assert response.json()["message"] == "task_location is required"


def test_officer_cannot_assign(client, officer):
    response = client.post(
        "/api/duty-assignments",
        json={"user_id": officer.id, "date": "2024-03-05", "task_location": "Self"},
        headers=auth_headers(officer),
    )

    assert response.status_code == 403


def test_lists_are_scoped(client, db, admin, supervisor, officer, other_officer):
    _add_assignment(db, officer, day=3)
    _add_assignment(db, officer, day=5, status="completed")
    _add_assignment(db, other_officer)

    as_admin = client.get("/api/duty-assignments", headers=auth_headers(admin)).json()["data"]
    as_supervisor = client.get("/api/duty-assignments", headers=auth_headers(supervisor)).json()["data"]
    as_officer = client.get("/api/duty-assignments/me", headers=auth_headers(officer)).json()["data"]
    completed = client.get(
        "/api/duty-assignments", params={"status": "completed"}, headers=auth_headers(admin)
    ).json()["data"]

    assert len(as_admin) == 3
    assert {row["department"] for row in as_supervisor} == {"North"}
    assert [row["date"] for row in as_officer] == ["2024-03-05", "2024-03-03"]
    assert [row["status"] for row in completed] == ["completed"]


def test_foreign_assignment_is_not_found(client, db, supervisor, officer, other_officer):
    assignment = _add_assignment(db, other_officer)

    for user in (supervisor, officer):
        response = client.get(f"/api/duty-assignments/{assignment.id}", headers=auth_headers(user))
        assert response.status_code == 404


def test_reassignment_denormalizes_new_officer(client, db, admin, officer, other_officer):
    assignment = _add_assignment(db, officer)

    response = client.put(
        f"/api/duty-assignments/{assignment.id}",
        json={"user_id": other_officer.id, "status": "ongoing"},
        headers=auth_headers(admin),
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["user_id"] == other_officer.id
    assert data["officer_name"] == "Oscar South"
    assert data["department"] == "South"
    assert data["status"] == "ongoing"


def test_supervisor_cannot_reassign_out_of_department(client, db, supervisor, officer, other_officer):
    assignment = _add_assignment(db, officer)

    response = client.put(
        f"/api/duty-assignments/{assignment.id}",
        json={"user_id": other_officer.id},
        headers=auth_headers(supervisor),
    )

    assert response.status_code == 403
    db.expire_all()
    assert db.get(DutyAssignment, assignment.id).user_id == officer.id


def test_supervisor_cannot_reassign_to_foreign_officer_under_own_department(
    client, db, supervisor, officer, other_officer
):
    assignment = _add_assignment(db, officer)

    response = client.put(
        f"/api/duty-assignments/{assignment.id}",
        json={"user_id": other_officer.id, "department": "North"},
        headers=auth_headers(supervisor),
    )

    assert response.status_code == 403
    db.expire_all()
    row = db.get(DutyAssignment, assignment.id)
    assert row.user_id == officer.id
    assert row.officer_name == "Olivia North"


def test_invalid_status_is_rejected(client, db, admin, officer):
    assignment = _add_assignment(db, officer)

    response = client.put(
        f"/api/duty-assignments/{assignment.id}",
        json={"status": "in-progress"},
        headers=auth_headers(admin),
    )

    assert response.status_code == 400


def test_delete_assignment(client, db, supervisor, officer):
    assignment = _add_assignment(db, officer)

    response = client.delete(f"/api/duty-assignments/{assignment.id}", headers=auth_headers(supervisor))

    assert response.status_code == 200
    db.expire_all()
    assert db.query(DutyAssignment).count() == 0
