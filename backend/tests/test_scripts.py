from officer_duty.core.policy import Role
from officer_duty.core.security import verify_password
from officer_duty.models.user import User
from officer_duty.scripts import create_admin as create_admin_script
from officer_duty.scripts.recreate_tables import recreate_tables

from conftest import TestingSessionLocal, engine


def test_recreate_tables_empties_every_table(db, officer):
    tables = recreate_tables(bind=engine)

    assert tables == [
        "absence_requests",
        "attendance",
        "clock_settings",
        "duty_assignments",
        "notifications",
        "users",
    ]
    db.expire_all()
    assert db.query(User).count() == 0


def test_create_admin_is_idempotent(db, monkeypatch):
    monkeypatch.setattr(create_admin_script, "engine", engine)
    monkeypatch.setattr(create_admin_script, "SessionLocal", TestingSessionLocal)

    first = create_admin_script.create_admin("chief", "topsecret1", "Chief Admin")
    second = create_admin_script.create_admin("another", "topsecret2")

    assert second.id == first.id
    admins = db.query(User).filter(User.role == Role.admin).all()
    assert [user.username for user in admins] == ["chief"]
    assert admins[0].full_name == "Chief Admin"
    assert verify_password("topsecret1", admins[0].password_hash)
