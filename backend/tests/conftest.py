import os

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["DATABASE_URL"] = "sqlite://"

from datetime import datetime, time

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from officer_duty.core.dependencies import get_now
from officer_duty.core.policy import Role
from officer_duty.core.security import create_access_token, hash_password
from officer_duty.database.base import Base
from officer_duty.database.session import get_db
from officer_duty.main import app
from officer_duty.models.clock_settings import ClockSettings
from officer_duty.models.user import User

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

PASSWORD = "secret123"
PASSWORD_HASH = hash_password(PASSWORD)

# Monday morning, inside the default 08:00-17:00 clock-in window
DEFAULT_NOW = datetime(2024, 3, 4, 8, 30)


class FrozenClock:
    def __init__(self, now: datetime):
        self.now = now

    def set(self, hour: int, minute: int = 0, day: int | None = None):
        self.now = self.now.replace(hour=hour, minute=minute, day=day or self.now.day)
        return self.now


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal(expire_on_commit=False)
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def clock():
    return FrozenClock(DEFAULT_NOW)


@pytest.fixture
def client(db, clock):
    def override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_now] = lambda: clock.now
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    def _make_user(username, role=Role.officer, department=None, full_name=None):
        user = User(
            username=username,
            password_hash=PASSWORD_HASH,
            role=role,
            department=department,
            full_name=full_name,
        )
        db.add(user)
        db.commit()
        return user

    return _make_user


@pytest.fixture
def make_clock_settings(db):
    def _make_clock_settings(clock_in="08:00", clock_out="17:00", is_active=True):
        row = ClockSettings(
            clock_in_start_time=time.fromisoformat(clock_in),
            clock_out_start_time=time.fromisoformat(clock_out),
            is_active=is_active,
        )
        db.add(row)
        db.commit()
        return row

    return _make_clock_settings


def auth_headers(user) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user)}"}


@pytest.fixture
def admin(make_user):
    return make_user("admin", Role.admin, full_name="System Admin")


@pytest.fixture
def supervisor(make_user):
    return make_user("sup_north", Role.supervisor, department="North", full_name="Sam North")


@pytest.fixture
def officer(make_user):
    return make_user("officer_north", Role.officer, department="North", full_name="Olivia North")


@pytest.fixture
def other_officer(make_user):
    return make_user("officer_south", Role.officer, department="South", full_name="Oscar South")
