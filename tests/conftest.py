import os
import tempfile

# Settings are read at import time, configure a local sqlite DB first.
os.environ.setdefault(
    "SQLALCHEMY_DATABASE_URL",
    f"sqlite:///{os.path.join(tempfile.gettempdir(), 'cargoplan_test.db')}"
)
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("JWT_SECRET", "test-jwt-secret")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from cargoplan import models, schemas
from cargoplan.database import Base, SessionLocal, engine
from cargoplan.main import app
from cargoplan.security import hash_password

PASSWORD = "Secret123#"


@pytest.fixture(autouse=True)
def _fresh_schema():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


def _create_user(db, username, role, city=None):
    user = models.User(username=username, password=hash_password(PASSWORD), role=role, city=city)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def admin(db):
    return _create_user(db, "admin123", models.UserRole.ADMIN)


@pytest.fixture
def agent_mumbai(db):
    return _create_user(db, "agent_mumbai", models.UserRole.AGENT, city="Mumbai")


@pytest.fixture
def agent_chennai(db):
    return _create_user(db, "agent_chennai", models.UserRole.AGENT, city="Chennai")


def actor_for(user):
    return schemas.Actor.model_validate(user)


def auth_headers(client, user):
    response = client.post("/api/v1/auth/login", json={"username": user.username, "password": PASSWORD})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def admin_headers(client, admin):
    return auth_headers(client, admin)


@pytest.fixture
def mumbai_headers(client, agent_mumbai):
    return auth_headers(client, agent_mumbai)


@pytest.fixture
def chennai_headers(client, agent_chennai):
    return auth_headers(client, agent_chennai)


def plan_payload(**overrides):
    payload = {
        "vehicle_type": "Truck",
        "vehicle_number": "MH01AB1234",
        "number_of_vehicles": 2,
        "capacity": 1000,
        "route": {"from": "Mumbai", "to": "Delhi", "estimated_distance": 1400},
        "starting_time": datetime(2026, 11, 1, 8, 0).isoformat(),
        "notes": "Overnight run",
    }
    payload.update(overrides)
    return payload


def cargo_payload(plan_id, **overrides):
    payload = {
        "plan_id": plan_id,
        "box_count": 10,
        "size": "big",
        "weight": 200,
        "price": 5000,
        "description": "Machine parts",
        "contact_person": "R. Shah",
        "contact_phone": "9876543210",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def make_plan(db, admin):
    from cargoplan.services import plans

    def _make(**overrides):
        return plans.create_plan(db, actor_for(admin), schemas.PlanCreate(**plan_payload(**overrides)))
    return _make
