from __future__ import annotations

import os

os.environ["ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite+pysqlite://"
os.environ["AUTO_CREATE_TABLES"] = "0"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from checkin.core.security import build_admin_credentials, get_admin_credentials
from checkin.db.session import get_db
from checkin.main import app
from checkin.models import Base

ADMIN_USER = "admin"
ADMIN_PASS = "s3cret-pass"


@pytest.fixture()
def db():
    engine = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture(scope="session")
def admin_credentials():
    return build_admin_credentials(ADMIN_USER, ADMIN_PASS)


@pytest.fixture()
def client(db, admin_credentials):
    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_admin_credentials] = lambda: admin_credentials

    client_instance = TestClient(app)
    try:
        yield client_instance
    finally:
        client_instance.close()
        app.dependency_overrides.clear()


@pytest.fixture()
def admin_client(client):
    response = client.post("/api/admin/login", json={"username": ADMIN_USER, "password": ADMIN_PASS})
    assert response.status_code == 200
    return client


def check_in_payload(**overrides) -> dict:
    payload = {
        "deviceId": "abc",
        "firstName": "Ali",
        "lastName": "Al Harthy",
        "jobId": "J-100",
        "phone": "+96890000000",
        "company": "OQ",
        "area": "North",
        "cluster": "Cluster N1",
        "plant": "Plant N1-A",
        "ts": "2024-05-01 08:00",
    }
    payload.update(overrides)
    return payload
