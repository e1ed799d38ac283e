"""
Shared fixtures: an in-memory database wired into the app and request helpers.
"""
from typing import Any, Callable, Dict

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from crediflow.main import app
from crediflow.core.database import Base, get_db

# Setup In-Memory Database for Testing
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def db_session():
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def client(db_session):
    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def application_payload(**overrides: Any) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "user_id": "user-001",
        "full_name": "Adaeze Okafor",
        "email": "adaeze.okafor@gmail.com",
        "phone": "08031234567",
        "loan_type": "salary",
        "loan_amount": 500000,
        "loan_purpose": "School fees",
        "employment_status": "employed",
        "monthly_income": 250000,
        "payment_type": "installment",
    }
    payload.update(overrides)
    return payload


@pytest.fixture()
def submit_application(client) -> Callable[..., Dict[str, Any]]:
    def _submit(**overrides: Any) -> Dict[str, Any]:
        response = client.post("/applications", json=application_payload(**overrides))
        assert response.status_code == 201, response.text
        return response.json()
    return _submit


@pytest.fixture()
def dispatched_application(client, submit_application) -> Callable[..., Dict[str, Any]]:
    """Submits an application and walks it through approval and dispatch."""
    def _dispatch(**overrides: Any) -> Dict[str, Any]:
        application = submit_application(**overrides)
        for status in ("approved", "dispatched"):
            response = client.patch(
                f"/applications/{application['id']}/status",
                json={"status": status, "reviewed_by": "admin-001"}
            )
            assert response.status_code == 200, response.text
        return response.json()
    return _dispatch
