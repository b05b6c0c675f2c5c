"""
Pytest configuration and fixtures for testing.

This file provides reusable test fixtures for:
- Database setup/teardown
- FastAPI test client
- API client and boards bound to the test app
- Sample jobs, candidates and assessments
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from talentflow.core.database import Base, get_db
from talentflow.client import TalentFlowClient
from main import app


# Use in-memory SQLite for testing (fast, isolated)
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session():
    """
    Create a fresh database for each test.
    """
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session):
    """
    FastAPI test client with overridden database dependency.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def api(client):
    """TalentFlowClient talking to the test app."""
    return TalentFlowClient(base_url="http://testserver/api", http_client=client)


@pytest.fixture
def inject_faults(monkeypatch):
    """
    Turn on fault injection from inside a test, after its data is set up.

    Usage: inject_faults(write=1.0) or inject_faults(reorder=1.0)
    """
    from talentflow.core.config import settings

    def _enable(write: float = 0.0, reorder: float = 0.0):
        monkeypatch.setattr(settings, "SIMULATED_ERROR_RATE", write)
        monkeypatch.setattr(settings, "SIMULATED_REORDER_ERROR_RATE", reorder)
    return _enable


@pytest.fixture
def sample_job_data():
    """Sample job data for testing"""
    return {
        "title": "Senior Frontend Developer",
        "description": "Build amazing user interfaces with React",
        "requirements": ["3+ years of experience in React", "Strong understanding of JavaScript"],
        "tags": ["React", "JavaScript", "CSS"],
    }


@pytest.fixture
def make_jobs(client):
    """Create jobs with the given titles; returns the created jobs in order."""
    def _make(*titles, **overrides):
        jobs = []
        for title in titles:
            payload = {"title": title, "tags": overrides.get("tags", [])}
            payload.update({k: v for k, v in overrides.items() if k != "tags"})
            response = client.post("/api/jobs", json=payload)
            assert response.status_code == 201, response.text
            jobs.append(response.json())
        return jobs
    return _make


@pytest.fixture
def make_candidate(client):
    """Create a candidate; keyword arguments override the defaults."""
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        payload = {
            "name": f"Candidate {counter['n']}",
            "email": f"candidate{counter['n']}@example.com",
            "jobId": 1,
        }
        payload.update(overrides)
        response = client.post("/api/candidates", json=payload)
        assert response.status_code == 201, response.text
        return response.json()
    return _make


@pytest.fixture
def sample_assessment_data():
    """Assessment with a conditional follow-up question"""
    return {
        "title": "Technical Assessment",
        "description": "Core engineering questions",
        "questions": [
            {
                "id": "relocate",
                "type": "single-choice",
                "question": "Are you willing to relocate?",
                "options": ["Yes", "No", "Depends on the location"],
                "required": True,
            },
            {
                "id": "city",
                "type": "short-text",
                "question": "Which city would you prefer?",
                "required": True,
                "validation": {"maxLength": 40},
                "conditionalLogic": {"dependsOn": "relocate", "condition": "equals", "value": "Yes"},
            },
            {
                "id": "years",
                "type": "numeric",
                "question": "How many years of programming experience do you have?",
                "required": True,
                "validation": {"min": 0, "max": 50},
            },
            {
                "id": "frameworks",
                "type": "multi-choice",
                "question": "Which of the following are JavaScript frameworks?",
                "options": ["React", "Angular", "Vue", "Django", "Flask"],
                "required": False,
            },
        ],
    }
