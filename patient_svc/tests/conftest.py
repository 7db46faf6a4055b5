"""
Shared pytest fixtures.

Fixture Hierarchy:
    temp_db → patient_repo → patient_service → test_app → client

    mock_service → mock_app → mock_client   (HTTP layer against a substitute service)
"""
import os
import tempfile
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from repositories import Database, PatientRepository
from services import PatientService, PatientServiceInterface
from models import Patient
from core.exceptions import setup_exception_handlers
from core import dependencies as deps


@pytest.fixture
def temp_db():
    """
    Create a fresh SQLite database in a temp file for each test.
    """
    fd, db_path = tempfile.mkstemp(suffix='.db')
    os.close(fd)

    db = Database(db_path=db_path)
    yield db

    for suffix in ("", "-wal", "-shm"):
        if os.path.exists(db_path + suffix):
            os.unlink(db_path + suffix)


@pytest.fixture
def patient_repo(temp_db):
    """Create a PatientRepository with the test database."""
    return PatientRepository(db=temp_db)


@pytest.fixture
def patient_service(patient_repo):
    """Create a PatientService with the test repository."""
    return PatientService(patient_store=patient_repo)


@pytest.fixture
def sample_patient():
    """A stored patient as the store would return it."""
    now = datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)
    return Patient(
        id=5,
        name="ZopSmart",
        phone="+919172681679",
        discharge=True,
        blood_group="+A",
        description="patient description",
        created_at=now,
        updated_at=now,
    )


def _build_app(overrides: dict) -> FastAPI:
    from api.routers import health_router, patients_router

    app = FastAPI(title="Patient Records Service Test")
    setup_exception_handlers(app)
    app.dependency_overrides.update(overrides)
    app.include_router(health_router)
    app.include_router(patients_router)
    return app


@pytest.fixture
def test_app(temp_db, patient_repo, patient_service):
    """
    FastAPI app using the real routers with test instances injected
    through dependency_overrides.
    """
    app = _build_app({
        deps.get_database: lambda: temp_db,
        deps.get_patient_repository: lambda: patient_repo,
        deps.get_patient_service: lambda: patient_service,
    })
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(test_app):
    """Create a test client for the API."""
    return TestClient(test_app)


@pytest.fixture
def mock_service():
    """A substitute service implementing PatientServiceInterface."""
    return MagicMock(spec=PatientServiceInterface)


@pytest.fixture
def mock_client(mock_service):
    """Test client whose routers talk to mock_service."""
    app = _build_app({deps.get_patient_service: lambda: mock_service})
    yield TestClient(app)
    app.dependency_overrides.clear()
