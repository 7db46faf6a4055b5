"""
FastAPI dependency injection for Patient Records Service.

Architecture Flow:
    API Layer (Routers)
         ↓ Depends()
    Service Layer (validation, existence checks)
         ↓ Injected
    Repository Layer (SQL)
         ↓ Injected
    Database (SQLite)

Usage in Routers:
    from core.dependencies import get_patient_service

    @router.get("/patients")
    async def list_patients(
        patient_service: PatientServiceInterface = Depends(get_patient_service)
    ):
        ...

Testing:
    app.dependency_overrides[get_patient_service] = lambda: fake_service
"""
import logging
from typing import Optional, TYPE_CHECKING

from core.config import settings

if TYPE_CHECKING:
    from repositories import Database, PatientRepository
    from services import PatientService

logger = logging.getLogger(__name__)


_database_instance: Optional["Database"] = None


def get_database() -> "Database":
    """
    Get the database instance, creating it on first use.

    Returns:
        Database: The configured database instance.
    """
    global _database_instance

    if _database_instance is None:
        # Imported here to avoid circular imports with repositories
        from repositories import Database

        logger.info(f"Initializing database: {settings.database_path}")
        _database_instance = Database(
            db_path=settings.database_path,
            busy_timeout=settings.patient_svc_db_busy_timeout
        )

    return _database_instance


def reset_database() -> None:
    """Drop the cached database instance (for testing only)."""
    global _database_instance
    _database_instance = None


def get_patient_repository() -> "PatientRepository":
    """
    Get a PatientRepository instance with database injected.

    Returns:
        PatientRepository: Store for patient persistence.
    """
    from repositories import PatientRepository

    return PatientRepository(db=get_database())


def get_patient_service() -> "PatientService":
    """
    Get a PatientService instance with the store injected.

    Returns:
        PatientService: Service for patient operations.
    """
    from services import PatientService

    return PatientService(patient_store=get_patient_repository())
