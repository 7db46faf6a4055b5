"""
Service layer for patient operations.

This service validates input and orchestrates calls to the patient store.

Architecture:
    API Layer (routers) → PatientService → PatientStore → Database

Dependency Injection:
    PatientService receives its store via constructor injection.
    Use core.dependencies.get_patient_service() in routers with Depends().

Existence checks:
    update() and delete() look the patient up before writing. A missing or
    soft-deleted id therefore fails with PatientNotFoundError here, even
    though the store's own delete accepts it silently.
"""
import logging
from typing import List, Protocol

from core.exceptions import ValidationError
from models import Patient
from repositories import PatientStore

logger = logging.getLogger(__name__)

INVALID_ID = "invalid id"
INVALID_NAME = "invalid name"


def valid_id(patient_id: int) -> bool:
    """True iff the id is a positive integer."""
    return patient_id > 0


def validate_name(name: str) -> bool:
    """True iff the name is non-empty."""
    return name != ""


class PatientServiceInterface(Protocol):
    """Patient operations the HTTP layer depends on."""

    def insert(self, patient: Patient) -> Patient: ...

    def get_by_id(self, patient_id: int) -> Patient: ...

    def get_all(self) -> List[Patient]: ...

    def update(self, patient: Patient, patient_id: int) -> Patient: ...

    def delete(self, patient_id: int) -> None: ...


class PatientService:
    """
    Service layer for patient operations.

    Store errors (PatientNotFoundError, PersistenceError) are propagated
    unchanged; this layer only adds ValidationError.
    """

    def __init__(self, patient_store: PatientStore):
        """
        Initialize the patient service.

        Args:
            patient_store: Store used for persistence.
                           Injected via core.dependencies.get_patient_service().
        """
        self._store = patient_store

    def _check_id(self, patient_id: int) -> None:
        if not valid_id(patient_id):
            logger.warning("Rejected patient id", extra={"patient_id": patient_id})
            raise ValidationError(INVALID_ID)

    def insert(self, patient: Patient) -> Patient:
        """
        Create a new patient.

        Raises:
            ValidationError: If the name is empty.
            PersistenceError: If the store fails to write.
        """
        if not validate_name(patient.name):
            logger.warning("Rejected patient with empty name")
            raise ValidationError(INVALID_NAME)

        created = self._store.insert(patient)
        logger.info(f"Patient created (id={created.id})")
        return created

    def get_by_id(self, patient_id: int) -> Patient:
        """
        Get an active patient.

        Raises:
            ValidationError: If the id is not positive.
            PatientNotFoundError: If no active patient has this id.
        """
        self._check_id(patient_id)
        return self._store.get_by_id(patient_id)

    def get_all(self) -> List[Patient]:
        return self._store.get_all()

    def update(self, patient: Patient, patient_id: int) -> Patient:
        """
        Update an active patient.

        The patient is looked up first; when the lookup fails its error is
        raised and no write is issued.

        Raises:
            ValidationError: If the id is not positive.
            PatientNotFoundError: If no active patient has this id.
            PersistenceError: If the store fails.
        """
        self._check_id(patient_id)
        self._store.get_by_id(patient_id)

        updated = self._store.update(patient, patient_id)
        logger.info(f"Patient updated (id={patient_id})")
        return updated

    def delete(self, patient_id: int) -> None:
        """
        Soft-delete an active patient.

        Raises:
            ValidationError: If the id is not positive.
            PatientNotFoundError: If no active patient has this id, including
                one that was already deleted.
            PersistenceError: If the store fails.
        """
        self._check_id(patient_id)
        self._store.get_by_id(patient_id)

        self._store.delete(patient_id)
        logger.info(f"Patient deleted (id={patient_id})")
