"""
Service layer for business logic.

This module contains validation and orchestration services.
"""
from services.patient_service import (
    PatientService,
    PatientServiceInterface,
    valid_id,
    validate_name,
)

__all__ = [
    "PatientService",
    "PatientServiceInterface",
    "valid_id",
    "validate_name",
]
