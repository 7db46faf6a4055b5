"""
Patients router - patient CRUD endpoints.

Architecture:
    HTTP Request → Router (this file) → PatientService → PatientRepository → Database

Responses:
    Success: {"code": 200, "status": "Success", "data": ...}
    Failure: {"code": 400, "status": "Error", "Message": "..."}

    Errors raised by the service are rendered by the handlers registered in
    core.exceptions.setup_exception_handlers(); every failure is a 400.

Path ids:
    A path id that is not an integer is read as 0, which the service then
    rejects with "invalid id".
"""
import logging
import re
from typing import Any, Dict

from fastapi import APIRouter, Depends, status

from schemas import (
    DELETE_CONFIRMATION,
    SUCCESS_STATUS,
    ErrorEnvelope,
    PatientData,
    PatientRequest,
    PatientResponse,
    SuccessEnvelope,
)
from services import PatientServiceInterface
from core.dependencies import get_patient_service

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/patients",
    tags=["Patients"],
    responses={status.HTTP_400_BAD_REQUEST: {"model": ErrorEnvelope}},
)

_INT_PATTERN = re.compile(r"[+-]?\d+")

# Bounds of an SQLite INTEGER
MAX_ID = 2**63 - 1
MIN_ID = -2**63


def parse_id(raw: str) -> int:
    """
    Parse a path id, returning 0 when it is not a plain integer.

    Out-of-range values are clamped to the signed 64-bit bounds, so a huge
    id is looked up (and not found) and a huge negative one fails validation.
    """
    if _INT_PATTERN.fullmatch(raw):
        negative = raw.startswith("-")
        digits = raw.lstrip("+-").lstrip("0") or "0"
        # int() refuses very long digit strings, and they are out of range anyway
        if len(digits) > 19:
            return MIN_ID if negative else MAX_ID
        value = -int(digits) if negative else int(digits)
        return max(MIN_ID, min(MAX_ID, value))
    logger.debug("Non-numeric patient id in path", extra={"raw_id": raw})
    return 0


def success(data: Any) -> Dict[str, Any]:
    """Build the success envelope."""
    return {"code": status.HTTP_200_OK, "status": SUCCESS_STATUS, "data": data}


@router.get(
    "/{id}",
    response_model=SuccessEnvelope,
    summary="Get a patient",
    description="Fetch an active patient by id. Soft-deleted patients are not returned."
)
def get_patient(
    id: str,
    patient_service: PatientServiceInterface = Depends(get_patient_service)
):
    patient = patient_service.get_by_id(parse_id(id))
    return success(PatientData(Patient=PatientResponse.from_patient(patient)).to_wire())


@router.get(
    "",
    response_model=SuccessEnvelope,
    summary="List patients",
    description="List all active patients. Returns an empty list when there are none."
)
def list_patients(
    patient_service: PatientServiceInterface = Depends(get_patient_service)
):
    patients = patient_service.get_all()
    return success(PatientData(Patient=[PatientResponse.from_patient(p) for p in patients]).to_wire())


@router.post(
    "",
    response_model=SuccessEnvelope,
    summary="Create a patient",
    description="Create a patient. `name` must be non-empty. Returns the stored record with its generated id."
)
def create_patient(
    patient: PatientRequest,
    patient_service: PatientServiceInterface = Depends(get_patient_service)
):
    """
    Create a new patient.

    - **name**: Patient's full name (required, non-empty)
    - **phone**, **discharge**, **bloodGroup**, **description**: optional
    """
    created = patient_service.insert(patient.to_model())
    return success(PatientData(Patient=PatientResponse.from_patient(created)).to_wire())


@router.put(
    "/{id}",
    response_model=SuccessEnvelope,
    summary="Update a patient",
    description="Overwrite the mutable fields of an active patient. Missing fields are reset to their zero value."
)
def update_patient(
    id: str,
    patient: PatientRequest,
    patient_service: PatientServiceInterface = Depends(get_patient_service)
):
    updated = patient_service.update(patient.to_model(), parse_id(id))
    return success(PatientData(Patient=PatientResponse.from_patient(updated)).to_wire())


@router.delete(
    "/{id}",
    response_model=SuccessEnvelope,
    summary="Delete a patient",
    description="Soft-delete an active patient. Deleting the same id again fails."
)
def delete_patient(
    id: str,
    patient_service: PatientServiceInterface = Depends(get_patient_service)
):
    patient_service.delete(parse_id(id))
    return success(DELETE_CONFIRMATION)
