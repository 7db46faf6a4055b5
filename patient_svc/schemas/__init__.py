"""
Pydantic schemas for API request/response validation.

This module contains all Pydantic models used at API boundaries.
"""
from schemas.patient import (
    DELETE_CONFIRMATION,
    SUCCESS_STATUS,
    ErrorEnvelope,
    PatientData,
    PatientRequest,
    PatientResponse,
    SuccessEnvelope,
)

__all__ = [
    "DELETE_CONFIRMATION",
    "SUCCESS_STATUS",
    "ErrorEnvelope",
    "PatientData",
    "PatientRequest",
    "PatientResponse",
    "SuccessEnvelope",
]
