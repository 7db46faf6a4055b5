"""
Domain models for the patient records service.
"""
from models.patient import Patient, PATIENT_COLUMNS

__all__ = ["Patient", "PATIENT_COLUMNS"]
