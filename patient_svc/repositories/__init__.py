"""
Repository layer for database access.

This module contains all database access operations, encapsulating SQL and data persistence logic.
"""
from repositories.base import Database
from repositories.patient_repository import PatientRepository, PatientStore

__all__ = [
    "Database",
    "PatientRepository",
    "PatientStore",
]
