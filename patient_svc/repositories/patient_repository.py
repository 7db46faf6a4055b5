"""
Repository for patient database operations.

Architecture:
    PatientRepository is the data access layer for patients.
    It should be injected via core.dependencies.get_patient_repository().

All SQL is encapsulated in this repository - no SQL in service or API layers.
Every value is bound through `?` placeholders.

Soft delete:
    Rows are never physically removed. Deleting a patient stamps `deletedat`,
    and every read and update filters on `deletedat IS NULL`.
"""
import sqlite3
import logging
from typing import List, Protocol

from core.datetime_utils import utc_now, to_db_string
from core.exceptions import PatientNotFoundError, PersistenceError
from models import Patient, PATIENT_COLUMNS
from repositories.base import Database

logger = logging.getLogger(__name__)

_SELECT_ACTIVE = f"SELECT {', '.join(PATIENT_COLUMNS)} FROM patient WHERE deletedat IS NULL"

INSERT_SQL = (
    "INSERT INTO patient (name, phone, discharge, bloodgroup, description, createdat, udatedat) "
    "VALUES (?, ?, ?, ?, ?, ?, ?)"
)
GET_BY_ID_SQL = _SELECT_ACTIVE + " AND id = ?"
GET_ALL_SQL = _SELECT_ACTIVE + " ORDER BY id"
UPDATE_SQL = (
    "UPDATE patient SET name = ?, phone = ?, discharge = ?, udatedat = ?, bloodgroup = ?, description = ? "
    "WHERE deletedat IS NULL AND id = ?"
)
DELETE_SQL = "UPDATE patient SET deletedat = ? WHERE id = ? AND deletedat IS NULL"


class PatientStore(Protocol):
    """Persistence operations the service layer depends on."""

    def insert(self, patient: Patient) -> Patient: ...

    def get_by_id(self, patient_id: int) -> Patient: ...

    def get_all(self) -> List[Patient]: ...

    def update(self, patient: Patient, patient_id: int) -> Patient: ...

    def delete(self, patient_id: int) -> None: ...


class PatientRepository:
    """
    SQLite implementation of PatientStore.

    This repository does not check existence before writing; that is the
    service layer's job. An update or delete that matches no active row
    simply affects zero rows.
    """

    def __init__(self, db: Database):
        """
        Initialize the patient repository.

        Args:
            db: Database instance for data access.
                Injected via core.dependencies.get_patient_repository().
        """
        self._db = db

    def _execute(self, operation: str, sql: str, params: tuple) -> sqlite3.Cursor:
        """Run a write statement in its own transaction."""
        conn = self._db.get_connection()
        try:
            cursor = conn.execute(sql, params)
            conn.commit()
            return cursor
        except sqlite3.Error as e:
            logger.error(
                "Patient write failed",
                extra={"operation": operation, "error": str(e)}
            )
            raise PersistenceError(operation=operation, error=str(e)) from e
        finally:
            conn.close()

    def insert(self, patient: Patient) -> Patient:
        """
        Insert a new patient and return the stored record.

        `createdat` and `udatedat` are both stamped with the current UTC time.

        Args:
            patient: Patient carrying the mutable fields; id and timestamps are ignored.

        Returns:
            Patient: The created record with its generated id.

        Raises:
            PersistenceError: If the insert fails.
        """
        now = to_db_string(utc_now())
        cursor = self._execute("insert", INSERT_SQL, (
            patient.name,
            patient.phone,
            patient.discharge,
            patient.blood_group,
            patient.description,
            now,
            now,
        ))
        patient_id = cursor.lastrowid
        logger.info("Patient inserted", extra={"patient_id": patient_id})
        return self.get_by_id(patient_id)

    def get_by_id(self, patient_id: int) -> Patient:
        """
        Get an active patient by id.

        Raises:
            PatientNotFoundError: If no row matches or the row is soft-deleted.
            PersistenceError: If the query fails.
        """
        conn = self._db.get_connection()
        try:
            row = conn.execute(GET_BY_ID_SQL, (patient_id,)).fetchone()
        except sqlite3.Error as e:
            raise PersistenceError(operation="get_by_id", error=str(e)) from e
        finally:
            conn.close()

        if row is None:
            raise PatientNotFoundError(patient_id=patient_id)
        return Patient.from_row(row)

    def get_all(self) -> List[Patient]:
        """
        Get all active patients.

        Returns:
            List[Patient]: Active patients ordered by id; empty when there are none.

        Raises:
            PersistenceError: If the query fails.
        """
        conn = self._db.get_connection()
        try:
            rows = conn.execute(GET_ALL_SQL).fetchall()
        except sqlite3.Error as e:
            raise PersistenceError(operation="get_all", error=str(e)) from e
        finally:
            conn.close()

        return [Patient.from_row(row) for row in rows]

    def update(self, patient: Patient, patient_id: int) -> Patient:
        """
        Overwrite the mutable fields of an active patient and return the refreshed row.

        Raises:
            PersistenceError: If the write fails.
            PatientNotFoundError: If no active row matched, surfaced by the read-back.
        """
        affected = self._execute("update", UPDATE_SQL, (
            patient.name,
            patient.phone,
            patient.discharge,
            to_db_string(utc_now()),
            patient.blood_group,
            patient.description,
            patient_id,
        )).rowcount
        logger.info("Patient updated", extra={"patient_id": patient_id, "rows": affected})
        return self.get_by_id(patient_id)

    def delete(self, patient_id: int) -> None:
        """
        Soft-delete an active patient by stamping `deletedat`.

        Deleting an id that is missing or already deleted affects zero rows
        and is not an error.

        Raises:
            PersistenceError: If the write fails.
        """
        affected = self._execute("delete", DELETE_SQL, (to_db_string(utc_now()), patient_id)).rowcount
        logger.info("Patient soft-deleted", extra={"patient_id": patient_id, "rows": affected})
