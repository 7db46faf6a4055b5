"""
Domain model for patients.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from core.datetime_utils import from_db_string

# Column order used by every SELECT in the patient repository
PATIENT_COLUMNS = (
    "id", "name", "phone", "discharge", "createdat",
    "udatedat", "bloodgroup", "description", "deletedat",
)


@dataclass
class Patient:
    """
    A patient record.

    `id` and the timestamps are assigned by the store; callers creating or
    updating a patient only fill in the mutable fields. A non-null
    `deleted_at` marks the record as soft-deleted.
    """

    name: str = ""
    phone: str = ""
    discharge: bool = False
    blood_group: str = ""
    description: str = ""
    id: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: tuple) -> 'Patient':
        """
        Create a Patient from a database row ordered as PATIENT_COLUMNS.

        Args:
            row: Tuple of column values from the patient table.

        Returns:
            Patient instance.
        """
        return cls(
            id=row[0],
            name=row[1],
            phone=row[2] or "",
            discharge=bool(row[3]),
            created_at=from_db_string(row[4]),
            updated_at=from_db_string(row[5]),
            blood_group=row[6] or "",
            description=row[7] or "",
            deleted_at=from_db_string(row[8]),
        )
