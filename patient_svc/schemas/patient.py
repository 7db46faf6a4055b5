"""
Pydantic schemas for patient-related API operations.

Wire field names are camelCase (`bloodGroup`, `createdAt`, `updatedAt`);
the Python attributes are snake_case and mapped through aliases.
"""
from datetime import datetime
from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from models import Patient

SUCCESS_STATUS = "Success"
DELETE_CONFIRMATION = "Patient deleted Successfully"


class PatientRequest(BaseModel):
    """Schema for the body of create and update requests.

    Every field is optional on the wire: a missing or null field takes its
    zero value, so a body without `name` is rejected by the service layer with
    `invalid name` rather than by schema validation. Unknown fields are
    ignored.
    """
    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
        json_schema_extra={
            "example": {
                "name": "Zopsmart",
                "phone": "+919172681679",
                "discharge": True,
                "bloodGroup": "+A",
                "description": "patient description",
            }
        },
    )

    name: str = Field(default="", description="Patient full name (must be non-empty)")
    phone: str = Field(default="", description="Contact phone number")
    discharge: bool = Field(default=False, strict=True, description="Whether the patient has been discharged")
    blood_group: str = Field(default="", alias="bloodGroup", description="Blood group, e.g. +A")
    description: str = Field(default="", description="Free-text notes")

    @field_validator("*", mode="before")
    @classmethod
    def null_to_zero_value(cls, value: Any, info: ValidationInfo) -> Any:
        """Read an explicit JSON null as the field's zero value."""
        if value is None:
            return cls.model_fields[info.field_name].default
        return value

    def to_model(self) -> Patient:
        """Convert the request body into a domain Patient with no id or timestamps."""
        return Patient(
            name=self.name,
            phone=self.phone,
            discharge=self.discharge,
            blood_group=self.blood_group,
            description=self.description,
        )


class PatientResponse(BaseModel):
    """Schema for a patient in responses. `deletedAt` is never exposed."""
    model_config = ConfigDict(populate_by_name=True)

    id: int = Field(..., description="Unique patient identifier", examples=[1])
    name: str = Field(..., description="Patient full name", examples=["Zopsmart"])
    phone: str = Field(default="", examples=["+919172681679"])
    discharge: bool = Field(default=False)
    blood_group: str = Field(default="", alias="bloodGroup", examples=["+A"])
    description: str = Field(default="")
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")

    @classmethod
    def from_patient(cls, patient: Patient) -> "PatientResponse":
        return cls(
            id=patient.id,
            name=patient.name,
            phone=patient.phone,
            discharge=patient.discharge,
            blood_group=patient.blood_group,
            description=patient.description,
            created_at=patient.created_at,
            updated_at=patient.updated_at,
        )


class PatientData(BaseModel):
    """The `data` member of a successful read/write envelope."""
    Patient: Union[PatientResponse, List[PatientResponse]]

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")


class SuccessEnvelope(BaseModel):
    """Envelope for successful responses: {code, status, data}."""
    code: int = Field(..., examples=[200])
    status: str = Field(default=SUCCESS_STATUS, examples=[SUCCESS_STATUS])
    data: Any = None


class ErrorEnvelope(BaseModel):
    """Envelope for failed responses: {code, status, Message}."""
    code: int = Field(..., examples=[400])
    status: str = Field(default="Error", examples=["Error"])
    Message: str = Field(..., examples=["invalid id"])
