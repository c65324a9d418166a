"""
app/schemas/csv_import.py

Request and response schemas for the clinic import endpoints.
"""

from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, Field


class ImportRowErrorResponse(BaseModel):
    """
    One row-level import error.
    """

    row: int = Field(..., ge=0)
    message: str


class ImportReportResponse(BaseModel):
    """
    Result of one import. errors is truncated for display; error_count is
    the total number of row errors.
    """

    success: bool = True
    message: str
    inserted_patients: int = Field(..., ge=0, serialization_alias="insertedPatients")
    inserted_appointments: int = Field(..., ge=0, serialization_alias="insertedAppointments")
    existing_patients: int = Field(0, ge=0, serialization_alias="existingPatients")
    error_count: int = Field(0, ge=0, serialization_alias="errorCount")
    errors: list[ImportRowErrorResponse] = Field(default_factory=list)


class LoadPatientRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=3, max_length=255)
    phone: str | None = Field(None, max_length=50)


class LoadAppointmentRequest(BaseModel):
    patient_email: str = Field(..., min_length=3, max_length=255)
    doctor_id: int = Field(1, ge=1)
    location_id: int = Field(1, ge=1)
    date: dt.date
    time: dt.time
    reason: str | None = Field(None, max_length=255)
    description: str | None = None
    payment_method_id: int = Field(1, ge=1)
    status_id: int = Field(1, ge=1)


class LoadDataRequest(BaseModel):
    """
    Already-normalized records; appointments reference patients by email.
    """

    patients: list[LoadPatientRequest] = Field(..., min_length=1)
    appointments: list[LoadAppointmentRequest] = Field(default_factory=list)
