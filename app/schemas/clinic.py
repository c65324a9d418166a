"""
app/schemas/clinic.py

Request and response schemas for the clinic CRUD and report endpoints.
"""

from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, Field


class MessageResponse(BaseModel):
    message: str
    id: int | None = None


# ---------------------------------------------------------------------------
# Patients
# ---------------------------------------------------------------------------


class PatientCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=3, max_length=255)
    phone: str | None = Field(None, max_length=50)


class PatientPatchRequest(BaseModel):
    name: str | None = Field(None, max_length=255)
    email: str | None = Field(None, max_length=255)
    phone: str | None = Field(None, max_length=50)


class PatientResponse(BaseModel):
    id: int
    name: str
    email: str
    phone: str | None

    model_config = {"from_attributes": True}


class FrequentPatientResponse(BaseModel):
    id: int
    name: str
    email: str
    total_appointments: int


# ---------------------------------------------------------------------------
# Doctors
# ---------------------------------------------------------------------------


class DoctorCreateRequest(BaseModel):
    name: str = Field(..., min_length=1)
    specialty_id: int = Field(..., ge=1)
    email: str | None = None
    phone: str | None = None


class DoctorPatchRequest(BaseModel):
    name: str | None = None
    specialty_id: int | None = Field(None, ge=1)
    email: str | None = None
    phone: str | None = None


class DoctorResponse(BaseModel):
    id: int
    name: str
    specialty_id: int
    specialty: str
    email: str | None
    phone: str | None


class DoctorStatsResponse(BaseModel):
    id: int
    name: str
    specialty: str
    appointments_last_month: int


# ---------------------------------------------------------------------------
# Appointments
# ---------------------------------------------------------------------------


class AppointmentCreateRequest(BaseModel):
    patient_id: int = Field(..., ge=1)
    doctor_id: int = Field(..., ge=1)
    location_id: int = Field(..., ge=1)
    date: dt.date
    time: dt.time
    reason: str = Field("Sin especificar", max_length=255)
    description: str = "Sin descripción"
    payment_method_id: int = Field(..., ge=1)
    status_id: int = Field(..., ge=1)


class AppointmentPatchRequest(BaseModel):
    patient_id: int | None = Field(None, ge=1)
    doctor_id: int | None = Field(None, ge=1)
    location_id: int | None = Field(None, ge=1)
    date: dt.date | None = None
    time: dt.time | None = None
    reason: str | None = Field(None, max_length=255)
    description: str | None = None
    payment_method_id: int | None = Field(None, ge=1)
    status_id: int | None = Field(None, ge=1)


class AppointmentDetailResponse(BaseModel):
    id: int
    patient_id: int
    doctor_id: int
    date: dt.date
    time: dt.time
    reason: str
    description: str
    patient: str
    patient_email: str
    doctor: str
    specialty: str
    location: str
    payment_method: str
    status: str
    status_color: str


# ---------------------------------------------------------------------------
# Reference catalogs
# ---------------------------------------------------------------------------


class SpecialtyCreateRequest(BaseModel):
    name: str = Field(..., min_length=1)
    description: str | None = None


class SpecialtyResponse(BaseModel):
    id: int
    name: str
    description: str | None

    model_config = {"from_attributes": True}


class LocationCreateRequest(BaseModel):
    name: str = Field(..., min_length=1)
    address: str | None = None


class LocationResponse(BaseModel):
    id: int
    name: str
    address: str | None

    model_config = {"from_attributes": True}


class PaymentMethodCreateRequest(BaseModel):
    name: str = Field(..., min_length=1)


class PaymentMethodResponse(BaseModel):
    id: int
    name: str

    model_config = {"from_attributes": True}


class AppointmentStatusCreateRequest(BaseModel):
    name: str = Field(..., min_length=1)
    color: str | None = None


class AppointmentStatusResponse(BaseModel):
    id: int
    name: str
    color: str

    model_config = {"from_attributes": True}


# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------


class RevenueReportRow(BaseModel):
    payment_method: str
    total_appointments: int
    estimated_revenue: int
