"""
app/domain/clinic_import.py

Domain models used by the clinic CSV import flow.

Candidate patients and appointments carry provisional, batch-local integer
ids. They are resolved to durable database ids only inside the loader.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, time
from typing import Mapping

RawRow = Mapping[str, "str | None"]
"""One parsed CSV record: header name -> raw cell value."""


@dataclass(frozen=True)
class RowError:
    """
    One unprocessable CSV row. row_number counts the header as row 1.
    """

    row_number: int
    message: str


@dataclass(frozen=True)
class NormalizedRow:
    """
    A raw row after catalog resolution and value cleanup, before the
    patient has been assigned a batch-local id.
    """

    row_number: int
    patient_name: str
    patient_email: str
    patient_phone: str | None
    doctor_id: int
    location_id: int
    date: date
    time: time
    reason: str
    description: str
    payment_method_id: int
    status_id: int


@dataclass(frozen=True)
class CandidatePatient:
    temporary_id: int
    name: str
    email: str
    phone: str | None = None


@dataclass(frozen=True)
class CandidateAppointment:
    temporary_id: int
    patient_temporary_id: int
    doctor_id: int
    location_id: int
    date: date
    time: time
    reason: str
    description: str
    payment_method_id: int
    status_id: int
    row_number: int | None = None


@dataclass(frozen=True)
class ImportBatch:
    """
    Deduplicated output of normalization, ready for the loader.
    """

    patients: tuple[CandidatePatient, ...] = ()
    appointments: tuple[CandidateAppointment, ...] = ()
    errors: tuple[RowError, ...] = ()


@dataclass(frozen=True)
class StructureValidationResult:
    """
    Outcome of the up-front header check.
    """

    valid: bool
    columns: tuple[str, ...] = ()
    rows_preview: int = 0
    reason: str | None = None
    missing_columns: tuple[str, ...] = ()


@dataclass(frozen=True)
class ImportSummary:
    """
    End-of-run import summary.

    errors holds every row error of the run; callers that display them
    decide how many to show.
    """

    inserted_patients: int
    inserted_appointments: int
    errors: tuple[RowError, ...] = field(default_factory=tuple)
    existing_patients: int = 0
    skipped_appointments: int = 0

    @property
    def message(self) -> str:
        return (
            f"Data loaded: {self.inserted_patients} patients, "
            f"{self.inserted_appointments} appointments"
        )
