"""
app/repositories/appointment_repository.py

Persistence and read models for appointments.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date
from typing import Any

from sqlalchemy import Select, insert, select
from sqlalchemy.orm import Session

from db.models import (
    Appointment,
    AppointmentStatus,
    Doctor,
    Location,
    Patient,
    PaymentMethod,
    Specialty,
)

_DEFAULT_BATCH_SIZE = 500

APPOINTMENT_FIELDS: tuple[str, ...] = (
    "patient_id",
    "doctor_id",
    "location_id",
    "date",
    "time",
    "reason",
    "description",
    "payment_method_id",
    "status_id",
)


def _detailed_select() -> Select:
    return (
        select(
            Appointment.id,
            Appointment.patient_id,
            Appointment.doctor_id,
            Appointment.date,
            Appointment.time,
            Appointment.reason,
            Appointment.description,
            Patient.name.label("patient"),
            Patient.email.label("patient_email"),
            Doctor.name.label("doctor"),
            Specialty.name.label("specialty"),
            Location.name.label("location"),
            PaymentMethod.name.label("payment_method"),
            AppointmentStatus.name.label("status"),
            AppointmentStatus.color.label("status_color"),
        )
        .join(Patient, Appointment.patient_id == Patient.id)
        .join(Doctor, Appointment.doctor_id == Doctor.id)
        .join(Specialty, Doctor.specialty_id == Specialty.id)
        .join(Location, Appointment.location_id == Location.id)
        .join(PaymentMethod, Appointment.payment_method_id == PaymentMethod.id)
        .join(AppointmentStatus, Appointment.status_id == AppointmentStatus.id)
    )


class AppointmentRepository:
    """
    Repository for appointment writes and joined read models.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def bulk_insert(
        self,
        payloads: Sequence[dict[str, Any]],
        *,
        batch_size: int = _DEFAULT_BATCH_SIZE,
    ) -> int:
        """
        Insert appointment rows in chunks. Returns the number inserted.
        """

        if not payloads:
            return 0

        size = max(1, batch_size)
        inserted = 0
        for start in range(0, len(payloads), size):
            chunk = list(payloads[start : start + size])
            self._session.execute(insert(Appointment).values(chunk))
            inserted += len(chunk)
        return inserted

    def list_detailed(self) -> list[dict[str, Any]]:
        stmt = _detailed_select().order_by(Appointment.date.desc(), Appointment.time.desc())
        return [dict(row) for row in self._session.execute(stmt).mappings()]

    def get_detailed(self, appointment_id: int) -> dict[str, Any] | None:
        stmt = _detailed_select().where(Appointment.id == appointment_id)
        row = self._session.execute(stmt).mappings().first()
        return dict(row) if row is not None else None

    def list_for_doctor(
        self,
        doctor_id: int,
        *,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> list[dict[str, Any]]:
        """
        Appointments of one doctor, newest first. The date range applies only
        when both bounds are given.
        """

        stmt = _detailed_select().where(Appointment.doctor_id == doctor_id)
        if start_date is not None and end_date is not None:
            stmt = stmt.where(Appointment.date.between(start_date, end_date))
        stmt = stmt.order_by(Appointment.date.desc(), Appointment.time.desc())
        return [dict(row) for row in self._session.execute(stmt).mappings()]

    def get(self, appointment_id: int) -> Appointment | None:
        return self._session.get(Appointment, appointment_id)

    def create(self, values: dict[str, Any]) -> Appointment:
        appointment = Appointment(**{key: values[key] for key in APPOINTMENT_FIELDS if key in values})
        self._session.add(appointment)
        self._session.flush()
        return appointment

    def update(self, appointment: Appointment, changes: dict[str, Any]) -> Appointment:
        for key, value in changes.items():
            if key in APPOINTMENT_FIELDS:
                setattr(appointment, key, value)
        self._session.flush()
        return appointment

    def delete(self, appointment: Appointment) -> None:
        self._session.delete(appointment)
        self._session.flush()
