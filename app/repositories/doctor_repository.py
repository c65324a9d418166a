"""
app/repositories/doctor_repository.py

Persistence layer for doctors.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import Select, select
from sqlalchemy.orm import Session

from db.models import Doctor, Specialty

DOCTOR_FIELDS: tuple[str, ...] = ("name", "specialty_id", "email", "phone")


def _with_specialty() -> Select:
    return select(
        Doctor.id,
        Doctor.name,
        Doctor.specialty_id,
        Specialty.name.label("specialty"),
        Doctor.email,
        Doctor.phone,
    ).join(Specialty, Doctor.specialty_id == Specialty.id)


class DoctorRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def list_detailed(self) -> list[dict[str, Any]]:
        stmt = _with_specialty().order_by(Doctor.name, Doctor.id)
        return [dict(row) for row in self._session.execute(stmt).mappings()]

    def get_detailed(self, doctor_id: int) -> dict[str, Any] | None:
        row = self._session.execute(_with_specialty().where(Doctor.id == doctor_id)).mappings().first()
        return dict(row) if row is not None else None

    def get(self, doctor_id: int) -> Doctor | None:
        return self._session.get(Doctor, doctor_id)

    def create(self, values: dict[str, Any]) -> Doctor:
        doctor = Doctor(**{key: values[key] for key in DOCTOR_FIELDS if key in values})
        self._session.add(doctor)
        self._session.flush()
        return doctor

    def update(self, doctor: Doctor, changes: dict[str, Any]) -> Doctor:
        for key, value in changes.items():
            if key in DOCTOR_FIELDS:
                setattr(doctor, key, value)
        self._session.flush()
        return doctor

    def delete(self, doctor: Doctor) -> None:
        self._session.delete(doctor)
        self._session.flush()
