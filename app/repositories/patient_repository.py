"""
app/repositories/patient_repository.py

Persistence layer for patients.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Callable

from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from app.domain.clinic_import import CandidatePatient
from app.mappers.row_normalizer import normalize_email
from db.models.patient import Patient

_DEFAULT_BATCH_SIZE = 500

_DIALECT_INSERTS: dict[str, Callable[..., Any]] = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}

PATIENT_FIELDS: tuple[str, ...] = ("name", "email", "phone")


class PatientRepository:
    """
    Repository for patient reads, CRUD writes and insert-if-absent imports.

    Writes never commit; the caller owns the transaction.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    # ------------------------------------------------------------------
    # Import support
    # ------------------------------------------------------------------

    def insert_if_absent(
        self,
        patients: Sequence[CandidatePatient],
        *,
        batch_size: int = _DEFAULT_BATCH_SIZE,
    ) -> int:
        """
        Insert patients whose email is not stored yet.

        Rows colliding with the unique email constraint are skipped by the
        database (ON CONFLICT DO NOTHING). Returns the number of new rows.
        """

        if not patients:
            return 0

        insert = self._dialect_insert()
        size = max(1, batch_size)
        inserted = 0

        for start in range(0, len(patients), size):
            chunk = patients[start : start + size]
            stmt = (
                insert(Patient)
                .values(
                    [
                        {"name": patient.name, "email": patient.email, "phone": patient.phone}
                        for patient in chunk
                    ]
                )
                .on_conflict_do_nothing(index_elements=[Patient.email])
            )
            result = self._session.execute(stmt)
            inserted += max(0, result.rowcount or 0)

        return inserted

    def ids_by_email(
        self,
        emails: Sequence[str],
        *,
        batch_size: int = _DEFAULT_BATCH_SIZE,
    ) -> dict[str, int]:
        """
        Map each stored email in ``emails`` to its durable patient id.
        """

        unique_emails = list(dict.fromkeys(emails))
        size = max(1, batch_size)
        ids: dict[str, int] = {}

        for start in range(0, len(unique_emails), size):
            chunk = unique_emails[start : start + size]
            rows = self._session.execute(
                select(Patient.email, Patient.id).where(Patient.email.in_(chunk))
            )
            for email, patient_id in rows:
                ids[email] = patient_id

        return ids

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    def list_all(self) -> list[Patient]:
        return list(self._session.scalars(select(Patient).order_by(Patient.id)))

    def get(self, patient_id: int) -> Patient | None:
        return self._session.get(Patient, patient_id)

    def create(self, *, name: str, email: str, phone: str | None = None) -> Patient:
        patient = Patient(name=name.strip(), email=normalize_email(email), phone=phone)
        self._session.add(patient)
        self._session.flush()
        return patient

    def update(self, patient: Patient, changes: dict[str, Any]) -> Patient:
        """Apply the known fields of ``changes``; unknown keys are ignored."""
        for key, value in changes.items():
            if key not in PATIENT_FIELDS:
                continue
            if key == "email" and value is not None:
                value = normalize_email(value)
            setattr(patient, key, value)
        self._session.flush()
        return patient

    def delete(self, patient: Patient) -> None:
        self._session.delete(patient)
        self._session.flush()

    def _dialect_insert(self) -> Callable[..., Any]:
        dialect_name = self._session.get_bind().dialect.name
        try:
            return _DIALECT_INSERTS[dialect_name]
        except KeyError:
            raise RuntimeError(
                f"Insert-if-absent is not supported for dialect {dialect_name!r}."
            ) from None
