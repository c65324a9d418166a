"""
app/services/import_loader.py

Transactional loader for deduplicated clinic import batches.

The whole batch is one unit of work:

    1. insert-if-absent every candidate patient (keyed on email)
    2. re-read durable ids for every batch email
    3. remap each appointment: temporary patient id -> email -> durable id
    4. insert appointments and commit

Any database failure rolls back every insert of the batch.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.domain.clinic_import import ImportBatch, ImportSummary, RowError
from app.repositories.appointment_repository import AppointmentRepository
from app.repositories.patient_repository import PatientRepository

logger = logging.getLogger(__name__)


class CSVPersistenceError(RuntimeError):
    """
    Raised when an import batch cannot be persisted. Nothing was written.
    """


class ImportLoader:
    """
    Persists an ImportBatch atomically and reports what was inserted.
    """

    def __init__(self, *, batch_size: int = 500) -> None:
        self._batch_size = max(1, batch_size)

    def load(self, batch: ImportBatch, db: Session) -> ImportSummary:
        """
        Load ``batch`` into the database and return the import summary.

        Raises CSVPersistenceError after rolling back if any insert fails.
        """

        patients = PatientRepository(db)
        appointments = AppointmentRepository(db)
        unresolved: list[RowError] = []

        try:
            with _unit_of_work(db):
                inserted_patients = patients.insert_if_absent(
                    batch.patients,
                    batch_size=self._batch_size,
                )

                durable_ids = patients.ids_by_email(
                    [patient.email for patient in batch.patients],
                    batch_size=self._batch_size,
                )
                emails_by_temporary_id = {
                    patient.temporary_id: patient.email for patient in batch.patients
                }

                payloads: list[dict[str, Any]] = []
                for appointment in batch.appointments:
                    email = emails_by_temporary_id.get(appointment.patient_temporary_id)
                    patient_id = durable_ids.get(email) if email is not None else None
                    if patient_id is None:
                        logger.warning(
                            "Skipping appointment with unresolved patient temporary_id=%s row=%s",
                            appointment.patient_temporary_id,
                            appointment.row_number,
                        )
                        unresolved.append(
                            RowError(
                                row_number=appointment.row_number or 0,
                                message="Appointment skipped: patient could not be resolved.",
                            )
                        )
                        continue

                    payloads.append(
                        {
                            "patient_id": patient_id,
                            "doctor_id": appointment.doctor_id,
                            "location_id": appointment.location_id,
                            "date": appointment.date,
                            "time": appointment.time,
                            "reason": appointment.reason,
                            "description": appointment.description,
                            "payment_method_id": appointment.payment_method_id,
                            "status_id": appointment.status_id,
                        }
                    )

                inserted_appointments = appointments.bulk_insert(
                    payloads,
                    batch_size=self._batch_size,
                )
        except SQLAlchemyError as exc:
            logger.exception(
                "Import rolled back patients=%d appointments=%d",
                len(batch.patients),
                len(batch.appointments),
            )
            raise CSVPersistenceError("Failed to persist the import batch.") from exc

        summary = ImportSummary(
            inserted_patients=inserted_patients,
            inserted_appointments=inserted_appointments,
            errors=batch.errors + tuple(unresolved),
            existing_patients=len(batch.patients) - inserted_patients,
            skipped_appointments=len(unresolved),
        )
        logger.info(
            "Import committed inserted_patients=%d existing_patients=%d "
            "inserted_appointments=%d skipped_appointments=%d row_errors=%d",
            summary.inserted_patients,
            summary.existing_patients,
            summary.inserted_appointments,
            summary.skipped_appointments,
            len(summary.errors),
        )
        return summary


@contextmanager
def _unit_of_work(db: Session) -> Iterator[None]:
    """
    Commit on success, roll back on any exception.
    """

    try:
        yield
        db.commit()
    except Exception:
        db.rollback()
        raise
