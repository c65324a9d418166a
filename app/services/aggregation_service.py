"""
app/services/aggregation_service.py

Deduplication and aggregation of normalized import rows.

Patients are collapsed by normalized email. The first row that mentions an
email mints the patient's batch-local id (1, 2, 3, ... in order of first
appearance); later rows reuse it. Every valid row still yields exactly one
appointment, in input order.
"""

from __future__ import annotations

from app.domain.clinic_import import (
    CandidateAppointment,
    CandidatePatient,
    ImportBatch,
    NormalizedRow,
    RowError,
)


class ImportAggregator:
    """
    Accumulates one import batch. Not thread-safe; one instance per import.
    """

    def __init__(self) -> None:
        self._patient_ids_by_email: dict[str, int] = {}
        self._patients: list[CandidatePatient] = []
        self._appointments: list[CandidateAppointment] = []
        self._errors: list[RowError] = []

    def add_row(self, row: NormalizedRow) -> CandidateAppointment:
        """
        Register one normalized row and return its candidate appointment.
        """

        patient_id = self.patient_id_for(
            email=row.patient_email,
            name=row.patient_name,
            phone=row.patient_phone,
        )
        appointment = CandidateAppointment(
            temporary_id=len(self._appointments) + 1,
            patient_temporary_id=patient_id,
            doctor_id=row.doctor_id,
            location_id=row.location_id,
            date=row.date,
            time=row.time,
            reason=row.reason,
            description=row.description,
            payment_method_id=row.payment_method_id,
            status_id=row.status_id,
            row_number=row.row_number,
        )
        self._appointments.append(appointment)
        return appointment

    def patient_id_for(self, *, email: str, name: str, phone: str | None = None) -> int:
        """
        Return the batch-local id for ``email``, minting one on first sight.

        ``email`` must already be normalized.
        """

        existing = self._patient_ids_by_email.get(email)
        if existing is not None:
            return existing

        patient_id = len(self._patients) + 1
        self._patient_ids_by_email[email] = patient_id
        self._patients.append(
            CandidatePatient(temporary_id=patient_id, name=name, email=email, phone=phone)
        )
        return patient_id

    def add_error(self, error: RowError) -> None:
        self._errors.append(error)

    def build(self) -> ImportBatch:
        return ImportBatch(
            patients=tuple(self._patients),
            appointments=tuple(self._appointments),
            errors=tuple(self._errors),
        )
