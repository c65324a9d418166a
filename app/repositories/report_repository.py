"""
app/repositories/report_repository.py

Aggregate read queries behind the clinic report endpoints.

Every method issues a single SQL statement; there are no per-row follow-up
queries.
"""

from __future__ import annotations

from datetime import date
from typing import Any

from sqlalchemy import and_, func, select
from sqlalchemy.orm import Session

from db.models import Appointment, Doctor, Patient, PaymentMethod, Specialty

CONFIRMED_STATUS_ID = 2
FREQUENT_PATIENT_MIN_APPOINTMENTS = 3


class ReportRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def frequent_patients(
        self,
        *,
        more_than: int = FREQUENT_PATIENT_MIN_APPOINTMENTS,
    ) -> list[dict[str, Any]]:
        """
        Patients with strictly more than ``more_than`` appointments.
        """

        total = func.count(Appointment.id).label("total_appointments")
        stmt = (
            select(Patient.id, Patient.name, Patient.email, total)
            .join(Appointment, Appointment.patient_id == Patient.id)
            .group_by(Patient.id, Patient.name, Patient.email)
            .having(func.count(Appointment.id) > more_than)
            .order_by(total.desc(), Patient.id)
        )
        return [dict(row) for row in self._session.execute(stmt).mappings()]

    def doctor_confirmed_counts(
        self,
        *,
        since: date,
        status_id: int = CONFIRMED_STATUS_ID,
    ) -> list[dict[str, Any]]:
        """
        Confirmed appointments per doctor from ``since`` onward.

        Doctors without appointments in the window are listed with 0.
        """

        count = func.count(Appointment.id).label("appointments_last_month")
        stmt = (
            select(Doctor.id, Doctor.name, Specialty.name.label("specialty"), count)
            .join(Specialty, Doctor.specialty_id == Specialty.id)
            .outerjoin(
                Appointment,
                and_(
                    Appointment.doctor_id == Doctor.id,
                    Appointment.date >= since,
                    Appointment.status_id == status_id,
                ),
            )
            .group_by(Doctor.id, Doctor.name, Specialty.name)
            .order_by(count.desc(), Doctor.id)
        )
        return [dict(row) for row in self._session.execute(stmt).mappings()]

    def revenue_by_payment_method(
        self,
        *,
        amount_per_appointment: int,
        start_date: date | None = None,
        end_date: date | None = None,
        status_id: int = CONFIRMED_STATUS_ID,
    ) -> list[dict[str, Any]]:
        """
        Confirmed appointment count and estimated revenue per payment method.

        The date range applies only when both bounds are given.
        """

        join_condition = and_(
            Appointment.payment_method_id == PaymentMethod.id,
            Appointment.status_id == status_id,
        )
        if start_date is not None and end_date is not None:
            join_condition = and_(join_condition, Appointment.date.between(start_date, end_date))

        total = func.count(Appointment.id)
        stmt = (
            select(
                PaymentMethod.name.label("payment_method"),
                total.label("total_appointments"),
                (total * amount_per_appointment).label("estimated_revenue"),
            )
            .outerjoin(Appointment, join_condition)
            .group_by(PaymentMethod.id, PaymentMethod.name)
            .order_by((total * amount_per_appointment).desc(), PaymentMethod.id)
        )
        return [dict(row) for row in self._session.execute(stmt).mappings()]
