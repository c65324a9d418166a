"""
db/models/appointment.py

Appointment model: one booked visit of a patient with a doctor.
"""

import datetime as dt
from typing import TYPE_CHECKING

from sqlalchemy import Date, ForeignKey, Index, Integer, String, Text, Time
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db.base import Base, AuditColumnsMixin
from db.models.catalog import AppointmentStatus, Location, PaymentMethod

if TYPE_CHECKING:
    from db.models.doctor import Doctor
    from db.models.patient import Patient


class Appointment(Base, AuditColumnsMixin):
    """
    Every foreign key points at a reference table; imports resolve free text
    to these ids before inserting.
    """

    __tablename__ = "appointments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    patient_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("patients.id", ondelete="CASCADE"),
        nullable=False,
    )
    doctor_id: Mapped[int] = mapped_column(Integer, ForeignKey("doctors.id"), nullable=False)
    location_id: Mapped[int] = mapped_column(Integer, ForeignKey("locations.id"), nullable=False)

    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    time: Mapped[dt.time] = mapped_column(Time, nullable=False)

    reason: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)

    payment_method_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("payment_methods.id"),
        nullable=False,
    )
    status_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("appointment_statuses.id"),
        nullable=False,
    )

    # ── Relationships ──────────────────────────────────────────────────────────

    patient: Mapped["Patient"] = relationship("Patient", back_populates="appointments")
    doctor: Mapped["Doctor"] = relationship("Doctor", back_populates="appointments")
    location: Mapped[Location] = relationship("Location")
    payment_method: Mapped[PaymentMethod] = relationship("PaymentMethod")
    status: Mapped[AppointmentStatus] = relationship("AppointmentStatus")

    # ── Indexes ────────────────────────────────────────────────────────────────

    __table_args__ = (
        Index("ix_appointments_patient_id", "patient_id"),
        Index("ix_appointments_doctor_date", "doctor_id", "date"),
        Index("ix_appointments_status_id", "status_id"),
    )

    def __repr__(self) -> str:
        return f"<Appointment id={self.id} patient_id={self.patient_id} date={self.date}>"
