"""
db/models/doctor.py

Doctors and the specialties they belong to.
"""

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db.base import Base

if TYPE_CHECKING:
    from db.models.appointment import Appointment


class Specialty(Base):
    __tablename__ = "specialties"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    doctors: Mapped[list["Doctor"]] = relationship("Doctor", back_populates="specialty")

    def __repr__(self) -> str:
        return f"<Specialty id={self.id} name={self.name!r}>"


class Doctor(Base):
    """
    A practitioner. Each doctor has exactly one specialty.
    """

    __tablename__ = "doctors"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    specialty_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("specialties.id"),
        nullable=False,
    )

    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)

    # ── Relationships ──────────────────────────────────────────────────────────

    specialty: Mapped[Specialty] = relationship("Specialty", back_populates="doctors")

    appointments: Mapped[list["Appointment"]] = relationship(
        "Appointment",
        back_populates="doctor",
    )

    __table_args__ = (Index("ix_doctors_specialty_id", "specialty_id"),)

    def __repr__(self) -> str:
        return f"<Doctor id={self.id} name={self.name!r}>"
