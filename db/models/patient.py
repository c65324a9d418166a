"""
db/models/patient.py

Patient model. Email is the durable identity used by CSV imports.
"""

from typing import TYPE_CHECKING

from sqlalchemy import Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db.base import Base, AuditColumnsMixin

if TYPE_CHECKING:
    from db.models.appointment import Appointment


class Patient(Base, AuditColumnsMixin):
    """
    A clinic patient.

    email is stored trimmed and lower-cased; the unique constraint on it is
    what makes insert-if-absent imports safe against prior data.
    """

    __tablename__ = "patients"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Normalized (trimmed, lower-case) email; deduplication key",
    )

    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)

    # ── Relationships ──────────────────────────────────────────────────────────

    appointments: Mapped[list["Appointment"]] = relationship(
        "Appointment",
        back_populates="patient",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (UniqueConstraint("email"),)

    def __repr__(self) -> str:
        return f"<Patient id={self.id} email={self.email!r}>"
