"""
db/seed.py

Idempotent seeding of the reference tables.

The ids seeded here are the ids the CSV import catalogs resolve to, so they
are inserted explicitly rather than left to the sequence.
"""

from __future__ import annotations

import logging

from sqlalchemy import func, select, text
from sqlalchemy.orm import Session

from db.base import Base
from db.models import AppointmentStatus, Doctor, Location, PaymentMethod, Specialty

logger = logging.getLogger(__name__)

SPECIALTIES: tuple[tuple[int, str, str], ...] = (
    (1, "Medicina General", "Atención primaria y controles generales"),
    (2, "Cardiología", "Diagnóstico y tratamiento del sistema cardiovascular"),
    (3, "Pediatría", "Atención médica de niños y adolescentes"),
    (4, "Dermatología", "Enfermedades de la piel"),
)

DOCTORS: tuple[tuple[int, str, int, str], ...] = (
    (1, "Dra. Martínez", 1, "martinez@crudclinic.local"),
    (2, "Dra. Torres", 2, "torres@crudclinic.local"),
    (3, "Dr. Ramírez", 3, "ramirez@crudclinic.local"),
    (4, "Dr. López", 4, "lopez@crudclinic.local"),
)

LOCATIONS: tuple[tuple[int, str], ...] = (
    (1, "Sede Norte"),
    (2, "Sede Centro"),
    (3, "Sede Sur"),
)

PAYMENT_METHODS: tuple[tuple[int, str], ...] = (
    (1, "Efectivo"),
    (2, "Transferencia"),
    (3, "Tarjeta Crédito"),
    (4, "Tarjeta Débito"),
)

APPOINTMENT_STATUSES: tuple[tuple[int, str, str], ...] = (
    (1, "Pendiente", "#ffc107"),
    (2, "Confirmada", "#28a745"),
    (3, "Cancelada", "#dc3545"),
    (4, "Reprogramada", "#17a2b8"),
)


def seed_reference_data(session: Session) -> int:
    """
    Insert missing reference rows. Existing rows are left untouched.

    Returns the number of rows added. The caller owns the commit.
    """

    added = 0

    for row_id, name, description in SPECIALTIES:
        if session.get(Specialty, row_id) is None:
            session.add(Specialty(id=row_id, name=name, description=description))
            added += 1
    session.flush()

    for row_id, name, specialty_id, email in DOCTORS:
        if session.get(Doctor, row_id) is None:
            session.add(Doctor(id=row_id, name=name, specialty_id=specialty_id, email=email))
            added += 1

    for row_id, name in LOCATIONS:
        if session.get(Location, row_id) is None:
            session.add(Location(id=row_id, name=name))
            added += 1

    for row_id, name in PAYMENT_METHODS:
        if session.get(PaymentMethod, row_id) is None:
            session.add(PaymentMethod(id=row_id, name=name))
            added += 1

    for row_id, name, color in APPOINTMENT_STATUSES:
        if session.get(AppointmentStatus, row_id) is None:
            session.add(AppointmentStatus(id=row_id, name=name, color=color))
            added += 1

    session.flush()
    _sync_sequences(session)
    logger.info("Reference data seeded rows_added=%d", added)
    return added


def _sync_sequences(session: Session) -> None:
    # Explicit ids do not advance PostgreSQL serial sequences.
    if session.get_bind().dialect.name != "postgresql":
        return

    for model in (Specialty, Doctor, Location, PaymentMethod, AppointmentStatus):
        table_name = model.__tablename__
        max_id = session.scalar(select(func.max(model.id)))
        if max_id is None:
            continue
        session.execute(
            text("SELECT setval(pg_get_serial_sequence(:table_name, 'id'), :max_id)"),
            {"table_name": table_name, "max_id": max_id},
        )


def create_schema(session: Session) -> None:
    """Create every clinic table that does not exist yet."""
    Base.metadata.create_all(bind=session.get_bind())
