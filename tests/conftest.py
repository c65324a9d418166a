"""
tests/conftest.py

Shared fixtures: an in-memory SQLite clinic database with the reference
catalogs seeded, and helpers to write CSV files.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from pathlib import Path

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

import db.models as _clinic_models  # noqa: F401  registers all ORM models on Base.metadata
from db.base import Base
from db.seed import seed_reference_data

CSV_HEADER: tuple[str, ...] = (
    "Nombre Paciente",
    "Correo Paciente",
    "Médico",
    "Fecha Cita",
    "Hora Cita",
    "Ubicación",
    "Motivo",
    "Descripción",
    "Método de Pago",
    "Estatus Cita",
)


def _enable_foreign_keys(dbapi_connection, _connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@pytest.fixture()
def engine() -> Iterator[Engine]:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    event.listen(engine, "connect", _enable_foreign_keys)
    Base.metadata.create_all(engine)
    with Session(engine) as session:
        seed_reference_data(session)
        session.commit()
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture()
def db(session_factory: sessionmaker) -> Iterator[Session]:
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def write_csv(tmp_path: Path):
    """Return a function writing rows under CSV_HEADER to a UTF-8 file."""

    def _write(
        rows: Sequence[Sequence[str]],
        *,
        header: Sequence[str] = CSV_HEADER,
        name: str = "import.csv",
    ) -> Path:
        lines = [",".join(header)]
        lines.extend(",".join(row) for row in rows)
        path = tmp_path / name
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path

    return _write
