"""
tests/test_csv_import_service.py

End-to-end CSVImportService runs: file on disk -> SQLite database.
"""

from __future__ import annotations

from datetime import date, time

import pytest
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.services.csv_import_service import CSVImportService, CSVStructureError
from db.models import Appointment, Patient


@pytest.fixture()
def service() -> CSVImportService:
    return CSVImportService(log_row_errors=False)


FIVE_ROWS = [
    ["Ana Gómez", "ana@x.com", "Dra. Torres", "2024-05-01", "09:00", "Sede Norte", "Control", "", "Efectivo", "Confirmada"],
    ["Luis Pérez", "luis@x.com", "Dr. López", "2024-05-02", "10:00", "Sede Sur", "", "", "Transferencia", "Pendiente"],
    ["Marta Ruiz", "marta@x.com", "Dr. Ramírez", "2024-05-03", "", "Sede Centro", "Fiebre", "", "Efectivo", "Pendiente"],
    ["Ana G.", "ANA@X.COM ", "Dr. Desconocido", "2024-05-04", "11:00", "", "", "", "", ""],
    ["Marta Ruiz", "marta@x.com", "Dra. Martínez", "2024-05-05", "12:00", "Sede Norte", "", "", "Tarjeta Crédito", "Cancelada"],
]


class TestImportFile:
    def test_five_row_scenario(self, service: CSVImportService, db: Session, write_csv) -> None:
        summary = service.import_file(path=write_csv(FIVE_ROWS), db=db)

        assert summary.inserted_patients == 3
        assert summary.inserted_appointments == 4
        assert len(summary.errors) == 1
        assert summary.errors[0].row_number == 4
        assert "Hora Cita" in summary.errors[0].message

        assert db.scalar(select(func.count()).select_from(Patient)) == 3
        assert db.scalar(select(func.count()).select_from(Appointment)) == 4

    def test_unknown_doctor_gets_default_id(self, service: CSVImportService, db: Session, write_csv) -> None:
        service.import_file(path=write_csv(FIVE_ROWS), db=db)

        appointment = db.scalars(
            select(Appointment).where(Appointment.date == date(2024, 5, 4))
        ).one()
        assert appointment.doctor_id == 1
        assert appointment.time == time(11, 0)
        assert appointment.reason == "Sin especificar"
        assert appointment.description == "Sin descripción"

    def test_reimport_adds_appointments_but_no_patients(
        self, service: CSVImportService, db: Session, write_csv
    ) -> None:
        path = write_csv(FIVE_ROWS)
        first = service.import_file(path=path, db=db)
        second = service.import_file(path=path, db=db)

        assert first.inserted_appointments == 4
        assert second.inserted_patients == 0
        assert second.existing_patients == 3
        assert db.scalar(select(func.count()).select_from(Patient)) == 3
        assert second.inserted_appointments == 4
        assert db.scalar(select(func.count()).select_from(Appointment)) == 8

    def test_missing_required_column_stops_before_writes(
        self, service: CSVImportService, db: Session, write_csv
    ) -> None:
        header = ("Nombre Paciente", "Correo Paciente", "Médico", "Fecha Cita")
        path = write_csv([["Ana", "ana@x.com", "Dra. Torres", "2024-05-01"]], header=header)

        with pytest.raises(CSVStructureError) as ctx:
            service.import_file(path=path, db=db)

        assert ctx.value.missing_columns == ("Hora Cita",)
        assert db.scalar(select(func.count()).select_from(Patient)) == 0

    def test_header_only_file_is_empty(self, service: CSVImportService, db: Session, write_csv) -> None:
        with pytest.raises(CSVStructureError, match="empty"):
            service.import_file(path=write_csv([]), db=db)

    def test_malformed_quoting_is_structure_error(
        self, service: CSVImportService, db: Session, tmp_path
    ) -> None:
        path = tmp_path / "broken.csv"
        path.write_text(
            "Nombre Paciente,Correo Paciente,Médico,Fecha Cita,Hora Cita\n"
            'Ana,ana@x.com,"Dra. Torres,2024-05-01,09:00\n',
            encoding="utf-8",
        )
        with pytest.raises(CSVStructureError):
            service.import_file(path=path, db=db)


class TestImportRecords:
    def test_loads_records_and_reports_unknown_emails(self, service: CSVImportService, db: Session) -> None:
        summary = service.import_records(
            patients=[
                {"name": "Ana", "email": "Ana@x.com", "phone": None},
                {"name": "Luis", "email": "luis@x.com", "phone": "555"},
            ],
            appointments=[
                {
                    "patient_email": "ana@x.com",
                    "doctor_id": 2,
                    "location_id": 1,
                    "date": date(2024, 5, 1),
                    "time": time(9, 0),
                    "reason": None,
                    "description": "Chequeo",
                    "payment_method_id": 1,
                    "status_id": 2,
                },
                {
                    "patient_email": "ghost@x.com",
                    "doctor_id": 1,
                    "location_id": 1,
                    "date": date(2024, 5, 2),
                    "time": time(9, 0),
                    "reason": None,
                    "description": None,
                    "payment_method_id": 1,
                    "status_id": 1,
                },
            ],
            db=db,
        )

        assert summary.inserted_patients == 2
        assert summary.inserted_appointments == 1
        assert [(e.row_number, e.message) for e in summary.errors] == [
            (2, "Unknown patient email: ghost@x.com"),
        ]
        stored = db.scalars(select(Appointment)).one()
        assert stored.reason == "Sin especificar"
        assert stored.description == "Chequeo"
