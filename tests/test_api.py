"""
tests/test_api.py

HTTP-level tests for the import and CRUD routers using FastAPI's TestClient.
The app is assembled from the routers directly so no PostgreSQL URL is
needed.
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from app.api.dependencies import get_upload_storage
from app.api.routers import (
    appointments_router,
    catalogs_router,
    csv_import_router,
    doctors_router,
    patients_router,
    reports_router,
)
from app.config import CSVImportSettings, get_csv_import_settings
from app.storage.uploads import ScratchUploadStorage
from db.session import get_db


CSV_HEADER = (
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

VALID_ROW = "Ana Gómez,ana@x.com,Dra. Torres,2024-05-01,09:00,Sede Norte,Control,,Efectivo,Confirmada"


@pytest.fixture()
def upload_dir(tmp_path: Path) -> Path:
    return tmp_path / "uploads"


@pytest.fixture()
def client(session_factory: sessionmaker, upload_dir: Path) -> Iterator[TestClient]:
    application = FastAPI()
    for router in (
        csv_import_router,
        patients_router,
        doctors_router,
        appointments_router,
        catalogs_router,
        reports_router,
    ):
        application.include_router(router)

    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    application.dependency_overrides[get_db] = _get_db
    application.dependency_overrides[get_upload_storage] = lambda: ScratchUploadStorage(
        upload_dir, max_bytes=1024 * 1024
    )
    application.dependency_overrides[get_csv_import_settings] = lambda: CSVImportSettings(
        max_errors_in_response=2
    )

    with TestClient(application) as test_client:
        yield test_client


def _csv_body(*rows: str) -> bytes:
    return ("\n".join([",".join(CSV_HEADER), *rows]) + "\n").encode("utf-8")


# ---------------------------------------------------------------------------
# Import endpoints
# ---------------------------------------------------------------------------


class TestUploadCSV:
    def test_upload_returns_camel_case_report(self, client: TestClient, upload_dir: Path) -> None:
        response = client.post(
            "/upload-csv",
            files={"file": ("citas.csv", _csv_body(VALID_ROW), "text/csv")},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["insertedPatients"] == 1
        assert body["insertedAppointments"] == 1
        assert body["errors"] == []
        assert body["message"] == "Data loaded: 1 patients, 1 appointments"
        # Scratch copy is removed after the import.
        assert list(upload_dir.glob("*")) == []

    def test_error_list_is_capped_but_counted(self, client: TestClient) -> None:
        bad_rows = [f"P{i},p{i}@x.com,Dra. Torres,2024-05-01,,,,,," for i in range(4)]
        response = client.post(
            "/upload-csv",
            files={"file": ("citas.csv", _csv_body(VALID_ROW, *bad_rows), "text/csv")},
        )

        body = response.json()
        assert response.status_code == 200
        assert body["errorCount"] == 4
        assert len(body["errors"]) == 2
        assert body["errors"][0]["row"] == 3

    def test_accepts_browser_form_field_name(self, client: TestClient) -> None:
        response = client.post(
            "/upload-csv",
            files={"csvFile": ("citas.csv", _csv_body(VALID_ROW), "text/csv")},
        )
        assert response.status_code == 200
        assert response.json()["insertedAppointments"] == 1

    def test_missing_file_is_400(self, client: TestClient) -> None:
        response = client.post("/upload-csv", data={"note": "no file"})
        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "No file was uploaded."

    def test_rejects_other_file_types(self, client: TestClient) -> None:
        response = client.post(
            "/upload-csv",
            files={"file": ("citas.xlsx", b"PK\x03\x04", "application/octet-stream")},
        )
        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "Only CSV and TXT files are allowed."

    def test_missing_columns_is_400(self, client: TestClient, upload_dir: Path) -> None:
        response = client.post(
            "/upload-csv",
            files={"file": ("citas.csv", b"Nombre Paciente\nAna\n", "text/csv")},
        )
        assert response.status_code == 400
        assert "Missing required columns" in response.json()["detail"]["error"]
        assert list(upload_dir.glob("*")) == []


class TestLoadData:
    def test_loads_normalized_records(self, client: TestClient) -> None:
        response = client.post(
            "/load-data",
            json={
                "patients": [{"name": "Ana", "email": "ana@x.com"}],
                "appointments": [
                    {"patient_email": "ANA@x.com", "date": "2024-05-01", "time": "09:00"},
                ],
            },
        )
        assert response.status_code == 200
        assert response.json()["insertedAppointments"] == 1

    def test_requires_at_least_one_patient(self, client: TestClient) -> None:
        response = client.post("/load-data", json={"patients": [], "appointments": []})
        assert response.status_code == 422

    def test_phone_wider_than_column_is_rejected(self, client: TestClient) -> None:
        response = client.post(
            "/load-data",
            json={"patients": [{"name": "Ana", "email": "ana@x.com", "phone": "5" * 51}]},
        )
        assert response.status_code == 422


# ---------------------------------------------------------------------------
# CRUD endpoints
# ---------------------------------------------------------------------------


class TestPatients:
    def test_create_get_patch_delete(self, client: TestClient) -> None:
        created = client.post("/patients", json={"name": "Ana", "email": " Ana@X.com"})
        assert created.status_code == 201
        patient_id = created.json()["id"]

        fetched = client.get(f"/patients/{patient_id}").json()
        assert fetched["email"] == "ana@x.com"

        assert client.patch(f"/patients/{patient_id}", json={"phone": "555"}).status_code == 200
        assert client.get(f"/patients/{patient_id}").json()["phone"] == "555"

        assert client.delete(f"/patients/{patient_id}").status_code == 200
        assert client.get(f"/patients/{patient_id}").status_code == 404

    def test_duplicate_email_is_conflict(self, client: TestClient) -> None:
        client.post("/patients", json={"name": "Ana", "email": "ana@x.com"})
        response = client.post("/patients", json={"name": "Otra", "email": "ANA@x.com"})
        assert response.status_code == 409

    def test_empty_patch_is_400(self, client: TestClient) -> None:
        patient_id = client.post("/patients", json={"name": "Ana", "email": "ana@x.com"}).json()["id"]
        assert client.patch(f"/patients/{patient_id}", json={}).status_code == 400

    def test_frequent_patients(self, client: TestClient) -> None:
        rows = [VALID_ROW] * 4
        client.post("/upload-csv", files={"file": ("citas.csv", _csv_body(*rows), "text/csv")})

        frequent = client.get("/patients/frequent").json()
        assert frequent == [
            {"id": frequent[0]["id"], "name": "Ana Gómez", "email": "ana@x.com", "total_appointments": 4}
        ]


class TestDoctorsAndCatalogs:
    def test_doctors_include_specialty_name(self, client: TestClient) -> None:
        doctor = client.get("/doctors/2").json()
        assert doctor["name"] == "Dra. Torres"
        assert doctor["specialty"] == "Cardiología"

    def test_unknown_doctor_is_404(self, client: TestClient) -> None:
        assert client.get("/doctors/999").status_code == 404

    def test_status_color_defaults(self, client: TestClient) -> None:
        response = client.post("/appointment-statuses", json={"name": "No asistió"})
        assert response.status_code == 201
        assert response.json()["color"] == "#6c757d"

    def test_catalog_lists_are_seeded(self, client: TestClient) -> None:
        names = {row["name"] for row in client.get("/payment-methods").json()}
        assert {"Efectivo", "Transferencia"} <= names


class TestAppointmentsAndReports:
    def test_appointment_detail_and_doctor_filter(self, client: TestClient) -> None:
        client.post("/upload-csv", files={"file": ("citas.csv", _csv_body(VALID_ROW), "text/csv")})

        listed = client.get("/appointments").json()
        assert len(listed) == 1
        assert listed[0]["doctor"] == "Dra. Torres"
        assert listed[0]["status"] == "Confirmada"

        in_range = client.get(
            "/appointments/doctor/2",
            params={"start_date": "2024-04-01", "end_date": "2024-05-31"},
        ).json()
        out_of_range = client.get(
            "/appointments/doctor/2",
            params={"start_date": "2024-06-01", "end_date": "2024-06-30"},
        ).json()
        assert len(in_range) == 1
        assert out_of_range == []

    def test_create_with_unknown_reference_is_conflict(self, client: TestClient) -> None:
        patient_id = client.post("/patients", json={"name": "Ana", "email": "ana@x.com"}).json()["id"]
        response = client.post(
            "/appointments",
            json={
                "patient_id": patient_id,
                "doctor_id": 1,
                "location_id": 42,
                "date": "2024-05-01",
                "time": "09:00",
                "payment_method_id": 1,
                "status_id": 1,
            },
        )
        assert response.status_code == 409

    def test_revenue_counts_confirmed_appointments(self, client: TestClient) -> None:
        client.post(
            "/upload-csv",
            files={"file": ("citas.csv", _csv_body(VALID_ROW, VALID_ROW), "text/csv")},
        )
        report = {row["payment_method"]: row for row in client.get("/reports/revenue").json()}
        assert report["Efectivo"]["total_appointments"] == 2
        assert report["Efectivo"]["estimated_revenue"] == 100000
        assert report["Transferencia"]["total_appointments"] == 0
