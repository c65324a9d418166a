from app.repositories.appointment_repository import AppointmentRepository
from app.repositories.catalog_repository import CatalogRepository
from app.repositories.doctor_repository import DoctorRepository
from app.repositories.patient_repository import PatientRepository
from app.repositories.report_repository import ReportRepository

__all__ = [
    "AppointmentRepository",
    "CatalogRepository",
    "DoctorRepository",
    "PatientRepository",
    "ReportRepository",
]
