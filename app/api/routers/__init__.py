"""
app/api/routers package marker.
"""

from app.api.routers.appointments import router as appointments_router
from app.api.routers.catalogs import router as catalogs_router
from app.api.routers.csv_import import router as csv_import_router
from app.api.routers.doctors import router as doctors_router
from app.api.routers.patients import router as patients_router
from app.api.routers.reports import router as reports_router

__all__ = [
    "appointments_router",
    "catalogs_router",
    "csv_import_router",
    "doctors_router",
    "patients_router",
    "reports_router",
]
