"""
Model package exports.

Import every clinic model here so Base.metadata is complete for
create_all() and for the startup schema check.
"""

from db.models.appointment import Appointment
from db.models.catalog import AppointmentStatus, Location, PaymentMethod
from db.models.doctor import Doctor, Specialty
from db.models.patient import Patient

__all__ = [
    "Appointment",
    "AppointmentStatus",
    "Doctor",
    "Location",
    "Patient",
    "PaymentMethod",
    "Specialty",
]
