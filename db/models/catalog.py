"""
db/models/catalog.py

Reference tables referenced by appointments: locations, payment methods
and appointment statuses.
"""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base

DEFAULT_STATUS_COLOR = "#6c757d"


class Location(Base):
    __tablename__ = "locations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    address: Mapped[str | None] = mapped_column(String(255), nullable=True)


class PaymentMethod(Base):
    __tablename__ = "payment_methods"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False)


class AppointmentStatus(Base):
    """
    Lifecycle state of an appointment. color is a CSS hex colour used by
    the front end to badge the status.
    """

    __tablename__ = "appointment_statuses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(60), nullable=False)
    color: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=DEFAULT_STATUS_COLOR,
    )
