"""
app/api/routers/catalogs.py

List/create endpoints for the reference catalogs.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.repositories.catalog_repository import CatalogRepository
from app.schemas.clinic import (
    AppointmentStatusCreateRequest,
    AppointmentStatusResponse,
    LocationCreateRequest,
    LocationResponse,
    PaymentMethodCreateRequest,
    PaymentMethodResponse,
    SpecialtyCreateRequest,
    SpecialtyResponse,
)
from db.models import AppointmentStatus, Location, PaymentMethod, Specialty
from db.session import get_db

router = APIRouter(tags=["catalogs"])


@router.get("/specialties", response_model=list[SpecialtyResponse])
def list_specialties(db: Session = Depends(get_db)) -> list[SpecialtyResponse]:
    rows = CatalogRepository(db, Specialty).list_all()
    return [SpecialtyResponse.model_validate(row) for row in rows]


@router.post("/specialties", response_model=SpecialtyResponse, status_code=status.HTTP_201_CREATED)
def create_specialty(body: SpecialtyCreateRequest, db: Session = Depends(get_db)) -> SpecialtyResponse:
    row = CatalogRepository(db, Specialty).create(body.model_dump())
    db.commit()
    return SpecialtyResponse.model_validate(row)


@router.get("/locations", response_model=list[LocationResponse])
def list_locations(db: Session = Depends(get_db)) -> list[LocationResponse]:
    rows = CatalogRepository(db, Location).list_all()
    return [LocationResponse.model_validate(row) for row in rows]


@router.post("/locations", response_model=LocationResponse, status_code=status.HTTP_201_CREATED)
def create_location(body: LocationCreateRequest, db: Session = Depends(get_db)) -> LocationResponse:
    row = CatalogRepository(db, Location).create(body.model_dump())
    db.commit()
    return LocationResponse.model_validate(row)


@router.get("/payment-methods", response_model=list[PaymentMethodResponse])
def list_payment_methods(db: Session = Depends(get_db)) -> list[PaymentMethodResponse]:
    rows = CatalogRepository(db, PaymentMethod).list_all()
    return [PaymentMethodResponse.model_validate(row) for row in rows]


@router.post(
    "/payment-methods",
    response_model=PaymentMethodResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_payment_method(
    body: PaymentMethodCreateRequest,
    db: Session = Depends(get_db),
) -> PaymentMethodResponse:
    row = CatalogRepository(db, PaymentMethod).create(body.model_dump())
    db.commit()
    return PaymentMethodResponse.model_validate(row)


@router.get("/appointment-statuses", response_model=list[AppointmentStatusResponse])
def list_appointment_statuses(db: Session = Depends(get_db)) -> list[AppointmentStatusResponse]:
    rows = CatalogRepository(db, AppointmentStatus).list_all()
    return [AppointmentStatusResponse.model_validate(row) for row in rows]


@router.post(
    "/appointment-statuses",
    response_model=AppointmentStatusResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_appointment_status(
    body: AppointmentStatusCreateRequest,
    db: Session = Depends(get_db),
) -> AppointmentStatusResponse:
    """
    Create a status; color falls back to the default badge colour.
    """
    row = CatalogRepository(db, AppointmentStatus).create(body.model_dump())
    db.commit()
    return AppointmentStatusResponse.model_validate(row)
