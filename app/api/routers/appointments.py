"""
app/api/routers/appointments.py

Appointment CRUD endpoints. Reads return the joined view (patient, doctor,
specialty, location, payment method and status names).
"""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.repositories.appointment_repository import AppointmentRepository
from app.schemas.clinic import (
    AppointmentCreateRequest,
    AppointmentDetailResponse,
    AppointmentPatchRequest,
    MessageResponse,
)
from db.models.appointment import Appointment
from db.session import get_db

router = APIRouter(prefix="/appointments", tags=["appointments"])

_REFERENCE_ERROR = "The appointment references an unknown patient, doctor or catalog entry."


def _get_or_404(repository: AppointmentRepository, appointment_id: int) -> Appointment:
    appointment = repository.get(appointment_id)
    if appointment is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Appointment not found.")
    return appointment


@router.get("", response_model=list[AppointmentDetailResponse])
def list_appointments(db: Session = Depends(get_db)) -> list[AppointmentDetailResponse]:
    return [AppointmentDetailResponse(**row) for row in AppointmentRepository(db).list_detailed()]


@router.get("/doctor/{doctor_id}", response_model=list[AppointmentDetailResponse])
def list_doctor_appointments(
    doctor_id: int,
    start_date: date | None = Query(None),
    end_date: date | None = Query(None),
    db: Session = Depends(get_db),
) -> list[AppointmentDetailResponse]:
    """
    Appointments of one doctor. The range filter applies when both
    start_date and end_date are given.
    """
    rows = AppointmentRepository(db).list_for_doctor(
        doctor_id,
        start_date=start_date,
        end_date=end_date,
    )
    return [AppointmentDetailResponse(**row) for row in rows]


@router.get("/{appointment_id}", response_model=AppointmentDetailResponse)
def get_appointment(appointment_id: int, db: Session = Depends(get_db)) -> AppointmentDetailResponse:
    row = AppointmentRepository(db).get_detailed(appointment_id)
    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Appointment not found.")
    return AppointmentDetailResponse(**row)


@router.post("", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def create_appointment(
    body: AppointmentCreateRequest,
    db: Session = Depends(get_db),
) -> MessageResponse:
    try:
        appointment = AppointmentRepository(db).create(body.model_dump())
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=_REFERENCE_ERROR)
    return MessageResponse(id=appointment.id, message="Appointment created")


@router.put("/{appointment_id}", response_model=MessageResponse)
def replace_appointment(
    appointment_id: int,
    body: AppointmentCreateRequest,
    db: Session = Depends(get_db),
) -> MessageResponse:
    repository = AppointmentRepository(db)
    appointment = _get_or_404(repository, appointment_id)
    try:
        repository.update(appointment, body.model_dump())
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=_REFERENCE_ERROR)
    return MessageResponse(id=appointment_id, message="Appointment updated")


@router.patch("/{appointment_id}", response_model=MessageResponse)
def patch_appointment(
    appointment_id: int,
    body: AppointmentPatchRequest,
    db: Session = Depends(get_db),
) -> MessageResponse:
    changes = body.model_dump(exclude_unset=True)
    if not changes:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No valid fields to update.",
        )

    repository = AppointmentRepository(db)
    appointment = _get_or_404(repository, appointment_id)
    try:
        repository.update(appointment, changes)
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=_REFERENCE_ERROR)
    return MessageResponse(id=appointment_id, message="Appointment partially updated")


@router.delete("/{appointment_id}", response_model=MessageResponse)
def delete_appointment(appointment_id: int, db: Session = Depends(get_db)) -> MessageResponse:
    repository = AppointmentRepository(db)
    repository.delete(_get_or_404(repository, appointment_id))
    db.commit()
    return MessageResponse(id=appointment_id, message="Appointment deleted")
