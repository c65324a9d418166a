"""
app/api/routers/doctors.py

Doctor CRUD endpoints and per-doctor appointment stats.
"""

from __future__ import annotations

from datetime import date, timedelta

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.config import ReportSettings, get_report_settings
from app.repositories.doctor_repository import DoctorRepository
from app.repositories.report_repository import ReportRepository
from app.schemas.clinic import (
    DoctorCreateRequest,
    DoctorPatchRequest,
    DoctorResponse,
    DoctorStatsResponse,
    MessageResponse,
)
from db.models.doctor import Doctor
from db.session import get_db

router = APIRouter(prefix="/doctors", tags=["doctors"])


def _get_or_404(repository: DoctorRepository, doctor_id: int) -> Doctor:
    doctor = repository.get(doctor_id)
    if doctor is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Doctor not found.")
    return doctor


def _integrity_error() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail="The doctor references an unknown specialty or is still referenced by appointments.",
    )


@router.get("", response_model=list[DoctorResponse])
def list_doctors(db: Session = Depends(get_db)) -> list[DoctorResponse]:
    return [DoctorResponse(**row) for row in DoctorRepository(db).list_detailed()]


@router.get("/stats", response_model=list[DoctorStatsResponse])
def doctor_stats(
    db: Session = Depends(get_db),
    settings: ReportSettings = Depends(get_report_settings),
) -> list[DoctorStatsResponse]:
    """
    Confirmed appointments per doctor over the configured trailing window.
    """
    since = date.today() - timedelta(days=settings.doctor_stats_window_days)
    rows = ReportRepository(db).doctor_confirmed_counts(since=since)
    return [DoctorStatsResponse(**row) for row in rows]


@router.get("/{doctor_id}", response_model=DoctorResponse)
def get_doctor(doctor_id: int, db: Session = Depends(get_db)) -> DoctorResponse:
    row = DoctorRepository(db).get_detailed(doctor_id)
    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Doctor not found.")
    return DoctorResponse(**row)


@router.post("", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def create_doctor(body: DoctorCreateRequest, db: Session = Depends(get_db)) -> MessageResponse:
    try:
        doctor = DoctorRepository(db).create(body.model_dump())
        db.commit()
    except IntegrityError:
        db.rollback()
        raise _integrity_error()
    return MessageResponse(id=doctor.id, message="Doctor created")


@router.put("/{doctor_id}", response_model=MessageResponse)
def replace_doctor(
    doctor_id: int,
    body: DoctorCreateRequest,
    db: Session = Depends(get_db),
) -> MessageResponse:
    repository = DoctorRepository(db)
    doctor = _get_or_404(repository, doctor_id)
    try:
        repository.update(doctor, body.model_dump())
        db.commit()
    except IntegrityError:
        db.rollback()
        raise _integrity_error()
    return MessageResponse(id=doctor_id, message="Doctor updated")


@router.patch("/{doctor_id}", response_model=MessageResponse)
def patch_doctor(
    doctor_id: int,
    body: DoctorPatchRequest,
    db: Session = Depends(get_db),
) -> MessageResponse:
    changes = body.model_dump(exclude_unset=True)
    if not changes:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No valid fields to update.",
        )

    repository = DoctorRepository(db)
    doctor = _get_or_404(repository, doctor_id)
    try:
        repository.update(doctor, changes)
        db.commit()
    except IntegrityError:
        db.rollback()
        raise _integrity_error()
    return MessageResponse(id=doctor_id, message="Doctor partially updated")


@router.delete("/{doctor_id}", response_model=MessageResponse)
def delete_doctor(doctor_id: int, db: Session = Depends(get_db)) -> MessageResponse:
    repository = DoctorRepository(db)
    doctor = _get_or_404(repository, doctor_id)
    try:
        repository.delete(doctor)
        db.commit()
    except IntegrityError:
        db.rollback()
        raise _integrity_error()
    return MessageResponse(id=doctor_id, message="Doctor deleted")
