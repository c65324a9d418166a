"""
app/api/routers/patients.py

Patient CRUD endpoints and the frequent-patients report.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.repositories.patient_repository import PatientRepository
from app.repositories.report_repository import ReportRepository
from app.schemas.clinic import (
    FrequentPatientResponse,
    MessageResponse,
    PatientCreateRequest,
    PatientPatchRequest,
    PatientResponse,
)
from db.models.patient import Patient
from db.session import get_db

router = APIRouter(prefix="/patients", tags=["patients"])


def _get_or_404(repository: PatientRepository, patient_id: int) -> Patient:
    patient = repository.get(patient_id)
    if patient is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Patient not found.")
    return patient


def _email_conflict(email: str | None) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail=f"A patient with email {email!r} already exists.",
    )


@router.get("", response_model=list[PatientResponse])
def list_patients(db: Session = Depends(get_db)) -> list[PatientResponse]:
    return [PatientResponse.model_validate(patient) for patient in PatientRepository(db).list_all()]


# Declared before /{patient_id} so the literal path wins.
@router.get("/frequent", response_model=list[FrequentPatientResponse])
def list_frequent_patients(db: Session = Depends(get_db)) -> list[FrequentPatientResponse]:
    """
    Patients with more than 3 registered appointments.
    """
    rows = ReportRepository(db).frequent_patients()
    return [FrequentPatientResponse(**row) for row in rows]


@router.get("/{patient_id}", response_model=PatientResponse)
def get_patient(patient_id: int, db: Session = Depends(get_db)) -> PatientResponse:
    return PatientResponse.model_validate(_get_or_404(PatientRepository(db), patient_id))


@router.post("", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def create_patient(body: PatientCreateRequest, db: Session = Depends(get_db)) -> MessageResponse:
    """
    Create a patient.

    Raises HTTP 409 if the (normalized) email is already registered.
    """
    try:
        patient = PatientRepository(db).create(name=body.name, email=body.email, phone=body.phone)
        db.commit()
    except IntegrityError:
        db.rollback()
        raise _email_conflict(body.email)
    return MessageResponse(id=patient.id, message="Patient created")


@router.put("/{patient_id}", response_model=MessageResponse)
def replace_patient(
    patient_id: int,
    body: PatientCreateRequest,
    db: Session = Depends(get_db),
) -> MessageResponse:
    repository = PatientRepository(db)
    patient = _get_or_404(repository, patient_id)
    try:
        repository.update(patient, body.model_dump())
        db.commit()
    except IntegrityError:
        db.rollback()
        raise _email_conflict(body.email)
    return MessageResponse(id=patient_id, message="Patient updated")


@router.patch("/{patient_id}", response_model=MessageResponse)
def patch_patient(
    patient_id: int,
    body: PatientPatchRequest,
    db: Session = Depends(get_db),
) -> MessageResponse:
    changes = body.model_dump(exclude_unset=True)
    if not changes:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No valid fields to update.",
        )

    repository = PatientRepository(db)
    patient = _get_or_404(repository, patient_id)
    try:
        repository.update(patient, changes)
        db.commit()
    except IntegrityError:
        db.rollback()
        raise _email_conflict(changes.get("email"))
    return MessageResponse(id=patient_id, message="Patient partially updated")


@router.delete("/{patient_id}", response_model=MessageResponse)
def delete_patient(patient_id: int, db: Session = Depends(get_db)) -> MessageResponse:
    repository = PatientRepository(db)
    repository.delete(_get_or_404(repository, patient_id))
    db.commit()
    return MessageResponse(id=patient_id, message="Patient deleted")
