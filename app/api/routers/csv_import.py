"""
app/api/routers/csv_import.py

Clinic bulk-import HTTP endpoints.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, UploadFile, status
from sqlalchemy.orm import Session

from app.api.dependencies import get_csv_upload, get_upload_storage
from app.config import CSVImportSettings, get_csv_import_settings
from app.domain.clinic_import import ImportSummary
from app.schemas.csv_import import ImportReportResponse, ImportRowErrorResponse, LoadDataRequest
from app.services.csv_import_service import (
    CSVImportService,
    CSVPersistenceError,
    CSVStructureError,
    get_csv_import_service,
)
from app.storage.uploads import ScratchUploadStorage, UploadStorageError, UploadTooLargeError
from db.session import get_db

logger = logging.getLogger(__name__)

router = APIRouter(tags=["import"])


@router.post("/upload-csv", response_model=ImportReportResponse)
def upload_csv(
    file: UploadFile = Depends(get_csv_upload),
    db: Session = Depends(get_db),
    import_service: CSVImportService = Depends(get_csv_import_service),
    storage: ScratchUploadStorage = Depends(get_upload_storage),
    settings: CSVImportSettings = Depends(get_csv_import_settings),
) -> ImportReportResponse:
    """
    Import patients and appointments from one uploaded CSV file.
    """

    logger.info("CSV upload received name=%r", file.filename)
    try:
        with storage.scoped(file.file, file_name=file.filename) as path:
            summary = import_service.import_file(path=path, db=db)
    except UploadTooLargeError as exc:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail={"success": False, "error": str(exc)},
        ) from exc
    except CSVStructureError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"success": False, "error": str(exc)},
        ) from exc
    except (CSVPersistenceError, UploadStorageError) as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "success": False,
                "error": "Internal error while processing the CSV file.",
                "details": str(exc),
            },
        ) from exc
    finally:
        file.file.close()

    return _to_report(summary, max_errors=settings.max_errors_in_response)


@router.post("/load-data", response_model=ImportReportResponse)
def load_data(
    body: LoadDataRequest,
    db: Session = Depends(get_db),
    import_service: CSVImportService = Depends(get_csv_import_service),
    settings: CSVImportSettings = Depends(get_csv_import_settings),
) -> ImportReportResponse:
    """
    Load already-normalized patients and appointments in one transaction.
    """

    try:
        summary = import_service.import_records(
            patients=[patient.model_dump() for patient in body.patients],
            appointments=[appointment.model_dump() for appointment in body.appointments],
            db=db,
        )
    except CSVPersistenceError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"success": False, "error": "Error loading data into the database."},
        ) from exc

    return _to_report(summary, max_errors=settings.max_errors_in_response)


def _to_report(summary: ImportSummary, *, max_errors: int) -> ImportReportResponse:
    return ImportReportResponse(
        success=True,
        message=summary.message,
        inserted_patients=summary.inserted_patients,
        inserted_appointments=summary.inserted_appointments,
        existing_patients=summary.existing_patients,
        error_count=len(summary.errors),
        errors=[
            ImportRowErrorResponse(row=error.row_number, message=error.message)
            for error in summary.errors[:max_errors]
        ],
    )
