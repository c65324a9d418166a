"""
app/services/csv_import_service.py

Service layer for the clinic CSV import.

One import runs the whole pipeline to completion before returning:

    1. structure check on the header and the first few rows
    2. streaming parse + per-row normalization (bad rows become RowErrors)
    3. patient deduplication by normalized email
    4. transactional load (all or nothing)

Structural problems stop the import before any write. Row problems are
collected and reported. Persistence problems roll back the whole batch.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from functools import lru_cache
from pathlib import Path
from typing import Any

from sqlalchemy.orm import Session

from app.config import get_csv_import_settings
from app.domain.clinic_import import ImportBatch, ImportSummary, NormalizedRow, RowError, StructureValidationResult
from app.mappers.catalog_mapper import ClinicCatalogs, default_catalogs, load_catalogs_file
from app.mappers.row_normalizer import DEFAULT_DESCRIPTION, DEFAULT_REASON, RowNormalizer, normalize_email
from app.parsers.csv_row_parser import CSVRowParser, MalformedInputError
from app.services.aggregation_service import ImportAggregator
from app.services.import_loader import CSVPersistenceError, ImportLoader
from app.validators.csv_validator import CSVStructureValidator

logger = logging.getLogger(__name__)

__all__ = [
    "CSVImportService",
    "CSVPersistenceError",
    "CSVStructureError",
    "get_csv_import_service",
]


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class CSVStructureError(ValueError):
    """
    Raised when the file cannot be imported at all: missing required
    columns, no data rows, or an unreadable stream.
    """

    def __init__(self, message: str, *, missing_columns: Sequence[str] = ()) -> None:
        super().__init__(message)
        self.missing_columns = tuple(missing_columns)


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class CSVImportService:
    """
    Coordinates CSV parsing, validation, normalization and loading.
    """

    def __init__(
        self,
        *,
        preview_rows: int = 5,
        log_row_errors: bool = True,
        parser: CSVRowParser | None = None,
        validator: CSVStructureValidator | None = None,
        normalizer: RowNormalizer | None = None,
        loader: ImportLoader | None = None,
    ) -> None:
        self._preview_rows = max(1, preview_rows)
        self._log_row_errors = log_row_errors
        self._parser = parser or CSVRowParser()
        self._validator = validator or CSVStructureValidator()
        self._normalizer = normalizer or RowNormalizer(validator=self._validator)
        self._loader = loader or ImportLoader()

    def import_file(self, *, path: str | Path, db: Session) -> ImportSummary:
        """
        Import one CSV file into the clinic database.

        Raises:
            CSVStructureError:   the file is empty, unreadable, or lacks
                                 required columns. Nothing was written.
            CSVPersistenceError: the load transaction failed and was rolled
                                 back. Nothing was written.
        """

        validation = self.validate_file(path)
        if not validation.valid:
            raise CSVStructureError(
                validation.reason or "Invalid CSV structure.",
                missing_columns=validation.missing_columns,
            )
        logger.info(
            "CSV structure valid path=%s preview_rows=%d columns=%s",
            path,
            validation.rows_preview,
            ", ".join(validation.columns),
        )

        batch = self.normalize_file(path)
        return self._loader.load(batch, db)

    def validate_file(self, path: str | Path) -> StructureValidationResult:
        """
        Check the header against the required columns using the first rows.
        """

        try:
            with self._parser.open(path) as stream:
                columns, preview = self._parser.read_preview(stream, limit=self._preview_rows)
        except MalformedInputError as exc:
            raise CSVStructureError(str(exc)) from exc

        return self._validator.validate_structure(preview_rows=preview, columns=columns)

    def normalize_file(self, path: str | Path) -> ImportBatch:
        """
        Stream every row through the normalizer into a deduplicated batch.
        """

        try:
            with self._parser.open(path) as stream:
                batch = self._normalizer.normalize_rows(self._parser.iter_rows(stream))
        except MalformedInputError as exc:
            raise CSVStructureError(str(exc)) from exc

        self._log_errors(batch.errors)
        logger.info(
            "CSV normalized path=%s unique_patients=%d appointments=%d row_errors=%d",
            path,
            len(batch.patients),
            len(batch.appointments),
            len(batch.errors),
        )
        return batch

    def import_records(
        self,
        *,
        patients: Sequence[Mapping[str, Any]],
        appointments: Sequence[Mapping[str, Any]],
        db: Session,
    ) -> ImportSummary:
        """
        Load already-normalized records through the same dedup + load path.

        Appointments reference patients by email. An appointment whose email
        is not among ``patients`` is reported as a RowError numbered by its
        1-based position in ``appointments``.
        """

        aggregator = ImportAggregator()
        names_by_email: dict[str, str] = {}

        for patient in patients:
            email = normalize_email(str(patient["email"]))
            names_by_email.setdefault(email, str(patient["name"]).strip())
            aggregator.patient_id_for(
                email=email,
                name=names_by_email[email],
                phone=patient.get("phone"),
            )

        for position, appointment in enumerate(appointments, start=1):
            email = normalize_email(str(appointment["patient_email"]))
            if email not in names_by_email:
                aggregator.add_error(
                    RowError(
                        row_number=position,
                        message=f"Unknown patient email: {email}",
                    )
                )
                continue
            aggregator.add_row(
                NormalizedRow(
                    row_number=position,
                    patient_name=names_by_email[email],
                    patient_email=email,
                    patient_phone=None,
                    doctor_id=appointment["doctor_id"],
                    location_id=appointment["location_id"],
                    date=appointment["date"],
                    time=appointment["time"],
                    reason=(appointment.get("reason") or "").strip() or DEFAULT_REASON,
                    description=(appointment.get("description") or "").strip() or DEFAULT_DESCRIPTION,
                    payment_method_id=appointment["payment_method_id"],
                    status_id=appointment["status_id"],
                )
            )

        batch = aggregator.build()
        self._log_errors(batch.errors)
        return self._loader.load(batch, db)

    def _log_errors(self, errors: Sequence[RowError]) -> None:
        if not self._log_row_errors:
            return
        for error in errors:
            logger.warning("CSV row error row=%s message=%s", error.row_number, error.message)


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


def _build_catalogs(catalogs_file: str | None) -> ClinicCatalogs:
    if not catalogs_file:
        return default_catalogs()
    logger.info("Loading import catalogs from %s", catalogs_file)
    return load_catalogs_file(catalogs_file)


@lru_cache(maxsize=1)
def get_csv_import_service() -> CSVImportService:
    """
    Build and cache the import service with env-driven settings.
    """

    settings = get_csv_import_settings()
    validator = CSVStructureValidator()
    return CSVImportService(
        preview_rows=settings.preview_rows,
        log_row_errors=settings.log_row_errors,
        validator=validator,
        normalizer=RowNormalizer(
            catalogs=_build_catalogs(settings.catalogs_file),
            validator=validator,
        ),
        loader=ImportLoader(batch_size=settings.batch_size),
    )
