"""
app/mappers/row_normalizer.py

Maps raw clinic CSV rows to normalized patient + appointment values.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date, datetime, time

from app.domain.clinic_import import ImportBatch, NormalizedRow, RawRow, RowError
from app.mappers.catalog_mapper import ClinicCatalogs, LookupCatalog, default_catalogs
from app.services.aggregation_service import ImportAggregator
from app.validators.csv_validator import (
    COLUMN_DATE,
    COLUMN_DESCRIPTION,
    COLUMN_DOCTOR,
    COLUMN_LOCATION,
    COLUMN_PATIENT_EMAIL,
    COLUMN_PATIENT_NAME,
    COLUMN_PATIENT_PHONE,
    COLUMN_PAYMENT_METHOD,
    COLUMN_REASON,
    COLUMN_STATUS,
    COLUMN_TIME,
    CSVStructureValidator,
)
from db.models import Appointment, Patient

logger = logging.getLogger(__name__)

FIRST_DATA_ROW = 2
DEFAULT_REASON = "Sin especificar"
DEFAULT_DESCRIPTION = "Sin descripción"

# Column widths of the target tables; longer values would fail the whole
# batch at insert time instead of just their row.
MAX_LENGTHS: dict[str, int] = {
    COLUMN_PATIENT_NAME: Patient.__table__.c.name.type.length,
    COLUMN_PATIENT_EMAIL: Patient.__table__.c.email.type.length,
    COLUMN_PATIENT_PHONE: Patient.__table__.c.phone.type.length,
    COLUMN_REASON: Appointment.__table__.c.reason.type.length,
}

DATE_FORMATS: tuple[str, ...] = (
    "%Y-%m-%d",
    "%Y/%m/%d",
    "%d/%m/%Y",
    "%d-%m-%Y",
)

TIME_FORMATS: tuple[str, ...] = (
    "%H:%M",
    "%H:%M:%S",
    "%I:%M %p",
    "%I:%M:%S %p",
)


def normalize_email(value: str) -> str:
    """Deduplication key: trimmed, lower-cased email."""
    return value.strip().lower()


class RowNormalizer:
    """
    Validates required values, resolves catalog labels, and cleans text
    fields for one row at a time.
    """

    def __init__(
        self,
        *,
        catalogs: ClinicCatalogs | None = None,
        validator: CSVStructureValidator | None = None,
    ) -> None:
        self._catalogs = catalogs or default_catalogs()
        self._validator = validator or CSVStructureValidator()

    def normalize_row(
        self,
        raw_row: RawRow,
        *,
        row_number: int,
    ) -> tuple[NormalizedRow | None, RowError | None]:
        """
        Normalize one row.

        Returns ``(row, None)`` on success and ``(None, error)`` when required
        values are missing, including rows that are blank throughout. Malformed
        dates or times and values wider than their column raise ValueError.
        """

        missing = self._validator.missing_values(raw_row)
        if missing:
            return None, RowError(
                row_number=row_number,
                message=f"Missing required columns: {', '.join(missing)}",
            )

        catalogs = self._catalogs
        return (
            NormalizedRow(
                row_number=row_number,
                patient_name=_bounded(COLUMN_PATIENT_NAME, _text(raw_row.get(COLUMN_PATIENT_NAME)) or ""),
                patient_email=_bounded(
                    COLUMN_PATIENT_EMAIL,
                    normalize_email(raw_row[COLUMN_PATIENT_EMAIL] or ""),
                ),
                patient_phone=_bounded(COLUMN_PATIENT_PHONE, _text(raw_row.get(COLUMN_PATIENT_PHONE))),
                doctor_id=self._resolve(catalogs.doctors, raw_row.get(COLUMN_DOCTOR), row_number),
                location_id=self._resolve(catalogs.locations, raw_row.get(COLUMN_LOCATION), row_number),
                date=parse_date(raw_row[COLUMN_DATE] or ""),
                time=parse_time(raw_row[COLUMN_TIME] or ""),
                reason=_bounded(COLUMN_REASON, _text(raw_row.get(COLUMN_REASON)) or DEFAULT_REASON),
                description=_text(raw_row.get(COLUMN_DESCRIPTION)) or DEFAULT_DESCRIPTION,
                payment_method_id=self._resolve(
                    catalogs.payment_methods,
                    raw_row.get(COLUMN_PAYMENT_METHOD),
                    row_number,
                ),
                status_id=self._resolve(catalogs.statuses, raw_row.get(COLUMN_STATUS), row_number),
            ),
            None,
        )

    def normalize_rows(
        self,
        rows: Iterable[RawRow],
        *,
        aggregator: ImportAggregator | None = None,
    ) -> ImportBatch:
        """
        Normalize every row and fold the results into one deduplicated batch.

        A failing row becomes a RowError; it never stops the loop.
        """

        aggregator = aggregator or ImportAggregator()

        for row_number, raw_row in enumerate(rows, start=FIRST_DATA_ROW):
            try:
                normalized, error = self.normalize_row(raw_row, row_number=row_number)
                if error is not None:
                    aggregator.add_error(error)
                    continue
                if normalized is not None:
                    aggregator.add_row(normalized)
            except Exception as exc:  # noqa: BLE001
                aggregator.add_error(
                    RowError(row_number=row_number, message=f"Error processing row: {exc}")
                )

        return aggregator.build()

    def _resolve(self, catalog: LookupCatalog, value: str | None, row_number: int) -> int:
        if value is not None and value.strip() and not catalog.is_known(value):
            logger.debug(
                "Unmapped %s value row=%s value=%r; using default id %s",
                catalog.name,
                row_number,
                value,
                catalog.default_id,
            )
        return catalog.resolve(value)


def parse_date(value: str) -> date:
    raw = value.strip()
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(raw, fmt).date()
        except ValueError:
            continue
    raise ValueError(f"invalid date for '{COLUMN_DATE}': {raw!r}")


def parse_time(value: str) -> time:
    raw = value.strip()
    for fmt in TIME_FORMATS:
        try:
            return datetime.strptime(raw, fmt).time()
        except ValueError:
            continue
    raise ValueError(f"invalid time for '{COLUMN_TIME}': {raw!r}")


def _bounded(column: str, value: str | None) -> str | None:
    limit = MAX_LENGTHS[column]
    if value is not None and len(value) > limit:
        raise ValueError(f"'{column}' exceeds {limit} characters")
    return value


def _text(value: str | None) -> str | None:
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None
