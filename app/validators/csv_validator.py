"""
app/validators/csv_validator.py

Header and row-presence validation for clinic CSV imports.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from app.domain.clinic_import import RawRow, StructureValidationResult

COLUMN_PATIENT_NAME = "Nombre Paciente"
COLUMN_PATIENT_EMAIL = "Correo Paciente"
COLUMN_PATIENT_PHONE = "Teléfono Paciente"
COLUMN_DOCTOR = "Médico"
COLUMN_DATE = "Fecha Cita"
COLUMN_TIME = "Hora Cita"
COLUMN_LOCATION = "Ubicación"
COLUMN_REASON = "Motivo"
COLUMN_DESCRIPTION = "Descripción"
COLUMN_PAYMENT_METHOD = "Método de Pago"
COLUMN_STATUS = "Estatus Cita"

REQUIRED_COLUMNS: tuple[str, ...] = (
    COLUMN_PATIENT_NAME,
    COLUMN_PATIENT_EMAIL,
    COLUMN_DOCTOR,
    COLUMN_DATE,
    COLUMN_TIME,
)

OPTIONAL_COLUMNS: tuple[str, ...] = (
    COLUMN_LOCATION,
    COLUMN_REASON,
    COLUMN_DESCRIPTION,
    COLUMN_PAYMENT_METHOD,
    COLUMN_STATUS,
    COLUMN_PATIENT_PHONE,
)

EMPTY_FILE_REASON = "The CSV file is empty."


class CSVStructureValidator:
    """
    Validates the declared header once, and required values per row.
    """

    def __init__(self, required_columns: Sequence[str] = REQUIRED_COLUMNS) -> None:
        self._required_columns = tuple(required_columns)

    @property
    def required_columns(self) -> tuple[str, ...]:
        return self._required_columns

    def validate_structure(
        self,
        *,
        preview_rows: Sequence[RawRow],
        columns: Sequence[str],
    ) -> StructureValidationResult:
        """
        Check the header of a file from its first few rows.

        A file with a header but no data rows is reported as empty.
        """

        if not preview_rows:
            return StructureValidationResult(valid=False, reason=EMPTY_FILE_REASON)

        observed = tuple(columns) or tuple(preview_rows[0].keys())
        missing = tuple(column for column in self._required_columns if column not in observed)
        if missing:
            return StructureValidationResult(
                valid=False,
                columns=observed,
                rows_preview=len(preview_rows),
                reason=f"Missing required columns: {', '.join(missing)}",
                missing_columns=missing,
            )

        return StructureValidationResult(
            valid=True,
            columns=observed,
            rows_preview=len(preview_rows),
        )

    def missing_values(self, row: RawRow) -> list[str]:
        """
        Return the required columns that are absent or blank in one row.
        """

        return [column for column in self._required_columns if self._is_blank(row.get(column))]

    @staticmethod
    def _is_blank(value: Any) -> bool:
        if value is None:
            return True
        return str(value).strip() == ""
