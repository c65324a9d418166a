from __future__ import annotations

from app.validators.csv_validator import (
    EMPTY_FILE_REASON,
    REQUIRED_COLUMNS,
    CSVStructureValidator,
)


def _row(**overrides: str | None) -> dict[str, str | None]:
    row: dict[str, str | None] = {
        "Nombre Paciente": "Ana",
        "Correo Paciente": "ana@x.com",
        "Médico": "Dra. Torres",
        "Fecha Cita": "2024-05-01",
        "Hora Cita": "10:00",
    }
    row.update(overrides)
    return row


class TestValidateStructure:
    def setup_method(self) -> None:
        self.validator = CSVStructureValidator()

    def test_no_rows_is_empty_file(self) -> None:
        result = self.validator.validate_structure(preview_rows=[], columns=REQUIRED_COLUMNS)
        assert result.valid is False
        assert result.reason == EMPTY_FILE_REASON

    def test_missing_columns_are_listed(self) -> None:
        row = _row()
        del row["Hora Cita"]
        del row["Médico"]
        result = self.validator.validate_structure(preview_rows=[row], columns=tuple(row))
        assert result.valid is False
        assert result.missing_columns == ("Médico", "Hora Cita")
        assert result.reason == "Missing required columns: Médico, Hora Cita"

    def test_complete_header_is_valid(self) -> None:
        row = _row()
        result = self.validator.validate_structure(preview_rows=[row, row], columns=tuple(row))
        assert result.valid is True
        assert result.rows_preview == 2
        assert result.reason is None

    def test_columns_fall_back_to_first_row_keys(self) -> None:
        result = self.validator.validate_structure(preview_rows=[_row()], columns=())
        assert result.valid is True


class TestRowChecks:
    def setup_method(self) -> None:
        self.validator = CSVStructureValidator()

    def test_blank_and_none_values_count_as_missing(self) -> None:
        row = _row(**{"Hora Cita": "   ", "Fecha Cita": None})
        assert self.validator.missing_values(row) == ["Fecha Cita", "Hora Cita"]

    def test_complete_row_has_no_missing_values(self) -> None:
        assert self.validator.missing_values(_row()) == []
