from __future__ import annotations

import json
from pathlib import Path

import pytest

from app.mappers.catalog_mapper import (
    CatalogConfigError,
    LookupCatalog,
    default_catalogs,
    load_catalogs_file,
)


class TestLookupCatalog:
    def test_case_sensitive_requires_exact_label(self) -> None:
        doctors = default_catalogs().doctors
        assert doctors.resolve("Dra. Torres") == 2
        assert doctors.resolve("dra. torres") == 1
        assert doctors.is_known("dra. torres") is False

    def test_case_insensitive_folds_case_and_whitespace(self) -> None:
        statuses = default_catalogs().statuses
        assert statuses.resolve("  confirmada ") == 2
        assert statuses.resolve("CANCELADA") == 3

    def test_unmapped_and_missing_values_use_default(self) -> None:
        catalog = LookupCatalog(name="x", entries={"A": 7}, default_id=3)
        assert catalog.resolve("Dr. Desconocido") == 3
        assert catalog.resolve(None) == 3

    def test_extended_overrides_and_keeps_flags(self) -> None:
        base = LookupCatalog(name="pm", entries={"Efectivo": 1}, case_sensitive=False)
        extended = base.extended({"Nequi": 5})
        assert extended.resolve("nequi") == 5
        assert extended.resolve("EFECTIVO") == 1
        assert base.is_known("Nequi") is False


class TestLoadCatalogsFile:
    def test_extends_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "catalogs.json"
        path.write_text(
            json.dumps({"doctors": {"entries": {"Dra. Vega": 5}, "default_id": 2}}),
            encoding="utf-8",
        )
        catalogs = load_catalogs_file(path)
        assert catalogs.doctors.resolve("Dra. Vega") == 5
        assert catalogs.doctors.resolve("Dra. Martínez") == 1
        assert catalogs.doctors.resolve("nobody") == 2
        assert catalogs.locations.resolve("Sede Sur") == 3

    def test_non_integer_ids_are_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / "catalogs.json"
        path.write_text(json.dumps({"locations": {"entries": {"Sede Este": "4"}}}), encoding="utf-8")
        with pytest.raises(CatalogConfigError):
            load_catalogs_file(path)

    def test_invalid_json_is_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / "catalogs.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(CatalogConfigError):
            load_catalogs_file(path)
