"""
app/mappers/catalog_mapper.py

Free-text to reference-id lookup tables used by the CSV import.

Each catalog mirrors one reference table of the clinic database. Values that
do not resolve fall back to the catalog's default id: an unknown doctor or
payment method is a data-quality fact, not a row failure.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

DEFAULT_CATALOG_ID = 1

DEFAULT_DOCTORS: dict[str, int] = {
    "Dra. Martínez": 1,
    "Dra. Torres": 2,
    "Dr. Ramírez": 3,
    "Dr. López": 4,
}

DEFAULT_LOCATIONS: dict[str, int] = {
    "Sede Norte": 1,
    "Sede Centro": 2,
    "Sede Sur": 3,
}

DEFAULT_PAYMENT_METHODS: dict[str, int] = {
    "Efectivo": 1,
    "Transferencia": 2,
    "Tarjeta Crédito": 3,
    "Tarjeta Débito": 4,
}

DEFAULT_STATUSES: dict[str, int] = {
    "Pendiente": 1,
    "Confirmada": 2,
    "Cancelada": 3,
    "Reprogramada": 4,
}


class CatalogConfigError(ValueError):
    """
    Raised when a catalog override file is unreadable or badly shaped.
    """


@dataclass(frozen=True)
class LookupCatalog:
    """
    Immutable label -> id table with a fallback id.

    Case-sensitive catalogs match labels exactly as written. Case-insensitive
    catalogs also trim surrounding whitespace before comparing.
    """

    name: str
    entries: Mapping[str, int]
    default_id: int = DEFAULT_CATALOG_ID
    case_sensitive: bool = True
    _folded: dict[str, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        folded: dict[str, int] = {}
        if not self.case_sensitive:
            for label, entry_id in self.entries.items():
                folded.setdefault(self._fold(label), entry_id)
        object.__setattr__(self, "_folded", folded)

    def resolve(self, value: str | None) -> int:
        """Return the id for ``value``, or the default id when unmapped."""
        if value is None:
            return self.default_id
        if self.case_sensitive:
            return self.entries.get(value, self.default_id)
        return self._folded.get(self._fold(value), self.default_id)

    def is_known(self, value: str | None) -> bool:
        if value is None:
            return False
        if self.case_sensitive:
            return value in self.entries
        return self._fold(value) in self._folded

    def extended(self, extra_entries: Mapping[str, int]) -> "LookupCatalog":
        """Return a copy with additional or overriding labels."""
        merged = dict(self.entries)
        merged.update(extra_entries)
        return LookupCatalog(
            name=self.name,
            entries=merged,
            default_id=self.default_id,
            case_sensitive=self.case_sensitive,
        )

    @staticmethod
    def _fold(value: str) -> str:
        return value.strip().casefold()


@dataclass(frozen=True)
class ClinicCatalogs:
    """
    The four catalogs consulted while normalizing one import row.
    """

    doctors: LookupCatalog
    locations: LookupCatalog
    payment_methods: LookupCatalog
    statuses: LookupCatalog


def default_catalogs() -> ClinicCatalogs:
    return ClinicCatalogs(
        doctors=LookupCatalog(name="doctors", entries=dict(DEFAULT_DOCTORS)),
        locations=LookupCatalog(name="locations", entries=dict(DEFAULT_LOCATIONS)),
        payment_methods=LookupCatalog(
            name="payment_methods",
            entries=dict(DEFAULT_PAYMENT_METHODS),
            case_sensitive=False,
        ),
        statuses=LookupCatalog(
            name="statuses",
            entries=dict(DEFAULT_STATUSES),
            case_sensitive=False,
        ),
    )


def load_catalogs_file(path: str | Path, *, base: ClinicCatalogs | None = None) -> ClinicCatalogs:
    """
    Extend catalogs from a JSON file.

    Expected shape (every key optional)::

        {
            "doctors": {"entries": {"Dra. Vega": 5}, "default_id": 1},
            "payment_methods": {"entries": {"Nequi": 5}}
        }
    """

    catalogs = base or default_catalogs()
    try:
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise CatalogConfigError(f"Catalog file {path} could not be read: {exc}") from exc
    if not isinstance(raw, dict):
        raise CatalogConfigError("Catalog file must contain a JSON object.")

    return ClinicCatalogs(
        doctors=_apply_override(catalogs.doctors, raw.get("doctors")),
        locations=_apply_override(catalogs.locations, raw.get("locations")),
        payment_methods=_apply_override(catalogs.payment_methods, raw.get("payment_methods")),
        statuses=_apply_override(catalogs.statuses, raw.get("statuses")),
    )


def _apply_override(catalog: LookupCatalog, override: Any) -> LookupCatalog:
    if override is None:
        return catalog
    if not isinstance(override, dict):
        raise CatalogConfigError(f"Catalog '{catalog.name}' override must be an object.")

    entries = override.get("entries", {})
    if not isinstance(entries, dict) or not all(
        isinstance(label, str) and isinstance(entry_id, int) for label, entry_id in entries.items()
    ):
        raise CatalogConfigError(f"Catalog '{catalog.name}' entries must map labels to integer ids.")

    extended = catalog.extended(entries)
    default_id = override.get("default_id")
    if default_id is None:
        return extended
    if not isinstance(default_id, int):
        raise CatalogConfigError(f"Catalog '{catalog.name}' default_id must be an integer.")
    return LookupCatalog(
        name=extended.name,
        entries=extended.entries,
        default_id=default_id,
        case_sensitive=extended.case_sensitive,
    )
