"""
app/mappers package marker.
"""

from app.mappers.catalog_mapper import ClinicCatalogs, LookupCatalog, default_catalogs
from app.mappers.row_normalizer import RowNormalizer, normalize_email

__all__ = [
    "ClinicCatalogs",
    "LookupCatalog",
    "RowNormalizer",
    "default_catalogs",
    "normalize_email",
]
