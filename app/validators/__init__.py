"""
app/validators package marker.
"""

from app.validators.csv_validator import (
    OPTIONAL_COLUMNS,
    REQUIRED_COLUMNS,
    CSVStructureValidator,
)

__all__ = [
    "CSVStructureValidator",
    "OPTIONAL_COLUMNS",
    "REQUIRED_COLUMNS",
]
