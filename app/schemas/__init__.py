"""
app/schemas package marker.
"""

from app.schemas.csv_import import (
    ImportReportResponse,
    ImportRowErrorResponse,
    LoadDataRequest,
)

__all__ = [
    "ImportReportResponse",
    "ImportRowErrorResponse",
    "LoadDataRequest",
]
