"""
app/domain package marker.
"""

from app.domain.clinic_import import (
    CandidateAppointment,
    CandidatePatient,
    ImportBatch,
    ImportSummary,
    NormalizedRow,
    RowError,
    StructureValidationResult,
)

__all__ = [
    "CandidateAppointment",
    "CandidatePatient",
    "ImportBatch",
    "ImportSummary",
    "NormalizedRow",
    "RowError",
    "StructureValidationResult",
]
