from __future__ import annotations

from datetime import date, time

from app.domain.clinic_import import NormalizedRow, RowError
from app.services.aggregation_service import ImportAggregator


def _normalized(email: str, row_number: int, name: str = "Ana") -> NormalizedRow:
    return NormalizedRow(
        row_number=row_number,
        patient_name=name,
        patient_email=email,
        patient_phone=None,
        doctor_id=1,
        location_id=1,
        date=date(2024, 5, 1),
        time=time(9, 0),
        reason="Control",
        description="Sin descripción",
        payment_method_id=1,
        status_id=1,
    )


class TestImportAggregator:
    def test_first_sight_mints_sequential_ids(self) -> None:
        aggregator = ImportAggregator()
        aggregator.add_row(_normalized("a@x.com", 2))
        aggregator.add_row(_normalized("b@x.com", 3))
        aggregator.add_row(_normalized("a@x.com", 4, name="Ana Other"))
        batch = aggregator.build()

        assert [(p.temporary_id, p.email) for p in batch.patients] == [(1, "a@x.com"), (2, "b@x.com")]
        # First row wins for the patient's attributes.
        assert batch.patients[0].name == "Ana"
        assert [a.patient_temporary_id for a in batch.appointments] == [1, 2, 1]
        assert [a.temporary_id for a in batch.appointments] == [1, 2, 3]

    def test_every_valid_row_yields_an_appointment(self) -> None:
        aggregator = ImportAggregator()
        for row_number in range(2, 7):
            aggregator.add_row(_normalized("same@x.com", row_number))
        batch = aggregator.build()
        assert len(batch.patients) == 1
        assert len(batch.appointments) == 5

    def test_errors_are_kept_in_order(self) -> None:
        aggregator = ImportAggregator()
        aggregator.add_error(RowError(row_number=5, message="b"))
        aggregator.add_error(RowError(row_number=3, message="a"))
        assert [e.row_number for e in aggregator.build().errors] == [5, 3]

    def test_empty_batch(self) -> None:
        batch = ImportAggregator().build()
        assert batch.patients == ()
        assert batch.appointments == ()
        assert batch.errors == ()
