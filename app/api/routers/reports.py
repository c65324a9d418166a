"""
app/api/routers/reports.py

Aggregate report endpoints.
"""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.config import ReportSettings, get_report_settings
from app.repositories.report_repository import ReportRepository
from app.schemas.clinic import RevenueReportRow
from db.session import get_db

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("/revenue", response_model=list[RevenueReportRow])
def revenue_report(
    start_date: date | None = Query(None),
    end_date: date | None = Query(None),
    db: Session = Depends(get_db),
    settings: ReportSettings = Depends(get_report_settings),
) -> list[RevenueReportRow]:
    """
    Confirmed appointments and estimated revenue per payment method.
    """
    rows = ReportRepository(db).revenue_by_payment_method(
        amount_per_appointment=settings.estimated_revenue_per_appointment,
        start_date=start_date,
        end_date=end_date,
    )
    return [RevenueReportRow(**row) for row in rows]
