"""Report router - on-demand Excel export and summary statistics"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from ...auth import Caller, require_staff
from ...database import get_db
from ...shared.clock import utcnow
from .exporter import XLSX_MEDIA_TYPE, build_workbook, sections_for, workbook_bytes
from .repository import ReportRepository
from .schemas import ReportStatsResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/excel", tags=["Reports"])


@router.get("/export")
async def export_report(
    report_type: str = Query("all", alias="type"),
    startDate: Optional[date] = Query(None),
    endDate: Optional[date] = Query(None),
    caller: Caller = Depends(require_staff),
    db: Session = Depends(get_db),
):
    """Download the studio report as an .xlsx workbook"""
    logger.info(f"📊 Excel export requested by {caller.uid} (type={report_type})")
    workbook = build_workbook(db, startDate, endDate, sections_for(report_type))
    filename = f"photography_report_{utcnow().date().isoformat()}.xlsx"

    return StreamingResponse(
        iter([workbook_bytes(workbook)]),
        media_type=XLSX_MEDIA_TYPE,
        headers={
            "Content-Disposition": f'attachment; filename="{filename}"',
            "Cache-Control": "no-cache",
        },
    )


@router.get("/stats", response_model=ReportStatsResponse)
async def get_report_stats(
    caller: Caller = Depends(require_staff),
    db: Session = Depends(get_db),
):
    repo = ReportRepository()
    return ReportStatsResponse(
        bookings=repo.get_booking_stats(db),
        photos=repo.get_photo_stats(db),
        selections=repo.get_selection_stats(db),
        revenue=repo.get_revenue_stats(db),
    )
