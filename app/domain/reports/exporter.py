"""Excel workbook builder shared by the export endpoint and the scheduled job"""

import logging
from datetime import date, datetime
from io import BytesIO
from typing import Iterable, Optional

from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill
from openpyxl.worksheet.worksheet import Worksheet
from sqlalchemy.orm import Session

from .repository import ReportRepository

logger = logging.getLogger(__name__)

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

SECTION_SELECTIONS = "selections"
SECTION_PAYMENTS = "payments"
ALL_SECTIONS = (SECTION_SELECTIONS, SECTION_PAYMENTS)

HEADER_FONT = Font(bold=True)
HEADER_FILL = PatternFill(fill_type="solid", fgColor="FFD4AF37")  # copper

BOOKING_COLUMNS = [
    ("Booking ID", 12),
    ("Client Name", 20),
    ("Email", 25),
    ("Phone", 15),
    ("Event Type", 15),
    ("Package", 12),
    ("Event Date", 12),
    ("Event Time", 10),
    ("Location", 30),
    ("Duration (hrs)", 12),
    ("Guest Count", 12),
    ("Status", 12),
    ("Total Amount", 15),
    ("Selected Photos Count", 20),
    ("Created At", 18),
]

SELECTION_COLUMNS = [
    ("Booking ID", 12),
    ("Client Name", 20),
    ("Email", 25),
    ("Event Type", 15),
    ("Event Date", 12),
    ("Photo Filename", 30),
    ("Selected At", 18),
    ("Notes", 30),
]

PAYMENT_COLUMNS = [
    ("Payment ID", 12),
    ("Booking ID", 12),
    ("Client Name", 20),
    ("Amount", 12),
    ("Currency", 10),
    ("Status", 12),
    ("Payment Method", 15),
    ("Created At", 18),
]


def _fmt_date(value: Optional[date]) -> str:
    return value.isoformat() if value else ""


def _fmt_datetime(value: Optional[datetime]) -> str:
    return value.strftime("%Y-%m-%d %H:%M:%S") if value else ""


def _add_sheet(workbook: Workbook, title: str, columns: list, rows: Iterable[list]) -> Worksheet:
    sheet = workbook.create_sheet(title)
    sheet.append([header for header, _ in columns])
    for index, (_, width) in enumerate(columns, start=1):
        sheet.column_dimensions[sheet.cell(row=1, column=index).column_letter].width = width
    for cell in sheet[1]:
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL
    for row in rows:
        sheet.append(row)
    return sheet


def build_workbook(
    db: Session,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    sections: Iterable[str] = ALL_SECTIONS,
) -> Workbook:
    """Bookings sheet always; selections and payments sheets when requested.

    The date range filters on the booking's event date and does not apply
    to payments.
    """
    sections = set(sections)
    repo = ReportRepository()
    workbook = Workbook()
    workbook.remove(workbook.active)

    bookings = repo.get_bookings_with_selection_counts(db, start_date, end_date)
    _add_sheet(
        workbook,
        "Bookings",
        BOOKING_COLUMNS,
        (
            [
                booking.id,
                profile.display_name or "",
                profile.email,
                profile.phone or "",
                booking.event_type,
                booking.package_type,
                _fmt_date(booking.event_date),
                booking.event_time or "",
                booking.location or "",
                booking.duration,
                booking.guest_count,
                booking.status,
                booking.total_amount,
                selected_count,
                _fmt_datetime(booking.created_at),
            ]
            for booking, profile, selected_count in bookings
        ),
    )

    if SECTION_SELECTIONS in sections:
        selections = repo.get_selections(db, start_date, end_date)
        _add_sheet(
            workbook,
            "Photo Selections",
            SELECTION_COLUMNS,
            (
                [
                    booking.id,
                    profile.display_name or "",
                    profile.email,
                    booking.event_type,
                    _fmt_date(booking.event_date),
                    photo.filename,
                    _fmt_datetime(selection.selected_at),
                    selection.notes or "",
                ]
                for selection, photo, booking, profile in selections
            ),
        )

    if SECTION_PAYMENTS in sections:
        payments = repo.get_payments(db)
        _add_sheet(
            workbook,
            "Payments",
            PAYMENT_COLUMNS,
            (
                [
                    payment.id,
                    payment.booking_id,
                    profile.display_name or "",
                    payment.amount,
                    payment.currency,
                    payment.status,
                    payment.payment_method or "",
                    _fmt_datetime(payment.created_at),
                ]
                for payment, profile in payments
            ),
        )

    logger.info(f"📊 Workbook built: {', '.join(workbook.sheetnames)} ({len(bookings)} bookings)")
    return workbook


def workbook_bytes(workbook: Workbook) -> bytes:
    buffer = BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


def sections_for(report_type: str) -> tuple[str, ...]:
    """Map the ``type`` query value onto workbook sections"""
    if report_type == SECTION_SELECTIONS:
        return (SECTION_SELECTIONS,)
    if report_type == SECTION_PAYMENTS:
        return (SECTION_PAYMENTS,)
    return ALL_SECTIONS
