"""Report schemas"""

from pydantic import BaseModel


class BookingReportStats(BaseModel):
    total_bookings: int
    pending_bookings: int
    confirmed_bookings: int
    completed_bookings: int
    cancelled_bookings: int


class PhotoReportStats(BaseModel):
    total_photos: int


class SelectionReportStats(BaseModel):
    total_selections: int
    clients_with_selections: int


class RevenueReportStats(BaseModel):
    total_revenue: float
    total_payments: int
    successful_payments: int


class ReportStatsResponse(BaseModel):
    bookings: BookingReportStats
    photos: PhotoReportStats
    selections: SelectionReportStats
    revenue: RevenueReportStats
