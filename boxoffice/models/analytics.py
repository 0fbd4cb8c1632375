# boxoffice/models/analytics.py
from pydantic import BaseModel
from typing import Dict, List, Literal

from boxoffice.models.booking import Booking

Timeframe = Literal["all", "day", "week", "month", "custom"]


class HallOccupancy(BaseModel):
    booked: int
    total: int
    occupancy: float


class RevenueReport(BaseModel):
    timeframe: Timeframe
    revenueByCategory: Dict[str, float]
    revenueByEventType: Dict[str, float]
    totalRevenue: float


class OccupancyReport(BaseModel):
    halls: Dict[str, HallOccupancy]
    overallOccupancy: float


class Overview(BaseModel):
    totalRevenue: float
    totalBookings: int
    activeEvents: int
    overallOccupancy: float


class ReportSummary(BaseModel):
    totalRevenue: float
    totalBookings: int
    uniqueCustomers: int
    repeatCustomers: int
    averageBookingValue: float


class BookingReport(BaseModel):
    summary: ReportSummary
    bookings: List[Booking]
