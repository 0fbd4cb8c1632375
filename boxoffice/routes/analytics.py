# boxoffice/routes/analytics.py
from datetime import date
from typing import Optional

from fastapi import APIRouter, HTTPException, Depends, Query

from boxoffice.database import BOOKINGS, EVENTS, HALLS, get_database
from boxoffice.models.analytics import (
    BookingReport,
    OccupancyReport,
    Overview,
    RevenueReport,
    Timeframe,
)
from boxoffice.models.booking import Booking, BookingStatus
from boxoffice.models.event import EventType
from boxoffice.utils import analytics
from boxoffice.utils.auth_utils import get_current_admin
from boxoffice.utils.documents import convert_objectid_to_str

router = APIRouter(dependencies=[Depends(get_current_admin)])


async def _all(db, collection: str):
    return await db[collection].find({}).to_list(length=None)


@router.get("/analytics/overview", response_model=Overview)
async def overview(db=Depends(get_database)):
    bookings = await _all(db, BOOKINGS)
    events = await _all(db, EVENTS)
    return Overview(
        totalRevenue=analytics.total_revenue(bookings),
        totalBookings=len(bookings),
        activeEvents=sum(1 for e in events if e.get("status") == "active"),
        overallOccupancy=analytics.overall_occupancy(events),
    )


@router.get("/analytics/revenue", response_model=RevenueReport)
async def revenue(
    timeframe: Timeframe = Query("all"),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    db=Depends(get_database),
):
    if start_date and end_date and start_date > end_date:
        raise HTTPException(status_code=400, detail="start_date must not be after end_date")

    bookings = analytics.filter_by_timeframe(await _all(db, BOOKINGS), timeframe, start_date, end_date)
    events = await _all(db, EVENTS)
    return RevenueReport(
        timeframe=timeframe,
        revenueByCategory=analytics.revenue_by_category(bookings, events),
        revenueByEventType=analytics.revenue_by_event_type(bookings),
        totalRevenue=analytics.total_revenue(bookings),
    )


@router.get("/analytics/occupancy", response_model=OccupancyReport)
async def occupancy(db=Depends(get_database)):
    events = await _all(db, EVENTS)
    halls = await _all(db, HALLS)
    return OccupancyReport(
        halls=analytics.hall_occupancy(events, halls),
        overallOccupancy=analytics.overall_occupancy(events),
    )


@router.get("/reports", response_model=BookingReport)
async def booking_report(
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    event_type: Optional[EventType] = Query(None),
    status: Optional[BookingStatus] = Query(None),
    event_id: Optional[str] = Query(None),
    db=Depends(get_database),
):
    bookings = await db[BOOKINGS].find({}).sort("createdAt", -1).to_list(length=None)
    selected = analytics.filter_report_bookings(
        bookings,
        start_date=start_date,
        end_date=end_date,
        event_type=event_type,
        status=status,
        event_id=event_id,
    )
    return BookingReport(
        summary=analytics.summarize(selected),
        bookings=[Booking(**convert_objectid_to_str(b)) for b in selected],
    )
