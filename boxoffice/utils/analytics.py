# boxoffice/utils/analytics.py
"""Revenue, occupancy and report figures computed from booking documents.

Revenue only ever counts confirmed bookings. Dates are compared on the
booking's ``bookingDate`` (YYYY-MM-DD).
"""

from collections import Counter, defaultdict
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

UNKNOWN_CATEGORY = "Unknown"


def _booking_date(booking: Mapping[str, Any]) -> Optional[date]:
    value = booking.get("bookingDate")
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None


def is_confirmed(booking: Mapping[str, Any]) -> bool:
    return booking.get("status") == "confirmed"


def timeframe_bounds(
    timeframe: str,
    start: Optional[date] = None,
    end: Optional[date] = None,
    today: Optional[date] = None,
) -> Tuple[Optional[date], Optional[date]]:
    """Return a half-open [lower, upper) date window for a timeframe.

    ``today`` defaults to the UTC date, matching ``bookingDate``. Weeks start
    on Sunday. Custom bounds are inclusive dates and either may
    be left open.
    """
    today = today or datetime.now(timezone.utc).date()
    if timeframe == "all":
        return None, None
    if timeframe == "day":
        return today, today + timedelta(days=1)
    if timeframe == "week":
        week_start = today - timedelta(days=(today.weekday() + 1) % 7)
        return week_start, week_start + timedelta(days=7)
    if timeframe == "month":
        month_start = today.replace(day=1)
        if month_start.month == 12:
            next_month = month_start.replace(year=month_start.year + 1, month=1)
        else:
            next_month = month_start.replace(month=month_start.month + 1)
        return month_start, next_month
    if timeframe == "custom":
        return start, end + timedelta(days=1) if end else None
    raise ValueError(f"Unknown timeframe: {timeframe}")


def in_window(booking: Mapping[str, Any], lower: Optional[date], upper: Optional[date]) -> bool:
    if lower is None and upper is None:
        return True
    booked_on = _booking_date(booking)
    if booked_on is None:
        return False
    return (lower is None or booked_on >= lower) and (upper is None or booked_on < upper)


def filter_by_timeframe(
    bookings: Iterable[Mapping[str, Any]],
    timeframe: str = "all",
    start: Optional[date] = None,
    end: Optional[date] = None,
    today: Optional[date] = None,
) -> List[Mapping[str, Any]]:
    """Confirmed bookings that fall inside the timeframe."""
    lower, upper = timeframe_bounds(timeframe, start, end, today)
    return [b for b in bookings if is_confirmed(b) and in_window(b, lower, upper)]


def total_revenue(bookings: Iterable[Mapping[str, Any]]) -> float:
    return sum(b.get("totalAmount", 0) for b in bookings if is_confirmed(b))


def revenue_by_category(
    bookings: Iterable[Mapping[str, Any]],
    events: Iterable[Mapping[str, Any]],
) -> Dict[str, float]:
    """Confirmed revenue per event category.

    Bookings whose event is gone are grouped under "Unknown", so the values
    always add up to ``total_revenue``.
    """
    categories = {str(e["_id"]): e.get("category") or UNKNOWN_CATEGORY for e in events}
    revenue: Dict[str, float] = defaultdict(float)
    for booking in bookings:
        if not is_confirmed(booking):
            continue
        category = categories.get(str(booking.get("eventId")), UNKNOWN_CATEGORY)
        revenue[category] += booking.get("totalAmount", 0)
    return dict(revenue)


def revenue_by_event_type(bookings: Iterable[Mapping[str, Any]]) -> Dict[str, float]:
    revenue = {"movie": 0.0, "match": 0.0}
    for booking in bookings:
        if is_confirmed(booking):
            event_type = booking.get("eventType") or UNKNOWN_CATEGORY
            revenue[event_type] = revenue.get(event_type, 0.0) + booking.get("totalAmount", 0)
    return revenue


def occupancy_rate(booked: int, total: int) -> float:
    if total <= 0:
        return 0.0
    return booked / total * 100


def hall_occupancy(
    events: Iterable[Mapping[str, Any]],
    halls: Iterable[Mapping[str, Any]],
) -> Dict[str, Dict[str, Any]]:
    """Booked vs. total seats per hall name, summed over the hall's events."""
    names = {str(h["_id"]): h.get("name") or str(h["_id"]) for h in halls}
    totals: Dict[str, Dict[str, Any]] = {}
    for event in events:
        name = names.get(str(event.get("hall_id")), str(event.get("hall_id")))
        entry = totals.setdefault(name, {"booked": 0, "total": 0})
        entry["booked"] += len(event.get("bookedSeats") or [])
        entry["total"] += event.get("total_seats") or 0
    for entry in totals.values():
        entry["occupancy"] = occupancy_rate(entry["booked"], entry["total"])
    return totals


def overall_occupancy(events: Iterable[Mapping[str, Any]]) -> float:
    """Mean of per-event occupancy percentages; 0 when there are no events."""
    rates = [
        occupancy_rate(len(e.get("bookedSeats") or []), e.get("total_seats") or 0)
        for e in events
    ]
    if not rates:
        return 0.0
    return sum(rates) / len(rates)


def filter_report_bookings(
    bookings: Iterable[Mapping[str, Any]],
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    event_type: Optional[str] = None,
    status: Optional[str] = None,
    event_id: Optional[str] = None,
) -> List[Mapping[str, Any]]:
    """Bookings matching every given filter; date bounds are inclusive."""
    upper = end_date + timedelta(days=1) if end_date else None
    return [
        b for b in bookings
        if in_window(b, start_date, upper)
        and (event_type is None or b.get("eventType") == event_type)
        and (status is None or b.get("status") == status)
        and (event_id is None or str(b.get("eventId")) == event_id)
    ]


def summarize(bookings: Iterable[Mapping[str, Any]]) -> Dict[str, Any]:
    bookings = list(bookings)
    confirmed = [b for b in bookings if is_confirmed(b)]
    revenue = total_revenue(confirmed)
    per_customer = Counter(
        (b.get("customerEmail") or "").strip().lower() for b in bookings
    )
    per_customer.pop("", None)
    return {
        "totalRevenue": revenue,
        "totalBookings": len(bookings),
        "uniqueCustomers": len(per_customer),
        "repeatCustomers": sum(1 for count in per_customer.values() if count > 1),
        "averageBookingValue": revenue / len(confirmed) if confirmed else 0.0,
    }
