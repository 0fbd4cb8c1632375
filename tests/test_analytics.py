"""Tests for revenue, occupancy and report figures."""

from datetime import date

import pytest

from boxoffice.utils import analytics

EVENTS = [
    {"_id": "e1", "category": "Action", "hall_id": "hallA", "total_seats": 48, "bookedSeats": ["HALLA-1"] * 12},
    {"_id": "e2", "category": "Premier League", "hall_id": "hallA", "total_seats": 52, "bookedSeats": []},
    {"_id": "e3", "category": "Drama", "hall_id": "vip_hall", "total_seats": 22, "bookedSeats": ["S1_1"] * 11},
]
HALLS = [
    {"_id": "hallA", "name": "Hall A"},
    {"_id": "vip_hall", "name": "VIP Hall"},
]


def _booking(event_id, total, status="confirmed", booked_on="2026-10-19", email="a@example.com", event_type="movie"):
    return {
        "eventId": event_id,
        "eventType": event_type,
        "totalAmount": total,
        "status": status,
        "bookingDate": booked_on,
        "customerEmail": email,
    }


class TestTimeframes:
    def test_week_starts_on_sunday(self):
        # 2026-10-21 is a Wednesday
        assert analytics.timeframe_bounds("week", today=date(2026, 10, 21)) == (
            date(2026, 10, 18),
            date(2026, 10, 25),
        )
        assert analytics.timeframe_bounds("week", today=date(2026, 10, 18))[0] == date(2026, 10, 18)

    def test_month_rolls_over_the_year(self):
        assert analytics.timeframe_bounds("month", today=date(2026, 12, 14)) == (
            date(2026, 12, 1),
            date(2027, 1, 1),
        )

    def test_day_and_all(self):
        assert analytics.timeframe_bounds("day", today=date(2026, 10, 19)) == (date(2026, 10, 19), date(2026, 10, 20))
        assert analytics.timeframe_bounds("all") == (None, None)

    def test_custom_range_includes_the_end_date(self):
        bookings = [_booking("e1", 100, booked_on="2026-10-01"), _booking("e1", 200, booked_on="2026-10-05")]
        selected = analytics.filter_by_timeframe(bookings, "custom", date(2026, 10, 1), date(2026, 10, 5))
        assert len(selected) == 2

    def test_unknown_timeframe(self):
        with pytest.raises(ValueError):
            analytics.timeframe_bounds("fortnight")

    def test_only_confirmed_bookings_in_window(self):
        bookings = [
            _booking("e1", 100, booked_on="2026-10-19"),
            _booking("e1", 100, booked_on="2026-10-19", status="pending"),
            _booking("e1", 100, booked_on="2026-10-12"),
        ]
        assert len(analytics.filter_by_timeframe(bookings, "day", today=date(2026, 10, 19))) == 1


class TestRevenue:
    def test_category_breakdown_adds_up_to_total(self):
        bookings = [
            _booking("e1", 7650),
            _booking("e2", 5100, event_type="match"),
            _booking("deleted", 1000),
            _booking("e1", 9999, status="cancelled"),
        ]
        by_category = analytics.revenue_by_category(bookings, EVENTS)
        assert by_category == {"Action": 7650, "Premier League": 5100, "Unknown": 1000}
        assert sum(by_category.values()) == analytics.total_revenue(bookings) == 13750

    def test_event_type_breakdown(self):
        bookings = [_booking("e1", 100), _booking("e2", 50, event_type="match"), _booking("e1", 70, status="pending")]
        assert analytics.revenue_by_event_type(bookings) == {"movie": 100, "match": 50}


class TestOccupancy:
    def test_zero_total_seats_is_zero_percent(self):
        assert analytics.occupancy_rate(0, 0) == 0
        assert analytics.occupancy_rate(5, 0) == 0

    def test_overall_is_mean_of_events(self):
        # 25%, 0% and 50%
        assert analytics.overall_occupancy(EVENTS) == pytest.approx(25.0)
        assert analytics.overall_occupancy([]) == 0

    def test_hall_occupancy_sums_events_per_hall(self):
        result = analytics.hall_occupancy(EVENTS, HALLS)
        assert result["Hall A"] == {"booked": 12, "total": 100, "occupancy": pytest.approx(12.0)}
        assert result["VIP Hall"]["occupancy"] == pytest.approx(50.0)


class TestReports:
    def test_filters_combine(self):
        bookings = [
            _booking("e1", 100, booked_on="2026-10-01"),
            _booking("e2", 200, booked_on="2026-10-02", event_type="match"),
            _booking("e1", 300, booked_on="2026-10-03", status="cancelled"),
            _booking("e1", 400, booked_on="2026-10-04"),
        ]
        selected = analytics.filter_report_bookings(
            bookings, start_date=date(2026, 10, 1), end_date=date(2026, 10, 3), event_type="movie"
        )
        assert [b["totalAmount"] for b in selected] == [100, 300]
        assert analytics.filter_report_bookings(bookings, status="cancelled", event_id="e1")[0]["totalAmount"] == 300

    def test_summary_counts_customers_case_insensitively(self):
        bookings = [
            _booking("e1", 100, email="Ada@Example.com"),
            _booking("e1", 300, email="ada@example.com"),
            _booking("e2", 200, email="ben@example.com"),
            _booking("e2", 999, email="cy@example.com", status="cancelled"),
        ]
        assert analytics.summarize(bookings) == {
            "totalRevenue": 600,
            "totalBookings": 4,
            "uniqueCustomers": 3,
            "repeatCustomers": 1,
            "averageBookingValue": 200,
        }

    def test_empty_summary(self):
        summary = analytics.summarize([])
        assert summary["totalRevenue"] == 0
        assert summary["averageBookingValue"] == 0
