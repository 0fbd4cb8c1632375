"""Unit tests for seat layout generation.

Run with: pytest tests/test_seating.py -v
"""

from collections import Counter

import pytest

from boxoffice.utils.seating import (
    SeatBlock,
    generate_event_seats,
    generate_seats,
    is_single_selection,
    layout_size,
    layout_warnings,
    required_pricing_keys,
    seat_type_name,
)

VIP_MOVIE_PRICING = {
    "vipSingle": {"price": 7500, "count": 20},
    "vipCouple": {"price": 15000, "count": 14},
    "vipFamily": {"price": 30000, "count": 14},
}
VIP_MATCH_PRICING = {
    "vipSofaSeats": {"price": 2500, "count": 10},
    "vipRegularSeats": {"price": 2000, "count": 12},
}


class TestRuleTable:
    """Seat counts per (event type, hall type)."""

    def test_vip_match_has_ten_sofa_and_twelve_regular_seats(self):
        seats = generate_seats("match", "vip_hall", "vip", 22, VIP_MATCH_PRICING)
        counts = Counter(seat.category for seat in seats)
        assert counts == {"sofa": 10, "regular": 12}
        assert [s.id for s in seats[:5]] == ["S1_1", "S1_2", "S1_3", "S1_4", "S1_5"]
        assert seats[5].id == "S2_1"
        assert [s.id for s in seats if s.category == "regular"][:7] == ["A1", "A2", "A3", "A4", "A5", "A6", "B1"]

    def test_vip_movie_has_single_couple_and_family_units(self):
        seats = generate_seats("movie", "vip_hall", "vip", 22, VIP_MOVIE_PRICING)
        counts = Counter(seat.category for seat in seats)
        assert counts == {"vipSingle": 20, "vipCouple": 7, "vipFamily": 14}
        ids = [s.id for s in seats]
        assert ids[0] == "S1" and ids[19] == "S20"
        assert ids[20] == "C1" and ids[26] == "C7"
        assert ids[27] == "F1" and ids[-1] == "F14"

    @pytest.mark.parametrize("event_type,category", [("match", "standardMatch"), ("movie", "standardSingle")])
    def test_standard_halls_follow_capacity(self, event_type, category):
        seats = generate_seats(event_type, "hallB", "standard", 60)
        assert len(seats) == 60
        assert {seat.category for seat in seats} == {category}
        assert seats[0].id == "HALLB-1"
        assert seats[-1].id == "HALLB-60"

    def test_vip_layouts_ignore_hall_capacity(self):
        assert len(generate_seats("movie", "vip_hall", "vip", 5)) == 41
        assert len(generate_seats("match", "vip_hall", "vip", 500)) == 22

    @pytest.mark.parametrize("event_type", ["movie", "match"])
    @pytest.mark.parametrize("hall_type", ["vip", "standard"])
    def test_no_duplicate_seat_ids(self, event_type, hall_type):
        seats = generate_seats(event_type, "hallA", hall_type, 48)
        ids = [seat.id for seat in seats]
        assert len(ids) == len(set(ids))
        assert len(ids) == layout_size(event_type, hall_type, 48)

    def test_zero_capacity_standard_hall_has_no_seats(self):
        assert generate_seats("movie", "hallA", "standard", 0) == []

    def test_unknown_event_type_is_rejected(self):
        with pytest.raises(ValueError):
            generate_seats("concert", "hallA", "standard", 10)


class TestBookedFlags:
    def test_is_booked_matches_booked_list(self):
        booked = ["HALLA-1", "HALLA-2", "NOT-A-SEAT"]
        seats = generate_seats("movie", "hallA", "standard", 48, booked_seat_ids=booked)
        for seat in seats:
            assert seat.isBooked == (seat.id in booked)
        assert sum(seat.isBooked for seat in seats) == 2

    def test_vip_booked_flags(self):
        seats = generate_seats("match", "vip_hall", "vip", 22, booked_seat_ids=["S2_3", "B6"])
        assert {s.id for s in seats if s.isBooked} == {"S2_3", "B6"}


class TestPricing:
    def test_prices_come_from_the_category_tier(self):
        seats = generate_seats("movie", "vip_hall", "vip", 22, VIP_MOVIE_PRICING)
        prices = {seat.category: seat.price for seat in seats}
        assert prices == {"vipSingle": 7500, "vipCouple": 15000, "vipFamily": 30000}

    def test_missing_tier_prices_seat_at_zero(self):
        seats = generate_seats("match", "vip_hall", "vip", 22, {"vipSofaSeats": {"price": 2500, "count": 10}})
        assert all(seat.price == 0 for seat in seats if seat.category == "regular")
        assert all(seat.price == 2500 for seat in seats if seat.category == "sofa")

    def test_required_pricing_keys(self):
        assert required_pricing_keys("match", "vip") == ["vipSofaSeats", "vipRegularSeats"]
        assert required_pricing_keys("match", "standard") == ["standardMatchSeats"]
        assert required_pricing_keys("movie", "standard") == ["standardSingle"]


class TestLayoutOverrides:
    def test_custom_layout_table_replaces_fixed_counts(self):
        layouts = {("movie", "vip"): (SeatBlock("vipSingle", "vipSingle", rows=("R",), per_row=3),)}
        seats = generate_seats("movie", "vip_hall", "vip", 3, VIP_MOVIE_PRICING, layouts=layouts)
        assert [s.id for s in seats] == ["R1", "R2", "R3"]
        assert all(s.price == 7500 for s in seats)


class TestHelpers:
    def test_generate_event_seats_reads_documents(self):
        event = {
            "event_type": "movie",
            "pricing": {"standardSingle": {"price": 2500, "count": 48}},
            "bookedSeats": ["HALLA-1", "HALLA-2"],
        }
        hall = {"_id": "hallA", "name": "Hall A", "capacity": 48, "type": "standard"}
        seats = generate_event_seats(event, hall)
        assert len(seats) == 48
        assert [s.id for s in seats if s.isBooked] == ["HALLA-1", "HALLA-2"]
        assert {s.price for s in seats} == {2500}

    def test_single_selection_only_for_vip_movies(self):
        assert is_single_selection("movie", "vip")
        assert not is_single_selection("match", "vip")
        assert not is_single_selection("movie", "standard")

    def test_seat_type_names(self):
        assert seat_type_name("sofa") == "VIP Sofa Seat"
        assert seat_type_name("standardSingle") == "Standard Single Seat"
        assert seat_type_name("mystery") == "mystery"

    def test_layout_warnings_flag_vip_capacity_divergence(self):
        hall = {"_id": "vip_hall", "capacity": 22, "type": "vip"}
        warnings = layout_warnings("movie", hall, VIP_MOVIE_PRICING)
        assert any("41 seats" in w for w in warnings)
        assert any("sum to 48" in w for w in warnings)

    def test_layout_warnings_clean_for_consistent_standard_hall(self):
        hall = {"_id": "hallA", "capacity": 48, "type": "standard"}
        assert layout_warnings("movie", hall, {"standardSingle": {"price": 2500, "count": 48}}) == []
