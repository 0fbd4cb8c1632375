"""Tests for seat selection rules."""

import pytest

from boxoffice.errors import (
    SeatCategoryConflictError,
    SeatNotFoundError,
    SeatSelectionError,
    SeatUnavailableError,
)
from boxoffice.utils.seating import generate_seats
from boxoffice.utils.selection import SeatSelection, build_selection

MATCH_PRICING = {
    "vipSofaSeats": {"price": 2500, "count": 10},
    "vipRegularSeats": {"price": 2000, "count": 12},
}


@pytest.fixture
def vip_match_seats():
    return generate_seats("match", "vip_hall", "vip", 22, MATCH_PRICING, booked_seat_ids=["A6"])


@pytest.fixture
def vip_movie_seats():
    pricing = {"vipSingle": {"price": 7500, "count": 20}, "vipCouple": {"price": 15000, "count": 14}}
    return generate_seats("movie", "vip_hall", "vip", 41, pricing)


class TestToggle:
    """Interactive selection, one click at a time."""

    def test_first_seat_locks_the_category(self, vip_match_seats):
        selection = SeatSelection(vip_match_seats)
        assert selection.toggle("S1_1").accepted
        assert selection.category == "sofa"

        outcome = selection.toggle("A1")
        assert not outcome.accepted
        assert outcome.message == (
            "Cannot mix VIP Sofa Seat and VIP Regular Seat seats in one booking. "
            "Clear your selection to switch."
        )
        assert selection.selected == ("S1_1",)

    def test_same_category_seats_accumulate(self, vip_match_seats):
        selection = SeatSelection(vip_match_seats)
        for seat_id in ("A1", "A2", "B3"):
            assert selection.toggle(seat_id).accepted
        assert selection.selected == ("A1", "A2", "B3")
        assert selection.total_price == 6000
        assert len(selection) == 3

    def test_deselecting_last_seat_releases_the_lock(self, vip_match_seats):
        selection = SeatSelection(vip_match_seats)
        selection.toggle("S1_1")
        selection.toggle("S1_1")
        assert selection.selected == ()
        assert selection.category is None
        assert selection.toggle("A1").accepted

    def test_clear_resets_selection(self, vip_match_seats):
        selection = SeatSelection(vip_match_seats)
        selection.toggle("S1_1")
        selection.clear()
        assert selection.toggle("A1").accepted

    def test_booked_seat_is_rejected(self, vip_match_seats):
        outcome = SeatSelection(vip_match_seats).toggle("A6")
        assert not outcome.accepted
        assert outcome.message == "Seat already booked."

    def test_unknown_seat_is_rejected(self, vip_match_seats):
        outcome = SeatSelection(vip_match_seats).toggle("Z99")
        assert not outcome.accepted
        assert outcome.message == "Seat not found."

    def test_single_mode_replaces_previous_pick(self, vip_movie_seats):
        selection = SeatSelection(vip_movie_seats, single=True)
        selection.toggle("S1")
        assert selection.toggle("C2").accepted
        assert selection.selected == ("C2",)
        assert selection.total_price == 15000


class TestBuildSelection:
    def test_valid_selection(self, vip_match_seats):
        selection = build_selection(vip_match_seats, ["S1_1", "S1_2", "S1_1"])
        assert selection.selected == ("S1_1", "S1_2")
        assert selection.category == "sofa"

    def test_mixed_categories_raise(self, vip_match_seats):
        with pytest.raises(SeatCategoryConflictError):
            build_selection(vip_match_seats, ["S1_1", "A1"])

    def test_booked_seat_raises(self, vip_match_seats):
        with pytest.raises(SeatUnavailableError) as excinfo:
            build_selection(vip_match_seats, ["A5", "A6"])
        assert excinfo.value.seat_ids == ["A6"]

    def test_unknown_seat_raises(self, vip_match_seats):
        with pytest.raises(SeatNotFoundError):
            build_selection(vip_match_seats, ["A1", "Q1"])

    def test_empty_selection_raises(self, vip_match_seats):
        with pytest.raises(SeatSelectionError):
            build_selection(vip_match_seats, [])

    def test_single_mode_allows_one_unit(self, vip_movie_seats):
        assert build_selection(vip_movie_seats, ["F3"], single=True).selected == ("F3",)
        with pytest.raises(SeatSelectionError):
            build_selection(vip_movie_seats, ["S1", "S2"], single=True)
