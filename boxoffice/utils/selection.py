# boxoffice/utils/selection.py
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from boxoffice.errors import (
    SeatCategoryConflictError,
    SeatNotFoundError,
    SeatSelectionError,
    SeatUnavailableError,
)
from boxoffice.models.event import Seat
from boxoffice.utils.seating import seat_type_name


@dataclass(frozen=True)
class SelectionOutcome:
    accepted: bool
    message: Optional[str] = None


class SeatSelection:
    """Seats picked for one booking.

    All seats share the category of the first one picked. In single-selection
    mode (VIP movie halls) picking a seat replaces whatever was selected.
    """

    def __init__(self, seats: Iterable[Seat], single: bool = False) -> None:
        self._seats = {seat.id: seat for seat in seats}
        self._selected: List[str] = []
        self.single = single

    @property
    def selected(self) -> Tuple[str, ...]:
        return tuple(self._selected)

    @property
    def selected_seats(self) -> List[Seat]:
        return [self._seats[seat_id] for seat_id in self._selected]

    @property
    def category(self) -> Optional[str]:
        if not self._selected:
            return None
        return self._seats[self._selected[0]].category

    @property
    def total_price(self) -> float:
        return sum(seat.price for seat in self.selected_seats)

    def seat(self, seat_id: str) -> Optional[Seat]:
        return self._seats.get(seat_id)

    def __len__(self) -> int:
        return len(self._selected)

    def toggle(self, seat_id: str) -> SelectionOutcome:
        seat = self._seats.get(seat_id)
        if seat is None:
            return SelectionOutcome(False, "Seat not found.")
        if seat.isBooked:
            return SelectionOutcome(False, "Seat already booked.")

        if seat_id in self._selected:
            self._selected.remove(seat_id)
            return SelectionOutcome(True)

        if self.single:
            self._selected = [seat_id]
            return SelectionOutcome(True)

        locked = self.category
        if locked is not None and seat.category != locked:
            return SelectionOutcome(
                False,
                f"Cannot mix {seat_type_name(locked)} and {seat_type_name(seat.category)} "
                "seats in one booking. Clear your selection to switch.",
            )

        self._selected.append(seat_id)
        return SelectionOutcome(True)

    def clear(self) -> None:
        self._selected = []


def build_selection(seats: Iterable[Seat], seat_ids: Iterable[str], single: bool = False) -> SeatSelection:
    """Strict form of the selection rules, used before pricing or committing.

    Raises instead of returning an outcome, so a request that the seat map
    would refuse cannot reach the database.
    """
    selection = SeatSelection(seats, single=single)
    requested = list(dict.fromkeys(seat_ids))
    if not requested:
        raise SeatSelectionError("Select at least one seat")
    if single and len(requested) > 1:
        raise SeatSelectionError("Only one VIP seat unit can be booked at a time")

    unknown = [seat_id for seat_id in requested if selection.seat(seat_id) is None]
    if unknown:
        raise SeatNotFoundError(unknown)
    taken = [seat_id for seat_id in requested if selection.seat(seat_id).isBooked]
    if taken:
        raise SeatUnavailableError(taken)

    for seat_id in requested:
        locked = selection.category
        outcome = selection.toggle(seat_id)
        if not outcome.accepted:
            raise SeatCategoryConflictError(
                seat_type_name(locked),
                seat_type_name(selection.seat(seat_id).category),
            )
    return selection
