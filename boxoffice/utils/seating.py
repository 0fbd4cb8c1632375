# boxoffice/utils/seating.py
"""Seat layout generation.

One generator serves every caller that needs a seat map: the public seat
view, quoting, booking and admin seat marking. VIP halls use the fixed
block layouts below; standard halls get one single seat per unit of hall
capacity, numbered ``{HALLID}-{n}``.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from boxoffice.models.event import Seat

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SeatBlock:
    """A run of same-category seats laid out over one or more rows."""

    category: str
    pricing_key: str
    rows: Tuple[str, ...]
    per_row: int
    separator: str = ""

    @property
    def size(self) -> int:
        return len(self.rows) * self.per_row

    def seat_ids(self) -> List[Tuple[str, str, int]]:
        return [
            (f"{row}{self.separator}{n}", row, n)
            for row in self.rows
            for n in range(1, self.per_row + 1)
        ]


# Fixed VIP layouts. These do not follow Hall.capacity (see DESIGN.md).
VIP_MATCH_LAYOUT = (
    SeatBlock("sofa", "vipSofaSeats", rows=("S1", "S2"), per_row=5, separator="_"),
    SeatBlock("regular", "vipRegularSeats", rows=("A", "B"), per_row=6),
)

VIP_MOVIE_LAYOUT = (
    SeatBlock("vipSingle", "vipSingle", rows=("S",), per_row=20),
    SeatBlock("vipCouple", "vipCouple", rows=("C",), per_row=7),
    SeatBlock("vipFamily", "vipFamily", rows=("F",), per_row=14),
)

FIXED_LAYOUTS: Dict[Tuple[str, str], Tuple[SeatBlock, ...]] = {
    ("match", "vip"): VIP_MATCH_LAYOUT,
    ("movie", "vip"): VIP_MOVIE_LAYOUT,
}

# Standard halls: category and pricing key per event type
STANDARD_CATEGORIES = {
    "match": ("standardMatch", "standardMatchSeats"),
    "movie": ("standardSingle", "standardSingle"),
}

SEAT_TYPE_NAMES = {
    "sofa": "VIP Sofa Seat",
    "regular": "VIP Regular Seat",
    "vipSingle": "VIP Single Seat",
    "vipCouple": "VIP Couple Seat",
    "vipFamily": "VIP Family Seat",
    "standardMatch": "Standard Match Seat",
    "standardSingle": "Standard Single Seat",
    "standardCouple": "Standard Couple Seat",
    "standardFamily": "Standard Family Seat",
}


def seat_type_name(category: str) -> str:
    """Human-readable name for a seat category."""
    return SEAT_TYPE_NAMES.get(category, category)


def is_single_selection(event_type: str, hall_type: str) -> bool:
    """VIP movie seats are sold one pod or family block at a time."""
    return event_type == "movie" and hall_type == "vip"


def _tier_price(pricing: Optional[Mapping[str, Any]], key: str) -> float:
    tier = (pricing or {}).get(key)
    if tier is None:
        return 0
    if isinstance(tier, Mapping):
        return tier.get("price") or 0
    return getattr(tier, "price", 0) or 0


def generate_seats(
    event_type: str,
    hall_id: str,
    hall_type: str,
    hall_capacity: int,
    pricing: Optional[Mapping[str, Any]] = None,
    booked_seat_ids: Iterable[str] = (),
    layouts: Mapping[Tuple[str, str], Tuple[SeatBlock, ...]] = FIXED_LAYOUTS,
) -> List[Seat]:
    """Build the ordered seat map for an event.

    Seats whose pricing tier is missing are priced at 0. ``isBooked`` is a
    set-membership check against ``booked_seat_ids``.
    """
    booked = set(booked_seat_ids)
    blocks = layouts.get((event_type, hall_type))

    if blocks is not None:
        seats = []
        for block in blocks:
            price = _tier_price(pricing, block.pricing_key)
            for seat_id, row, number in block.seat_ids():
                seats.append(Seat(
                    id=seat_id,
                    category=block.category,
                    price=price,
                    isBooked=seat_id in booked,
                    row=row,
                    number=number,
                ))
        return seats

    if event_type not in STANDARD_CATEGORIES:
        raise ValueError(f"Unsupported event type: {event_type}")

    category, pricing_key = STANDARD_CATEGORIES[event_type]
    price = _tier_price(pricing, pricing_key)
    prefix = hall_id.upper()
    return [
        Seat(
            id=f"{prefix}-{n}",
            category=category,
            price=price,
            isBooked=f"{prefix}-{n}" in booked,
            number=n,
        )
        for n in range(1, max(hall_capacity, 0) + 1)
    ]


def generate_event_seats(event: Mapping[str, Any], hall: Mapping[str, Any]) -> List[Seat]:
    """Seat map for an event document and its hall document."""
    return generate_seats(
        event_type=event["event_type"],
        hall_id=str(hall["_id"]),
        hall_type=hall.get("type", "standard"),
        hall_capacity=hall.get("capacity", 0),
        pricing=event.get("pricing"),
        booked_seat_ids=event.get("bookedSeats") or [],
    )


def layout_size(event_type: str, hall_type: str, hall_capacity: int) -> int:
    blocks = FIXED_LAYOUTS.get((event_type, hall_type))
    if blocks is None:
        return max(hall_capacity, 0)
    return sum(block.size for block in blocks)


def required_pricing_keys(event_type: str, hall_type: str) -> List[str]:
    blocks = FIXED_LAYOUTS.get((event_type, hall_type))
    if blocks is None:
        return [STANDARD_CATEGORIES[event_type][1]]
    return [block.pricing_key for block in blocks]


def layout_warnings(event_type: str, hall: Mapping[str, Any], pricing: Mapping[str, Any]) -> List[str]:
    """Describe where an event's pricing or the fixed layout disagree with its hall.

    These are reported, not rejected: VIP layouts are fixed regardless of
    hall capacity.
    """
    hall_type = hall.get("type", "standard")
    capacity = hall.get("capacity", 0)
    warnings = []

    missing = [key for key in required_pricing_keys(event_type, hall_type) if key not in pricing]
    if missing:
        warnings.append(f"pricing has no tier for {', '.join(missing)}; those seats are priced at 0")

    size = layout_size(event_type, hall_type, capacity)
    if size != capacity:
        warnings.append(f"{hall_type} {event_type} layout has {size} seats but hall capacity is {capacity}")

    counted = sum(_tier_count(tier) for tier in pricing.values())
    if counted != capacity:
        warnings.append(f"pricing counts sum to {counted} but hall capacity is {capacity}")

    for warning in warnings:
        logger.warning("Hall %s: %s", hall.get("_id"), warning)
    return warnings


def _tier_count(tier: Any) -> int:
    if isinstance(tier, Mapping):
        return tier.get("count") or 0
    return getattr(tier, "count", 0) or 0
