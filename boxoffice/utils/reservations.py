# boxoffice/utils/reservations.py
"""Seat claims and booking records.

A booking is written in two steps that never leave the event and the
booking out of step:

1. claim: one conditional update on the event document appends the seats
   only if none of them is already in ``bookedSeats``. MongoDB applies a
   single-document update atomically, so two requests racing for the same
   seat cannot both match.
2. record: insert the booking. If that fails the claimed seats are pulled
   back out before the error propagates.

Cancelling a booking pulls its seats from the event so they can be sold
again. Pending gateway bookings hold their seats until ``holdExpiresAt``;
lapsed holds are cancelled the next time the event is booked or its seat
map is read.
"""

import logging
import secrets
import time
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterable, List, Optional

from bson import ObjectId
from decouple import config
from pymongo import ReturnDocument

from boxoffice.database import BOOKINGS, EVENTS
from boxoffice.errors import (
    BookingAlreadyCancelledError,
    BookingNotFoundError,
    EventNotBookableError,
    EventNotFoundError,
    SeatUnavailableError,
)
from boxoffice.models.booking import BookingCreate
from boxoffice.utils.catalog import fetch_event_and_hall
from boxoffice.utils.documents import parse_object_id
from boxoffice.utils.pricing import calculate_total_price, check_client_figures
from boxoffice.utils.seating import generate_event_seats, is_single_selection, seat_type_name
from boxoffice.utils.selection import build_selection
from boxoffice.utils.sequences import next_booking_code

logger = logging.getLogger(__name__)

# Payment methods settled later through the gateway; their seats are held
# by a pending booking until verification.
DEFERRED_PAYMENT_METHODS = {"monnify"}
HOLD_MINUTES = config("HOLD_MINUTES", default=15, cast=int)


def utcnow_naive() -> datetime:
    # BSON dates are stored and returned as naive UTC
    return datetime.now(timezone.utc).replace(tzinfo=None)


def new_payment_reference() -> str:
    return f"BOX-{int(time.time() * 1000)}-{secrets.token_hex(6)}"


async def claim_seats(db, event_id: ObjectId, seat_ids: List[str]) -> None:
    """Append seats to the event unless any of them is already booked."""
    result = await db[EVENTS].update_one(
        {"_id": event_id, "status": "active", "bookedSeats": {"$nin": seat_ids}},
        {
            "$push": {"bookedSeats": {"$each": seat_ids}},
            "$set": {"updatedAt": datetime.now(timezone.utc)},
        },
    )
    if result.matched_count == 1:
        logger.info("Claimed seats %s on event %s", seat_ids, event_id)
        return

    # Work out why the guard refused the update
    event = await db[EVENTS].find_one({"_id": event_id}, {"status": 1, "bookedSeats": 1})
    if not event:
        raise EventNotFoundError(str(event_id))
    if event.get("status") != "active":
        raise EventNotBookableError(str(event_id), event.get("status", "unknown"))
    taken = set(event.get("bookedSeats") or []) & set(seat_ids)
    logger.info("Seat claim on event %s refused, already booked: %s", event_id, sorted(taken))
    raise SeatUnavailableError(taken or seat_ids)


async def release_seats(db, event_id: ObjectId, seat_ids: Iterable[str]) -> bool:
    seat_ids = list(seat_ids)
    result = await db[EVENTS].update_one(
        {"_id": event_id},
        {
            "$pullAll": {"bookedSeats": seat_ids},
            "$set": {"updatedAt": datetime.now(timezone.utc)},
        },
    )
    if result.matched_count == 0:
        logger.warning("Could not release seats %s: event %s no longer exists", seat_ids, event_id)
        return False
    logger.info("Released seats %s on event %s", seat_ids, event_id)
    return True


async def _insert_booking(db, booking_data: Dict[str, Any]) -> None:
    await db[BOOKINGS].insert_one(booking_data)


async def create_booking(db, request: BookingCreate) -> Dict[str, Any]:
    """Validate, price, claim and record a booking; return the stored document."""
    await release_expired_holds(db, request.eventId)
    event, hall = await fetch_event_and_hall(db, request.eventId)
    if event.get("status") != "active":
        raise EventNotBookableError(request.eventId, event.get("status", "unknown"))

    seats = generate_event_seats(event, hall)
    selection = build_selection(
        seats,
        request.seats,
        single=is_single_selection(event["event_type"], hall.get("type", "standard")),
    )
    pricing_details = calculate_total_price(selection.selected_seats)
    check_client_figures(pricing_details, {
        "amount": request.amount,
        "processingFee": request.processingFee,
        "totalAmount": request.totalAmount,
    })

    seat_ids = list(selection.selected)
    await claim_seats(db, event["_id"], seat_ids)

    try:
        now = datetime.now(timezone.utc)
        deferred = request.paymentMethod in DEFERRED_PAYMENT_METHODS
        booking_data = {
            "_id": ObjectId(),
            "bookingCode": await next_booking_code(db),
            "customerName": request.customerName,
            "customerEmail": request.customerEmail,
            "customerPhone": request.customerPhone,
            "eventId": str(event["_id"]),
            "eventTitle": event.get("title", ""),
            "eventType": event["event_type"],
            "seats": seat_ids,
            "seatType": seat_type_name(selection.category),
            **pricing_details,
            "status": "pending" if deferred else "confirmed",
            "bookingDate": now.date().isoformat(),
            "bookingTime": now.strftime("%H:%M:%S"),
            "paymentMethod": request.paymentMethod,
            "paymentReference": new_payment_reference() if deferred else None,
            "holdExpiresAt": utcnow_naive() + timedelta(minutes=HOLD_MINUTES) if deferred else None,
            "createdAt": now,
        }
        await _insert_booking(db, booking_data)
    except Exception:
        logger.error("Recording booking on event %s failed; releasing seats %s", event["_id"], seat_ids)
        await release_seats(db, event["_id"], seat_ids)
        raise

    logger.info(
        "Booking %s %s for %s on event %s (%s)",
        booking_data["bookingCode"], booking_data["status"], request.customerEmail,
        booking_data["eventId"], ", ".join(seat_ids),
    )
    return booking_data


async def cancel_booking(db, booking_id: str) -> Dict[str, Any]:
    """Mark a booking cancelled and free its seats."""
    oid = parse_object_id(booking_id, "Booking ID")
    booking = await db[BOOKINGS].find_one_and_update(
        {"_id": oid, "status": {"$ne": "cancelled"}},
        {"$set": {"status": "cancelled", "updatedAt": datetime.now(timezone.utc)}},
        return_document=ReturnDocument.AFTER,
    )
    if booking is None:
        if await db[BOOKINGS].find_one({"_id": oid}, {"_id": 1}):
            raise BookingAlreadyCancelledError(booking_id)
        raise BookingNotFoundError(booking_id)

    await _release_booking_seats(db, booking)
    logger.info("Booking %s cancelled", booking.get("bookingCode", booking_id))
    return booking


async def _release_booking_seats(db, booking: Dict[str, Any]) -> None:
    if ObjectId.is_valid(booking["eventId"]):
        await release_seats(db, ObjectId(booking["eventId"]), booking["seats"])


async def release_expired_holds(db, event_id: Optional[str] = None) -> int:
    """Cancel pending bookings whose hold has lapsed and free their seats.

    Returns the number of bookings released. A booking confirmed between the
    lookup and the update is left alone.
    """
    query = {"status": "pending", "holdExpiresAt": {"$lt": utcnow_naive()}}
    if event_id is not None:
        query["eventId"] = event_id
    lapsed = await db[BOOKINGS].find(query, {"_id": 1}).to_list(length=None)

    released = 0
    for doc in lapsed:
        booking = await db[BOOKINGS].find_one_and_update(
            {"_id": doc["_id"], "status": "pending"},
            {"$set": {
                "status": "cancelled",
                "cancelReason": "hold_expired",
                "updatedAt": datetime.now(timezone.utc),
            }},
            return_document=ReturnDocument.AFTER,
        )
        if booking is None:
            continue
        await _release_booking_seats(db, booking)
        logger.info("Hold on booking %s expired; seats %s released", booking.get("bookingCode"), booking["seats"])
        released += 1
    return released


async def confirm_booking(db, booking_id: ObjectId, extra: Optional[Dict[str, Any]] = None) -> Optional[Dict[str, Any]]:
    """Move a pending booking to confirmed; None if it was not pending."""
    fields = {"status": "confirmed", "updatedAt": datetime.now(timezone.utc)}
    fields.update(extra or {})
    booking = await db[BOOKINGS].find_one_and_update(
        {"_id": booking_id, "status": "pending"},
        {"$set": fields},
        return_document=ReturnDocument.AFTER,
    )
    if booking:
        logger.info("Booking %s confirmed", booking.get("bookingCode", booking_id))
    return booking
