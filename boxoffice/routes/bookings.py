# boxoffice/routes/bookings.py
import logging
import re
from typing import List, Optional

from bson import ObjectId
from fastapi import APIRouter, HTTPException, Depends, Query

from boxoffice.database import BOOKINGS, EVENTS, HALLS, get_database
from boxoffice.errors import BookingNotFoundError
from boxoffice.models.booking import Booking, BookingCreate, BookingSummary
from boxoffice.utils.auth_utils import get_current_admin, get_optional_admin
from boxoffice.utils.documents import convert_objectid_to_str, id_filter, parse_object_id
from boxoffice.utils.reservations import DEFERRED_PAYMENT_METHODS, cancel_booking, create_booking

logger = logging.getLogger(__name__)

router = APIRouter()


async def _hall_names(db, events) -> dict:
    hall_ids = {str(event.get("hall_id")) for event in events.values() if event.get("hall_id")}
    names = {}
    for hall_id in hall_ids:
        hall = await db[HALLS].find_one(id_filter(hall_id), {"name": 1})
        if hall:
            names[hall_id] = hall.get("name", hall_id)
    return names


@router.post("", response_model=Booking, status_code=201)
async def book_seats(request: BookingCreate, admin=Depends(get_optional_admin), db=Depends(get_database)):
    # Only box office staff may record a booking as already paid
    if admin is None and request.paymentMethod not in DEFERRED_PAYMENT_METHODS:
        logger.info("Anonymous %s booking for %s taken as monnify", request.paymentMethod, request.customerEmail)
        request = request.model_copy(update={"paymentMethod": "monnify"})
    booking = await create_booking(db, request)
    return Booking(**convert_objectid_to_str(booking))


@router.get("", response_model=List[BookingSummary])
async def list_bookings(
    customerEmail: Optional[str] = Query(None),
    eventId: Optional[str] = Query(None),
    search: Optional[str] = Query(None, description="Matches customer name or email"),
    admin=Depends(get_optional_admin),
    db=Depends(get_database),
):
    # Anonymous callers may only look up their own bookings by email
    if admin is None and not customerEmail:
        raise HTTPException(status_code=401, detail="Not authenticated")

    query = {}
    if customerEmail:
        query["customerEmail"] = {"$regex": f"^{re.escape(customerEmail.strip())}$", "$options": "i"}
    if eventId:
        query["eventId"] = eventId
    if search and admin is not None:
        pattern = re.escape(search.strip())
        query["$or"] = [
            {"customerName": {"$regex": pattern, "$options": "i"}},
            {"customerEmail": {"$regex": pattern, "$options": "i"}},
        ]

    bookings = await db[BOOKINGS].find(query).sort("createdAt", -1).to_list(length=None)

    event_ids = {b["eventId"] for b in bookings if ObjectId.is_valid(b.get("eventId", ""))}
    events = {}
    if event_ids:
        found = await db[EVENTS].find(
            {"_id": {"$in": [ObjectId(e) for e in event_ids]}}, {"hall_id": 1}
        ).to_list(length=None)
        events = {str(event["_id"]): event for event in found}
    hall_names = await _hall_names(db, events)

    summaries = []
    for booking in bookings:
        event = events.get(booking["eventId"], {})
        summaries.append(BookingSummary(
            **convert_objectid_to_str(booking),
            eventHall=hall_names.get(str(event.get("hall_id")), "N/A"),
        ))
    return summaries


@router.get("/{booking_id}", response_model=Booking)
async def get_booking(booking_id: str, db=Depends(get_database)):
    booking = await db[BOOKINGS].find_one({"_id": parse_object_id(booking_id, "Booking ID")})
    if not booking:
        raise BookingNotFoundError(booking_id)
    return Booking(**convert_objectid_to_str(booking))


@router.post("/{booking_id}/cancel", response_model=Booking)
async def cancel(booking_id: str, admin=Depends(get_current_admin), db=Depends(get_database)):
    booking = await cancel_booking(db, booking_id)
    logger.info("Booking %s cancelled by %s", booking_id, admin["email"])
    return Booking(**convert_objectid_to_str(booking))
