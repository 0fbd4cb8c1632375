# boxoffice/routes/events.py
import logging
from datetime import datetime, timezone
from typing import List, Optional

from bson import ObjectId
from fastapi import APIRouter, HTTPException, Depends, Query

from boxoffice.database import EVENTS, get_database
from boxoffice.errors import SeatNotFoundError
from boxoffice.models.event import (
    BookedSeatsUpdate,
    Event,
    EventCreate,
    EventStatus,
    EventUpdate,
    Quote,
    QuoteRequest,
    SeatMap,
)
from boxoffice.utils.auth_utils import get_current_admin
from boxoffice.utils.catalog import fetch_event, fetch_event_and_hall, fetch_hall
from boxoffice.utils.documents import convert_objectid_to_str
from boxoffice.utils.pricing import calculate_total_price
from boxoffice.utils.reservations import release_expired_holds
from boxoffice.utils.seating import (
    generate_event_seats,
    is_single_selection,
    layout_size,
    layout_warnings,
    seat_type_name,
)
from boxoffice.utils.selection import build_selection

logger = logging.getLogger(__name__)

router = APIRouter()


def _event_fields(event: EventCreate, hall) -> dict:
    event_data = event.model_dump(mode="json")
    event_data["hall_id"] = str(hall["_id"])
    if event.total_seats is None:
        event_data["total_seats"] = layout_size(event.event_type, hall["type"], hall["capacity"])
    layout_warnings(event.event_type, hall, event_data["pricing"])
    return event_data


@router.get("", response_model=List[Event])
async def list_events(status: Optional[EventStatus] = Query(None), db=Depends(get_database)):
    query = {"status": status} if status else {}
    events = await db[EVENTS].find(query).sort([("event_date", 1), ("event_time", 1)]).to_list(length=None)
    return [Event(**convert_objectid_to_str(event)) for event in events]


@router.post("", response_model=Event, status_code=201)
async def create_event(event: EventCreate, admin=Depends(get_current_admin), db=Depends(get_database)):
    hall = await fetch_hall(db, event.hall_id)

    now = datetime.now(timezone.utc)
    event_data = _event_fields(event, hall)
    event_data.update({"_id": ObjectId(), "bookedSeats": [], "createdAt": now, "updatedAt": now})
    await db[EVENTS].insert_one(event_data)
    logger.info("Event %s (%s) created by %s", event_data["_id"], event.title, admin["email"])

    return Event(**convert_objectid_to_str(event_data))


@router.get("/{event_id}", response_model=Event)
async def get_event(event_id: str, db=Depends(get_database)):
    event = await fetch_event(db, event_id)
    return Event(**convert_objectid_to_str(event))


@router.put("/{event_id}", response_model=Event)
async def update_event(event_id: str, event: EventUpdate, admin=Depends(get_current_admin), db=Depends(get_database)):
    existing = await fetch_event(db, event_id)
    hall = await fetch_hall(db, event.hall_id)

    layout_changed = (
        str(hall["_id"]) != str(existing["hall_id"]) or event.event_type != existing["event_type"]
    )
    if layout_changed and existing.get("bookedSeats"):
        raise HTTPException(
            status_code=409,
            detail="Cannot change the hall or event type of an event with booked seats",
        )

    event_data = _event_fields(event, hall)
    event_data["updatedAt"] = datetime.now(timezone.utc)
    # bookedSeats is only changed through bookings and seat marking
    await db[EVENTS].update_one({"_id": existing["_id"]}, {"$set": event_data})
    logger.info("Event %s updated by %s", event_id, admin["email"])

    return Event(**convert_objectid_to_str({**existing, **event_data}))


@router.patch("/{event_id}")
async def mark_booked_seats(
    event_id: str,
    update: BookedSeatsUpdate,
    admin=Depends(get_current_admin),
    db=Depends(get_database),
):
    """Mark seats as booked without a booking record (box office holds, damaged seats)."""
    event, hall = await fetch_event_and_hall(db, event_id)
    layout_ids = {seat.id for seat in generate_event_seats(event, hall)}
    unknown = [seat_id for seat_id in update.newBookedSeats if seat_id not in layout_ids]
    if unknown:
        raise SeatNotFoundError(unknown)

    await db[EVENTS].update_one(
        {"_id": event["_id"]},
        {
            "$addToSet": {"bookedSeats": {"$each": update.newBookedSeats}},
            "$set": {"updatedAt": datetime.now(timezone.utc)},
        },
    )
    updated = await fetch_event(db, event_id)
    logger.info("Seats %s marked booked on event %s by %s", update.newBookedSeats, event_id, admin["email"])
    return {"message": "Event booked seats updated successfully", "bookedSeats": updated.get("bookedSeats", [])}


@router.delete("/{event_id}")
async def delete_event(event_id: str, admin=Depends(get_current_admin), db=Depends(get_database)):
    event = await fetch_event(db, event_id)
    await db[EVENTS].delete_one({"_id": event["_id"]})
    logger.info("Event %s deleted by %s", event_id, admin["email"])
    return {"message": "Event deleted successfully"}


@router.get("/{event_id}/seats", response_model=SeatMap)
async def get_event_seats(event_id: str, db=Depends(get_database)):
    await release_expired_holds(db, event_id)
    event, hall = await fetch_event_and_hall(db, event_id)
    hall_type = hall.get("type", "standard")
    return SeatMap(
        event_id=event_id,
        hall_id=str(hall["_id"]),
        hall_type=hall_type,
        singleSelection=is_single_selection(event["event_type"], hall_type),
        seats=generate_event_seats(event, hall),
    )


@router.post("/{event_id}/quote", response_model=Quote)
async def quote_seats(event_id: str, request: QuoteRequest, db=Depends(get_database)):
    event, hall = await fetch_event_and_hall(db, event_id)
    selection = build_selection(
        generate_event_seats(event, hall),
        request.seats,
        single=is_single_selection(event["event_type"], hall.get("type", "standard")),
    )
    return Quote(
        seats=list(selection.selected),
        category=selection.category,
        seatType=seat_type_name(selection.category),
        **calculate_total_price(selection.selected_seats),
    )
