# boxoffice/routes/halls.py
import logging
from datetime import datetime, timezone
from typing import List

from bson import ObjectId
from fastapi import APIRouter, HTTPException, Depends, status

from boxoffice.database import EVENTS, HALLS, get_database
from boxoffice.errors import HallInUseError
from boxoffice.models.hall import Hall, HallCreate, HallUpdate
from boxoffice.utils.auth_utils import get_current_admin
from boxoffice.utils.catalog import fetch_hall
from boxoffice.utils.documents import convert_objectid_to_str
from boxoffice.utils.seating import generate_event_seats, layout_size

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=List[Hall])
async def list_halls(db=Depends(get_database)):
    halls = await db[HALLS].find({}).sort("name", 1).to_list(length=None)
    return [Hall(**convert_objectid_to_str(hall)) for hall in halls]


@router.post("", response_model=Hall, status_code=status.HTTP_201_CREATED)
async def create_hall(hall: HallCreate, admin=Depends(get_current_admin), db=Depends(get_database)):
    hall_key = hall.hall_id or ObjectId()
    if hall.hall_id and await db[HALLS].find_one({"_id": hall.hall_id}):
        raise HTTPException(status_code=409, detail="Hall ID already exists")

    hall_data = hall.model_dump(exclude={"hall_id"})
    hall_data["_id"] = hall_key
    hall_data["createdAt"] = datetime.now(timezone.utc)
    await db[HALLS].insert_one(hall_data)
    logger.info("Hall %s (%s, %d seats) created by %s", hall_key, hall.type, hall.capacity, admin["email"])

    return Hall(**convert_objectid_to_str(hall_data))


@router.get("/{hall_id}", response_model=Hall)
async def get_hall(hall_id: str, db=Depends(get_database)):
    hall = await fetch_hall(db, hall_id)
    return Hall(**convert_objectid_to_str(hall))


@router.put("/{hall_id}", response_model=Hall)
async def update_hall(hall_id: str, hall: HallUpdate, admin=Depends(get_current_admin), db=Depends(get_database)):
    existing = await fetch_hall(db, hall_id)
    updated = {**existing, **hall.model_dump()}

    events = await db[EVENTS].find({"hall_id": str(existing["_id"])}).to_list(length=None)
    for event in events:
        layout = {seat.id for seat in generate_event_seats(event, updated)}
        dropped = sorted(set(event.get("bookedSeats") or []) - layout)
        if dropped:
            raise HTTPException(
                status_code=409,
                detail=f"Booked seats {', '.join(dropped)} of event {event.get('title', event['_id'])} are not in the new layout",
            )

    await db[HALLS].update_one(
        {"_id": existing["_id"]},
        {"$set": {**hall.model_dump(), "updatedAt": datetime.now(timezone.utc)}},
    )
    # Events sized from the old layout follow the hall
    for event in events:
        old_size = layout_size(event["event_type"], existing["type"], existing["capacity"])
        if event.get("total_seats") == old_size:
            await db[EVENTS].update_one(
                {"_id": event["_id"]},
                {"$set": {"total_seats": layout_size(event["event_type"], hall.type, hall.capacity)}},
            )
    logger.info("Hall %s updated by %s", hall_id, admin["email"])
    return Hall(**convert_objectid_to_str(updated))


@router.delete("/{hall_id}")
async def delete_hall(hall_id: str, admin=Depends(get_current_admin), db=Depends(get_database)):
    existing = await fetch_hall(db, hall_id)
    in_use = await db[EVENTS].count_documents({"hall_id": str(existing["_id"])})
    if in_use:
        raise HallInUseError(hall_id, in_use)

    await db[HALLS].delete_one({"_id": existing["_id"]})
    logger.info("Hall %s deleted by %s", hall_id, admin["email"])
    return {"message": "Hall deleted successfully"}
