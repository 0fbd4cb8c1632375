# boxoffice/utils/catalog.py
from typing import Any, Dict, Tuple

from boxoffice.database import EVENTS, HALLS
from boxoffice.errors import EventNotFoundError, HallNotFoundError
from boxoffice.utils.documents import id_filter, parse_object_id


async def fetch_hall(db, hall_id: str) -> Dict[str, Any]:
    hall = await db[HALLS].find_one(id_filter(hall_id))
    if not hall:
        raise HallNotFoundError(hall_id)
    return hall


async def fetch_event(db, event_id: str) -> Dict[str, Any]:
    event = await db[EVENTS].find_one({"_id": parse_object_id(event_id, "Event ID")})
    if not event:
        raise EventNotFoundError(event_id)
    return event


async def fetch_event_and_hall(db, event_id: str) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    event = await fetch_event(db, event_id)
    hall = await fetch_hall(db, str(event["hall_id"]))
    return event, hall
