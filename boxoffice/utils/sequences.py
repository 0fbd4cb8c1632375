# boxoffice/utils/sequences.py
from pymongo import ReturnDocument

from boxoffice.database import COUNTERS


async def get_next_sequence(db, name: str) -> int:
    """Atomically increment and return the next value of a named counter."""
    counter = await db[COUNTERS].find_one_and_update(
        {"_id": name},
        {"$inc": {"seq": 1}},
        upsert=True,
        return_document=ReturnDocument.AFTER,
    )
    return counter["seq"]


def format_booking_code(seq: int, prefix: str = "BK", pad: int = 0) -> str:
    """BK12345, or BK00012 with pad=5."""
    if pad > 0:
        return f"{prefix}{seq:0{pad}d}"
    return f"{prefix}{seq}"


async def next_booking_code(db) -> str:
    return format_booking_code(await get_next_sequence(db, "bookings"))
