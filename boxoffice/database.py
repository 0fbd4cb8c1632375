# boxoffice/database.py
import logging

from motor.motor_asyncio import AsyncIOMotorClient
from decouple import config
from pymongo import ASCENDING

logger = logging.getLogger(__name__)

MONGO_DETAILS = config("MONGO_URI", default="mongodb://localhost:27017")
MONGO_DB = config("MONGO_DB", default="boxoffice")
client = AsyncIOMotorClient(MONGO_DETAILS)
database = client[MONGO_DB]

# Collection names
HALLS = "halls"
EVENTS = "events"
BOOKINGS = "bookings"
ADMINS = "admins"
COUNTERS = "counters"


def get_database():
    """FastAPI dependency returning the application database."""
    return database


async def ensure_indexes(db):
    await db[BOOKINGS].create_index([("bookingCode", ASCENDING)], unique=True, sparse=True)
    await db[BOOKINGS].create_index([("paymentReference", ASCENDING)], sparse=True)
    await db[BOOKINGS].create_index([("customerEmail", ASCENDING)])
    await db[EVENTS].create_index([("hall_id", ASCENDING)])
    await db[ADMINS].create_index([("email", ASCENDING)], unique=True)
    await db[ADMINS].create_index([("username", ASCENDING)], unique=True)
    logger.info("MongoDB indexes ensured on database %s", db.name)
