# boxoffice/utils/documents.py
from typing import Any, Dict

from bson import ObjectId

from boxoffice.errors import InvalidObjectIdError


def convert_objectid_to_str(document):
    """Convert ObjectId fields in a MongoDB document to strings."""
    if isinstance(document, dict):
        return {k: str(v) if isinstance(v, ObjectId) else v for k, v in document.items()}
    return document


def parse_object_id(value: str, label: str = "ID") -> ObjectId:
    if not ObjectId.is_valid(value):
        raise InvalidObjectIdError(label)
    return ObjectId(value)


def id_filter(value: str) -> Dict[str, Any]:
    """Match an `_id` that may be stored as an ObjectId or as a plain slug.

    Halls can be keyed by readable slugs ("hallA", "vip_hall") because
    standard seat IDs are derived from the hall ID.
    """
    if ObjectId.is_valid(value):
        return {"_id": {"$in": [ObjectId(value), value]}}
    return {"_id": value}
