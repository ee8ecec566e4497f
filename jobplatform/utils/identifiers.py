"""
Helpers for the 24-hex document identifiers used on every route.

Stored references are not type-consistent: an application's ``job`` may be a
plain string or an ObjectId depending on which code path created it. New
writes always use ObjectId; reads go through ``reference_variants`` so both
forms keep matching.
"""

import re
from typing import Any, List, Optional

from bson import ObjectId
from fastapi import HTTPException

OBJECT_ID_PATTERN = re.compile(r"^[0-9a-fA-F]{24}$")


def is_valid_object_id(value: Any) -> bool:
    """Strict 24-hex check. ``ObjectId.is_valid`` also accepts any 12-byte string."""
    if isinstance(value, ObjectId):
        return True
    return isinstance(value, str) and bool(OBJECT_ID_PATTERN.match(value))


def to_object_id(value: Any) -> Optional[ObjectId]:
    if isinstance(value, ObjectId):
        return value
    if is_valid_object_id(value):
        return ObjectId(value)
    return None


def parse_object_id(value: str, label: str = "") -> ObjectId:
    """Convert a route parameter, raising 400 before any database access."""
    oid = to_object_id(value)
    if oid is None:
        name = f"{label} ID" if label else "ID"
        raise HTTPException(status_code=400, detail=f"Invalid {name}")
    return oid


def reference_variants(value: Any) -> List[Any]:
    """Every storage form a reference to ``value`` may have been written in."""
    variants = [str(value)]
    oid = to_object_id(value)
    if oid is not None:
        variants.append(oid)
    return variants


def reference_query(value: Any) -> dict:
    variants = reference_variants(value)
    if len(variants) == 1:
        return variants[0]
    return {"$in": variants}


def serialize_doc(value: Any) -> Any:
    """Make a Mongo document JSON-safe: ObjectIds become strings, ``id`` mirrors ``_id``."""
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, list):
        return [serialize_doc(item) for item in value]
    if isinstance(value, dict):
        result = {key: serialize_doc(item) for key, item in value.items()}
        if "_id" in result and "id" not in result:
            result["id"] = result["_id"]
        return result
    return value
