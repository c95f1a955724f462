from datetime import datetime
from fastapi.responses import JSONResponse
from bson import ObjectId

from utils.errors import ValidationError


def error_response(status_code: int, message: str, error: str = "Error"):
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": error,
            "message": message
        }
    )

def parse_object_id(value, name: str = "") -> ObjectId:
    """Turn a path/body id into an ObjectId or raise a 400."""
    if isinstance(value, ObjectId):
        return value
    if not value or not ObjectId.is_valid(str(value)):
        label = f"{name} " if name else ""
        raise ValidationError(f"Invalid {label}ID")
    return ObjectId(str(value))

def _serialize_value(value):
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return serialize_doc(dict(value))
    if isinstance(value, list):
        return [_serialize_value(v) for v in value]
    return value

def serialize_doc(doc: dict):
    if not doc:
        return doc

    # convert ObjectId → string (keep `_id`)
    if isinstance(doc.get("_id"), ObjectId):
        doc["id"] = str(doc["_id"])

    # nested question/announcement docs carry ObjectIds too
    for key, value in doc.items():
        doc[key] = _serialize_value(value)

    return doc

