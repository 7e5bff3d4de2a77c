import uuid
from typing import Any, Mapping

KEY_FIELDS = ("phone", "email", "name", "id")


def new_id() -> str:
    """Generate an opaque record ID, unique for the life of the process"""
    return uuid.uuid4().hex


def normalize_key(record: Mapping[str, Any]) -> str:
    """
    Lookup key for a patient record: phone, else email, else name, else id,
    lower-cased. Empty values are skipped.
    """
    for field in KEY_FIELDS:
        value = record.get(field)
        if value is not None and str(value) != "":
            return str(value).lower()
    return ""
