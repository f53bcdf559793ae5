"""Random opaque identifiers for records that need no human-readable sequence."""

import secrets
import string
import uuid

SHORT_ID_ALPHABET = string.ascii_uppercase + string.digits


def generate_uuid() -> str:
    """Random version-4 UUID string."""
    return str(uuid.uuid4())


def generate_short_id(length: int = 8) -> str:
    """Uppercase alphanumeric string, e.g. ``K7Q2M9XA``."""
    if length < 1:
        raise ValueError(f"length must be positive, got {length}")
    return "".join(secrets.choice(SHORT_ID_ALPHABET) for _ in range(length))
