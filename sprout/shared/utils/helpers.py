# 📄 File: sprout/shared/utils/helpers.py

# 🧭 Purpose (Layman Explanation):
# Small shared tools used all over the marketplace, like making new IDs,
# reading the current time, and turning a "page bookmark" into text and back.

# 🧪 Purpose (Technical Summary):
# General purpose helpers: id generation, timezone-aware UTC timestamps,
# normalisation of naive datetimes returned by some drivers, and opaque
# keyset pagination cursors.

# 🔗 Dependencies:
# - uuid: Unique identifier generation
# - base64 / datetime: cursor encoding

# 🔄 Connected Modules / Calls From:
# Used by: domain models (default ids and timestamps), repository implementations
# (datetime normalisation, cursor pagination)

import base64
import binascii
from datetime import datetime, timezone
from typing import Optional, Tuple
from uuid import uuid4

from sprout.shared.core.exceptions import ValidationError


def generate_id() -> str:
    """Generate a new string identifier."""
    return str(uuid4())


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """
    Attach UTC to naive datetimes.

    SQLite drops tzinfo on the way back; everything stored is UTC.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def encode_cursor(timestamp: datetime, entity_id: str) -> str:
    """
    Encode a keyset pagination position.

    Args:
        timestamp: Sort timestamp of the last item on the page
        entity_id: Id of that item, used as tie breaker

    Returns:
        URL-safe opaque cursor string
    """
    raw = f"{ensure_utc(timestamp).isoformat()}|{entity_id}"
    return base64.urlsafe_b64encode(raw.encode("utf-8")).decode("ascii")


def decode_cursor(cursor: str) -> Tuple[datetime, str]:
    """
    Decode a cursor produced by encode_cursor.

    Raises:
        ValidationError: If the cursor is malformed
    """
    try:
        raw = base64.urlsafe_b64decode(cursor.encode("ascii")).decode("utf-8")
        timestamp, entity_id = raw.split("|", 1)
        return ensure_utc(datetime.fromisoformat(timestamp)), entity_id
    except (ValueError, UnicodeError, binascii.Error) as e:
        raise ValidationError("Invalid pagination cursor", field="cursor", value=cursor) from e
