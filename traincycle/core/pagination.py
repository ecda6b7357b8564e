import base64
import json
from typing import Any, Callable

from traincycle.core.exceptions import ValidationError


def encode_cursor(value: Any, field: str) -> str:
    """Encode a cursor value to a base64 string."""
    data = json.dumps({"field": field, "value": str(value)})
    return base64.urlsafe_b64encode(data.encode()).decode()


def decode_cursor(cursor: str, cast: Callable[[str], Any] = str) -> tuple[str, Any]:
    """Decode a cursor to its field and value; a malformed cursor is a client error."""
    try:
        decoded = json.loads(base64.urlsafe_b64decode(cursor).decode())
        return decoded["field"], cast(decoded["value"])
    except (ValueError, KeyError, TypeError) as e:
        raise ValidationError("cursor", "invalid cursor format") from e
