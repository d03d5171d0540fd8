from __future__ import annotations

import base64
import binascii
import re
from typing import Optional

from ..core.exceptions import ValidationError

_DATA_URL_PREFIX = re.compile(r"^data:image/\w+;base64,")


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def optional_str(value) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def optional_int(value, field_name: str) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"{field_name} must be a number") from e


def decode_photo(value: Optional[str]) -> Optional[bytes]:
    """Decode a base64 photo, with or without a ``data:image/...`` prefix."""
    if not value:
        return None
    raw = _DATA_URL_PREFIX.sub("", value.strip())
    try:
        return base64.b64decode(raw, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValidationError("Photo is not valid base64") from e


def encode_photo(data: Optional[bytes], *, mime: str = "image/jpeg") -> Optional[str]:
    if not data:
        return None
    return f"data:{mime};base64,{base64.b64encode(bytes(data)).decode('ascii')}"
