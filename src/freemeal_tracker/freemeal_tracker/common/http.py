from __future__ import annotations

from datetime import date
from functools import wraps
from typing import Optional

from flask import jsonify, request, session

from ..core.constants import MAX_PAGE_SIZE
from ..core.exceptions import ValidationError
from .datetime_utils import parse_iso_date


def json_error(message: str, status: int):
    return jsonify({"success": False, "error": message}), status


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "admin_id" not in session:
            return json_error("Login required", 401)
        return view(*args, **kwargs)

    return wrapper


def arg_int(name: str, default: int, *, minimum: int = 0, maximum: int = MAX_PAGE_SIZE) -> int:
    raw = request.args.get(name)
    if raw in (None, ""):
        return default
    try:
        value = int(raw)
    except ValueError as e:
        raise ValidationError(f"{name} must be a number") from e
    return max(minimum, min(value, maximum))


def arg_date(name: str) -> Optional[date]:
    raw = (request.args.get(name) or "").strip()
    if not raw:
        return None
    try:
        return parse_iso_date(raw)
    except ValueError as e:
        raise ValidationError(f"{name} must be YYYY-MM-DD") from e
