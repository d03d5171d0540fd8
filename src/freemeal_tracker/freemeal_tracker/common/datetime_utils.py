from __future__ import annotations

import re
from datetime import date, datetime, time, timedelta
from typing import Optional

from ..core.exceptions import ValidationError

_HAS_TIME = re.compile(r"[T ]\d{1,2}:\d{2}")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def parse_effective_timestamp(value: Optional[str], *, now: datetime) -> Optional[datetime]:
    """Parse the kiosk's manual ``time_claimed`` override.

    Accepts ``YYYY-MM-DD HH:MM[:SS]``, the ISO ``T`` form, or a bare
    ``YYYY-MM-DD``. A bare date keeps the time of day of ``now`` so a
    back-dated claim still gets a plausible timestamp.
    """

    if value is None:
        return None
    value = str(value).strip()
    if not value:
        return None

    if _HAS_TIME.search(value):
        try:
            text = value.replace("T", " ")
            if text.endswith(("Z", "z")):
                text = text[:-1] + "+00:00"
            parsed = datetime.fromisoformat(text)
        except ValueError as e:
            raise ValidationError(f"Invalid time_claimed: {value!r}") from e
        if parsed.tzinfo is not None:
            # claim dates are local; shift offsets to the kiosk clock
            parsed = parsed.astimezone().replace(tzinfo=None)
        return parsed.replace(microsecond=0)

    try:
        day = parse_iso_date(value[:10])
    except ValueError as e:
        raise ValidationError(f"Invalid time_claimed: {value!r}") from e
    return datetime.combine(day, time(now.hour, now.minute, now.second))


def previous_week_range(today: date) -> tuple[date, date]:
    """Monday..Sunday of the calendar week before ``today``'s week."""
    start_of_week = today - timedelta(days=today.weekday())
    start = start_of_week - timedelta(days=7)
    return start, start + timedelta(days=6)
