from __future__ import annotations

from datetime import datetime
from typing import Protocol, Sequence

from .model import Person


class PeopleDirectory(Protocol):
    """Lookup across employees, interns and trainees.

    Lưu ý (DIP): tầng service phụ thuộc vào interface này, không phụ thuộc trực tiếp DB cụ thể.
    """

    def resolve_person(self, identifier: str) -> Sequence[Person]:
        """Every person whose RFID tag or ID number equals ``identifier``.

        More than one element means the directory is inconsistent.
        """

        raise NotImplementedError

    def decrement_meal_count(self, person: Person, *, at: datetime) -> bool:
        """Decrement-if-positive; returns False when nothing was decremented."""

        raise NotImplementedError

    def touch_last_active(self, person: Person, *, at: datetime) -> None:
        raise NotImplementedError
