from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from .model import ClaimEvent, ClaimLogFilter, ClaimLogRow, ClaimStats


class ClaimRepository(Protocol):
    def find_claim_for_date(self, person_identifier: str, claim_date: date, *, lock: bool = False) -> Optional[ClaimEvent]:
        """``lock=True`` reads the latest committed row (``SELECT ... FOR UPDATE``)."""

        raise NotImplementedError

    def create_claim(
        self,
        *,
        person_identifier: str,
        claim_date: date,
        effective_timestamp: datetime,
        meal_type: Optional[str] = None,
    ) -> ClaimEvent:
        """Insert a CLAIMED row.

        Raises ConcurrencyConflict when a row for (person, date) already exists.
        """

        raise NotImplementedError

    def amend_claim(self, claim_id: int) -> bool:
        """Flip an open CLAIMED row to CLAIMED_ALREADY; False if it was already amended."""

        raise NotImplementedError

    def list_recent(self, *, limit: int, offset: int = 0) -> Sequence[ClaimLogRow]:
        raise NotImplementedError

    def search_logs(self, filters: ClaimLogFilter, *, limit: Optional[int] = None, offset: int = 0) -> Sequence[ClaimLogRow]:
        raise NotImplementedError

    def count_logs(self, filters: ClaimLogFilter) -> int:
        raise NotImplementedError

    def get_stats(self, day: date) -> ClaimStats:
        raise NotImplementedError
