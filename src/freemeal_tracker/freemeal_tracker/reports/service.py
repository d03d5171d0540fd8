from __future__ import annotations

import csv
import io
from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Optional

from ..claims.model import ClaimLogFilter, ClaimStats
from ..claims.repository import ClaimRepository
from ..common.datetime_utils import now_local, previous_week_range
from ..common.validators import optional_int, optional_str
from ..core.constants import DEFAULT_LOGS_PAGE_SIZE, MAX_PAGE_SIZE
from ..core.enums import ClaimStatus, PersonCategory
from ..core.exceptions import ValidationError

CSV_HEADERS = ["Date", "Ashima ID", "Employee Name", "Position", "Time Claimed", "Meal Type", "Note"]


@dataclass(frozen=True)
class CsvReport:
    filename: str
    content: str
    rows: int = 0

    @property
    def content_bytes(self) -> bytes:
        # BOM so Excel opens it as UTF-8
        return self.content.encode("utf-8-sig")


def build_log_filter(
    *,
    search: Optional[str] = None,
    log_type: Optional[str] = None,
    person_type: Optional[str] = None,
    position_id=None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> ClaimLogFilter:
    """Normalize raw query values into a ClaimLogFilter.

    ``log_type`` of ``ALL`` (or empty) means no status filter.
    """

    status = None
    log_type = optional_str(log_type)
    if log_type and log_type.upper() != "ALL":
        try:
            status = ClaimStatus(log_type.upper())
        except ValueError as e:
            raise ValidationError(f"Unknown log_type: {log_type}") from e

    person_type = optional_str(person_type)
    if person_type and person_type.lower() != "all":
        try:
            person_type = PersonCategory(person_type.lower()).value
        except ValueError as e:
            raise ValidationError(f"Unknown person_type: {person_type}") from e
    else:
        person_type = None

    if start_date and end_date and start_date > end_date:
        raise ValidationError("start_date must be on or before end_date")

    return ClaimLogFilter(
        search=optional_str(search),
        status=status,
        person_type=person_type,
        position_id=optional_int(position_id, "position"),
        start_date=start_date,
        end_date=end_date,
    )


class FreemealReportService:
    """Admin read side of the claim log: paging, CSV export and dashboard stats."""

    def __init__(self, claims: ClaimRepository, *, clock: Callable[[], datetime] = now_local):
        self._claims = claims
        self._clock = clock

    def list_logs(self, filters: ClaimLogFilter, *, page: int = 1, limit: int = DEFAULT_LOGS_PAGE_SIZE) -> dict:
        page = max(1, int(page))
        limit = max(1, min(int(limit), MAX_PAGE_SIZE))
        rows = self._claims.search_logs(filters, limit=limit, offset=(page - 1) * limit)
        total = self._claims.count_logs(filters)
        return {
            "data": [r.to_dict() for r in rows],
            "total": total,
            "page": page,
            "limit": limit,
            "pages": -(-total // limit),
        }

    def stats(self) -> ClaimStats:
        return self._claims.get_stats(self._clock().date())

    def previous_week(self) -> tuple[date, date]:
        return previous_week_range(self._clock().date())

    def export_csv(self, filters: ClaimLogFilter, *, previous_week: bool = False) -> CsvReport:
        if previous_week:
            start, end = self.previous_week()
            filters = ClaimLogFilter(
                search=filters.search,
                status=filters.status,
                person_type=filters.person_type,
                position_id=filters.position_id,
                start_date=start,
                end_date=end,
            )

        out = io.StringIO()
        writer = csv.writer(out, lineterminator="\n")
        writer.writerow(CSV_HEADERS)
        rows = self._claims.search_logs(filters)
        for row in rows:
            writer.writerow(
                [
                    row.claim_date.strftime("%Y-%m-%d"),
                    row.person_identifier,
                    row.name or "",
                    row.position or "",
                    row.time_claimed.strftime("%H:%M:%S"),
                    row.person_type,
                    row.status.value,
                ]
            )

        return CsvReport(filename=self._filename(filters), content=out.getvalue(), rows=len(rows))

    def _filename(self, filters: ClaimLogFilter) -> str:
        if filters.start_date or filters.end_date:
            start = filters.start_date.isoformat() if filters.start_date else "start"
            end = filters.end_date.isoformat() if filters.end_date else "end"
            return f"freemeal_logs_{start}_to_{end}.csv"
        return f"freemeal_logs_{self._clock().date().isoformat()}.csv"
