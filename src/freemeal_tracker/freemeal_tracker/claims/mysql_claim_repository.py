from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

import mysql.connector

from ..core.enums import ClaimStatus, PersonCategory
from ..core.exceptions import ConcurrencyConflict
from ..database.connection import DatabaseConnection
from ..database.mysql_base import DUPLICATE_KEY_ERRNO, db_cursor, fetchall, fetchone, like
from ..people.model import CATEGORY_TABLES
from .model import ClaimEvent, ClaimLogFilter, ClaimLogRow, ClaimStats
from .repository import ClaimRepository

_CLAIM_COLUMNS = "id, ashima_id, date_claimed, time_claimed, log_type, amended, meal_type"


def _combined_logs_sql() -> str:
    """Claim logs joined to whichever person table owns the identifier."""

    parts = []
    for category in PersonCategory:
        t = CATEGORY_TABLES[category]
        parts.append(
            f"""
            SELECT
                l.id, l.ashima_id, l.date_claimed, l.time_claimed, l.log_type,
                x.name, x.rfid_tag, x.position_id,
                d.name AS department, p.name AS position,
                '{category.value}' AS person_type
            FROM freemeal_logs l
            JOIN {t.table} x ON l.ashima_id = x.{t.id_column}
            LEFT JOIN departments d ON x.department_id = d.id
            LEFT JOIN positions p ON x.position_id = p.id
            """
        )
    return "(" + "\nUNION ALL\n".join(parts) + ") AS combined"


_COMBINED_LOGS = _combined_logs_sql()


def _row_to_claim(r: dict) -> ClaimEvent:
    return ClaimEvent(
        claim_id=int(r["id"]),
        person_identifier=str(r["ashima_id"]),
        claim_date=r["date_claimed"],
        effective_timestamp=r["time_claimed"],
        status=ClaimStatus(r["log_type"]),
        amended=bool(r.get("amended")),
        meal_type=r.get("meal_type"),
    )


def _row_to_log(r: dict) -> ClaimLogRow:
    return ClaimLogRow(
        claim_id=int(r["id"]),
        person_identifier=str(r["ashima_id"]),
        name=r["name"],
        rfid_tag=r.get("rfid_tag"),
        department=r.get("department"),
        position=r.get("position"),
        person_type=r["person_type"],
        status=ClaimStatus(r["log_type"]),
        claim_date=r["date_claimed"],
        time_claimed=r["time_claimed"],
    )


def _where(filters: ClaimLogFilter) -> tuple[str, list[object]]:
    clauses: list[str] = []
    params: list[object] = []

    if filters.search:
        clauses.append("(ashima_id LIKE %s OR name LIKE %s)")
        params.extend([like(filters.search), like(filters.search)])
    if filters.status is not None:
        clauses.append("log_type=%s")
        params.append(filters.status.value)
    if filters.person_type:
        clauses.append("person_type=%s")
        params.append(filters.person_type)
    if filters.position_id is not None:
        clauses.append("position_id=%s")
        params.append(int(filters.position_id))
    if filters.start_date is not None:
        clauses.append("date_claimed >= %s")
        params.append(filters.start_date)
    if filters.end_date is not None:
        clauses.append("date_claimed <= %s")
        params.append(filters.end_date)

    where = ("WHERE " + " AND ".join(clauses)) if clauses else ""
    return where, params


class MySQLClaimRepository(ClaimRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def find_claim_for_date(self, person_identifier: str, claim_date: date, *, lock: bool = False) -> Optional[ClaimEvent]:
        suffix = " FOR UPDATE" if lock else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_CLAIM_COLUMNS}
                FROM freemeal_logs
                WHERE ashima_id=%s AND date_claimed=%s
                ORDER BY time_claimed DESC
                LIMIT 1{suffix}
                """,
                (person_identifier, claim_date),
            )
            row = fetchone(cur)
            return _row_to_claim(row) if row else None

    def create_claim(
        self,
        *,
        person_identifier: str,
        claim_date: date,
        effective_timestamp: datetime,
        meal_type: Optional[str] = None,
    ) -> ClaimEvent:
        with db_cursor(self._conn_factory) as (_, cur):
            try:
                cur.execute(
                    """
                    INSERT INTO freemeal_logs(ashima_id, date_claimed, time_claimed, log_type, amended, meal_type)
                    VALUES(%s,%s,%s,%s,0,%s)
                    """,
                    (person_identifier, claim_date, effective_timestamp, ClaimStatus.CLAIMED.value, meal_type),
                )
            except mysql.connector.IntegrityError as e:
                if e.errno == DUPLICATE_KEY_ERRNO:
                    raise ConcurrencyConflict(
                        f"claim for {person_identifier} on {claim_date} already exists"
                    ) from e
                raise
            return ClaimEvent(
                claim_id=int(cur.lastrowid),
                person_identifier=person_identifier,
                claim_date=claim_date,
                effective_timestamp=effective_timestamp,
                status=ClaimStatus.CLAIMED,
                amended=False,
                meal_type=meal_type,
            )

    def amend_claim(self, claim_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE freemeal_logs
                SET log_type=%s, amended=1
                WHERE id=%s AND log_type=%s AND amended=0
                """,
                (ClaimStatus.CLAIMED_ALREADY.value, int(claim_id), ClaimStatus.CLAIMED.value),
            )
            return cur.rowcount > 0

    def list_recent(self, *, limit: int, offset: int = 0) -> Sequence[ClaimLogRow]:
        return self.search_logs(ClaimLogFilter(), limit=limit, offset=offset)

    def search_logs(self, filters: ClaimLogFilter, *, limit: Optional[int] = None, offset: int = 0) -> Sequence[ClaimLogRow]:
        where, params = _where(filters)
        paging = ""
        if limit is not None:
            paging = "LIMIT %s OFFSET %s"
            params.extend([int(limit), int(offset)])

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT * FROM {_COMBINED_LOGS}
                {where}
                ORDER BY time_claimed DESC
                {paging}
                """,
                tuple(params),
            )
            return [_row_to_log(r) for r in fetchall(cur)]

    def count_logs(self, filters: ClaimLogFilter) -> int:
        where, params = _where(filters)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS total FROM {_COMBINED_LOGS} {where}", tuple(params))
            row = fetchone(cur)
            return int(row["total"]) if row else 0

    def get_stats(self, day: date) -> ClaimStats:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT
                    COUNT(DISTINCT ashima_id) AS today_count,
                    COALESCE(SUM(log_type=%s), 0) AS claimed_today,
                    COALESCE(SUM(log_type=%s), 0) AS already_claimed_today
                FROM freemeal_logs
                WHERE date_claimed=%s
                """,
                (ClaimStatus.CLAIMED.value, ClaimStatus.CLAIMED_ALREADY.value, day),
            )
            today = fetchone(cur) or {}
            cur.execute("SELECT COUNT(*) AS total FROM freemeal_logs")
            total = fetchone(cur) or {}
            return ClaimStats(
                today_count=int(today.get("today_count") or 0),
                claimed_today=int(today.get("claimed_today") or 0),
                already_claimed_today=int(today.get("already_claimed_today") or 0),
                total_logs=int(total.get("total") or 0),
            )
