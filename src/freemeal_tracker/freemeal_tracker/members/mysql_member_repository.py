from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import PersonCategory, PersonStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, like
from ..people.model import CATEGORY_TABLES
from .model import LookupItem, Member, MemberFields, MemberFilter
from .repository import MemberRepository


def _select(category: PersonCategory) -> str:
    t = CATEGORY_TABLES[category]
    meal_count = "x.meal_count" if t.has_meal_count else "NULL"
    return f"""
        SELECT
            x.id, x.{t.id_column} AS ashima_id, x.name,
            x.department_id, x.position_id,
            d.name AS department, p.name AS position,
            x.rfid_tag, x.photo, x.status, x.last_active,
            {meal_count} AS meal_count
        FROM {t.table} x
        LEFT JOIN departments d ON x.department_id = d.id
        LEFT JOIN positions p ON x.position_id = p.id
    """


def _where(category: PersonCategory, filters: MemberFilter) -> tuple[str, list[object]]:
    t = CATEGORY_TABLES[category]
    clauses = ["x.status != %s"]
    params: list[object] = [PersonStatus.DISCONTINUED.value]

    if filters.search:
        clauses.append(f"(x.{t.id_column} LIKE %s OR x.name LIKE %s)")
        params.extend([like(filters.search), like(filters.search)])
    if filters.department_id is not None:
        clauses.append("x.department_id = %s")
        params.append(int(filters.department_id))
    if filters.position_id is not None:
        clauses.append("x.position_id = %s")
        params.append(int(filters.position_id))
    if filters.status and filters.status != PersonStatus.DISCONTINUED.value:
        clauses.append("x.status = %s")
        params.append(filters.status)

    return "WHERE " + " AND ".join(clauses), params


def _row_to_member(category: PersonCategory, r: dict) -> Member:
    meal_count = r.get("meal_count")
    return Member(
        member_id=int(r["id"]),
        category=category,
        identifier=str(r["ashima_id"]),
        name=r["name"],
        department_id=r.get("department_id"),
        position_id=r.get("position_id"),
        department=r.get("department"),
        position=r.get("position"),
        rfid_tag=r.get("rfid_tag"),
        photo=r.get("photo"),
        status=r.get("status") or PersonStatus.ACTIVE.value,
        meal_count=int(meal_count) if meal_count is not None else None,
        last_active=r.get("last_active"),
    )


class MySQLMemberRepository(MemberRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_members(self, category: PersonCategory, filters: MemberFilter, *, limit: int, offset: int) -> Sequence[Member]:
        where, params = _where(category, filters)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                {_select(category)}
                {where}
                ORDER BY x.id DESC
                LIMIT %s OFFSET %s
                """,
                tuple(params + [int(limit), int(offset)]),
            )
            return [_row_to_member(category, r) for r in fetchall(cur)]

    def count_members(self, category: PersonCategory, filters: MemberFilter) -> int:
        t = CATEGORY_TABLES[category]
        where, params = _where(category, filters)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS total FROM {t.table} x {where}", tuple(params))
            row = fetchone(cur)
            return int(row["total"]) if row else 0

    def get_member(self, category: PersonCategory, member_id: int) -> Optional[Member]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_select(category)} WHERE x.id = %s", (int(member_id),))
            row = fetchone(cur)
            return _row_to_member(category, row) if row else None

    def create_member(self, category: PersonCategory, fields: MemberFields, *, photo: Optional[bytes]) -> int:
        t = CATEGORY_TABLES[category]
        columns = [t.id_column, "name", "department_id", "position_id", "rfid_tag", "photo", "status"]
        values: list[object] = [
            fields.identifier,
            fields.name,
            fields.department_id,
            fields.position_id,
            fields.rfid_tag,
            photo,
            fields.status,
        ]
        if t.has_meal_count:
            columns.append("meal_count")
            values.append(int(fields.meal_count or 0))

        placeholders = ",".join(["%s"] * len(columns))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"INSERT INTO {t.table}({', '.join(columns)}) VALUES({placeholders})",
                tuple(values),
            )
            return int(cur.lastrowid)

    def update_member(
        self,
        category: PersonCategory,
        member_id: int,
        fields: MemberFields,
        *,
        photo: Optional[bytes],
        replace_photo: bool,
    ) -> bool:
        t = CATEGORY_TABLES[category]
        assignments = [
            f"{t.id_column} = %s",
            "name = %s",
            "department_id = %s",
            "position_id = %s",
            "rfid_tag = %s",
            "status = %s",
        ]
        values: list[object] = [
            fields.identifier,
            fields.name,
            fields.department_id,
            fields.position_id,
            fields.rfid_tag,
            fields.status,
        ]
        if t.has_meal_count and fields.meal_count is not None:
            assignments.append("meal_count = %s")
            values.append(int(fields.meal_count))
        if replace_photo:
            assignments.append("photo = %s")
            values.append(photo)
        values.append(int(member_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE {t.table} SET {', '.join(assignments)} WHERE id = %s",
                tuple(values),
            )
            # rowcount is 0 when nothing changed, so check existence separately
            if cur.rowcount > 0:
                return True
            cur.execute(f"SELECT 1 AS found FROM {t.table} WHERE id = %s", (int(member_id),))
            return fetchone(cur) is not None

    def delete_member(self, category: PersonCategory, member_id: int) -> bool:
        t = CATEGORY_TABLES[category]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"DELETE FROM {t.table} WHERE id = %s", (int(member_id),))
            return cur.rowcount > 0

    def list_departments(self) -> Sequence[LookupItem]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, name FROM departments ORDER BY name")
            return [LookupItem(id=int(r["id"]), name=r["name"]) for r in fetchall(cur)]

    def list_positions(self) -> Sequence[LookupItem]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, name FROM positions ORDER BY name")
            return [LookupItem(id=int(r["id"]), name=r["name"]) for r in fetchall(cur)]
