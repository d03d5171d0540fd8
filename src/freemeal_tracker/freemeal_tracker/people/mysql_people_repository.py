from __future__ import annotations

from datetime import datetime
from typing import Sequence

from ..core.enums import PersonCategory
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import CATEGORY_TABLES, Person
from .repository import PeopleDirectory


def _select_for(category: PersonCategory) -> str:
    t = CATEGORY_TABLES[category]
    meal_count = "x.meal_count" if t.has_meal_count else "NULL"
    return f"""
        SELECT
            x.id AS person_id,
            x.{t.id_column} AS ashima_id,
            x.name,
            d.name AS department,
            p.name AS position,
            x.photo,
            x.status,
            x.rfid_tag,
            '{category.value}' AS person_type,
            {meal_count} AS meal_count
        FROM {t.table} x
        LEFT JOIN departments d ON x.department_id = d.id
        LEFT JOIN positions p ON x.position_id = p.id
        WHERE x.rfid_tag = %s OR x.{t.id_column} = %s
    """


_RESOLVE_QUERY = "\nUNION ALL\n".join(_select_for(c) for c in PersonCategory)


def row_to_person(r: dict) -> Person:
    meal_count = r.get("meal_count")
    return Person(
        category=PersonCategory(r["person_type"]),
        identifier=str(r["ashima_id"]),
        name=r["name"],
        person_id=int(r["person_id"]),
        meal_count=int(meal_count) if meal_count is not None else None,
        department=r.get("department"),
        position=r.get("position"),
        status=r.get("status"),
        rfid_tag=r.get("rfid_tag"),
        photo=r.get("photo"),
    )


class MySQLPeopleDirectory(PeopleDirectory):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def resolve_person(self, identifier: str) -> Sequence[Person]:
        params = tuple(identifier for _ in PersonCategory for _ in range(2))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_RESOLVE_QUERY, params)
            return [row_to_person(r) for r in fetchall(cur)]

    def decrement_meal_count(self, person: Person, *, at: datetime) -> bool:
        t = CATEGORY_TABLES[person.category]
        if not t.has_meal_count:
            return False
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                UPDATE {t.table}
                SET meal_count = meal_count - 1, last_active = %s
                WHERE {t.id_column} = %s AND meal_count > 0
                """,
                (at, person.identifier),
            )
            return cur.rowcount > 0

    def touch_last_active(self, person: Person, *, at: datetime) -> None:
        t = CATEGORY_TABLES[person.category]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE {t.table} SET last_active = %s WHERE {t.id_column} = %s",
                (at, person.identifier),
            )
