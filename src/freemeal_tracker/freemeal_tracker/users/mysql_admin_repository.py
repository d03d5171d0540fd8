from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import AdminUser
from .repository import AdminUserRepository


def _row_to_admin(row: dict) -> AdminUser:
    return AdminUser(
        admin_id=int(row["id"]),
        name=row["name"],
        username=row["username"],
        password_hash=row["password_hash"],
        employee_id=row.get("employee_id"),
        is_active=bool(row.get("is_active", True)),
    )


class MySQLAdminUserRepository(AdminUserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_identifier(self, identifier: str) -> Optional[AdminUser]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, name, username, employee_id, password_hash, is_active
                FROM admin_users
                WHERE username=%s OR employee_id=%s
                LIMIT 1
                """,
                (identifier, identifier),
            )
            row = fetchone(cur)
            return _row_to_admin(row) if row else None

    def get_by_id(self, admin_id: int) -> Optional[AdminUser]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, name, username, employee_id, password_hash, is_active
                FROM admin_users
                WHERE id=%s
                """,
                (int(admin_id),),
            )
            row = fetchone(cur)
            return _row_to_admin(row) if row else None
