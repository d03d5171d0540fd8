from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from werkzeug.security import check_password_hash

from ..common.validators import require_non_empty
from ..core.exceptions import AuthenticationError
from .repository import AdminUserRepository


@dataclass(frozen=True)
class SessionAdmin:
    """What we store into Flask session after login."""

    admin_id: int
    name: str
    username: str
    employee_id: Optional[str]


class AuthService:
    """Use case: authenticate back-office admin (login)."""

    def __init__(self, admins: AdminUserRepository):
        self._admins = admins

    def authenticate(self, identifier: str, password: str) -> SessionAdmin:
        identifier = require_non_empty(identifier, "Username")
        admin = self._admins.get_by_identifier(identifier)
        if not admin or not admin.is_active:
            raise AuthenticationError("Invalid username or password")

        try:
            ok = check_password_hash(admin.password_hash, password or "")
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            raise AuthenticationError("Invalid username or password")

        return SessionAdmin(
            admin_id=admin.admin_id,
            name=admin.name,
            username=admin.username,
            employee_id=admin.employee_id,
        )

    def get_session_admin(self, admin_id: int) -> Optional[SessionAdmin]:
        admin = self._admins.get_by_id(admin_id)
        if not admin or not admin.is_active:
            return None
        return SessionAdmin(
            admin_id=admin.admin_id,
            name=admin.name,
            username=admin.username,
            employee_id=admin.employee_id,
        )
