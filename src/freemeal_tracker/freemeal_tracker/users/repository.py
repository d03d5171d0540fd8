from __future__ import annotations

from typing import Optional, Protocol

from .model import AdminUser


class AdminUserRepository(Protocol):
    def get_by_identifier(self, identifier: str) -> Optional[AdminUser]:
        """Match on username or employee id."""

        raise NotImplementedError

    def get_by_id(self, admin_id: int) -> Optional[AdminUser]:
        raise NotImplementedError
