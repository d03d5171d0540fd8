from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class AdminUser:
    """Thực thể miền (domain): tài khoản quản trị back-office.

    Lưu ý: Đây là đối tượng dữ liệu thuần (không chứa code truy cập DB).
    """

    admin_id: int
    name: str
    username: str
    password_hash: str
    employee_id: Optional[str] = None
    is_active: bool = True
