from __future__ import annotations

from enum import Enum


class PersonCategory(str, Enum):
    """Loại người dùng thẻ RFID (mỗi loại lưu ở bảng riêng)."""

    EMPLOYEE = "employee"
    INTERN = "intern"
    TRAINEE = "trainee"


class PersonStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    DISCONTINUED = "discontinued"


class ClaimStatus(str, Enum):
    """Trạng thái dòng log suất ăn lưu trong CSDL."""

    CLAIMED = "CLAIMED"
    CLAIMED_ALREADY = "CLAIMED_ALREADY"


class ClaimDecisionCode(str, Enum):
    """Kết quả một lần quẹt thẻ, trả về cho kiosk để chọn thông báo."""

    CLAIMED = "CLAIMED"
    CLAIMED_ALREADY = "CLAIMED_ALREADY"
    BLOCKED = "BLOCKED"
