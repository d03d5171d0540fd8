from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Optional

from ..core.enums import ClaimDecisionCode, ClaimStatus
from ..people.model import Person


@dataclass(frozen=True)
class ClaimEvent:
    """Thực thể miền (domain): một dòng log nhận suất ăn miễn phí."""

    claim_id: int
    person_identifier: str
    claim_date: date
    effective_timestamp: datetime
    status: ClaimStatus
    amended: bool = False
    meal_type: Optional[str] = None

    @property
    def is_open_claim(self) -> bool:
        """A first claim that has not been flagged by a repeat scan yet."""
        return self.status == ClaimStatus.CLAIMED and not self.amended

    def as_amended(self) -> "ClaimEvent":
        return replace(self, status=ClaimStatus.CLAIMED_ALREADY, amended=True)

    def to_dict(self) -> dict:
        return {
            "id": self.claim_id,
            "ashima_id": self.person_identifier,
            "log_type": self.status.value,
            "date_claimed": self.claim_date.strftime("%Y-%m-%d"),
            "time_claimed": self.effective_timestamp.strftime("%Y-%m-%d %H:%M:%S"),
            "amended": self.amended,
            "meal_type": self.meal_type,
        }


@dataclass(frozen=True)
class ClaimDecision:
    person: Person
    claim: ClaimEvent
    decision: ClaimDecisionCode

    def to_dict(self) -> dict:
        return {
            "employee": self.person.to_dict(),
            "attendanceLog": self.claim.to_dict(),
            "logType": self.decision.value,
            "decision": self.decision.value,
        }


@dataclass(frozen=True)
class ClaimLogRow:
    """Read-model phục vụ danh sách log/xuất file (tối ưu cho truy vấn)."""

    claim_id: int
    person_identifier: str
    name: str
    rfid_tag: Optional[str]
    department: Optional[str]
    position: Optional[str]
    person_type: str
    status: ClaimStatus
    claim_date: date
    time_claimed: datetime

    def to_dict(self) -> dict:
        return {
            "id": self.claim_id,
            "ashima_id": self.person_identifier,
            "name": self.name,
            "rfid_tag": self.rfid_tag,
            "department": self.department,
            "position": self.position,
            "person_type": self.person_type,
            "log_type": self.status.value,
            "date_claimed": self.claim_date.strftime("%Y-%m-%d"),
            "time_claimed": self.time_claimed.strftime("%Y-%m-%d %H:%M:%S"),
        }


@dataclass(frozen=True)
class ClaimLogFilter:
    search: Optional[str] = None
    status: Optional[ClaimStatus] = None
    person_type: Optional[str] = None
    position_id: Optional[int] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None


@dataclass(frozen=True)
class ClaimStats:
    today_count: int
    claimed_today: int
    already_claimed_today: int
    total_logs: int
