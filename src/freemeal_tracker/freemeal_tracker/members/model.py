from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence

from ..common.validators import encode_photo
from ..core.enums import PersonCategory

# URL segment -> category (/api/admin/<slug>)
CATEGORY_BY_SLUG: dict[str, PersonCategory] = {
    "employees": PersonCategory.EMPLOYEE,
    "interns": PersonCategory.INTERN,
    "trainees": PersonCategory.TRAINEE,
}


@dataclass(frozen=True)
class Member:
    """Bản ghi quản trị của một nhân viên / thực tập sinh / học viên."""

    member_id: int
    category: PersonCategory
    identifier: str
    name: str
    department_id: Optional[int] = None
    position_id: Optional[int] = None
    department: Optional[str] = None
    position: Optional[str] = None
    rfid_tag: Optional[str] = None
    photo: Optional[bytes] = None
    status: str = "active"
    meal_count: Optional[int] = None
    last_active: Optional[datetime] = None

    def to_dict(self) -> dict:
        out = {
            "id": self.member_id,
            "ashima_id": self.identifier,
            "name": self.name,
            "department": self.department,
            "position": self.position,
            "department_id": self.department_id,
            "position_id": self.position_id,
            "rfid_tag": self.rfid_tag,
            "photo": encode_photo(self.photo),
            "status": self.status,
            "person_type": self.category.value,
            "last_active": self.last_active.strftime("%Y-%m-%d %H:%M:%S") if self.last_active else None,
        }
        if self.category == PersonCategory.EMPLOYEE:
            out["meal_count"] = self.meal_count
        return out


@dataclass(frozen=True)
class MemberFilter:
    search: Optional[str] = None
    department_id: Optional[int] = None
    position_id: Optional[int] = None
    status: Optional[str] = None


@dataclass(frozen=True)
class MemberFields:
    """Writable columns for create/update."""

    identifier: str
    name: str
    department_id: Optional[int]
    position_id: Optional[int]
    rfid_tag: Optional[str]
    status: str
    meal_count: Optional[int] = None


@dataclass(frozen=True)
class MemberPage:
    data: Sequence[Member]
    total: int
    page: int
    limit: int

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0

    def to_dict(self) -> dict:
        return {
            "data": [m.to_dict() for m in self.data],
            "total": self.total,
            "page": self.page,
            "limit": self.limit,
            "pages": self.pages,
        }


@dataclass(frozen=True)
class LookupItem:
    id: int
    name: str

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name}
