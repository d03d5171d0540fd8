from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..common.validators import encode_photo
from ..core.enums import PersonCategory


@dataclass(frozen=True)
class Person:
    """Thực thể miền (domain): người được phát suất ăn.

    One shape for all three categories; ``category`` tags which table the row
    came from. ``meal_count`` is only carried by employees.
    """

    category: PersonCategory
    identifier: str
    name: str
    person_id: int
    meal_count: Optional[int] = None
    department: Optional[str] = None
    position: Optional[str] = None
    status: Optional[str] = None
    rfid_tag: Optional[str] = None
    photo: Optional[bytes] = None

    @property
    def has_meal_counter(self) -> bool:
        return self.category == PersonCategory.EMPLOYEE and self.meal_count is not None

    def to_dict(self) -> dict:
        return {
            "person_id": self.person_id,
            "ashima_id": self.identifier,
            "name": self.name,
            "department": self.department,
            "position": self.position,
            "status": self.status,
            "person_type": self.category.value,
            "meal_count": self.meal_count,
            "photo": encode_photo(self.photo, mime="image/png"),
        }


@dataclass(frozen=True)
class CategoryTable:
    """Where one person category lives in the database."""

    table: str
    id_column: str
    has_meal_count: bool = False


CATEGORY_TABLES: dict[PersonCategory, CategoryTable] = {
    PersonCategory.EMPLOYEE: CategoryTable("employees", "ashima_id", has_meal_count=True),
    PersonCategory.INTERN: CategoryTable("interns", "id_number"),
    PersonCategory.TRAINEE: CategoryTable("trainees", "ashima_id"),
}
