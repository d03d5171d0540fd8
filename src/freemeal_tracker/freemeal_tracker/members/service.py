from __future__ import annotations

from typing import Mapping, Optional, Sequence

from ..app_logger import get_logger
from ..common.validators import decode_photo, optional_int, optional_str, require_non_empty
from ..core.constants import DEFAULT_MEMBERS_PAGE_SIZE, MAX_PAGE_SIZE
from ..core.enums import PersonCategory, PersonStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..people.repository import PeopleDirectory
from .model import LookupItem, Member, MemberFields, MemberFilter, MemberPage
from .repository import MemberRepository

logger = get_logger(__name__)


class MemberService:
    """Use case: admin management of employees, interns and trainees."""

    def __init__(self, members: MemberRepository, people: PeopleDirectory):
        self._members = members
        self._people = people

    def list_members(
        self,
        category: PersonCategory,
        *,
        search: Optional[str] = None,
        department_id: Optional[int] = None,
        position_id: Optional[int] = None,
        status: Optional[str] = None,
        page: int = 1,
        limit: int = DEFAULT_MEMBERS_PAGE_SIZE,
    ) -> MemberPage:
        page = max(1, int(page))
        limit = max(1, min(int(limit), MAX_PAGE_SIZE))
        filters = MemberFilter(
            search=optional_str(search),
            department_id=department_id,
            position_id=position_id,
            status=optional_str(status),
        )
        rows = self._members.list_members(category, filters, limit=limit, offset=(page - 1) * limit)
        total = self._members.count_members(category, filters)
        return MemberPage(data=list(rows), total=total, page=page, limit=limit)

    def get_member(self, category: PersonCategory, member_id: int) -> Member:
        member = self._members.get_member(category, member_id)
        if not member:
            raise NotFoundError(f"No {category.value} with id {member_id}")
        return member

    def create_member(self, category: PersonCategory, payload: Mapping) -> Member:
        fields = self._read_fields(category, payload, status=PersonStatus.ACTIVE.value)
        self._ensure_unique(fields)
        photo = decode_photo(payload.get("photo"))

        member_id = self._members.create_member(category, fields, photo=photo)
        logger.info("created %s %s (id=%s)", category.value, fields.identifier, member_id)
        return self.get_member(category, member_id)

    def update_member(self, category: PersonCategory, member_id: int, payload: Mapping) -> Member:
        current = self.get_member(category, member_id)

        status = optional_str(payload.get("status")) or current.status
        try:
            status = PersonStatus(status).value
        except ValueError as e:
            raise ValidationError(f"Unknown status: {status}") from e

        fields = self._read_fields(category, payload, status=status)
        discontinued = status == PersonStatus.DISCONTINUED.value
        if discontinued:
            # A discontinued card must stop working at the kiosk.
            fields = MemberFields(
                identifier=fields.identifier,
                name=fields.name,
                department_id=fields.department_id,
                position_id=fields.position_id,
                rfid_tag=None,
                status=fields.status,
                meal_count=fields.meal_count,
            )
        self._ensure_unique(fields, exclude=current)

        photo: Optional[bytes] = None
        replace_photo = False
        if discontinued or payload.get("remove_photo") or payload.get("removePhoto"):
            replace_photo = True
        elif payload.get("photo"):
            photo = decode_photo(payload.get("photo"))
            replace_photo = True

        if not self._members.update_member(category, member_id, fields, photo=photo, replace_photo=replace_photo):
            raise NotFoundError(f"No {category.value} was updated. It may not exist.")
        logger.info("updated %s id=%s status=%s", category.value, member_id, status)
        return self.get_member(category, member_id)

    def delete_member(self, category: PersonCategory, member_id: int) -> None:
        if not self._members.delete_member(category, member_id):
            raise NotFoundError(f"No {category.value} with id {member_id}")
        logger.info("deleted %s id=%s", category.value, member_id)

    def departments(self) -> Sequence[LookupItem]:
        return self._members.list_departments()

    def positions(self) -> Sequence[LookupItem]:
        return self._members.list_positions()

    def _read_fields(self, category: PersonCategory, payload: Mapping, *, status: str) -> MemberFields:
        identifier = require_non_empty(payload.get("ashima_id") or payload.get("id_number"), "ID number")
        name = require_non_empty(payload.get("name"), "Name")

        meal_count = None
        if category == PersonCategory.EMPLOYEE:
            meal_count = optional_int(payload.get("meal_count"), "meal_count")
            if meal_count is not None and meal_count < 0:
                raise ValidationError("meal_count cannot be negative")

        return MemberFields(
            identifier=identifier,
            name=name,
            department_id=optional_int(payload.get("department_id"), "department_id"),
            position_id=optional_int(payload.get("position_id"), "position_id"),
            rfid_tag=optional_str(payload.get("rfid_tag")),
            status=status,
            meal_count=meal_count,
        )

    def _ensure_unique(self, fields: MemberFields, *, exclude: Optional[Member] = None) -> None:
        """ID numbers and RFID tags must resolve to one person across all three tables."""

        def others(value: str):
            return [
                p
                for p in self._people.resolve_person(value)
                if not (exclude and p.category == exclude.category and p.person_id == exclude.member_id)
            ]

        if others(fields.identifier):
            raise ValidationError(f"ID number {fields.identifier} is already in use")
        if fields.rfid_tag and others(fields.rfid_tag):
            raise ValidationError(f"RFID tag {fields.rfid_tag} is already assigned")
