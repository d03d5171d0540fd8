from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import PersonCategory
from .model import LookupItem, Member, MemberFields, MemberFilter


class MemberRepository(Protocol):
    """Giao diện repository cho 3 bảng người dùng thẻ (employees / interns / trainees).

    Discontinued rows are never returned by ``list_members`` / ``count_members``.
    """

    def list_members(self, category: PersonCategory, filters: MemberFilter, *, limit: int, offset: int) -> Sequence[Member]:
        raise NotImplementedError

    def count_members(self, category: PersonCategory, filters: MemberFilter) -> int:
        raise NotImplementedError

    def get_member(self, category: PersonCategory, member_id: int) -> Optional[Member]:
        raise NotImplementedError

    def create_member(self, category: PersonCategory, fields: MemberFields, *, photo: Optional[bytes]) -> int:
        raise NotImplementedError

    def update_member(
        self,
        category: PersonCategory,
        member_id: int,
        fields: MemberFields,
        *,
        photo: Optional[bytes],
        replace_photo: bool,
    ) -> bool:
        """``replace_photo=False`` leaves the stored photo untouched."""

        raise NotImplementedError

    def delete_member(self, category: PersonCategory, member_id: int) -> bool:
        raise NotImplementedError

    def list_departments(self) -> Sequence[LookupItem]:
        raise NotImplementedError

    def list_positions(self) -> Sequence[LookupItem]:
        raise NotImplementedError
