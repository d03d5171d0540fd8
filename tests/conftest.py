from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Optional

import pytest

from src.freemeal_tracker.freemeal_tracker.claims.model import ClaimEvent, ClaimLogFilter, ClaimLogRow, ClaimStats
from src.freemeal_tracker.freemeal_tracker.core.enums import ClaimStatus, PersonCategory
from src.freemeal_tracker.freemeal_tracker.core.exceptions import ConcurrencyConflict
from src.freemeal_tracker.freemeal_tracker.people.model import Person


class InMemoryPeople:
    """PeopleDirectory over a plain list; records every mutation attempt."""

    def __init__(self, people: list[Person]):
        self.people = list(people)
        self.decrements: list[str] = []
        self.touched: list[tuple[str, datetime]] = []

    def get(self, identifier: str) -> Person:
        return next(p for p in self.people if p.identifier == identifier)

    def resolve_person(self, identifier: str):
        return [p for p in self.people if identifier in (p.identifier, p.rfid_tag)]

    def decrement_meal_count(self, person: Person, *, at: datetime) -> bool:
        self.decrements.append(person.identifier)
        for i, p in enumerate(self.people):
            if p.category == person.category and p.person_id == person.person_id:
                if p.meal_count is None or p.meal_count <= 0:
                    return False
                self.people[i] = replace(p, meal_count=p.meal_count - 1)
                self.touched.append((p.identifier, at))
                return True
        return False

    def touch_last_active(self, person: Person, *, at: datetime) -> None:
        self.touched.append((person.identifier, at))


class InMemoryClaims:
    """ClaimRepository keyed like the unique (ashima_id, date_claimed) index."""

    def __init__(self):
        self.rows: dict[tuple[str, date], ClaimEvent] = {}
        self.log_rows: list[ClaimLogRow] = []
        self.seen_filters: list[ClaimLogFilter] = []
        self.stats_days: list[date] = []
        self._next_id = 1

    def find_claim_for_date(self, person_identifier: str, claim_date: date, *, lock: bool = False) -> Optional[ClaimEvent]:
        return self.rows.get((person_identifier, claim_date))

    def create_claim(self, *, person_identifier, claim_date, effective_timestamp, meal_type=None) -> ClaimEvent:
        key = (person_identifier, claim_date)
        if key in self.rows:
            raise ConcurrencyConflict(f"duplicate {key}")
        claim = ClaimEvent(
            claim_id=self._next_id,
            person_identifier=person_identifier,
            claim_date=claim_date,
            effective_timestamp=effective_timestamp,
            status=ClaimStatus.CLAIMED,
            meal_type=meal_type,
        )
        self._next_id += 1
        self.rows[key] = claim
        return claim

    def amend_claim(self, claim_id: int) -> bool:
        for key, claim in self.rows.items():
            if claim.claim_id == claim_id:
                if not claim.is_open_claim:
                    return False
                self.rows[key] = claim.as_amended()
                return True
        return False

    def list_recent(self, *, limit: int, offset: int = 0):
        return self.search_logs(ClaimLogFilter(), limit=limit, offset=offset)

    def search_logs(self, filters: ClaimLogFilter, *, limit=None, offset: int = 0):
        self.seen_filters.append(filters)
        rows = [r for r in self.log_rows if _matches(r, filters)]
        rows.sort(key=lambda r: r.time_claimed, reverse=True)
        if limit is None:
            return rows[offset:]
        return rows[offset:offset + limit]

    def count_logs(self, filters: ClaimLogFilter) -> int:
        return len([r for r in self.log_rows if _matches(r, filters)])

    def get_stats(self, day: date) -> ClaimStats:
        self.stats_days.append(day)
        today = [r for r in self.log_rows if r.claim_date == day]
        return ClaimStats(
            today_count=len({r.person_identifier for r in today}),
            claimed_today=len([r for r in today if r.status == ClaimStatus.CLAIMED]),
            already_claimed_today=len([r for r in today if r.status == ClaimStatus.CLAIMED_ALREADY]),
            total_logs=len(self.log_rows),
        )


def _matches(r: ClaimLogRow, f: ClaimLogFilter) -> bool:
    if f.search and f.search.lower() not in f"{r.person_identifier} {r.name}".lower():
        return False
    if f.status is not None and r.status != f.status:
        return False
    if f.person_type and r.person_type != f.person_type:
        return False
    if f.start_date and r.claim_date < f.start_date:
        return False
    if f.end_date and r.claim_date > f.end_date:
        return False
    return True


def make_log_row(claim_id: int, identifier: str, name: str, when: datetime, *, status=ClaimStatus.CLAIMED, person_type="employee", position="Agent") -> ClaimLogRow:
    return ClaimLogRow(
        claim_id=claim_id,
        person_identifier=identifier,
        name=name,
        rfid_tag=None,
        department="Operations",
        position=position,
        person_type=person_type,
        status=status,
        claim_date=when.date(),
        time_claimed=when,
    )


@pytest.fixture
def employee() -> Person:
    return Person(
        category=PersonCategory.EMPLOYEE,
        identifier="E-100",
        name="Juan Dela Cruz",
        person_id=1,
        meal_count=3,
        rfid_tag="0004512345",
        status="active",
    )


@pytest.fixture
def intern() -> Person:
    return Person(category=PersonCategory.INTERN, identifier="I-200", name="Maria Santos", person_id=1, rfid_tag="0004598765")


@pytest.fixture
def trainee() -> Person:
    return Person(category=PersonCategory.TRAINEE, identifier="T-300", name="Jose Rizal", person_id=1, rfid_tag="0004511111")


@pytest.fixture
def people(employee, intern, trainee) -> InMemoryPeople:
    return InMemoryPeople([employee, intern, trainee])


@pytest.fixture
def claims() -> InMemoryClaims:
    return InMemoryClaims()


@pytest.fixture
def log_row():
    return make_log_row


@pytest.fixture
def people_of():
    return InMemoryPeople
