from __future__ import annotations

from contextlib import nullcontext
from dataclasses import replace
from datetime import datetime
from typing import Callable, ContextManager, Optional, Sequence

from ..app_logger import get_logger
from ..common.datetime_utils import now_local
from ..common.validators import require_non_empty
from ..core.enums import ClaimDecisionCode
from ..core.exceptions import ConcurrencyConflict, InternalError, NotFoundError
from ..people.model import Person
from ..people.repository import PeopleDirectory
from .model import ClaimDecision, ClaimEvent, ClaimLogRow
from .repository import ClaimRepository

logger = get_logger(__name__)


class MealClaimService:
    """Use case: one RFID / ID scan at the kiosk.

    Per (person, calendar date):
    - first scan creates a CLAIMED row -> CLAIMED
    - second scan amends that row to CLAIMED_ALREADY -> CLAIMED_ALREADY
    - any later scan changes nothing -> BLOCKED

    Duplicate creates racing each other are resolved by the store's unique
    (person, date) key: the loser gets ConcurrencyConflict and takes the amend path.
    """

    def __init__(
        self,
        claims: ClaimRepository,
        people: PeopleDirectory,
        *,
        transaction: Optional[Callable[[], ContextManager]] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._claims = claims
        self._people = people
        self._transaction = transaction or nullcontext
        self._clock = clock

    def resolve_person(self, identifier: str) -> Person:
        identifier = require_non_empty(identifier, "RFID tag / ID number")
        matches = list(self._people.resolve_person(identifier))
        if not matches:
            raise NotFoundError("Person not found for the provided RFID tag.")
        if len(matches) > 1:
            logger.error(
                "identifier %r matches %d people (%s)",
                identifier,
                len(matches),
                ", ".join(f"{p.category.value}:{p.identifier}" for p in matches),
            )
            raise InternalError("Identifier matches more than one person.")
        return matches[0]

    def record_claim(self, person_identifier: str, *, effective_timestamp: Optional[datetime] = None) -> ClaimDecision:
        person = self.resolve_person(person_identifier)
        now = self._clock()
        effective_timestamp = effective_timestamp or now

        with self._transaction():
            claim, decision = self._decide(person, effective_timestamp)
            person = self._apply_meal_counter(person, decision, now)

        logger.info(
            "meal claim %s: %s %s on %s",
            decision.value,
            person.category.value,
            person.identifier,
            claim.claim_date.isoformat(),
        )
        return ClaimDecision(person=person, claim=claim, decision=decision)

    def recent_claims(self, *, limit: int, offset: int = 0) -> Sequence[ClaimLogRow]:
        return self._claims.list_recent(limit=int(limit), offset=int(offset))

    def _decide(self, person: Person, effective_timestamp: datetime) -> tuple[ClaimEvent, ClaimDecisionCode]:
        claim_date = effective_timestamp.date()
        existing = self._claims.find_claim_for_date(person.identifier, claim_date)

        if existing is None:
            try:
                created = self._claims.create_claim(
                    person_identifier=person.identifier,
                    claim_date=claim_date,
                    effective_timestamp=effective_timestamp,
                    meal_type=person.category.value,
                )
                return created, ClaimDecisionCode.CLAIMED
            except ConcurrencyConflict:
                logger.warning("concurrent first claim for %s on %s, amending instead", person.identifier, claim_date)
                existing = self._claims.find_claim_for_date(person.identifier, claim_date, lock=True)
                if existing is None:
                    raise InternalError("Claim conflict reported but no claim row found.")

        if existing.is_open_claim:
            if self._claims.amend_claim(existing.claim_id):
                return existing.as_amended(), ClaimDecisionCode.CLAIMED_ALREADY
            # Another scan amended it first.
            existing = self._claims.find_claim_for_date(person.identifier, claim_date, lock=True) or existing.as_amended()

        return existing, ClaimDecisionCode.BLOCKED

    def _apply_meal_counter(self, person: Person, decision: ClaimDecisionCode, now: datetime) -> Person:
        if decision == ClaimDecisionCode.CLAIMED and person.has_meal_counter and person.meal_count > 0:
            if self._people.decrement_meal_count(person, at=now):
                return replace(person, meal_count=person.meal_count - 1)

        self._people.touch_last_active(person, at=now)
        return person
