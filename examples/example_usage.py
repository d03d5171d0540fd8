"""Example: drive the service layer directly (no Flask).

Controllers are thin; the claim rules live in MealClaimService.
"""

import importlib

from config import get_settings_module

from src.freemeal_tracker.freemeal_tracker.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    decision = container.meal_claim_service.record_claim("E-100")
    print(decision.decision.value, decision.person.meal_count)

    for row in container.meal_claim_service.recent_claims(limit=5):
        print(row.to_dict())


if __name__ == "__main__":
    main()
