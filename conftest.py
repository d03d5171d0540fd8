from __future__ import annotations

from datetime import datetime

import pytest


@pytest.fixture
def fixed_now() -> datetime:
    # Monday
    return datetime(2024, 6, 3, 8, 0, 0)
