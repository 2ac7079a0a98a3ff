from __future__ import annotations

import sys
from decimal import Decimal
from pathlib import Path
from typing import Any

import pytest


ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from deposit_calc.fingerprint import Fingerprint  # noqa: E402
from deposit_calc.models import RenewalPolicy, TermUnit  # noqa: E402


def pytest_configure(config: Any) -> None:
    config.addinivalue_line(
        "markers",
        "threaded: tests that start the background compute worker",
    )


def make_fp(
    *,
    principal: str = "10000",
    save_date: int = 20230101,
    draw_date: int = 20241231,
    term: int = 7,
    term_unit: TermUnit = TermUnit.DAY,
    interest_rate: str = "1.85",
    bonus_rate: str = "3.00",
    renewal_policy: RenewalPolicy = RenewalPolicy.NO_RENEW,
) -> Fingerprint:
    return Fingerprint(
        principal=Decimal(principal),
        save_date=save_date,
        draw_date=draw_date,
        term=term,
        term_unit=term_unit,
        interest_rate=Decimal(interest_rate),
        bonus_rate=Decimal(bonus_rate),
        renewal_policy=renewal_policy,
    )


@pytest.fixture
def fp_factory():
    return make_fp
