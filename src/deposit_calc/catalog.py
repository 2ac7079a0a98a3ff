from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from typing import List, Optional

from .models import Order, Product, RenewalPolicy, TermUnit
from .util.dates import advance, day_span, encode_date


# (term, unit, interest rate %, bonus rate %); each is offered with both renewal policies.
_STOCK_TERMS = [
    (7, TermUnit.DAY, "1.85", "3.00"),
    (3, TermUnit.MONTH, "1.60", "3.00"),
    (6, TermUnit.MONTH, "1.80", "3.45"),
    (1, TermUnit.YEAR, "2.00", "3.45"),
    (3, TermUnit.YEAR, "3.15", "2.00"),
    (5, TermUnit.YEAR, "3.65", "2.00"),
]


def default_products() -> List[Product]:
    out: List[Product] = []
    for term, unit, rate, bonus in _STOCK_TERMS:
        for policy in (RenewalPolicy.RENEW_PRINCIPAL, RenewalPolicy.RENEW_PRINCIPAL_AND_INTEREST):
            out.append(
                Product(
                    term=term,
                    term_unit=unit,
                    interest_rate=Decimal(rate),
                    bonus_rate=Decimal(bonus),
                    renewal_policy=policy,
                )
            )
    return out


def local_today(utc_offset_hours: int) -> date:
    return datetime.now(timezone(timedelta(hours=utc_offset_hours))).date()


def default_order(utc_offset_hours: int = 8, today: Optional[date] = None) -> Order:
    """
    A zero-principal order deposited today and withdrawn one year later.

    A Feb 29 deposit is withdrawn on Feb 28 of the following year.
    """
    save = today or local_today(utc_offset_hours)
    draw = advance(save, TermUnit.YEAR, 1)
    return Order(
        principal=Decimal("0.00"),
        save_date=encode_date(save),
        draw_date=encode_date(draw),
        days=day_span(save, draw),
    )
