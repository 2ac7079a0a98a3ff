from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from .models import Order, Product, RenewalPolicy, TermUnit


@dataclass(frozen=True)
class Fingerprint:
    """
    Every input the accrual engine reads, and nothing else.

    Used as the cache and work-queue key: equal fingerprints always produce equal results.
    `Order.days` and the product's output fields are deliberately absent.
    """

    principal: Decimal
    save_date: int
    draw_date: int
    term: int
    term_unit: TermUnit
    interest_rate: Decimal
    bonus_rate: Decimal
    renewal_policy: RenewalPolicy

    @classmethod
    def from_order_product(cls, order: Order, product: Product) -> "Fingerprint":
        return cls(
            principal=order.principal,
            save_date=order.save_date,
            draw_date=order.draw_date,
            term=product.term,
            term_unit=product.term_unit,
            interest_rate=product.interest_rate,
            bonus_rate=product.bonus_rate,
            renewal_policy=product.renewal_policy,
        )
