from __future__ import annotations

from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field


class TermUnit(str, Enum):
    DAY = "day"
    MONTH = "month"
    YEAR = "year"

    def label(self, term: int) -> str:
        noun = self.value if term == 1 else f"{self.value}s"
        return f"{term} {noun}"


class RenewalPolicy(str, Enum):
    NO_RENEW = "none"
    RENEW_PRINCIPAL = "principal"
    RENEW_PRINCIPAL_AND_INTEREST = "principal_and_interest"

    def label(self) -> str:
        return {
            RenewalPolicy.NO_RENEW: "no renewal",
            RenewalPolicy.RENEW_PRINCIPAL: "renew principal",
            RenewalPolicy.RENEW_PRINCIPAL_AND_INTEREST: "renew principal + interest",
        }[self]


class Order(BaseModel):
    principal: Decimal = Decimal("0.00")
    save_date: int
    draw_date: int

    # Derived from save_date/draw_date by validate_and_derive_days(); never set by hand.
    days: int = 0


class Product(BaseModel):
    term: int = Field(default=0, ge=0)
    term_unit: TermUnit = TermUnit.DAY
    interest_rate: Decimal = Decimal("0")
    bonus_rate: Decimal = Decimal("0")
    renewal_policy: RenewalPolicy = RenewalPolicy.NO_RENEW

    # Outputs of the last successful computation.
    interest: Decimal = Decimal("0")
    bonus_interest: Decimal = Decimal("0")

    @property
    def term_label(self) -> str:
        return self.term_unit.label(self.term)
