from __future__ import annotations

import logging
from decimal import (
    Context,
    Decimal,
    DivisionByZero,
    InvalidOperation,
    ROUND_DOWN,
    ROUND_HALF_EVEN,
    ROUND_HALF_UP,
    localcontext,
)
from typing import NamedTuple, Optional

from .fingerprint import Fingerprint
from .models import RenewalPolicy
from .util.dates import advance, day_span, decode_date


logger = logging.getLogger(__name__)

# A withdrawal before the end of a term earns the demand-deposit rate and no bonus.
PENALTY_RATE = Decimal("0.35")
DAY_COUNT_BASIS = Decimal(360)

# Largest magnitude a 96-bit decimal mantissa can hold; anything beyond it counts as overflow.
MAX_DECIMAL = Decimal("79228162514264337593543950335")

_CONTEXT = Context(prec=28, rounding=ROUND_HALF_EVEN, traps=[InvalidOperation, DivisionByZero])
# Rounding to cents must never fail for values that passed _fits().
_ROUNDING_CONTEXT = Context(prec=60, traps=[InvalidOperation])
_CENT = Decimal("0.01")
_HUNDRED = Decimal(100)
_ZERO = Decimal(0)


class AccrualResult(NamedTuple):
    interest: Decimal
    bonus_interest: Decimal


def _fits(value: Decimal) -> bool:
    return value.is_finite() and abs(value) <= MAX_DECIMAL


def _period_amount(principal: Decimal, rate: Decimal, days: int) -> Optional[Decimal]:
    amount = Decimal(days) / DAY_COUNT_BASIS * rate
    if not _fits(amount):
        return None
    amount = amount / _HUNDRED * principal
    return amount if _fits(amount) else None


def _accrue(carried: Decimal, principal: Decimal, rate: Decimal, days: int, rounding: str) -> Decimal:
    """
    Add one period's accrual to `carried` and round the running total to cents.

    Overflow anywhere along the way zeroes the accumulator instead of raising.
    """
    amount = _period_amount(principal, rate, days)
    if amount is not None:
        total = amount + carried
        if _fits(total):
            return total.quantize(_CENT, rounding=rounding, context=_ROUNDING_CONTEXT)
    logger.debug("Accrual overflow (principal=%s rate=%s days=%d); accumulator reset to 0", principal, rate, days)
    return _ZERO


def compute(fp: Fingerprint) -> AccrualResult:
    """
    Walk the deposit term by term and return (interest, bonus_interest).

    Pure function of the fingerprint. Dates are expected to have passed validation already.

    - interest: each period's running total rounds half away from zero to cents
    - bonus_interest: each period's running total truncates toward zero to cents
    - the final period, if cut short by the draw date, earns PENALTY_RATE and no bonus
    """
    if fp.term < 1:
        return AccrualResult(_ZERO, _ZERO)

    save = decode_date(fp.save_date, "save_date")
    draw = decode_date(fp.draw_date, "draw_date")

    with localcontext(_CONTEXT):
        cursor = save
        principal = fp.principal
        interest = _ZERO
        bonus = _ZERO
        rate = fp.interest_rate
        bonus_rate = fp.bonus_rate

        while cursor < draw:
            period_end = advance(cursor, fp.term_unit, fp.term)
            if period_end > draw:
                period_end = draw
                rate = PENALTY_RATE
                bonus_rate = _ZERO

            days = day_span(cursor, period_end)
            interest = _accrue(interest, principal, rate, days, ROUND_HALF_UP)
            bonus = _accrue(bonus, principal, bonus_rate, days, ROUND_DOWN)

            if fp.renewal_policy is RenewalPolicy.NO_RENEW:
                break
            if fp.renewal_policy is RenewalPolicy.RENEW_PRINCIPAL_AND_INTEREST:
                principal = principal + interest
                if not _fits(principal):
                    principal = _ZERO
                interest = _ZERO

            cursor = period_end

        return AccrualResult(principal - fp.principal + interest, bonus)
