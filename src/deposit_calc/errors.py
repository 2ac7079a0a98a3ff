from __future__ import annotations


class ValidationError(ValueError):
    """
    Base class for every input problem the calculator reports back to the caller.

    These are non-fatal: callers keep their last-known-good values and show the message.
    """


class DateError(ValidationError):
    pass


class DateOutOfRange(DateError):
    def __init__(self, field: str, value: int) -> None:
        super().__init__(f"{field} must be between 10000101 and 99991231 (got {value})")
        self.field = field
        self.value = value


class InvalidMonth(DateError):
    def __init__(self, field: str, value: int, month: int) -> None:
        super().__init__(f"{field} has an invalid month {month:02d} (got {value})")
        self.field = field
        self.value = value
        self.month = month


class InvalidDay(DateError):
    def __init__(self, field: str, value: int, day: int) -> None:
        super().__init__(f"{field} has an invalid day {day:02d} for its month (got {value})")
        self.field = field
        self.value = value
        self.day = day


class DateOrderViolation(DateError):
    def __init__(self, save_date: int, draw_date: int) -> None:
        super().__init__(f"save_date {save_date} is after draw_date {draw_date}")
        self.save_date = save_date
        self.draw_date = draw_date


class SpanTooLarge(DateError):
    def __init__(self, days: int, limit: int) -> None:
        super().__init__(f"deposit spans {days} days; at most {limit} days (one century) are supported")
        self.days = days
        self.limit = limit


class PrincipalError(ValidationError):
    pass


class InvalidPrincipal(PrincipalError):
    def __init__(self, raw: object) -> None:
        super().__init__(f"principal is not a number: {raw!r}")
        self.raw = raw


class NegativePrincipal(PrincipalError):
    def __init__(self, value: object) -> None:
        super().__init__(f"principal cannot be negative (got {value})")
        self.value = value


class PrincipalTooLarge(PrincipalError):
    def __init__(self, value: object, limit: object) -> None:
        super().__init__(f"principal {value} is too large; it must be below {limit}")
        self.value = value
        self.limit = limit


class ProductError(ValidationError):
    pass


class RateTooHigh(ProductError):
    def __init__(self, field: str, value: object, limit: object) -> None:
        super().__init__(f"{field} {value}% is too high; it must be at most {limit}%")
        self.field = field
        self.value = value
        self.limit = limit


class InvalidProduct(ProductError):
    """A product edit that the Product model refused (bad term, unknown unit, non-numeric rate)."""

    def __init__(self, index: int, detail: str) -> None:
        super().__init__(f"product {index} rejected: {detail}")
        self.index = index
        self.detail = detail


class InvalidRate(ProductError):
    def __init__(self, field: str, raw: object) -> None:
        super().__init__(f"{field} is not a number: {raw!r}")
        self.field = field
        self.raw = raw
