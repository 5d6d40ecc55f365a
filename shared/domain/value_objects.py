"""
Common Value Objects

Value objects used across multiple domains:
- Money: Represents monetary amounts with currency
- DateRange: Represents a stay period (check-in to check-out)
"""

import math
from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from decimal import Decimal

from shared.domain.base import ValueObject

SUPPORTED_CURRENCIES = ('USD', 'EUR', 'GBP', 'CAD', 'AUD')

SECONDS_PER_DAY = 24 * 60 * 60


@dataclass(frozen=True)
class Money(ValueObject):
    """
    Money value object

    Represents a non-negative monetary amount with currency.
    Immutable and supports arithmetic operations.
    """
    amount: Decimal
    currency: str = 'USD'

    def __post_init__(self):
        if not isinstance(self.amount, Decimal):
            object.__setattr__(self, 'amount', Decimal(str(self.amount)))
        if self.amount < 0:
            raise ValueError("Amount cannot be negative")
        if not self.currency:
            raise ValueError("Currency is required")
        if self.currency not in SUPPORTED_CURRENCIES:
            raise ValueError(f"Unsupported currency: {self.currency}")

    def __add__(self, other: 'Money') -> 'Money':
        """Add two money objects"""
        if not isinstance(other, Money):
            raise TypeError("Can only add Money to Money")
        if self.currency != other.currency:
            raise ValueError(f"Cannot add different currencies: {self.currency} and {other.currency}")
        return Money(self.amount + other.amount, self.currency)

    def __mul__(self, factor: int | Decimal) -> 'Money':
        """Multiply money by a factor"""
        if not isinstance(factor, (int, Decimal)):
            raise TypeError("Can only multiply Money by int or Decimal")
        return Money(self.amount * Decimal(factor), self.currency)

    def __str__(self):
        return f"{self.amount:,.2f} {self.currency}"

    def __repr__(self):
        return f"Money({self.amount}, '{self.currency}')"


def as_utc_datetime(value: date | datetime) -> datetime:
    """Normalize a date or datetime to an aware UTC datetime.

    A bare date is read as midnight UTC; a naive datetime is assumed to be UTC.
    """
    if not isinstance(value, datetime):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass(frozen=True)
class DateRange(ValueObject):
    """
    Stay period value object

    Bounds are aware datetimes. Overlap is tested on the closed interval
    [start, end], so a range ending exactly where another starts overlaps it.
    """
    start: datetime
    end: datetime

    def __post_init__(self):
        object.__setattr__(self, 'start', as_utc_datetime(self.start))
        object.__setattr__(self, 'end', as_utc_datetime(self.end))
        if self.start >= self.end:
            raise ValueError(f"Check-out ({self.end:%Y-%m-%d}) must be after check-in ({self.start:%Y-%m-%d})")

    def overlaps_with(self, other: 'DateRange') -> bool:
        """
        Check if this range overlaps with another

        Closed-interval test: touching bounds count as an overlap.

        Examples:
            - DateRange(1, 4) overlaps with DateRange(3, 5) -> True
            - DateRange(1, 4) overlaps with DateRange(4, 6) -> True (shared boundary)
            - DateRange(1, 4) overlaps with DateRange(5, 6) -> False
        """
        if not isinstance(other, DateRange):
            raise TypeError("Can only check overlap with another DateRange")

        return self.start <= other.end and self.end >= other.start

    def starts_before(self, day: date) -> bool:
        return self.start.date() < day

    @property
    def nights(self) -> int:
        """Number of nights, partial days rounded up."""
        seconds = (self.end - self.start).total_seconds()
        return math.ceil(seconds / SECONDS_PER_DAY)

    def __len__(self) -> int:
        return self.nights

    def __str__(self):
        return f"{self.start:%Y-%m-%d} - {self.end:%Y-%m-%d}"

    def __repr__(self):
        return f"DateRange({self.start.isoformat()}, {self.end.isoformat()})"
