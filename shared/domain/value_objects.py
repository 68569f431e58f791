"""
Common Value Objects

- StayPeriod: check-in to check-out timestamps of a hotel stay
- CheckoutCountdown: time left until a stay ends
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal

from shared.domain.base import ValueObject

ONE_DAY = timedelta(days=1)


@dataclass(frozen=True)
class CheckoutCountdown(ValueObject):
    """Remaining time until check-out, split for display."""
    days: int
    hours: int
    minutes: int
    seconds: int
    overdue: bool

    def as_dict(self) -> dict:
        return {
            'days': self.days,
            'hours': self.hours,
            'minutes': self.minutes,
            'seconds': self.seconds,
        }


@dataclass(frozen=True)
class StayPeriod(ValueObject):
    """
    Stay period value object

    Both ends are timestamps. check_out must be strictly after check_in.
    """
    check_in: datetime
    check_out: datetime

    def __post_init__(self):
        if self.check_out <= self.check_in:
            raise ValueError(
                f"Check-out ({self.check_out.isoformat()}) must be after "
                f"check-in ({self.check_in.isoformat()})"
            )

    def overlaps_with(self, other: 'StayPeriod') -> bool:
        """
        Check if this stay intersects another one

        Both ends are treated as inclusive: a stay that starts at the exact
        instant another one ends is reported as overlapping.

        Examples (days of the month):
            - StayPeriod(15, 18) overlaps with StayPeriod(17, 20) -> True
            - StayPeriod(15, 18) overlaps with StayPeriod(18, 21) -> True
            - StayPeriod(15, 18) overlaps with StayPeriod(19, 21) -> False
        """
        if not isinstance(other, StayPeriod):
            raise TypeError("Can only check overlap with another StayPeriod")

        return (other.check_in <= self.check_out and
                other.check_out >= self.check_in)

    @property
    def duration(self) -> timedelta:
        return self.check_out - self.check_in

    @property
    def nights(self) -> int:
        """
        Number of billable nights

        Any started day counts as a full night (2 days 20 hours -> 3).
        """
        whole_days, remainder = divmod(self.duration, ONE_DAY)
        return whole_days + (1 if remainder else 0)

    def total_for(self, nightly_price: Decimal) -> Decimal:
        """Price of the stay at the given nightly rate"""
        return Decimal(nightly_price) * self.nights

    def countdown(self, now: datetime) -> CheckoutCountdown:
        """Time left from ``now`` until check-out"""
        remaining = self.check_out - now
        if remaining <= timedelta(0):
            return CheckoutCountdown(days=0, hours=0, minutes=0, seconds=0, overdue=True)

        total_seconds = int(remaining.total_seconds())
        days, rest = divmod(total_seconds, 86400)
        hours, rest = divmod(rest, 3600)
        minutes, seconds = divmod(rest, 60)
        return CheckoutCountdown(
            days=days,
            hours=hours,
            minutes=minutes,
            seconds=seconds,
            overdue=False,
        )

    def __str__(self):
        return f"{self.check_in:%d.%m.%Y %H:%M} - {self.check_out:%d.%m.%Y %H:%M}"

    def __repr__(self):
        return f"StayPeriod({self.check_in.isoformat()}, {self.check_out.isoformat()})"
