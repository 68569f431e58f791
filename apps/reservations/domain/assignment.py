"""Read models returned by the ReservationManager."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from shared.domain.value_objects import CheckoutCountdown

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from apps.reservations.models import Reservation


@dataclass(frozen=True)
class RoomAssignment:
    room_number: str
    reservation: "Reservation"


@dataclass(frozen=True)
class CheckoutTiming:
    reservation: "Reservation"
    countdown: CheckoutCountdown
