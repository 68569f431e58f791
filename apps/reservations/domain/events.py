"""
Reservation Domain Events

Events recorded by the ReservationManager inside a unit of work and
published after the transaction commits.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional

from shared.domain.base import DomainEvent


@dataclass
class ReservationCreated(DomainEvent):
    """A room was booked (status confirmed, room now occupied)."""
    reservation_id: Optional[int] = None
    room_id: Optional[int] = None
    guest_id: Optional[int] = None
    check_in: Optional[datetime] = None
    check_out: Optional[datetime] = None
    total_amount: Decimal = Decimal("0.00")
    guest_created: bool = False


@dataclass
class ReservationUpdated(DomainEvent):
    """Guest details, dates, head count or status of a reservation changed."""
    reservation_id: Optional[int] = None
    changed_fields: list = field(default_factory=list)
    status: str = ''


@dataclass
class ReservationDeleted(DomainEvent):
    """A reservation record was removed."""
    reservation_id: Optional[int] = None
    room_id: Optional[int] = None


@dataclass
class RoomStatusChanged(DomainEvent):
    """Room occupancy was re-derived from its active reservations."""
    room_id: Optional[int] = None
    old_status: str = ''
    new_status: str = ''
