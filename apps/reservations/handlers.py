"""
Reservation Event Handlers

Audit logging for events published after a reservation unit of work
commits.
"""

import logging

from shared.application.message_bus import MessageBus, message_bus

from .domain.events import (
    ReservationCreated,
    ReservationDeleted,
    ReservationUpdated,
    RoomStatusChanged,
)

logger = logging.getLogger(__name__)


def log_reservation_created(event: ReservationCreated):
    logger.info(
        "event=%s reservation=%s room=%s guest=%s new_guest=%s total=%s",
        event.event_type,
        event.reservation_id,
        event.room_id,
        event.guest_id,
        event.guest_created,
        event.total_amount,
    )


def log_reservation_updated(event: ReservationUpdated):
    logger.info(
        "event=%s reservation=%s status=%s fields=%s",
        event.event_type,
        event.reservation_id,
        event.status,
        ",".join(event.changed_fields) or "-",
    )


def log_reservation_deleted(event: ReservationDeleted):
    logger.info("event=%s reservation=%s room=%s", event.event_type, event.reservation_id, event.room_id)


def log_room_status_changed(event: RoomStatusChanged):
    logger.info(
        "event=%s room=%s %s -> %s",
        event.event_type,
        event.room_id,
        event.old_status,
        event.new_status,
    )


def register_handlers(bus: MessageBus = message_bus):
    """Called from ReservationsConfig.ready()"""
    bus.register_event_handler(ReservationCreated, log_reservation_created)
    bus.register_event_handler(ReservationUpdated, log_reservation_updated)
    bus.register_event_handler(ReservationDeleted, log_reservation_deleted)
    bus.register_event_handler(RoomStatusChanged, log_room_status_changed)
