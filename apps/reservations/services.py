"""Reservation Manager.

Owns the rule that a room cannot be double-booked, the total-amount
computation and the reservation status lifecycle. The request layer talks
to it through ``get_reservation_manager()``; persistence goes through an
injected ``ReservationStore``.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, time
from typing import Any, Mapping

from django.conf import settings  # type: ignore
from django.db import DEFAULT_DB_ALIAS  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.dateparse import parse_date, parse_datetime  # type: ignore
from django.utils.module_loading import import_string  # type: ignore

from apps.guests.models import Guest
from apps.rooms.models import Room
from shared.domain.exceptions import ConflictError, NotFoundError, ValidationError
from shared.domain.value_objects import StayPeriod

from .domain.assignment import CheckoutTiming, RoomAssignment
from .domain.events import (
    ReservationCreated,
    ReservationDeleted,
    ReservationUpdated,
    RoomStatusChanged,
)
from .models import Reservation
from .store import ReservationStore

logger = logging.getLogger(__name__)

DEFAULT_STORE_CLASS = "apps.reservations.store.DjangoReservationStore"

GUEST_FIELDS = ("guest_name", "guest_email", "guest_phone")
RESERVATION_FIELDS = ("check_in", "check_out", "number_of_guests", "status", "special_requests")


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _as_datetime(value: Any, field_name: str) -> datetime:
    """Accept datetimes, dates and ISO strings; always return an aware datetime."""

    if isinstance(value, str):
        parsed = parse_datetime(value.strip())
        if parsed is None:
            parsed_date = parse_date(value.strip())
            if parsed_date is None:
                raise ValidationError(f"Invalid value for {field_name}", errors=[f"{field_name}: invalid date"])
            value = parsed_date
        else:
            value = parsed
    if isinstance(value, date) and not isinstance(value, datetime):
        value = datetime.combine(value, time.min)
    if not isinstance(value, datetime):
        raise ValidationError(f"Invalid value for {field_name}", errors=[f"{field_name}: invalid date"])
    if timezone.is_naive(value):
        value = timezone.make_aware(value)
    return value


def _stay_period(check_in: datetime, check_out: datetime) -> StayPeriod:
    try:
        return StayPeriod(check_in, check_out)
    except ValueError as exc:
        raise ValidationError(
            "Check-out must be after check-in",
            errors=["checkOut: must be after checkIn"],
        ) from exc


def _number_of_guests(value: Any) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError("Number of guests must be a whole number") from exc
    if number < 1:
        raise ValidationError("Number of guests must be at least 1")
    return number


def normalize_status(value: Any) -> str:
    """Map ``"CHECKED_IN"``, ``"Checked-In"`` and friends onto the canonical status."""

    candidate = str(value or "").strip().lower().replace("-", "_").replace(" ", "_")
    if candidate not in Reservation.Status.values:
        allowed = ", ".join(Reservation.Status.values)
        raise ValidationError(f"Invalid status '{value}'. Allowed: {allowed}")
    return candidate


class ReservationManager:
    """Use cases over rooms, guests and reservations."""

    def __init__(self, store: ReservationStore):
        self.store = store

    def __repr__(self) -> str:
        return f"ReservationManager(store={self.store!r})"

    # ------------------------------------
    # Commands
    # ------------------------------------
    def create_reservation(
        self,
        guest_name: str,
        guest_email: str,
        guest_phone: str | None,
        room_id: Any,
        check_in: Any,
        check_out: Any,
        number_of_guests: Any = 1,
        special_requests: str = "",
    ) -> Reservation:
        missing = [
            name
            for name, value in (
                ("guestName", guest_name),
                ("guestEmail", guest_email),
                ("roomId", room_id),
                ("checkIn", check_in),
                ("checkOut", check_out),
            )
            if _is_blank(value)
        ]
        if missing:
            raise ValidationError(
                "Missing required fields",
                errors=[f"{name}: This field is required." for name in missing],
            )

        period = _stay_period(_as_datetime(check_in, "checkIn"), _as_datetime(check_out, "checkOut"))
        guests = _number_of_guests(number_of_guests)
        email = Guest.objects.normalize_email(guest_email)

        with self.store.unit_of_work() as uow:
            room = self.store.find_room(room_id, lock=True)
            if room is None:
                raise NotFoundError("Room not found")

            if not room.is_available:
                logger.warning("Room %s rejected booking: status is %s", room.number, room.status)
                raise ConflictError(f"Room {room.number} is not available (status: {room.status})")

            self._ensure_no_overlap(room, period)

            guest = self.store.find_guest_by_email(email)
            guest_created = guest is None
            if guest_created:
                guest = self.store.create_guest(
                    name=guest_name.strip(),
                    email=email,
                    phone=(guest_phone or "").strip(),
                )

            reservation = self.store.insert_reservation(
                guest=guest,
                room=room,
                check_in=period.check_in,
                check_out=period.check_out,
                number_of_guests=guests,
                total_amount=period.total_for(room.price),
                status=Reservation.Status.CONFIRMED,
                special_requests=(special_requests or "").strip(),
            )

            self.store.update_room_status(room.pk, Room.Status.OCCUPIED)
            uow.add_event(
                RoomStatusChanged(
                    aggregate_id=room.pk,
                    room_id=room.pk,
                    old_status=room.status,
                    new_status=Room.Status.OCCUPIED,
                )
            )
            room.status = Room.Status.OCCUPIED

            uow.add_event(
                ReservationCreated(
                    aggregate_id=reservation.pk,
                    reservation_id=reservation.pk,
                    room_id=room.pk,
                    guest_id=guest.pk,
                    check_in=period.check_in,
                    check_out=period.check_out,
                    total_amount=reservation.total_amount,
                    guest_created=guest_created,
                )
            )

        logger.info(
            "Reservation %s created: room=%s guest=%s nights=%s total=%s",
            reservation.pk,
            room.number,
            guest.email,
            period.nights,
            reservation.total_amount,
        )
        return reservation

    def update_reservation(self, reservation_id: Any, changes: Mapping[str, Any]) -> Reservation:
        unsupported = sorted(set(changes) - set(GUEST_FIELDS) - set(RESERVATION_FIELDS))
        if unsupported:
            raise ValidationError(
                "Unsupported fields in update",
                errors=[f"{name}: cannot be changed" for name in unsupported],
            )

        with self.store.unit_of_work() as uow:
            reservation = self.store.find_reservation(reservation_id, lock=True)
            if reservation is None:
                raise NotFoundError("Reservation not found")

            changed_fields = self._apply_guest_changes(reservation.guest, changes)
            fields = self._reservation_changes(reservation, changes)

            period = _stay_period(
                fields.get("check_in", reservation.check_in),
                fields.get("check_out", reservation.check_out),
            )
            dates_changed = "check_in" in fields or "check_out" in fields
            status_changed = "status" in fields
            new_status = fields.get("status", reservation.status)

            if (dates_changed or status_changed) and new_status in Reservation.ACTIVE_STATUSES:
                room = self.store.find_room(reservation.room_id, lock=True)
                self._ensure_no_overlap(room, period, exclude_id=reservation.pk)

            if dates_changed:
                fields["total_amount"] = period.total_for(reservation.room.price)

            changed_fields.extend(fields)
            reservation = self.store.update_reservation(reservation.pk, **fields)

            if status_changed:
                self._sync_room_status(reservation.room_id, uow)

            uow.add_event(
                ReservationUpdated(
                    aggregate_id=reservation.pk,
                    reservation_id=reservation.pk,
                    changed_fields=changed_fields,
                    status=reservation.status,
                )
            )

        logger.info(
            "Reservation %s updated: room=%s status=%s fields=%s",
            reservation.pk,
            reservation.room.number,
            reservation.status,
            ",".join(changed_fields) or "-",
        )
        return reservation

    def delete_reservation(self, reservation_id: Any) -> None:
        with self.store.unit_of_work() as uow:
            reservation = self.store.find_reservation(reservation_id, lock=True)
            if reservation is None:
                raise NotFoundError("Reservation not found")

            room_id = reservation.room_id
            self.store.delete_reservation(reservation.pk)
            room_status = self._sync_room_status(room_id, uow)
            uow.add_event(
                ReservationDeleted(
                    aggregate_id=reservation.pk,
                    reservation_id=reservation.pk,
                    room_id=room_id,
                )
            )

        logger.info(
            "Reservation %s deleted: room=%s room_status=%s",
            reservation_id,
            reservation.room.number,
            room_status,
        )

    # ------------------------------------
    # Queries
    # ------------------------------------
    def get_reservation(self, reservation_id: Any) -> Reservation:
        reservation = self.store.find_reservation(reservation_id)
        if reservation is None:
            raise NotFoundError("Reservation not found")
        return reservation

    def get_room_by_reservation(self, reservation_id: Any) -> RoomAssignment:
        reservation = self.get_reservation(reservation_id)
        return RoomAssignment(room_number=reservation.room.number, reservation=reservation)

    def list_reservations(self) -> list[Reservation]:
        return self.store.list_reservations(order_by=("-created_at", "-id"))

    def checkout_timing(self, reservation_id: Any, now: datetime | None = None) -> CheckoutTiming:
        reservation = self.get_reservation(reservation_id)
        countdown = reservation.period.countdown(now or timezone.now())
        return CheckoutTiming(reservation=reservation, countdown=countdown)

    # ------------------------------------
    # Helpers
    # ------------------------------------
    def _ensure_no_overlap(self, room: Room, period: StayPeriod, *, exclude_id: int | None = None) -> None:
        conflicts = self.store.find_conflicting_reservations(
            room.pk,
            period.check_in,
            period.check_out,
            Reservation.ACTIVE_STATUSES,
            exclude_id=exclude_id,
        )
        if conflicts:
            logger.warning(
                "Overlap on room %s for %s: conflicts with reservation(s) %s",
                room.number,
                period,
                ", ".join(str(item.pk) for item in conflicts),
            )
            raise ConflictError(f"Room {room.number} is already booked for the selected dates")

    def _apply_guest_changes(self, guest: Guest, changes: Mapping[str, Any]) -> list[str]:
        fields: dict[str, Any] = {}

        if "guest_name" in changes:
            if _is_blank(changes["guest_name"]):
                raise ValidationError("Guest name cannot be empty")
            name = changes["guest_name"].strip()
            if name != guest.name:
                fields["name"] = name

        if "guest_email" in changes:
            if _is_blank(changes["guest_email"]):
                raise ValidationError("Guest email cannot be empty")
            email = Guest.objects.normalize_email(changes["guest_email"])
            if email != guest.email:
                other = self.store.find_guest_by_email(email)
                if other is not None and other.pk != guest.pk:
                    raise ConflictError("Another guest already uses this email")
                fields["email"] = email

        if "guest_phone" in changes:
            phone = (changes["guest_phone"] or "").strip()
            if phone != guest.phone:
                fields["phone"] = phone

        if fields:
            self.store.update_guest(guest.pk, **fields)
        return [f"guest_{name}" for name in fields]

    def _reservation_changes(self, reservation: Reservation, changes: Mapping[str, Any]) -> dict[str, Any]:
        fields: dict[str, Any] = {}

        for name, label in (("check_in", "checkIn"), ("check_out", "checkOut")):
            if name in changes:
                value = _as_datetime(changes[name], label)
                if value != getattr(reservation, name):
                    fields[name] = value

        if "number_of_guests" in changes:
            guests = _number_of_guests(changes["number_of_guests"])
            if guests != reservation.number_of_guests:
                fields["number_of_guests"] = guests

        if "status" in changes:
            status = normalize_status(changes["status"])
            if status != reservation.status:
                fields["status"] = status

        if "special_requests" in changes:
            special_requests = (changes["special_requests"] or "").strip()
            if special_requests != reservation.special_requests:
                fields["special_requests"] = special_requests

        return fields

    def _sync_room_status(self, room_id: int, uow) -> str | None:
        """Re-derive room occupancy from the active reservations still on it."""

        room = self.store.find_room(room_id, lock=True)
        if room is None:
            return None
        if room.is_out_of_service:
            return room.status

        active = self.store.count_active_reservations(room_id, Reservation.ACTIVE_STATUSES)
        new_status = Room.Status.OCCUPIED if active else Room.Status.AVAILABLE
        if new_status != room.status:
            self.store.update_room_status(room_id, new_status)
            uow.add_event(
                RoomStatusChanged(
                    aggregate_id=room_id,
                    room_id=room_id,
                    old_status=room.status,
                    new_status=new_status,
                )
            )
        return new_status


def get_reservation_manager() -> ReservationManager:
    """Build a manager around the store configured in ``HOTEL_RESERVATIONS``."""

    config = getattr(settings, "HOTEL_RESERVATIONS", {})
    store_class = import_string(config.get("STORE_CLASS", DEFAULT_STORE_CLASS))
    store = store_class(using=config.get("DATABASE_ALIAS", DEFAULT_DB_ALIAS))
    return ReservationManager(store)
