"""Persistence store consumed by the ReservationManager.

The manager never touches the ORM directly. It receives a store handle
at construction time and runs every multi-step write inside the store's
unit of work, so the conflict check, the reservation write and the room
status write commit or roll back together.
"""

from __future__ import annotations

import functools
import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Iterable, Sequence

from django.db import DEFAULT_DB_ALIAS, DatabaseError, IntegrityError, connections  # type: ignore
from django.utils import timezone  # type: ignore

from apps.guests.models import Guest
from apps.rooms.models import Room
from shared.application.message_bus import MessageBus
from shared.application.uow import DjangoUnitOfWork
from shared.domain.exceptions import ConflictError, NotFoundError, StoreError

from .models import Reservation

logger = logging.getLogger(__name__)


def _translate_errors(method):
    """Re-raise ORM failures as domain errors."""

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except IntegrityError as exc:
            logger.warning("Integrity error in %s: %s", method.__name__, exc)
            raise ConflictError("Record conflicts with existing data") from exc
        except DatabaseError as exc:
            logger.error("Store operation %s failed: %s", method.__name__, exc, exc_info=True)
            raise StoreError() from exc

    return wrapper


def _as_pk(value: Any) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


class ReservationStore(ABC):
    """Contract between the ReservationManager and the database.

    ``connect`` and ``disconnect`` are for long-lived callers such as
    management commands. Inside a request Django opens the connection
    lazily and closes it through ``close_old_connections`` according to
    ``CONN_MAX_AGE``, so views never call them.
    """

    @abstractmethod
    def connect(self) -> None: ...

    @abstractmethod
    def disconnect(self) -> None: ...

    @abstractmethod
    def health_check(self) -> dict[str, str]: ...

    @abstractmethod
    def unit_of_work(self) -> DjangoUnitOfWork:
        """Atomic scope for multi-step writes."""

    @abstractmethod
    def find_room(self, room_id: Any, *, lock: bool = False) -> Room | None: ...

    @abstractmethod
    def update_room_status(self, room_id: int, status: str) -> bool: ...

    @abstractmethod
    def find_guest_by_email(self, email: str) -> Guest | None: ...

    @abstractmethod
    def create_guest(self, **fields: Any) -> Guest: ...

    @abstractmethod
    def update_guest(self, guest_id: int, **fields: Any) -> Guest: ...

    @abstractmethod
    def find_reservation(self, reservation_id: Any, *, lock: bool = False) -> Reservation | None: ...

    @abstractmethod
    def find_conflicting_reservations(
        self,
        room_id: int,
        check_in: datetime,
        check_out: datetime,
        statuses: Iterable[str],
        *,
        exclude_id: int | None = None,
    ) -> list[Reservation]: ...

    @abstractmethod
    def count_active_reservations(
        self,
        room_id: int,
        statuses: Iterable[str],
        *,
        exclude_id: int | None = None,
    ) -> int: ...

    @abstractmethod
    def insert_reservation(self, **fields: Any) -> Reservation: ...

    @abstractmethod
    def update_reservation(self, reservation_id: int, **fields: Any) -> Reservation: ...

    @abstractmethod
    def delete_reservation(self, reservation_id: int) -> bool: ...

    @abstractmethod
    def list_reservations(self, order_by: Sequence[str] = ("-created_at", "-id")) -> list[Reservation]: ...


class DjangoReservationStore(ReservationStore):
    """ORM-backed store bound to one database alias."""

    def __init__(self, using: str = DEFAULT_DB_ALIAS, bus: MessageBus | None = None):
        self.using = using
        self._bus = bus

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(using={self.using!r})"

    @property
    def connection(self):
        return connections[self.using]

    # ------------------------------------
    # Lifecycle
    # ------------------------------------
    @_translate_errors
    def connect(self) -> None:
        self.connection.ensure_connection()
        logger.info("Database connection established (alias=%s)", self.using)

    def disconnect(self) -> None:
        self.connection.close()
        logger.info("Database connection closed (alias=%s)", self.using)

    def health_check(self) -> dict[str, str]:
        try:
            with self.connection.cursor() as cursor:
                cursor.execute("SELECT 1")
                cursor.fetchone()
        except DatabaseError as exc:
            logger.error("Database health check failed: %s", exc)
            return {"status": "unhealthy", "message": "Database connection failed", "error": str(exc)}
        return {"status": "healthy", "message": "Database is responsive"}

    def unit_of_work(self) -> DjangoUnitOfWork:
        return DjangoUnitOfWork(using=self.using, bus=self._bus)

    def _lock_queryset_if_possible(self, queryset, *, of: tuple[str, ...] = ()):
        """Apply select_for_update when inside transaction.atomic() on a backend that supports it."""

        connection = self.connection
        if not connection.in_atomic_block or not connection.features.has_select_for_update:
            return queryset
        if of and connection.features.has_select_for_update_of:
            return queryset.select_for_update(of=of)
        return queryset.select_for_update()

    # ------------------------------------
    # Rooms
    # ------------------------------------
    @_translate_errors
    def find_room(self, room_id: Any, *, lock: bool = False) -> Room | None:
        pk = _as_pk(room_id)
        if pk is None:
            return None
        queryset = Room.objects.using(self.using).filter(pk=pk)
        if lock:
            queryset = self._lock_queryset_if_possible(queryset)
        return queryset.first()

    @_translate_errors
    def update_room_status(self, room_id: int, status: str) -> bool:
        updated = (
            Room.objects.using(self.using)
            .filter(pk=room_id)
            .update(status=status, updated_at=timezone.now())
        )
        return updated > 0

    # ------------------------------------
    # Guests
    # ------------------------------------
    @_translate_errors
    def find_guest_by_email(self, email: str) -> Guest | None:
        normalized = Guest.objects.normalize_email(email)
        return Guest.objects.using(self.using).filter(email=normalized).first()

    @_translate_errors
    def create_guest(self, **fields: Any) -> Guest:
        return Guest.objects.using(self.using).create(**fields)

    @_translate_errors
    def update_guest(self, guest_id: int, **fields: Any) -> Guest:
        guest = Guest.objects.using(self.using).filter(pk=guest_id).first()
        if guest is None:
            raise NotFoundError("Guest not found")
        for name, value in fields.items():
            setattr(guest, name, value)
        guest.save(using=self.using, update_fields=[*fields, "updated_at"])
        return guest

    # ------------------------------------
    # Reservations
    # ------------------------------------
    def _reservations(self):
        return Reservation.objects.using(self.using).select_related("guest", "room")

    @_translate_errors
    def find_reservation(self, reservation_id: Any, *, lock: bool = False) -> Reservation | None:
        pk = _as_pk(reservation_id)
        if pk is None:
            return None
        queryset = self._reservations().filter(pk=pk)
        if lock:
            queryset = self._lock_queryset_if_possible(queryset, of=("self",))
        return queryset.first()

    def _active_on_room(self, room_id: int, statuses: Iterable[str], exclude_id: int | None):
        queryset = Reservation.objects.using(self.using).filter(room_id=room_id, status__in=list(statuses))
        if exclude_id is not None:
            queryset = queryset.exclude(pk=exclude_id)
        return queryset

    @_translate_errors
    def find_conflicting_reservations(
        self,
        room_id: int,
        check_in: datetime,
        check_out: datetime,
        statuses: Iterable[str],
        *,
        exclude_id: int | None = None,
    ) -> list[Reservation]:
        # Closed-interval intersection: touching endpoints count as a conflict.
        queryset = self._active_on_room(room_id, statuses, exclude_id).filter(
            check_in__lte=check_out,
            check_out__gte=check_in,
        )
        return list(queryset.order_by("check_in"))

    @_translate_errors
    def count_active_reservations(
        self,
        room_id: int,
        statuses: Iterable[str],
        *,
        exclude_id: int | None = None,
    ) -> int:
        return self._active_on_room(room_id, statuses, exclude_id).count()

    @_translate_errors
    def insert_reservation(self, **fields: Any) -> Reservation:
        return Reservation.objects.using(self.using).create(**fields)

    @_translate_errors
    def update_reservation(self, reservation_id: int, **fields: Any) -> Reservation:
        reservation = self._reservations().filter(pk=reservation_id).first()
        if reservation is None:
            raise NotFoundError("Reservation not found")
        for name, value in fields.items():
            setattr(reservation, name, value)
        reservation.save(using=self.using, update_fields=[*fields, "updated_at"])
        return reservation

    @_translate_errors
    def delete_reservation(self, reservation_id: int) -> bool:
        deleted, _ = Reservation.objects.using(self.using).filter(pk=reservation_id).delete()
        return deleted > 0

    @_translate_errors
    def list_reservations(self, order_by: Sequence[str] = ("-created_at", "-id")) -> list[Reservation]:
        return list(self._reservations().order_by(*order_by))
