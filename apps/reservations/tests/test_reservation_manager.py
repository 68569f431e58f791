"""Service-level tests for the ReservationManager."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone as dt_timezone
from decimal import Decimal
from unittest import mock

import pytest

from apps.guests.models import Guest
from apps.reservations.domain.events import (
    ReservationCreated,
    ReservationDeleted,
    ReservationUpdated,
    RoomStatusChanged,
)
from apps.reservations.models import Reservation
from apps.reservations.services import ReservationManager, get_reservation_manager, normalize_status
from apps.reservations.store import DjangoReservationStore
from apps.rooms.models import Room
from shared.application.message_bus import MessageBus
from shared.domain.exceptions import ConflictError, NotFoundError, StoreError, ValidationError


def _at(day: int, hour: int = 0, month: int = 2) -> datetime:
    return datetime(2024, month, day, hour, tzinfo=dt_timezone.utc)


@pytest.fixture
def room() -> Room:
    return Room.objects.create(number="205", room_type=Room.RoomType.DOUBLE, price=Decimal("6000.00"))


@pytest.fixture
def manager() -> ReservationManager:
    return ReservationManager(DjangoReservationStore())


def _book(manager: ReservationManager, room: Room, check_in: datetime, check_out: datetime, email: str = "a@x.com"):
    return manager.create_reservation(
        guest_name="Asha Rao",
        guest_email=email,
        guest_phone="+91-98765-43210",
        room_id=room.pk,
        check_in=check_in,
        check_out=check_out,
        number_of_guests=2,
    )


def _free(room: Room) -> None:
    Room.objects.filter(pk=room.pk).update(status=Room.Status.AVAILABLE)


@pytest.mark.django_db
def test_create_reservation_scenario(manager, room):
    reservation = _book(manager, room, _at(15), _at(18))

    assert reservation.total_amount == Decimal("18000.00")
    assert reservation.status == Reservation.Status.CONFIRMED
    assert reservation.room.number == "205"
    room.refresh_from_db()
    assert room.status == Room.Status.OCCUPIED


@pytest.mark.django_db
def test_partial_day_counts_as_full_night(manager, room):
    reservation = _book(manager, room, _at(15, 15), _at(18, 11))

    # 2 days 20 hours is billed as 3 nights
    assert reservation.total_amount == Decimal("18000.00")


@pytest.mark.django_db
def test_create_validates_input(manager, room):
    with pytest.raises(ValidationError) as missing:
        manager.create_reservation("", "a@x.com", "", room.pk, _at(15), _at(18))
    assert missing.value.message == "Missing required fields"

    with pytest.raises(ValidationError):
        manager.create_reservation("Asha", "a@x.com", "", room.pk, _at(18), _at(15))

    with pytest.raises(ValidationError):
        manager.create_reservation("Asha", "a@x.com", "", room.pk, _at(15), _at(18), number_of_guests=0)

    assert not Reservation.objects.exists()


@pytest.mark.django_db
def test_create_accepts_iso_strings(manager, room):
    reservation = manager.create_reservation(
        "Asha", "a@x.com", "", room.pk, "2024-02-15T15:00:00Z", "2024-02-18T11:00:00Z"
    )

    assert reservation.check_in == _at(15, 15)
    assert reservation.total_amount == Decimal("18000.00")


@pytest.mark.django_db
def test_unknown_room(manager):
    with pytest.raises(NotFoundError):
        manager.create_reservation("Asha", "a@x.com", "", 9999, _at(15), _at(18))
    assert not Guest.objects.exists()


@pytest.mark.django_db
def test_room_not_available(manager, room):
    Room.objects.filter(pk=room.pk).update(status=Room.Status.MAINTENANCE)

    with pytest.raises(ConflictError):
        _book(manager, room, _at(15), _at(18))


@pytest.mark.django_db
@pytest.mark.parametrize(
    "check_in, check_out",
    [
        (_at(17), _at(20)),  # overlaps the tail
        (_at(10), _at(16)),  # overlaps the head
        (_at(16), _at(17)),  # inside
        (_at(18), _at(21)),  # starts exactly at check-out
    ],
)
def test_overlapping_stay_conflicts(manager, room, check_in, check_out):
    _book(manager, room, _at(15), _at(18))
    _free(room)

    with pytest.raises(ConflictError):
        _book(manager, room, check_in, check_out, email="b@x.com")
    assert Reservation.objects.count() == 1


@pytest.mark.django_db
def test_cancelled_reservation_does_not_block(manager, room):
    first = _book(manager, room, _at(15), _at(18))
    manager.update_reservation(first.pk, {"status": "cancelled"})

    second = _book(manager, room, _at(16), _at(19), email="b@x.com")

    assert second.status == Reservation.Status.CONFIRMED


@pytest.mark.django_db
def test_existing_guest_is_reused_unchanged(manager, room):
    guest = Guest.objects.create(name="Original Name", email="a@x.com", phone="+1-555-0000")

    reservation = manager.create_reservation("Other Name", "A@X.com", "+1-555-9999", room.pk, _at(15), _at(18))

    assert reservation.guest_id == guest.pk
    assert Guest.objects.count() == 1
    guest.refresh_from_db()
    assert guest.name == "Original Name"
    assert guest.phone == "+1-555-0000"


@pytest.mark.django_db
def test_update_applies_only_present_fields(manager, room):
    reservation = _book(manager, room, _at(15), _at(18))
    before = reservation.updated_at

    updated = manager.update_reservation(reservation.pk, {"guest_name": "Asha R.", "number_of_guests": 3})

    assert updated.guest.name == "Asha R."
    assert updated.guest.email == "a@x.com"
    assert updated.number_of_guests == 3
    assert updated.check_in == _at(15)
    assert updated.total_amount == Decimal("18000.00")
    assert updated.updated_at >= before


@pytest.mark.django_db
def test_update_rejects_unknown_and_immutable_fields(manager, room):
    reservation = _book(manager, room, _at(15), _at(18))

    with pytest.raises(ValidationError):
        manager.update_reservation(reservation.pk, {"room_id": 42})
    with pytest.raises(ValidationError):
        manager.update_reservation(reservation.pk, {"total_amount": Decimal("1")})


@pytest.mark.django_db
def test_update_missing_reservation(manager):
    with pytest.raises(NotFoundError):
        manager.update_reservation(9999, {"status": "checked_in"})


@pytest.mark.django_db
def test_update_email_collision(manager, room):
    Guest.objects.create(name="Jane", email="jane@x.com")
    reservation = _book(manager, room, _at(15), _at(18))

    with pytest.raises(ConflictError):
        manager.update_reservation(reservation.pk, {"guest_email": "JANE@x.com"})


@pytest.mark.django_db
def test_update_dates_rechecks_overlap(manager, room):
    _book(manager, room, _at(15), _at(18))
    _free(room)
    second = _book(manager, room, _at(1, month=3), _at(4, month=3), email="b@x.com")

    with pytest.raises(ConflictError):
        manager.update_reservation(second.pk, {"check_in": _at(17)})

    second.refresh_from_db()
    assert second.check_in == _at(1, month=3)


@pytest.mark.django_db
def test_reactivating_cancelled_reservation_rechecks_overlap(manager, room):
    first = _book(manager, room, _at(15), _at(18))
    manager.update_reservation(first.pk, {"status": "cancelled"})
    _book(manager, room, _at(16), _at(19), email="b@x.com")

    with pytest.raises(ConflictError):
        manager.update_reservation(first.pk, {"status": "Confirmed"})

    first.refresh_from_db()
    assert first.status == Reservation.Status.CANCELLED


@pytest.mark.django_db
def test_update_dates_recomputes_total(manager, room):
    reservation = _book(manager, room, _at(15), _at(18))

    updated = manager.update_reservation(reservation.pk, {"check_out": _at(16)})

    assert updated.total_amount == Decimal("6000.00")


@pytest.mark.django_db
def test_any_status_transition_is_allowed(manager, room):
    reservation = _book(manager, room, _at(15), _at(18))

    manager.update_reservation(reservation.pk, {"status": "checked_out"})
    room.refresh_from_db()
    assert room.status == Room.Status.AVAILABLE

    updated = manager.update_reservation(reservation.pk, {"status": "CONFIRMED"})
    assert updated.status == Reservation.Status.CONFIRMED
    room.refresh_from_db()
    assert room.status == Room.Status.OCCUPIED


@pytest.mark.parametrize(
    "raw, expected",
    [("CHECKED_IN", "checked_in"), ("Checked-In", "checked_in"), (" cancelled ", "cancelled")],
)
def test_normalize_status(raw, expected):
    assert normalize_status(raw) == expected


def test_normalize_status_rejects_unknown():
    with pytest.raises(ValidationError):
        normalize_status("lost")


@pytest.mark.django_db
def test_delete_frees_room(manager, room):
    reservation = _book(manager, room, _at(15), _at(18))

    manager.delete_reservation(reservation.pk)

    assert not Reservation.objects.exists()
    room.refresh_from_db()
    assert room.status == Room.Status.AVAILABLE


@pytest.mark.django_db
def test_delete_keeps_room_occupied_while_other_stays_are_active(manager, room):
    first = _book(manager, room, _at(15), _at(18))
    _free(room)
    _book(manager, room, _at(1, month=3), _at(4, month=3), email="b@x.com")

    manager.delete_reservation(first.pk)

    room.refresh_from_db()
    assert room.status == Room.Status.OCCUPIED


@pytest.mark.django_db
def test_delete_leaves_housekeeping_status_alone(manager, room):
    reservation = _book(manager, room, _at(15), _at(18))
    Room.objects.filter(pk=room.pk).update(status=Room.Status.CLEANING)

    manager.delete_reservation(reservation.pk)

    room.refresh_from_db()
    assert room.status == Room.Status.CLEANING


@pytest.mark.django_db
def test_delete_missing_reservation_changes_nothing(manager, room):
    _book(manager, room, _at(15), _at(18))

    with pytest.raises(NotFoundError):
        manager.delete_reservation(9999)
    with pytest.raises(NotFoundError):
        manager.delete_reservation("not-a-number")

    assert Reservation.objects.count() == 1
    room.refresh_from_db()
    assert room.status == Room.Status.OCCUPIED


@pytest.mark.django_db
def test_get_room_by_reservation(manager, room):
    reservation = _book(manager, room, _at(15), _at(18))

    assignment = manager.get_room_by_reservation(reservation.pk)

    assert assignment.room_number == "205"
    assert assignment.reservation.pk == reservation.pk
    with pytest.raises(NotFoundError):
        manager.get_room_by_reservation(9999)


@pytest.mark.django_db
def test_list_reservations_newest_first(manager, room):
    first = _book(manager, room, _at(15), _at(18))
    _free(room)
    second = _book(manager, room, _at(1, month=3), _at(2, month=3), email="b@x.com")

    assert [item.pk for item in manager.list_reservations()] == [second.pk, first.pk]


@pytest.mark.django_db
def test_checkout_timing(manager, room):
    reservation = _book(manager, room, _at(15, 15), _at(18, 11))

    timing = manager.checkout_timing(reservation.pk, now=_at(16, 9) - timedelta(minutes=30, seconds=15))

    assert timing.countdown.as_dict() == {"days": 2, "hours": 2, "minutes": 30, "seconds": 15}
    assert timing.countdown.overdue is False
    assert manager.checkout_timing(reservation.pk, now=_at(19)).countdown.overdue is True


@pytest.mark.django_db(transaction=True)
def test_events_published_after_commit(room):
    bus = MessageBus()
    received = []
    for event_type in (ReservationCreated, ReservationUpdated, ReservationDeleted, RoomStatusChanged):
        bus.register_event_handler(event_type, received.append)
    manager = ReservationManager(DjangoReservationStore(bus=bus))

    reservation = _book(manager, room, _at(15), _at(18))
    assert [type(event) for event in received] == [RoomStatusChanged, ReservationCreated]
    created = received[1]
    assert created.reservation_id == reservation.pk
    assert created.guest_created is True
    assert created.total_amount == Decimal("18000.00")

    received.clear()
    with pytest.raises(ConflictError):
        _book(manager, room, _at(16), _at(17), email="b@x.com")
    assert received == []

    manager.delete_reservation(reservation.pk)
    assert [type(event) for event in received] == [RoomStatusChanged, ReservationDeleted]
    assert received[0].new_status == Room.Status.AVAILABLE


def _recording_manager():
    bus = MessageBus()
    received = []
    for event_type in (ReservationCreated, ReservationUpdated, ReservationDeleted, RoomStatusChanged):
        bus.register_event_handler(event_type, received.append)
    return ReservationManager(DjangoReservationStore(bus=bus)), received


@pytest.mark.django_db(transaction=True)
def test_failed_room_update_rolls_back_create(room):
    manager, received = _recording_manager()

    with mock.patch.object(manager.store, "update_room_status", side_effect=StoreError()):
        with pytest.raises(StoreError):
            _book(manager, room, _at(15), _at(18))

    assert Reservation.objects.count() == 0
    assert Guest.objects.count() == 0
    assert received == []
    room.refresh_from_db()
    assert room.status == Room.Status.AVAILABLE


@pytest.mark.django_db(transaction=True)
def test_failed_room_update_rolls_back_delete(room):
    manager, received = _recording_manager()
    reservation = _book(manager, room, _at(15), _at(18))
    received.clear()

    with mock.patch.object(manager.store, "update_room_status", side_effect=StoreError()):
        with pytest.raises(StoreError):
            manager.delete_reservation(reservation.pk)

    assert Reservation.objects.filter(pk=reservation.pk).exists()
    assert received == []
    room.refresh_from_db()
    assert room.status == Room.Status.OCCUPIED


@pytest.mark.django_db
def test_factory_reads_settings(settings):
    settings.HOTEL_RESERVATIONS = {
        "STORE_CLASS": "apps.reservations.store.DjangoReservationStore",
        "DATABASE_ALIAS": "default",
        "CURRENCY": "INR",
    }

    manager = get_reservation_manager()

    assert isinstance(manager.store, DjangoReservationStore)
    assert manager.store.using == "default"
    assert manager.store.health_check()["status"] == "healthy"
