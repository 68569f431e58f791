from io import StringIO
from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from django.core.management import call_command

from apps.guests.models import Guest
from apps.reservations.models import Reservation
from apps.rooms.models import Room
from apps.users.models import StaffProfile


@pytest.mark.django_db
def test_seed_is_idempotent():
    call_command("seed_hotel", admin_password="S3cure-admin-pass", stdout=StringIO())
    call_command("seed_hotel", stdout=StringIO())

    assert list(Room.objects.values_list("number", flat=True)) == ["101", "205", "301", "405"]
    assert Room.objects.get(number="205").price == Decimal("6000.00")
    assert sorted(Room.objects.get(number="301").amenities.values_list("name", flat=True)) == [
        "AC", "Balcony", "Jacuzzi", "Mini Bar", "Room Service", "TV", "WiFi",
    ]
    assert Guest.objects.count() == 2
    assert not Reservation.objects.exists()

    admin = get_user_model().objects.get(username="admin")
    assert admin.password != "S3cure-admin-pass"
    assert admin.check_password("S3cure-admin-pass")
    assert admin.staff_profile.role == StaffProfile.Role.ADMIN


@pytest.mark.django_db
def test_seed_admin_password_from_environment(monkeypatch):
    monkeypatch.setenv("HOTEL_ADMIN_PASSWORD", "from-env-pass-123")

    call_command("seed_hotel", stdout=StringIO())

    assert get_user_model().objects.get(username="admin").check_password("from-env-pass-123")


@pytest.mark.django_db
def test_seed_without_password_leaves_admin_unusable(monkeypatch):
    monkeypatch.delenv("HOTEL_ADMIN_PASSWORD", raising=False)
    out = StringIO()

    call_command("seed_hotel", stdout=out)

    assert not get_user_model().objects.get(username="admin").has_usable_password()
    assert "without a usable password" in out.getvalue()


@pytest.mark.django_db
def test_seed_demo_reservation_goes_through_manager():
    out = StringIO()
    call_command("seed_hotel", with_reservations=True, stdout=out)
    call_command("seed_hotel", with_reservations=True, stdout=out)

    reservation = Reservation.objects.get()
    assert reservation.room.number == "205"
    assert reservation.guest.email == "john.doe@example.com"
    assert reservation.total_amount == Decimal("18000.00")
    assert reservation.room.status == Room.Status.OCCUPIED
    assert "Demo reservation already present" in out.getvalue()
