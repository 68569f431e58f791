import os
from datetime import datetime, timezone as dt_timezone
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction

from apps.guests.models import Guest
from apps.reservations.models import Reservation
from apps.reservations.services import get_reservation_manager
from apps.rooms.models import Amenity, Room
from apps.users.models import StaffProfile
from shared.domain.exceptions import DomainError

User = get_user_model()

DEMO_ROOMS = [
    {
        "number": "101",
        "room_type": Room.RoomType.SINGLE,
        "price": Decimal("4500"),
        "amenities": ["WiFi", "TV", "AC", "Room Service"],
        "description": "Comfortable single room with city view",
    },
    {
        "number": "205",
        "room_type": Room.RoomType.DOUBLE,
        "price": Decimal("6000"),
        "amenities": ["WiFi", "TV", "AC", "Mini Bar", "Room Service"],
        "description": "Spacious double room with garden view",
    },
    {
        "number": "301",
        "room_type": Room.RoomType.SUITE,
        "price": Decimal("12000"),
        "amenities": ["WiFi", "TV", "AC", "Mini Bar", "Balcony", "Jacuzzi", "Room Service"],
        "description": "Luxury suite with ocean view and private balcony",
    },
    {
        "number": "405",
        "room_type": Room.RoomType.DELUXE,
        "price": Decimal("9000"),
        "amenities": ["WiFi", "TV", "AC", "Mini Bar", "Balcony", "Room Service"],
        "description": "Deluxe room with premium amenities",
    },
]

DEMO_GUESTS = [
    {
        "name": "John Doe",
        "email": "john.doe@example.com",
        "phone": "+1-555-0123",
        "address": "123 Main St, New York, NY 10001",
    },
    {
        "name": "Jane Smith",
        "email": "jane.smith@example.com",
        "phone": "+1-555-0456",
        "address": "456 Oak Ave, Los Angeles, CA 90210",
    },
]

DEMO_RESERVATION = {
    "guest_email": "john.doe@example.com",
    "room_number": "205",
    "check_in": datetime(2024, 2, 15, 15, 0, tzinfo=dt_timezone.utc),
    "check_out": datetime(2024, 2, 18, 11, 0, tzinfo=dt_timezone.utc),
    "number_of_guests": 2,
    "special_requests": "Late check-in requested",
}


class Command(BaseCommand):
    help = "Seeds demo rooms, guests and the admin staff account"

    def add_arguments(self, parser):
        parser.add_argument(
            "--admin-password",
            default=None,
            help="Password for the 'admin' staff user (falls back to HOTEL_ADMIN_PASSWORD)",
        )
        parser.add_argument(
            "--with-reservations",
            action="store_true",
            help="Also book the demo reservation for room 205",
        )

    def handle(self, *args, **options):
        manager = get_reservation_manager()
        manager.store.connect()

        with transaction.atomic(using=manager.store.using):
            rooms_created = self._seed_rooms()
            guests_created = self._seed_guests()
            self._seed_admin(options["admin_password"] or os.environ.get("HOTEL_ADMIN_PASSWORD"))

        self.stdout.write(f"Rooms: {rooms_created} created, {len(DEMO_ROOMS) - rooms_created} already present")
        self.stdout.write(f"Guests: {guests_created} created, {len(DEMO_GUESTS) - guests_created} already present")

        if options["with_reservations"]:
            self._seed_reservation(manager)

        self.stdout.write(self.style.SUCCESS("Hotel demo data is ready"))

    def _seed_rooms(self) -> int:
        created_count = 0
        for spec in DEMO_ROOMS:
            room, created = Room.objects.get_or_create(
                number=spec["number"],
                defaults={
                    "room_type": spec["room_type"],
                    "price": spec["price"],
                    "description": spec["description"],
                },
            )
            if created:
                amenities = [Amenity.objects.get_or_create(name=name)[0] for name in spec["amenities"]]
                room.amenities.set(amenities)
                created_count += 1
        return created_count

    def _seed_guests(self) -> int:
        created_count = 0
        for spec in DEMO_GUESTS:
            _, created = Guest.objects.get_or_create(
                email=spec["email"],
                defaults={key: value for key, value in spec.items() if key != "email"},
            )
            created_count += int(created)
        return created_count

    def _seed_admin(self, password):
        user, created = User.objects.get_or_create(
            username="admin",
            defaults={"email": "admin@hotel.com", "is_staff": True},
        )
        if password:
            user.set_password(password)
            user.save(update_fields=["password"])
        elif created:
            user.set_unusable_password()
            user.save(update_fields=["password"])
            self.stdout.write(
                self.style.WARNING(
                    "Admin user created without a usable password; "
                    "pass --admin-password or set HOTEL_ADMIN_PASSWORD"
                )
            )
        StaffProfile.objects.get_or_create(user=user, defaults={"role": StaffProfile.Role.ADMIN})
        self.stdout.write(f"Admin user: {user.username}")

    def _seed_reservation(self, manager):
        spec = DEMO_RESERVATION
        exists = Reservation.objects.filter(
            room__number=spec["room_number"],
            guest__email=spec["guest_email"],
            check_in=spec["check_in"],
        ).exists()
        if exists:
            self.stdout.write("Demo reservation already present, skipping")
            return

        guest = Guest.objects.get_by_email(spec["guest_email"])
        room = Room.objects.get(number=spec["room_number"])
        try:
            reservation = manager.create_reservation(
                guest_name=guest.name,
                guest_email=guest.email,
                guest_phone=guest.phone,
                room_id=room.pk,
                check_in=spec["check_in"],
                check_out=spec["check_out"],
                number_of_guests=spec["number_of_guests"],
                special_requests=spec["special_requests"],
            )
        except DomainError as exc:
            self.stdout.write(self.style.WARNING(f"Demo reservation skipped: {exc.message}"))
            return
        self.stdout.write(
            f"Demo reservation #{reservation.pk}: room {room.number}, total {reservation.total_amount}"
        )
