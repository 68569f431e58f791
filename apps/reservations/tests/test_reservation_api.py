"""Integration tests for reservation API endpoints."""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal
from unittest import mock

from django.contrib.auth import get_user_model
from django.db import DatabaseError
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.guests.models import Guest
from apps.reservations.models import Reservation
from apps.reservations.store import DjangoReservationStore
from apps.rooms.models import Room

User = get_user_model()


class ReservationAPITests(APITestCase):
    """Covers booking, conflicts, updates and deletion through the API."""

    def setUp(self) -> None:
        self.staff = User.objects.create_user(username="desk", password="DeskPass123")
        self.client.force_authenticate(self.staff)
        self.room = Room.objects.create(
            number="205",
            room_type=Room.RoomType.DOUBLE,
            price=Decimal("6000.00"),
        )
        self.list_url = reverse("reservation-list")

    def _payload(self, check_in: str, check_out: str, **overrides) -> dict:
        payload = {
            "guestName": "Asha Rao",
            "guestEmail": "a@x.com",
            "guestPhone": "+91-98765-43210",
            "roomId": self.room.pk,
            "checkIn": check_in,
            "checkOut": check_out,
            "numberOfGuests": 2,
        }
        payload.update(overrides)
        return payload

    def _book(self, check_in: str = "2024-02-15T00:00:00Z", check_out: str = "2024-02-18T00:00:00Z", **overrides):
        response = self.client.post(self.list_url, self._payload(check_in, check_out, **overrides), format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        return response.data["reservation"]

    def _detail_url(self, pk) -> str:
        return reverse("reservation-detail", args=[pk])

    def test_create_reservation_computes_total_and_occupies_room(self) -> None:
        response = self.client.post(
            self.list_url,
            self._payload("2024-02-15T00:00:00Z", "2024-02-18T00:00:00Z"),
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertTrue(response.data["success"])
        reservation = response.data["reservation"]
        self.assertEqual(reservation["totalAmount"], Decimal("18000.00"))
        self.assertEqual(reservation["status"], "confirmed")
        self.assertEqual(reservation["roomNumber"], "205")
        self.assertEqual(reservation["guestName"], "Asha Rao")
        self.assertEqual(reservation["guestEmail"], "a@x.com")
        self.assertEqual(reservation["numberOfGuests"], 2)

        self.room.refresh_from_db()
        self.assertEqual(self.room.status, Room.Status.OCCUPIED)
        self.assertEqual(Guest.objects.count(), 1)

    def test_overlapping_reservation_is_rejected(self) -> None:
        self._book()

        response = self.client.post(
            self.list_url,
            self._payload("2024-02-17T00:00:00Z", "2024-02-20T00:00:00Z", guestEmail="b@x.com"),
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.assertFalse(response.data["success"])
        self.assertIn("not available", response.data["message"])
        self.assertEqual(Reservation.objects.count(), 1)
        self.assertFalse(Guest.objects.filter(email="b@x.com").exists())

    def test_overlap_check_applies_even_when_room_marked_available(self) -> None:
        self._book()
        Room.objects.filter(pk=self.room.pk).update(status=Room.Status.AVAILABLE)

        response = self.client.post(
            self.list_url,
            self._payload("2024-02-17T00:00:00Z", "2024-02-20T00:00:00Z", guestEmail="b@x.com"),
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.assertIn("already booked", response.data["message"])

    def test_missing_fields(self) -> None:
        response = self.client.post(self.list_url, {"guestName": "Asha Rao"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["success"], False)
        self.assertEqual(response.data["message"], "Missing required fields")
        self.assertIn("guestEmail: This field is required.", response.data["errors"])

    def test_check_out_must_follow_check_in(self) -> None:
        response = self.client.post(
            self.list_url,
            self._payload("2024-02-18T00:00:00Z", "2024-02-15T00:00:00Z"),
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("checkOut", response.data["message"])
        self.assertEqual(Reservation.objects.count(), 0)

    def test_unknown_room_is_404(self) -> None:
        response = self.client.post(
            self.list_url,
            self._payload("2024-02-15T00:00:00Z", "2024-02-18T00:00:00Z", roomId=9999),
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data, {"success": False, "message": "Room not found"})

    def test_list_reservations_newest_first(self) -> None:
        first = self._book()
        Room.objects.filter(pk=self.room.pk).update(status=Room.Status.AVAILABLE)
        second = self._book("2024-03-01T00:00:00Z", "2024-03-02T00:00:00Z", guestEmail="c@x.com")

        response = self.client.get(self.list_url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["total"], 2)
        self.assertEqual([item["id"] for item in response.data["reservations"]], [second["id"], first["id"]])

        listed = response.data["reservations"][1]
        for field in ("guestName", "guestEmail", "roomNumber", "checkIn", "checkOut", "totalAmount", "status"):
            self.assertEqual(listed[field], first[field])

    def test_update_status_is_case_normalized(self) -> None:
        reservation = self._book()

        response = self.client.put(self._detail_url(reservation["id"]), {"status": "CHECKED_IN"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["reservation"]["status"], "checked_in")
        self.room.refresh_from_db()
        self.assertEqual(self.room.status, Room.Status.OCCUPIED)

    def test_update_unknown_status_is_rejected(self) -> None:
        reservation = self._book()

        response = self.client.patch(self._detail_url(reservation["id"]), {"status": "vanished"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("Invalid status", response.data["message"])

    def test_cancelling_releases_room(self) -> None:
        reservation = self._book()

        response = self.client.patch(self._detail_url(reservation["id"]), {"status": "cancelled"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.room.refresh_from_db()
        self.assertEqual(self.room.status, Room.Status.AVAILABLE)

    def test_update_dates_recomputes_total(self) -> None:
        reservation = self._book()

        response = self.client.patch(
            self._detail_url(reservation["id"]),
            {"checkOut": "2024-02-20T00:00:00Z", "guestPhone": "+91-11111-22222"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["reservation"]["totalAmount"], Decimal("30000.00"))
        self.assertEqual(response.data["reservation"]["guestPhone"], "+91-11111-22222")

    def test_update_into_overlap_is_rejected(self) -> None:
        first = self._book()
        Room.objects.filter(pk=self.room.pk).update(status=Room.Status.AVAILABLE)
        second = self._book("2024-03-01T00:00:00Z", "2024-03-04T00:00:00Z", guestEmail="c@x.com")

        response = self.client.patch(
            self._detail_url(second["id"]),
            {"checkIn": "2024-02-16T00:00:00Z"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        stored = Reservation.objects.get(pk=second["id"])
        self.assertEqual(stored.check_in.isoformat(), "2024-03-01T00:00:00+00:00")
        self.assertNotEqual(first["id"], second["id"])

    def test_update_rejects_room_change(self) -> None:
        reservation = self._book()
        other = Room.objects.create(number="301", price=Decimal("8000.00"))

        response = self.client.put(self._detail_url(reservation["id"]), {"roomId": other.pk}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.assertIn("roomId: This field cannot be changed.", response.data["errors"])
        self.assertEqual(Reservation.objects.get(pk=reservation["id"]).room_id, self.room.pk)

    def test_update_missing_reservation_is_404(self) -> None:
        response = self.client.put(self._detail_url(9999), {"status": "checked_in"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data["message"], "Reservation not found")

    def test_delete_resets_room(self) -> None:
        reservation = self._book()

        response = self.client.delete(self._detail_url(reservation["id"]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {"success": True, "message": "Reservation deleted successfully"})
        self.assertFalse(Reservation.objects.exists())
        self.room.refresh_from_db()
        self.assertEqual(self.room.status, Room.Status.AVAILABLE)

    def test_delete_missing_reservation_is_404_without_changes(self) -> None:
        self._book()

        response = self.client.delete(self._detail_url(9999))

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(Reservation.objects.count(), 1)
        self.room.refresh_from_db()
        self.assertEqual(self.room.status, Room.Status.OCCUPIED)

    def test_room_by_reservation(self) -> None:
        reservation = self._book()

        response = self.client.get(reverse("reservation-room", args=[reservation["id"]]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["roomNumber"], "205")
        self.assertEqual(response.data["reservation"]["id"], reservation["id"])

        missing = self.client.get(reverse("reservation-room", args=[9999]))
        self.assertEqual(missing.status_code, status.HTTP_404_NOT_FOUND)

    def test_checkout_timing(self) -> None:
        check_in = timezone.now() - timedelta(hours=1)
        check_out = timezone.now() + timedelta(days=2, hours=5)
        reservation = self._book(check_in.isoformat(), check_out.isoformat())

        response = self.client.get(reverse("reservation-checkout-timing", args=[reservation["id"]]))

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertFalse(response.data["overdue"])
        self.assertEqual(response.data["remaining"]["days"], 2)
        self.assertIn(response.data["remaining"]["hours"], (4, 5))

    def test_checkout_timing_overdue(self) -> None:
        reservation = self._book()

        response = self.client.get(reverse("reservation-checkout-timing", args=[reservation["id"]]))

        self.assertTrue(response.data["overdue"])
        self.assertEqual(response.data["remaining"], {"days": 0, "hours": 0, "minutes": 0, "seconds": 0})

    def test_requires_authentication(self) -> None:
        self.client.force_authenticate(None)
        response = self.client.get(self.list_url)
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertFalse(response.data["success"])

    def test_store_failure_is_500(self) -> None:
        with mock.patch.object(
            DjangoReservationStore,
            "_reservations",
            side_effect=DatabaseError("disk I/O error"),
        ):
            response = self.client.get(self.list_url)

        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.data, {"success": False, "message": "Database operation failed"})


class HealthCheckAPITests(APITestCase):
    def test_healthy(self) -> None:
        response = self.client.get(reverse("health"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {"status": "healthy", "message": "Database is responsive"})

    def test_unhealthy(self) -> None:
        unhealthy = {"status": "unhealthy", "message": "Database connection failed", "error": "gone"}
        with mock.patch.object(DjangoReservationStore, "health_check", return_value=unhealthy):
            response = self.client.get(reverse("health"))
        self.assertEqual(response.status_code, status.HTTP_503_SERVICE_UNAVAILABLE)
        self.assertEqual(response.data["status"], "unhealthy")
