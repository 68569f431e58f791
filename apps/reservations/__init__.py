"""Reservations app package.

This app owns the reservation lifecycle: the reservation model, the
persistence store and the ReservationManager that prevents double
bookings, computes totals and keeps room status in step with active
reservations. Every write path runs inside one database transaction.
"""
