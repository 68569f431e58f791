"""Guests app package.

A guest is identified by email. Reservations look guests up by email and
create them on first booking.
"""
