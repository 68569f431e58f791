"""Rooms app package.

Holds the hotel room inventory: room numbers, categories, nightly prices,
amenities and the occupancy status that reservations keep in sync.
"""
