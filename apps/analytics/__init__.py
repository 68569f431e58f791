"""Analytics app package.

Read-only dashboard statistics computed from rooms, guests and
reservations. Owns no models.
"""
