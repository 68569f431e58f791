"""Top-level package for Django configuration.

This package holds the settings modules for the hotel reservations
project together with the URL configuration and the WSGI and ASGI entry
points.
"""
