"""
Shared Kernel

Base classes and utilities shared by the hotel domains: value objects,
domain events, the unit of work, the message bus, the domain error
hierarchy and the API glue that turns those errors into responses.
"""
