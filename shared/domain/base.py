"""
Base Domain Classes

Building blocks shared by the hotel domains:
- ValueObject: Immutable objects compared by value
- DomainEvent: Something that happened, published after commit
"""

from abc import ABC
from dataclasses import asdict, dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any
from uuid import UUID, uuid4


@dataclass(frozen=True)
class ValueObject(ABC):
    """
    Base class for value objects

    Value objects are immutable and have no identity.
    Two value objects are equal if all their attributes are equal.
    """
    pass


@dataclass
class DomainEvent:
    """
    Base class for domain events

    Domain events represent something that happened in the domain.
    The unit of work collects them and the message bus dispatches them
    once the surrounding transaction has committed.
    """
    event_id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=datetime.now)
    aggregate_id: Any = None

    @property
    def event_type(self) -> str:
        return self.__class__.__name__

    def to_dict(self) -> dict:
        """Convert event to a JSON-friendly dictionary (used for log records)"""
        payload = {}
        for key, value in asdict(self).items():
            if isinstance(value, (datetime, date)):
                value = value.isoformat()
            elif isinstance(value, (UUID, Decimal)):
                value = str(value)
            payload[key] = value
        payload['event_type'] = self.event_type
        return payload
