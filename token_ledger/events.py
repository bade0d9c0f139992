"""
Event System Module

Ledger notifications (Transfer and Approval) and a publish/subscribe
dispatcher that delivers them to wallets, indexers and other observers in
the exact order the ledger emitted them.
"""

from enum import Enum
from typing import Callable, Dict, List, Any, Optional
from dataclasses import dataclass, field
from datetime import datetime, timezone
import uuid
import logging
from threading import RLock


class LedgerEvent(Enum):
    """Notifications emitted by the ledger"""
    TRANSFER = "token.transfer"  # Value moved: from, to, value
    APPROVAL = "token.approval"  # Allowance set: owner, spender, value


# Integer fields that are serialized as decimal strings
_AMOUNT_FIELDS = ("value",)


@dataclass
class EventPayload:
    """Payload for ledger notifications"""
    event_type: LedgerEvent
    sequence: int
    data: Dict[str, Any]
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    event_id: str = field(default_factory=lambda: str(uuid.uuid4()))

    @property
    def args(self) -> tuple:
        """Positional view of the notification, e.g. (from, to, value)"""
        if self.event_type == LedgerEvent.TRANSFER:
            return (self.data['from'], self.data['to'], self.data['value'])
        return (self.data['owner'], self.data['spender'], self.data['value'])

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        data = dict(self.data)
        for key in _AMOUNT_FIELDS:
            if key in data:
                data[key] = str(data[key])

        return {
            'event_type': self.event_type.value,
            'sequence': self.sequence,
            'data': data,
            'timestamp': self.timestamp.isoformat(),
            'event_id': self.event_id
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'EventPayload':
        """Create from dictionary"""
        payload_data = dict(data['data'])
        for key in _AMOUNT_FIELDS:
            if key in payload_data:
                payload_data[key] = int(payload_data[key])

        return cls(
            event_type=LedgerEvent(data['event_type']),
            sequence=data['sequence'],
            data=payload_data,
            timestamp=datetime.fromisoformat(data['timestamp']) if isinstance(data['timestamp'], str) else data['timestamp'],
            event_id=data['event_id']
        )


def create_transfer_event(sequence: int, from_account: str, to_account: str, value: int) -> EventPayload:
    """Create a Transfer notification"""
    return EventPayload(
        event_type=LedgerEvent.TRANSFER,
        sequence=sequence,
        data={"from": from_account, "to": to_account, "value": value}
    )


def create_approval_event(sequence: int, owner: str, spender: str, value: int) -> EventPayload:
    """Create an Approval notification"""
    return EventPayload(
        event_type=LedgerEvent.APPROVAL,
        sequence=sequence,
        data={"owner": owner, "spender": spender, "value": value}
    )


def _handler_name(handler: Callable) -> str:
    return getattr(handler, '__name__', repr(handler))


class EventDispatcher:
    """Central event dispatcher, publish/subscribe pattern"""

    def __init__(self):
        self._handlers: Dict[LedgerEvent, List[Callable]] = {}
        self._global_handlers: List[Callable] = []  # catch-all handlers
        self._lock = RLock()
        self.logger = logging.getLogger("token_ledger.events")

    def subscribe(self, event_type: LedgerEvent, handler: Callable) -> None:
        """Subscribe to a specific event type"""
        with self._lock:
            self._handlers.setdefault(event_type, []).append(handler)
            self.logger.debug(f"Subscribed handler {_handler_name(handler)} to {event_type.value}")

    def subscribe_all(self, handler: Callable) -> None:
        """Subscribe to ALL events"""
        with self._lock:
            self._global_handlers.append(handler)
            self.logger.debug(f"Subscribed global handler {_handler_name(handler)}")

    def unsubscribe(self, event_type: LedgerEvent, handler: Callable) -> None:
        """Unsubscribe from a specific event type"""
        with self._lock:
            try:
                self._handlers.get(event_type, []).remove(handler)
                self.logger.debug(f"Unsubscribed handler {_handler_name(handler)} from {event_type.value}")
            except ValueError:
                self.logger.warning(f"Handler {_handler_name(handler)} was not subscribed to {event_type.value}")

    def unsubscribe_all(self, handler: Callable) -> None:
        """Unsubscribe a global handler"""
        with self._lock:
            try:
                self._global_handlers.remove(handler)
                self.logger.debug(f"Unsubscribed global handler {_handler_name(handler)}")
            except ValueError:
                self.logger.warning(f"Global handler {_handler_name(handler)} was not subscribed")

    def publish(self, event: EventPayload) -> None:
        """Publish event to all subscribers"""
        with self._lock:
            self.logger.debug(f"Publishing event {event.event_type.value} #{event.sequence}")

            for handler in list(self._handlers.get(event.event_type, [])):
                try:
                    handler(event)
                except Exception as e:
                    # A broken observer must not undo a committed ledger operation
                    self.logger.error(f"Error in event handler {_handler_name(handler)} for {event.event_type.value}: {e}")

            for handler in list(self._global_handlers):
                try:
                    handler(event)
                except Exception as e:
                    self.logger.error(f"Error in global event handler {_handler_name(handler)} for {event.event_type.value}: {e}")

    def clear(self) -> None:
        """Clear all handlers"""
        with self._lock:
            self._handlers.clear()
            self._global_handlers.clear()
            self.logger.info("All event handlers cleared")

    def get_handler_count(self, event_type: Optional[LedgerEvent] = None) -> int:
        """Get count of handlers for a specific event type or all"""
        with self._lock:
            if event_type:
                return len(self._handlers.get(event_type, []))
            total = sum(len(handlers) for handlers in self._handlers.values())
            total += len(self._global_handlers)
            return total

    def get_subscribed_events(self) -> List[LedgerEvent]:
        """Get list of events that have subscribers"""
        with self._lock:
            return [event_type for event_type, handlers in self._handlers.items() if handlers]
