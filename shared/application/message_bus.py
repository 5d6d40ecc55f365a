"""
Message Bus

Routes domain events to their subscribers. Subscribers are registered
from each app's ``AppConfig.ready()``.
"""

from collections import defaultdict
from typing import Callable, Dict, List, Type
import logging

from shared.domain.base import DomainEvent

logger = logging.getLogger(__name__)

EventHandler = Callable[[DomainEvent], None]


class MessageBus:
    """Dispatches events to any number of handlers (1:N)."""

    def __init__(self):
        self._event_handlers: Dict[Type[DomainEvent], List[EventHandler]] = defaultdict(list)

    def subscribe(self, event_type: Type[DomainEvent], handler: EventHandler):
        """Register a handler; registering the same handler twice is a no-op."""
        handlers = self._event_handlers[event_type]
        if handler not in handlers:
            handlers.append(handler)
            logger.debug("Registered %s for %s", handler.__name__, event_type.__name__)

    def unsubscribe(self, event_type: Type[DomainEvent], handler: EventHandler):
        handlers = self._event_handlers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def handlers_for(self, event_type: Type[DomainEvent]) -> List[EventHandler]:
        return list(self._event_handlers.get(event_type, []))

    def publish_events(self, events: List[DomainEvent]):
        """
        Publish domain events

        The transaction that produced the events has already committed,
        so a failing handler is logged and the remaining handlers still run.
        """
        for event in events:
            event_type = type(event)
            handlers = self._event_handlers.get(event_type)
            if not handlers:
                logger.debug("No handlers registered for event %s", event_type.__name__)
                continue

            for handler in list(handlers):
                try:
                    handler(event)
                except Exception:
                    logger.error(
                        "Error in event handler %s for event %s (ID: %s)",
                        handler.__name__, event_type.__name__, event.event_id,
                        exc_info=True,
                    )


# Global message bus instance
message_bus = MessageBus()
