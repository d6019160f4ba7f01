"""
Domain Events

A small synchronous dispatcher for in-process domain events. Handlers are
registered per event type at startup and run inline, inside the request
that published the event, against the same database session.
"""

import logging
from collections import defaultdict
from collections.abc import Awaitable, Callable
from typing import Any

logger = logging.getLogger(__name__)

EventHandler = Callable[[Any, Any], Awaitable[None]]


class EventDispatcher:
    """Maps event types to their async handlers."""

    def __init__(self) -> None:
        self._handlers: dict[type, list[EventHandler]] = defaultdict(list)

    def subscribe(self, event_type: type, handler: EventHandler) -> None:
        if handler not in self._handlers[event_type]:
            self._handlers[event_type].append(handler)

    def handlers_for(self, event_type: type) -> list[EventHandler]:
        return list(self._handlers.get(event_type, []))

    async def publish(self, event: Any, db: Any) -> None:
        """
        Run every handler registered for the event's type.

        Handler exceptions propagate to the publisher.
        """
        handlers = self.handlers_for(type(event))
        if not handlers:
            logger.warning(f"No handlers registered for {type(event).__name__}")
        for handler in handlers:
            await handler(event, db)
