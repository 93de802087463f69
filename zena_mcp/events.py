"""Event-publishing collaborator."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections import deque
from collections.abc import Callable

from zena_mcp.enums import EventType
from zena_mcp.models.events import DomainEvent

logger = logging.getLogger(__name__)

EventHandler = Callable[[DomainEvent], None]


class EventPublisher(ABC):
    @abstractmethod
    def publish(self, event: DomainEvent) -> None:
        """Fire-and-forget delivery of a committed change."""
        pass


class EventBus(EventPublisher):
    """
    Synchronous in-process bus with a bounded history.

    A failing subscriber is logged with its traceback and does not stop
    delivery to the others or reach the publisher.
    """

    def __init__(self, history_size: int = 1000) -> None:
        self._subscribers: list[EventHandler] = []
        self.history: deque[DomainEvent] = deque(maxlen=history_size)

    def subscribe(self, handler: EventHandler) -> None:
        self._subscribers.append(handler)

    def unsubscribe(self, handler: EventHandler) -> None:
        self._subscribers.remove(handler)

    def publish(self, event: DomainEvent) -> None:
        self.history.append(event)
        logger.debug("Event %s on %s by %s", event.event_type.value, event.entity_id, event.actor)
        for handler in list(self._subscribers):
            try:
                handler(event)
            except Exception:
                logger.exception("Event handler %r failed for %s", handler, event.event_type.value)

    def of_type(self, event_type: EventType) -> list[DomainEvent]:
        return [e for e in self.history if e.event_type == event_type]

    def clear(self) -> None:
        self.history.clear()
