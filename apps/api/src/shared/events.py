"""
In-process domain event bus.

Services publish a topic and payload after a successful write. Delivery to
subscribers is best effort: a failing handler is logged and never affects
the write that triggered it.
"""

import inspect
import logging
from collections import defaultdict
from typing import Any, Awaitable, Callable, Union

logger = logging.getLogger(__name__)

EventHandler = Callable[[str, Any], Union[Awaitable[None], None]]


class EventBus:
    def __init__(self) -> None:
        self._handlers: dict[str, list[EventHandler]] = defaultdict(list)

    def subscribe(self, topic: str, handler: EventHandler) -> None:
        self._handlers[topic].append(handler)

    def unsubscribe(self, topic: str, handler: EventHandler) -> None:
        if handler in self._handlers.get(topic, []):
            self._handlers[topic].remove(handler)

    async def publish(self, topic: str, payload: Any) -> int:
        """
        Deliver ``payload`` to every handler of ``topic``.

        Returns:
            Number of handlers that completed without error
        """
        delivered = 0
        for handler in list(self._handlers.get(topic, [])):
            try:
                result = handler(topic, payload)
                if inspect.isawaitable(result):
                    await result
                delivered += 1
            except Exception as e:
                logger.error(f"Event handler failed for {topic}: {e}", exc_info=True)
        logger.debug(f"Published {topic} to {delivered} handler(s)")
        return delivered


# Global event bus instance
event_bus = EventBus()


async def get_event_bus() -> EventBus:
    """Event bus dependency for FastAPI dependency injection."""
    return event_bus
