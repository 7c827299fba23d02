from collections.abc import Callable

import structlog

from src.models.events import Event

log = structlog.get_logger()

Subscriber = Callable[[Event], None]


class EventBus:
    """Synchronous fan-out of events to the presentation layer."""

    def __init__(self) -> None:
        self._subscribers: list[Subscriber] = []

    def subscribe(self, subscriber: Subscriber) -> Callable[[], None]:
        """Register a subscriber. Returns a callable that unsubscribes it."""
        self._subscribers.append(subscriber)

        def unsubscribe() -> None:
            if subscriber in self._subscribers:
                self._subscribers.remove(subscriber)

        return unsubscribe

    def publish(self, event: Event) -> None:
        for subscriber in list(self._subscribers):
            try:
                subscriber(event)
            except Exception:
                log.exception("event_subscriber_failed", event_type=event.type)
