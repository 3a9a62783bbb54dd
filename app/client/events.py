"""Event subscriptions with explicit disposers.

Browser listeners (scroll, resize, hashchange, colour-scheme changes) are
modelled as EventSource objects. Every subscription returns a handle whose
``dispose`` detaches the handler, so a harness can tear down deterministically.
"""

import logging
from typing import Any, Callable, List

logger = logging.getLogger(__name__)

Handler = Callable[..., Any]


class Subscription:
    """Handle returned by EventSource.subscribe."""

    def __init__(self, source: "EventSource", handler: Handler):
        self._source = source
        self._handler = handler
        self.active = True

    def dispose(self) -> None:
        if not self.active:
            return
        self._source._remove(self._handler)
        self.active = False


class EventSource:
    """A named source of events that handlers can subscribe to."""

    def __init__(self, name: str):
        self.name = name
        self._handlers: List[Handler] = []

    def subscribe(self, handler: Handler) -> Subscription:
        self._handlers.append(handler)
        return Subscription(self, handler)

    def emit(self, *args: Any) -> None:
        for handler in list(self._handlers):
            handler(*args)

    @property
    def listener_count(self) -> int:
        return len(self._handlers)

    def _remove(self, handler: Handler) -> None:
        try:
            self._handlers.remove(handler)
        except ValueError:
            logger.debug(f"Handler already detached from {self.name}")


class SubscriptionGroup:
    """Collects subscriptions so they can be disposed together."""

    def __init__(self):
        self._subscriptions: List[Subscription] = []

    def add(self, subscription: Subscription) -> Subscription:
        self._subscriptions.append(subscription)
        return subscription

    def dispose_all(self) -> None:
        while self._subscriptions:
            self._subscriptions.pop().dispose()

    def __len__(self) -> int:
        return len(self._subscriptions)
