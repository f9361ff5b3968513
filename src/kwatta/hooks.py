"""Event handler registry for request outcomes."""

import logging

from .models.events import EventHandler, RequestEvent

logger = logging.getLogger(__name__)


class EventNotifier:
    """Broadcast request events to registered handlers.

    Handlers are called synchronously in registration order. Their return
    values are ignored, and an exception raised by a handler propagates
    to the caller of ``notify`` (remaining handlers are not called).
    """

    def __init__(self) -> None:
        """Initialize with no handlers."""
        self.handlers: list[EventHandler] = []

    def __len__(self) -> int:
        return len(self.handlers)

    def add(self, handler: EventHandler) -> None:
        """Register a handler.

        Args:
            handler: Callable receiving a RequestEvent
        """
        self.handlers.append(handler)
        logger.debug(f"Registered event handler: {getattr(handler, '__name__', handler)!r}")

    def remove(self, handler: EventHandler) -> None:
        """Unregister the first occurrence of a handler. No-op if it was never added.

        Handlers are matched by equality, so a bound method can be removed
        through a fresh ``obj.method`` reference.

        Args:
            handler: The callable passed to ``add``
        """
        try:
            self.handlers.remove(handler)
        except ValueError:
            return

    def notify(self, event: RequestEvent) -> None:
        """Call every handler with the event.

        Args:
            event: Event to broadcast
        """
        for handler in list(self.handlers):
            handler(event)
