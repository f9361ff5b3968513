"""Event types broadcast to request event handlers."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Optional


class EventType(str, Enum):
    """Outcome of a dispatched request."""

    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class RequestEvent:
    """
    Event broadcast after a request settles.

    ``type`` tags the payload: for SUCCESS it is the decoded response
    body (possibly served from the cache), for ERROR it is the exception
    that is about to be raised to the caller.

    Example:
        def on_event(event: RequestEvent) -> None:
            if event.is_error:
                print(f"{event.method} {event.url} failed: {event.error}")
            else:
                print(f"{event.method} {event.url} -> {event.payload}")

        client.add_event_handler(on_event)
    """

    type: EventType
    payload: Any
    method: Optional[str] = None
    url: Optional[str] = None

    # Timestamp (always UTC)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def success(cls, payload: Any, method: Optional[str] = None, url: Optional[str] = None) -> "RequestEvent":
        return cls(type=EventType.SUCCESS, payload=payload, method=method, url=url)

    @classmethod
    def failure(
        cls, error: BaseException, method: Optional[str] = None, url: Optional[str] = None
    ) -> "RequestEvent":
        return cls(type=EventType.ERROR, payload=error, method=method, url=url)

    @property
    def is_error(self) -> bool:
        """Check if this is an error event."""
        return self.type == EventType.ERROR

    @property
    def error(self) -> Optional[BaseException]:
        """The raised exception for error events, None otherwise."""
        return self.payload if self.is_error else None


# Type alias for event handler functions
EventHandler = Callable[[RequestEvent], Any]
