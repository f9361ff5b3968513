"""
kwatta - JSON HTTP client with auth, throttling, caching and middleware.

Usage:
    from kwatta import Kwatta, RequestEvent

    async with Kwatta("https://api.example.com") as client:
        client.set_auth_token("secret")
        client.add_event_handler(lambda event: print(event.type, event.url))

        users = await client.get("/users")
"""

__version__ = "1.0.0"

from .cache import CacheEntry, ResponseCache
from .client import Kwatta
from .exceptions import RequestError
from .hooks import EventNotifier
from .http import AiohttpTransport, HttpResponse, RequestOptions, RequestThrottle, Transport
from .logging_config import setup_logging
from .middleware import Middleware, MiddlewareChain
from .models.config import AuthConfig, KwattaConfig
from .models.events import EventHandler, EventType, RequestEvent

__all__ = [
    "__version__",
    # Core
    "Kwatta",
    "RequestError",
    # Config
    "KwattaConfig",
    "AuthConfig",
    "setup_logging",
    # Events
    "EventType",
    "RequestEvent",
    "EventHandler",
    "EventNotifier",
    # Middleware
    "Middleware",
    "MiddlewareChain",
    "RequestOptions",
    # Transport
    "Transport",
    "AiohttpTransport",
    "HttpResponse",
    # Internals
    "RequestThrottle",
    "ResponseCache",
    "CacheEntry",
]
