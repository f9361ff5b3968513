"""Configuration and event models for kwatta."""

from .config import DEFAULT_HEADERS, AuthConfig, KwattaConfig
from .events import EventHandler, EventType, RequestEvent

__all__ = [
    "DEFAULT_HEADERS",
    "AuthConfig",
    "KwattaConfig",
    "EventHandler",
    "EventType",
    "RequestEvent",
]
