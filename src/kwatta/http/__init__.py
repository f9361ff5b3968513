"""Transport and rate limiting for kwatta."""

from .protocols import HttpResponse, RequestBody, RequestOptions, Transport
from .rate_limiter import DEFAULT_RATE_LIMIT_DELAY, RequestThrottle
from .transport import AiohttpTransport

__all__ = [
    "AiohttpTransport",
    "DEFAULT_RATE_LIMIT_DELAY",
    "HttpResponse",
    "RequestBody",
    "RequestOptions",
    "RequestThrottle",
    "Transport",
]
