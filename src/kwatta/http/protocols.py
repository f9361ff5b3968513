"""Protocol definitions for the transport abstraction."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Optional, Protocol, Union

from aiohttp import FormData

# Request body as handed to the transport
RequestBody = Union[str, bytes, FormData, None]


@dataclass
class RequestOptions:
    """
    Options describing one outgoing request.

    Built by the client from the default and caller headers, then
    threaded through the middleware chain before dispatch.

    Attributes:
        method: HTTP method, upper case
        headers: Request headers (mutable, owned by this instance)
        body: JSON text, raw bytes, multipart form data, or None
        timeout: Seconds before the in-flight call is cancelled (None = no limit)
    """

    method: str
    headers: dict[str, str] = field(default_factory=dict)
    body: RequestBody = None
    timeout: Optional[float] = None

    @property
    def is_multipart(self) -> bool:
        """Check if the body is multipart form data."""
        return isinstance(self.body, FormData)

    def copy(self) -> RequestOptions:
        """Return a shallow copy with its own headers dict."""
        return RequestOptions(
            method=self.method,
            headers=dict(self.headers),
            body=self.body,
            timeout=self.timeout,
        )


@dataclass(frozen=True)
class HttpResponse:
    """
    Immutable HTTP response returned by a Transport.

    Attributes:
        status_code: HTTP status code (200, 404, etc.)
        content: Raw response content as bytes
        content_type: Content-Type header value
        headers: All response headers
        url: Final URL after any redirects
    """

    status_code: int
    content: bytes
    content_type: str = ""
    headers: dict[str, str] = field(default_factory=dict)
    url: str = ""

    @property
    def ok(self) -> bool:
        """Check if the status is in the 2xx range."""
        return 200 <= self.status_code < 300

    def json(self) -> Any:
        """
        Decode the body as JSON.

        Returns:
            Decoded value, or None for an empty body (e.g. HEAD responses)

        Raises:
            json.JSONDecodeError: If the body is not valid JSON
        """
        if not self.content.strip():
            return None
        return json.loads(self.content)


class Transport(Protocol):
    """
    Protocol for the network primitive behind the client.

    Any async callable taking a URL and RequestOptions and returning an
    HttpResponse satisfies it. This abstraction allows for:
    - Fake transports in tests
    - Different backends (aiohttp, httpx, etc.)

    Transport errors must propagate unchanged; the client reports and
    re-raises them as they are.
    """

    async def __call__(self, url: str, options: RequestOptions) -> HttpResponse:
        """
        Send one request.

        Args:
            url: Full target URL
            options: Method, headers, body and timeout

        Returns:
            HttpResponse with status, content, and headers
        """
        ...
