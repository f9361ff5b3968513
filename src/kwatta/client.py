"""Kwatta - JSON HTTP client with auth, throttling, caching and middleware."""

from __future__ import annotations

import asyncio
import json
import logging
import time
from collections.abc import Awaitable
from types import TracebackType
from typing import Any, Callable

from aiohttp import FormData

from .cache import DEFAULT_CACHE_LIFETIME, ResponseCache, cache_key
from .exceptions import RequestError
from .hooks import EventNotifier
from .http import (
    DEFAULT_RATE_LIMIT_DELAY,
    AiohttpTransport,
    HttpResponse,
    RequestBody,
    RequestOptions,
    RequestThrottle,
    Transport,
)
from .logging_config import setup_logging
from .middleware import Middleware, MiddlewareChain
from .models.config import DEFAULT_HEADERS, KwattaConfig
from .models.events import EventHandler, RequestEvent

logger = logging.getLogger(__name__)


class Kwatta:
    """
    JSON HTTP client bound to a base URL.

    Every request goes through the same steps:
    - Throttling: waits until ``rate_limit_delay`` seconds have passed
      since the last successful request
    - Caching: fresh responses are served from memory, keyed by method and URL
    - Headers: default headers, overridden by per-call headers
    - Middleware: registered middlewares transform the request options
    - Auth: the configured token header is set last, after middleware
    - Events: handlers are notified of every success and failure

    Failures (non-2xx status, transport errors, invalid JSON) are logged,
    broadcast as error events and re-raised unchanged. Nothing is retried.

    Example:
        async with Kwatta("https://api.example.com") as client:
            client.set_auth_token(os.environ["API_TOKEN"])
            client.use(add_trace_id)

            users = await client.get("/users")
            created = await client.post("/users", {"name": "Ada"})
    """

    def __init__(
        self,
        base_url: str,
        *,
        transport: Transport | None = None,
        default_headers: dict[str, str] | None = None,
        rate_limit_delay: float = DEFAULT_RATE_LIMIT_DELAY,
        cache_lifetime: float = DEFAULT_CACHE_LIFETIME,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """
        Initialize the client.

        Args:
            base_url: Prefix prepended to every request path
            transport: Network primitive (an AiohttpTransport is created if None)
            default_headers: Extra headers sent with every request, merged over
                             Content-Type: application/json
            rate_limit_delay: Minimum seconds between dispatches
            cache_lifetime: Seconds before a cached response goes stale
            clock: Time source for throttling and cache timestamps
            sleep: Coroutine used for throttling waits
        """
        self.base_url = base_url
        self.default_headers = {**DEFAULT_HEADERS, **(default_headers or {})}

        self._auth_token: str | None = None
        self._auth_header_name = "Authorization"
        self._use_bearer_prefix = True

        self._clock = clock
        self._throttle = RequestThrottle(delay=rate_limit_delay, clock=clock, sleep=sleep)
        self._cache = ResponseCache(lifetime=cache_lifetime, clock=clock)
        self._middlewares = MiddlewareChain()
        self._notifier = EventNotifier()

        self._owns_transport = transport is None
        self._transport: Transport = transport if transport is not None else AiohttpTransport()

    @classmethod
    def from_config(
        cls,
        config: KwattaConfig,
        transport: Transport | None = None,
        configure_logging: bool = False,
    ) -> Kwatta:
        """
        Build a client from a KwattaConfig.

        Args:
            config: Validated configuration
            transport: Optional transport override
            configure_logging: If True, apply the config's log level and file

        Returns:
            Configured client
        """
        if configure_logging:
            setup_logging(level=config.log_level, log_file=config.log_file)

        client = cls(
            config.base_url,
            transport=transport,
            default_headers=config.default_headers,
            rate_limit_delay=config.rate_limit_delay,
            cache_lifetime=config.cache_lifetime,
        )
        if config.auth.token:
            client.set_auth_token(
                config.auth.token,
                header_name=config.auth.header_name,
                use_bearer_prefix=config.auth.use_bearer_prefix,
            )
        return client

    async def __aenter__(self) -> Kwatta:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit async context and close an owned transport."""
        await self.close()

    async def close(self) -> None:
        """Close the transport if this client created it."""
        if self._owns_transport and isinstance(self._transport, AiohttpTransport):
            await self._transport.close()

    @property
    def cache(self) -> ResponseCache:
        return self._cache

    @property
    def throttle(self) -> RequestThrottle:
        return self._throttle

    # Configuration

    def set_auth_token(
        self,
        token: str,
        header_name: str = "Authorization",
        use_bearer_prefix: bool = True,
    ) -> None:
        """
        Set the token attached to subsequent requests.

        Args:
            token: The authentication token
            header_name: Header that carries the token
            use_bearer_prefix: Send ``Bearer <token>`` instead of the bare token
        """
        self._auth_token = token
        self._auth_header_name = header_name
        self._use_bearer_prefix = use_bearer_prefix

    def set_rate_limit_delay(self, delay: float) -> None:
        """Set the minimum seconds between dispatches. Not validated."""
        self._throttle.delay = delay

    def set_last_request_timestamp(self, timestamp: float) -> None:
        """Set the clock time of the last request. Not validated."""
        self._throttle.last_request = timestamp

    def set_cache_lifetime(self, lifetime: float) -> None:
        """Set the seconds before a cached response goes stale. Not validated."""
        self._cache.lifetime = lifetime

    def use(self, middleware: Middleware) -> Kwatta:
        """
        Add a middleware to the end of the chain.

        Args:
            middleware: Function (or coroutine function) taking RequestOptions
                        and returning new options, or None for no change

        Returns:
            This client, to allow chained registration
        """
        self._middlewares.add(middleware)
        return self

    def clear_cache(self) -> None:
        """Drop every cached response."""
        self._cache.clear()

    def add_event_handler(self, handler: EventHandler) -> None:
        """Register a handler called with a RequestEvent after every request."""
        self._notifier.add(handler)

    def remove_event_handler(self, handler: EventHandler) -> None:
        """Unregister a handler. No-op if it was never added."""
        self._notifier.remove(handler)

    # Verbs

    async def get(self, path: str, headers: dict[str, str] | None = None, timeout: float | None = None) -> Any:
        """
        Execute an HTTP GET request.

        Args:
            path: Request path, appended to the base URL
            headers: Optional request headers
            timeout: Optional timeout in seconds

        Returns:
            The decoded JSON response body
        """
        return await self.request("GET", path, headers=headers, timeout=timeout)

    async def post(
        self,
        path: str,
        data: Any = None,
        headers: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> Any:
        """
        Execute an HTTP POST request.

        Args:
            path: Request path, appended to the base URL
            data: JSON-serializable value, or FormData for a multipart upload.
                  None (the default) sends no body rather than the JSON text "null"
            headers: Optional request headers
            timeout: Optional timeout in seconds

        Returns:
            The decoded JSON response body
        """
        return await self.request("POST", path, headers=headers, body=_encode_body(data), timeout=timeout)

    async def put(
        self,
        path: str,
        data: Any = None,
        headers: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> Any:
        """Execute an HTTP PUT request. See ``post`` for the arguments."""
        return await self.request("PUT", path, headers=headers, body=_encode_body(data), timeout=timeout)

    async def patch(
        self,
        path: str,
        data: Any = None,
        headers: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> Any:
        """Execute an HTTP PATCH request. See ``post`` for the arguments."""
        return await self.request("PATCH", path, headers=headers, body=_encode_body(data), timeout=timeout)

    async def delete(self, path: str, headers: dict[str, str] | None = None, timeout: float | None = None) -> Any:
        """Execute an HTTP DELETE request. See ``get`` for the arguments."""
        return await self.request("DELETE", path, headers=headers, timeout=timeout)

    async def head(self, path: str, headers: dict[str, str] | None = None, timeout: float | None = None) -> Any:
        """Execute an HTTP HEAD request. Resolves with None for an empty body."""
        return await self.request("HEAD", path, headers=headers, timeout=timeout)

    async def options(self, path: str, headers: dict[str, str] | None = None, timeout: float | None = None) -> Any:
        """Execute an HTTP OPTIONS request."""
        return await self.request("OPTIONS", path, headers=headers, timeout=timeout)

    async def connect(self, path: str, headers: dict[str, str] | None = None, timeout: float | None = None) -> Any:
        """Execute an HTTP CONNECT request."""
        return await self.request("CONNECT", path, headers=headers, timeout=timeout)

    async def trace(self, path: str, headers: dict[str, str] | None = None, timeout: float | None = None) -> Any:
        """Execute an HTTP TRACE request."""
        return await self.request("TRACE", path, headers=headers, timeout=timeout)

    async def copy(self, path: str, headers: dict[str, str] | None = None, timeout: float | None = None) -> Any:
        """Execute a WebDAV COPY request."""
        return await self.request("COPY", path, headers=headers, timeout=timeout)

    # Dispatch

    async def request(
        self,
        method: str,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        body: RequestBody = None,
        timeout: float | None = None,
        include_auth: bool = True,
    ) -> Any:
        """
        Perform an HTTP request.

        Args:
            method: HTTP method
            path: Request path, appended to the base URL as is
            headers: Optional headers overriding the defaults
            body: Encoded body (JSON text, bytes) or FormData
            timeout: Optional timeout in seconds (0 or None = no limit)
            include_auth: If False, the auth header is not injected

        Returns:
            The decoded JSON response body (None for an empty body)

        Raises:
            RequestError: On a non-2xx response
            Exception: Transport, timeout, decode and middleware errors, unchanged
        """
        method = method.upper()
        url = self.base_url + path

        try:
            await self._throttle.wait()

            key = cache_key(method, url)
            entry = self._cache.get(key)
            if entry is not None:
                self._log_request_success(method, url, cached=True)
                self._notifier.notify(RequestEvent.success(entry.data, method=method, url=url))
                return entry.data

            options = RequestOptions(
                method=method,
                headers=self._build_headers(headers),
                body=body,
                timeout=timeout,
            )
            options = await self._middlewares.apply(options)

            # Let the transport set the multipart boundary header itself
            if options.is_multipart:
                for name in [h for h in options.headers if h.lower() == "content-type"]:
                    del options.headers[name]

            if self._auth_token and include_auth:
                options.headers[self._auth_header_name] = self._auth_header_value()

            response = await self._send(url, options)

            if not response.ok:
                self._log_request_failure(method, url, response.status_code)
                raise RequestError(response.status_code, method, url)

            data = response.json()

            self._cache.set(key, data)
            self._notifier.notify(RequestEvent.success(data, method=method, url=url))
            self._throttle.mark()
            self._log_request_success(method, url)

            return data

        except Exception as e:
            logger.warning(f"[ABORTED] {method} request to {url} was aborted: {e}")
            self._notifier.notify(RequestEvent.failure(e, method=method, url=url))
            raise

    async def _send(self, url: str, options: RequestOptions) -> HttpResponse:
        """Call the transport, cancelling it after ``options.timeout`` seconds."""
        if options.timeout:
            return await asyncio.wait_for(self._transport(url, options), timeout=options.timeout)
        return await self._transport(url, options)

    def _build_headers(self, custom_headers: dict[str, str] | None = None) -> dict[str, str]:
        """Combine default headers with per-call headers (per-call wins)."""
        headers = dict(self.default_headers)
        if custom_headers:
            headers.update(custom_headers)
        return headers

    def _auth_header_value(self) -> str:
        if self._use_bearer_prefix:
            return f"Bearer {self._auth_token}"
        return str(self._auth_token)

    def _log_request_success(self, method: str, url: str, cached: bool = False) -> None:
        source = " (cached)" if cached else ""
        logger.info(f"[SUCCESS] {method} request to {url} was successful{source}")

    def _log_request_failure(self, method: str, url: str, status: int) -> None:
        logger.error(f"[FAILURE] {method} request to {url} failed with status {status}")


def _encode_body(data: Any) -> RequestBody:
    """Serialize a request payload; FormData and None pass through."""
    if data is None or isinstance(data, FormData):
        return data
    return json.dumps(data)
