"""Default transport backed by aiohttp."""

from __future__ import annotations

import logging
from types import TracebackType

import aiohttp

from .protocols import HttpResponse, RequestOptions

logger = logging.getLogger(__name__)


class AiohttpTransport:
    """
    Transport that sends requests through an aiohttp ClientSession.

    The session is created on first use and shared by every request
    until ``close()`` is called. Network errors (``aiohttp.ClientError``,
    ``asyncio.TimeoutError``) propagate unchanged.

    Example:
        async with AiohttpTransport() as transport:
            response = await transport(
                "https://api.example.com/users",
                RequestOptions(method="GET"),
            )
            print(response.json())
    """

    def __init__(
        self,
        user_agent: str | None = None,
        proxy: str | None = None,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        """
        Initialize the transport.

        Args:
            user_agent: Custom User-Agent string
            proxy: Proxy URL (http:// or socks5://)
            session: Existing session to use; it is not closed by this transport
        """
        if user_agent is None:
            user_agent = "kwatta/1.0"
        self._user_agent = user_agent
        self._proxy = proxy
        self._session = session
        self._owns_session = session is None

    async def __aenter__(self) -> AiohttpTransport:
        """Enter async context and create session."""
        self._get_session()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit async context and close session."""
        await self.close()

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(headers={"User-Agent": self._user_agent})
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        """Close the session if this transport created it."""
        if self._session is not None and self._owns_session:
            await self._session.close()
        self._session = None

    async def __call__(self, url: str, options: RequestOptions) -> HttpResponse:
        """
        Send a request and read the full response body.

        Args:
            url: Full target URL
            options: Method, headers and body of the request

        Returns:
            HttpResponse with status, content, and headers
        """
        session = self._get_session()
        async with session.request(
            options.method,
            url,
            headers=options.headers,
            data=options.body,
            proxy=self._proxy,
            allow_redirects=True,
        ) as response:
            content = await response.read()
            logger.debug(f"{options.method} {url}: HTTP {response.status}, {len(content)} bytes")
            return HttpResponse(
                status_code=response.status,
                content=content,
                content_type=response.headers.get("Content-Type", ""),
                headers=dict(response.headers),
                url=str(response.url),
            )
