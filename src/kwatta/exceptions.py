"""Exceptions raised by kwatta."""

from typing import Optional


class RequestError(Exception):
    """
    Raised when the server answers with a non-2xx status.

    Transport failures (connection errors, timeouts) and JSON decode
    failures are not wrapped; they reach the caller as raised.

    Attributes:
        status: HTTP status code of the response
        method: HTTP method of the failed request
        url: Full URL of the failed request
    """

    def __init__(self, status: int, method: str, url: str, message: Optional[str] = None):
        if message is None:
            message = f"Failed to {method.lower()} data to {url}. Status: {status}"
        super().__init__(message)
        self.status = status
        self.method = method
        self.url = url

    def __repr__(self) -> str:
        return f"RequestError(status={self.status!r}, method={self.method!r}, url={self.url!r})"
