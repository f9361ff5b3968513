"""Middleware chain applied to outgoing request options."""

import inspect
from collections.abc import Awaitable
from dataclasses import dataclass, field
from typing import Callable, Optional, Union

from .http.protocols import RequestOptions

MiddlewareResult = Optional[RequestOptions]

# A middleware may be a plain function or a coroutine function
Middleware = Callable[[RequestOptions], Union[MiddlewareResult, Awaitable[MiddlewareResult]]]


@dataclass
class MiddlewareChain:
    """
    Ordered list of middlewares threaded over request options.

    Each middleware receives the options produced by the previous one and
    returns the next version. Returning None means "no change": the
    options passed in are carried forward. Middlewares may also mutate
    the options in place and return None.

    Exceptions raised by a middleware are not caught here; they abort the
    request and surface through the client's error reporting.

    Example:
        def add_trace_id(options: RequestOptions) -> RequestOptions:
            options.headers["X-Trace-Id"] = new_trace_id()
            return options

        async def sign(options: RequestOptions) -> None:
            options.headers["X-Signature"] = await signer.sign(options.body)

        chain = MiddlewareChain().add(add_trace_id).add(sign)
        options = await chain.apply(options)
    """

    middlewares: list[Middleware] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.middlewares)

    def add(self, middleware: Middleware) -> "MiddlewareChain":
        """
        Add a middleware to the end of the chain (fluent API).

        Args:
            middleware: The middleware to add

        Returns:
            Self for chaining
        """
        self.middlewares.append(middleware)
        return self

    async def apply(self, options: RequestOptions) -> RequestOptions:
        """
        Run every middleware in registration order.

        Args:
            options: Options built from the default and caller headers;
                     not modified, the chain works on a copy

        Returns:
            The options produced by the last middleware
        """
        current = options.copy()
        for middleware in self.middlewares:
            result = middleware(current)
            if inspect.isawaitable(result):
                result = await result
            if result is not None:
                current = result
        return current
