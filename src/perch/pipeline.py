"""Middleware pipeline.

Mutable during setup (``pipe()``), frozen on the first request. Wraps
middleware around a final handler and converts ``HTTPError`` raised
anywhere in the chain into a ``Response``.
"""

import logging
import threading
from collections.abc import Callable
from typing import Any

import anyio

from perch.config import RoutingConfig
from perch.errors import ConfigurationError, HTTPError, NotFound
from perch.http.request import Request
from perch.http.response import Response
from perch.middleware.dispatch import DispatchMiddleware
from perch.middleware.implicit_head import ImplicitHeadMiddleware
from perch.middleware.implicit_options import ImplicitOptionsMiddleware
from perch.middleware.method_not_allowed import MethodNotAllowedMiddleware
from perch.middleware.protocol import BodyFactory, Next, ResponseFactory, empty_body
from perch.middleware.routing import RouteMiddleware
from perch.routing.protocol import Router

logger = logging.getLogger("perch.pipeline")


async def not_found(request: Request) -> Response:
    """Default final handler: nothing answered the request."""
    raise NotFound(f"No route matches {request.method} {request.path!r}")


def error_response(exc: HTTPError) -> Response:
    """Plain-text response for an ``HTTPError``."""
    response = Response(
        body=exc.detail,
        status=exc.status,
        content_type="text/plain; charset=utf-8",
    )
    for name, value in exc.headers:
        response = response.with_added_header(name, value)
    return response


class Pipeline:
    """An ordered middleware chain ending in a final handler.

    Usage::

        pipeline = Pipeline()
        pipeline.pipe(RouteMiddleware(router))
        pipeline.pipe(DispatchMiddleware())
        response = await pipeline.handle(Request("GET", "/"))

    Thread safety:
        ``pipe()`` is setup-time only. The first ``handle()`` composes
        the chain under a lock; afterwards the pipeline is read-only and
        safe to share between concurrent requests.
    """

    __slots__ = ("_chain", "_final_handler", "_freeze_lock", "_middleware")

    def __init__(self, final_handler: Next | None = None) -> None:
        self._final_handler: Next = final_handler or not_found
        self._middleware: list[Callable[..., Any]] = []
        self._chain: Next | None = None
        self._freeze_lock = threading.Lock()

    def pipe(self, middleware: Callable[..., Any]) -> "Pipeline":
        """Append *middleware*. Returns the pipeline for chaining."""
        if self._chain is not None:
            msg = "Cannot add middleware after the pipeline has handled a request."
            raise ConfigurationError(msg)
        self._middleware.append(middleware)
        return self

    @property
    def middleware(self) -> tuple[Callable[..., Any], ...]:
        return tuple(self._middleware)

    def _freeze(self) -> Next:
        with self._freeze_lock:
            if self._chain is not None:
                return self._chain

            handler = self._final_handler
            for mw in reversed(self._middleware):
                outer = handler

                async def make_next(
                    req: Request, _mw: Any = mw, _next: Next = outer
                ) -> Response:
                    return await _mw(req, _next)

                handler = make_next

            self._chain = handler
            logger.debug("Pipeline frozen with %d middleware", len(self._middleware))
            return handler

    async def handle(self, request: Request) -> Response:
        """Run *request* through the chain and return the response."""
        chain = self._chain or self._freeze()
        try:
            return await chain(request)
        except HTTPError as exc:
            logger.debug("%s %s -> %s", request.method, request.path, exc)
            return error_response(exc)

    async def __call__(self, request: Request) -> Response:
        return await self.handle(request)

    def handle_sync(self, request: Request) -> Response:
        """Run the pipeline to completion from synchronous code."""
        return anyio.run(self.handle, request)


def build_routing_pipeline(
    router: Router,
    config: RoutingConfig | None = None,
    final_handler: Next | None = None,
    *,
    response_factory: ResponseFactory = Response,
    body_factory: BodyFactory = empty_body,
) -> Pipeline:
    """Assemble the standard routing pipeline around *router*.

    Order: route matching, implicit HEAD, implicit OPTIONS, 405 handling,
    dispatch. Stages switched off in *config* are left out.
    """
    config = config or RoutingConfig()
    pipeline = Pipeline(final_handler)
    pipeline.pipe(RouteMiddleware(router))
    if config.implicit_head:
        pipeline.pipe(ImplicitHeadMiddleware(router, body_factory))
    if config.implicit_options:
        pipeline.pipe(
            ImplicitOptionsMiddleware(response_factory, separator=config.allow_separator)
        )
    if config.method_not_allowed:
        pipeline.pipe(
            MethodNotAllowedMiddleware(response_factory, separator=config.allow_separator)
        )
    if config.dispatch:
        pipeline.pipe(DispatchMiddleware())
    return pipeline
