"""Implicit OPTIONS support.

Answers ``OPTIONS`` for paths that do not declare it, advertising the
path's methods in an ``Allow`` header. Downstream is never called on
that branch.

Must run after ``RouteMiddleware`` so a ``RouteResult`` is attached.
"""

import logging

from perch.http.request import Request
from perch.http.response import Response
from perch.middleware.protocol import Next, ResponseFactory
from perch.routing.result import route_result_of

logger = logging.getLogger("perch.middleware")


class ImplicitOptionsMiddleware:
    """Answer OPTIONS requests with the path's allowed methods.

    Passes the request through untouched when:

    - the method is not ``OPTIONS``,
    - no ``RouteResult`` is attached,
    - the path matched nothing (downstream produces the 404), or
    - the matched route accepts ``OPTIONS`` itself.

    Otherwise returns ``response_factory()`` with status 200 and
    ``Allow: GET,POST`` (methods in the order the router reports them).

    Usage::

        pipeline.pipe(ImplicitOptionsMiddleware())
    """

    __slots__ = ("response_factory", "separator")

    def __init__(
        self,
        response_factory: ResponseFactory = Response,
        *,
        separator: str = ",",
    ) -> None:
        self.response_factory = response_factory
        self.separator = separator

    async def __call__(self, request: Request, next: Next) -> Response:
        if request.method != "OPTIONS":
            return await next(request)

        result = route_result_of(request)
        if result is None:
            return await next(request)

        if result.is_failure and not result.is_method_failure:
            return await next(request)

        route = result.matched_route
        if route is not None and route.allows_method("OPTIONS"):
            return await next(request)

        allowed = result.allowed_methods or ()
        logger.debug("Implicit OPTIONS for %r: Allow %s", request.path, allowed)
        return (
            self.response_factory()
            .with_status(200)
            .with_header("Allow", self.separator.join(allowed))
        )
