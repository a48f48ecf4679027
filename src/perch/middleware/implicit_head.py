"""Implicit HEAD support.

Answers ``HEAD`` for paths that only declare ``GET``: the request is
re-matched as ``GET``, handed downstream, and the body is stripped from
the response while status and headers are kept.

Must run after ``RouteMiddleware`` so a ``RouteResult`` is attached.
"""

import logging

from perch.http.request import Request
from perch.http.response import Response
from perch.middleware.protocol import BodyFactory, Next, empty_body
from perch.routing.protocol import Router
from perch.routing.result import attach_route_result, route_result_of

logger = logging.getLogger("perch.middleware")

# Request attribute recording the method a request was rewritten from
FORWARDED_HTTP_METHOD_ATTRIBUTE = "forwarded_http_method"


class ImplicitHeadMiddleware:
    """Serve HEAD requests through GET routes.

    Passes the request through untouched when:

    - the method is not ``HEAD``,
    - no ``RouteResult`` is attached, or
    - the matched route already accepts ``HEAD`` (explicitly, or
      because it accepts any method).

    Otherwise the request is rewritten to ``GET`` with
    ``FORWARDED_HTTP_METHOD_ATTRIBUTE`` set to ``"HEAD"``, re-matched,
    and forwarded with the fresh ``RouteResult``. A failed re-match is
    forwarded as-is and its response returned unchanged; producing the
    404/405 is left to downstream.

    Usage::

        pipeline.pipe(ImplicitHeadMiddleware(router))
    """

    __slots__ = ("body_factory", "router")

    def __init__(self, router: Router, body_factory: BodyFactory = empty_body) -> None:
        self.router = router
        self.body_factory = body_factory

    async def __call__(self, request: Request, next: Next) -> Response:
        if request.method != "HEAD":
            return await next(request)

        result = route_result_of(request)
        if result is None:
            return await next(request)

        route = result.matched_route
        if route is not None and route.allows_method("HEAD"):
            return await next(request)

        derived = request.with_method("GET").with_attribute(
            FORWARDED_HTTP_METHOD_ATTRIBUTE, "HEAD"
        )
        rematch = self.router.match(derived)
        derived = attach_route_result(derived, rematch)
        logger.debug(
            "Implicit HEAD for %r re-matched as GET (success=%s)",
            request.path,
            rematch.is_success,
        )

        response = await next(derived)
        if rematch.is_failure:
            return response
        return response.with_body(self.body_factory())
