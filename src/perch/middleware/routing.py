"""Path-based routing middleware.

Matches every request against the router and attaches the outcome, so
later middleware (implicit methods, 405 handling, dispatch) can act on
it. Never answers a request itself.
"""

from perch.http.request import Request
from perch.http.response import Response
from perch.middleware.protocol import Next
from perch.routing.protocol import Router
from perch.routing.result import attach_route_result


class RouteMiddleware:
    """Attach a fresh ``RouteResult`` (and matched parameters) to each request.

    Usage::

        pipeline.pipe(RouteMiddleware(router))
    """

    __slots__ = ("router",)

    def __init__(self, router: Router) -> None:
        self.router = router

    async def __call__(self, request: Request, next: Next) -> Response:
        result = self.router.match(request)
        return await next(attach_route_result(request, result))
