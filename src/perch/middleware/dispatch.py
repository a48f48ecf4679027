"""Dispatch to the matched route's handler."""

from perch._internal.invoke import invoke
from perch.http.request import Request
from perch.http.response import Response
from perch.middleware.protocol import Next
from perch.routing.result import route_result_of


class DispatchMiddleware:
    """Invoke the matched route's handler as middleware.

    The handler receives ``(request, next)`` and may be sync or async.
    Requests without a successful ``RouteResult`` go to ``next``.
    """

    __slots__ = ()

    async def __call__(self, request: Request, next: Next) -> Response:
        result = route_result_of(request)
        if result is None or result.matched_route is None:
            return await next(request)
        return await invoke(result.matched_route.handler, request, next)
