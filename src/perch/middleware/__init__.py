"""Middleware — Protocol-based, no inheritance required.

A middleware is any callable matching:
    async def mw(request: Request, next: Next) -> Response

Built-in middleware, in the order a routing pipeline runs them:
    RouteMiddleware -- Match the request and attach its RouteResult
    ImplicitHeadMiddleware -- Serve HEAD through GET routes, body stripped
    ImplicitOptionsMiddleware -- Answer OPTIONS with an Allow header
    MethodNotAllowedMiddleware -- 405 with Allow for method failures
    DispatchMiddleware -- Invoke the matched route's handler
"""

from perch.middleware.dispatch import DispatchMiddleware
from perch.middleware.implicit_head import (
    FORWARDED_HTTP_METHOD_ATTRIBUTE,
    ImplicitHeadMiddleware,
)
from perch.middleware.implicit_options import ImplicitOptionsMiddleware
from perch.middleware.method_not_allowed import MethodNotAllowedMiddleware
from perch.middleware.protocol import Middleware, Next
from perch.middleware.routing import RouteMiddleware

__all__ = [
    "FORWARDED_HTTP_METHOD_ATTRIBUTE",
    "DispatchMiddleware",
    "ImplicitHeadMiddleware",
    "ImplicitOptionsMiddleware",
    "MethodNotAllowedMiddleware",
    "Middleware",
    "Next",
    "RouteMiddleware",
]
