"""Perch — async routing middleware with implicit HEAD and OPTIONS.

Routes declare the methods they answer. Perch fills in the rest: HEAD is
served through GET routes with the body stripped, and OPTIONS is answered
from the path's allowed methods without touching a handler.

Basic usage::

    from perch import Request, Response, RouteCollector, TrieRouter, build_routing_pipeline

    router = TrieRouter()
    routes = RouteCollector(router)

    async def me(request, next):
        return Response("hello")

    routes.get("/api/v1/me", me)
    pipeline = build_routing_pipeline(router)

    response = await pipeline.handle(Request("HEAD", "/api/v1/me"))
    assert response.body_bytes == b""
"""

__version__ = "0.1.0-dev"
__all__ = [
    "FORWARDED_HTTP_METHOD_ATTRIBUTE",
    "ROUTE_RESULT_ATTRIBUTE",
    "ConfigurationError",
    "DispatchMiddleware",
    "DuplicateRouteError",
    "HTTPError",
    "Headers",
    "ImplicitHeadMiddleware",
    "ImplicitOptionsMiddleware",
    "InvalidRouteError",
    "MethodNotAllowedMiddleware",
    "Middleware",
    "Next",
    "NotFound",
    "PerchError",
    "Pipeline",
    "Request",
    "Response",
    "Route",
    "RouteCollector",
    "RouteMiddleware",
    "RouteResult",
    "Router",
    "RoutingConfig",
    "TrieRouter",
    "UriGenerationError",
    "build_routing_pipeline",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import perch`` fast while providing a clean top-level API.
    """
    if name in ("Headers", "Request", "Response"):
        from perch import http as _http

        return getattr(_http, name)

    if name == "RoutingConfig":
        from perch.config import RoutingConfig

        return RoutingConfig

    if name in ("Pipeline", "build_routing_pipeline"):
        from perch import pipeline as _pipeline

        return getattr(_pipeline, name)

    if name in (
        "ROUTE_RESULT_ATTRIBUTE",
        "Route",
        "RouteCollector",
        "RouteResult",
        "Router",
        "TrieRouter",
    ):
        from perch import routing as _routing

        return getattr(_routing, name)

    if name in (
        "FORWARDED_HTTP_METHOD_ATTRIBUTE",
        "DispatchMiddleware",
        "ImplicitHeadMiddleware",
        "ImplicitOptionsMiddleware",
        "MethodNotAllowedMiddleware",
        "Middleware",
        "Next",
        "RouteMiddleware",
    ):
        from perch import middleware as _mw

        return getattr(_mw, name)

    if name in (
        "ConfigurationError",
        "DuplicateRouteError",
        "HTTPError",
        "InvalidRouteError",
        "NotFound",
        "PerchError",
        "UriGenerationError",
    ):
        from perch import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
