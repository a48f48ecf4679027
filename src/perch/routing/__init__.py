"""Routing — routes, match results, and the in-process trie router.

Routes are registered during setup and frozen once the router starts
matching requests. A match never raises: it returns a ``RouteResult``.
"""

from perch.routing.collector import RouteCollector
from perch.routing.protocol import Router
from perch.routing.result import (
    ROUTE_RESULT_ATTRIBUTE,
    RouteResult,
    attach_route_result,
    route_result_of,
)
from perch.routing.route import HTTP_METHOD_ANY, PathSegment, Route
from perch.routing.router import TrieRouter, parse_path

__all__ = [
    "HTTP_METHOD_ANY",
    "ROUTE_RESULT_ATTRIBUTE",
    "PathSegment",
    "Route",
    "RouteCollector",
    "RouteResult",
    "Router",
    "TrieRouter",
    "attach_route_result",
    "parse_path",
    "route_result_of",
]
