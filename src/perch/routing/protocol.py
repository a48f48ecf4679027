"""Router protocol.

A router is anything with this shape. No base class required; the
middleware checks the shape, not the lineage::

    class MyRouter:
        def add_route(self, route: Route) -> None: ...
        def match(self, request: Request) -> RouteResult: ...
        def generate_uri(self, name: str, substitutions=None) -> str: ...

``match`` must be callable repeatedly: implicit-method middleware
re-matches a derived request after changing its method.
"""

from collections.abc import Mapping
from typing import Protocol

from perch.http.request import Request
from perch.routing.result import RouteResult
from perch.routing.route import Route


class Router(Protocol):
    """Protocol for perch routers."""

    def add_route(self, route: Route) -> None: ...

    def match(self, request: Request) -> RouteResult: ...

    def generate_uri(
        self,
        name: str,
        substitutions: Mapping[str, object] | None = None,
    ) -> str: ...
