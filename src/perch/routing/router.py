"""Trie-based router.

Routes are registered during setup and frozen into an immutable lookup
structure on the first ``match()`` (or an explicit ``compile()``).
"""

import logging
import re
from collections.abc import Iterator, Mapping
from dataclasses import dataclass

from perch.errors import ConfigurationError, UriGenerationError
from perch.http.request import Request
from perch.routing.params import CONVERTERS, converter_regex
from perch.routing.result import RouteResult
from perch.routing.route import PathSegment, Route

logger = logging.getLogger("perch.routing")

_FLASK_STYLE_PARAM = re.compile(r"<[^>]+>")


def parse_path(path: str) -> list[PathSegment]:
    """Parse a route path string into segments.

    Examples::

        "/users"          -> [PathSegment("users")]
        "/users/{id}"     -> [PathSegment("users"), PathSegment("{id}", is_param=True, ...)]
        "/users/{id:int}" -> [PathSegment("{id:int}", is_param=True, param_type="int")]
        "/files/{path:path}" -> [PathSegment("{path:path}", is_param=True, param_type="path")]
    """
    if _FLASK_STYLE_PARAM.search(path):
        msg = (
            f"Route path {path!r} uses <param> syntax. "
            "Perch route parameters are written as {param} or {param:type}."
        )
        raise ConfigurationError(msg)

    segments: list[PathSegment] = []
    for part in path.strip("/").split("/"):
        if not part:
            continue
        if part.startswith("{") and part.endswith("}"):
            inner = part[1:-1]
            if ":" in inner:
                param_name, param_type = inner.split(":", 1)
            else:
                param_name = inner
                param_type = "str"
            if param_type not in CONVERTERS:
                msg = f"Unknown converter {param_type!r} in route path {path!r}."
                raise ConfigurationError(msg)
            segments.append(
                PathSegment(
                    value=part,
                    is_param=True,
                    param_name=param_name,
                    param_type=param_type,
                )
            )
        else:
            segments.append(PathSegment(value=part))
    return segments


class _TrieNode:
    """A node in the route trie. Mutable during registration only."""

    __slots__ = ("any_route", "catch_all", "children", "param_child", "routes_by_method")

    def __init__(self) -> None:
        # Static segment children: "users" -> node
        self.children: dict[str, _TrieNode] = {}
        # Single parameter child (only one param pattern per level)
        self.param_child: _ParamEdge | None = None
        # Catch-all edge (path converter)
        self.catch_all: _CatchAllEdge | None = None
        # Routes terminating here, keyed by HTTP method in declaration order
        self.routes_by_method: dict[str, Route] = {}
        # Route accepting any method at this node
        self.any_route: Route | None = None

    @property
    def has_routes(self) -> bool:
        return bool(self.routes_by_method) or self.any_route is not None


@dataclass(slots=True)
class _ParamEdge:
    """A parameter edge in the trie."""

    param_name: str
    param_type: str
    regex: re.Pattern[str]
    node: _TrieNode


@dataclass(slots=True)
class _CatchAllEdge:
    """A catch-all (path) edge: consumes the remaining path."""

    param_name: str
    node: _TrieNode


class TrieRouter:
    """In-process router with trie-based path matching.

    Implements the ``Router`` protocol. ``match()`` never raises for an
    unmatched request: it returns a failed ``RouteResult`` whose
    ``allowed_methods`` lists, in declaration order, the methods the
    path does accept (or ``None`` if the path matched nothing).

    Usage::

        router = TrieRouter()
        router.add_route(Route("/users", handler, ("GET",)))
        router.add_route(Route("/users/{id:int}", handler, ("GET",)))
        result = router.match(Request("GET", "/users/42"))
    """

    __slots__ = ("_compiled", "_named", "_root", "_routes")

    def __init__(self) -> None:
        self._root = _TrieNode()
        self._routes: list[Route] = []
        self._named: dict[str, Route] = {}
        self._compiled = False

    def add_route(self, route: Route) -> None:
        """Add a route. Must be called before the router starts matching."""
        if self._compiled:
            msg = f"Cannot add route {route.path!r}: the router is already matching requests."
            raise ConfigurationError(msg)

        node = self._root
        for seg in parse_path(route.path):
            if seg.is_param and seg.param_type == "path":
                # Catch-all: consumes rest of path, must be last segment
                if node.catch_all is None:
                    node.catch_all = _CatchAllEdge(
                        param_name=seg.param_name or "path",
                        node=_TrieNode(),
                    )
                node = node.catch_all.node
                break

            if seg.is_param:
                edge = node.param_child
                if edge is None:
                    edge = node.param_child = _ParamEdge(
                        param_name=seg.param_name or "",
                        param_type=seg.param_type,
                        regex=converter_regex(seg.param_type),
                        node=_TrieNode(),
                    )
                elif (edge.param_name, edge.param_type) != (seg.param_name, seg.param_type):
                    msg = (
                        f"Route {route.path!r} declares {seg.value!r} where another route "
                        f"already declares {{{edge.param_name}:{edge.param_type}}}."
                    )
                    raise ConfigurationError(msg)
                node = edge.node
            else:
                node = node.children.setdefault(seg.value, _TrieNode())

        self._register(node, route)
        self._routes.append(route)
        if route.name is not None:
            self._named.setdefault(route.name, route)
        logger.debug("Registered route %s %s", route.methods or "*", route.path)

    @staticmethod
    def _register(node: _TrieNode, route: Route) -> None:
        """Attach *route* to its terminal node. Earlier routes win."""
        if route.methods is None:
            if node.any_route is None:
                node.any_route = route
            return
        for method in route.methods:
            node.routes_by_method.setdefault(method, route)

    @property
    def routes(self) -> list[Route]:
        """All registered routes in declaration order."""
        return list(self._routes)

    def compile(self) -> None:
        """Freeze the router. No more routes can be added."""
        self._compiled = True

    def match(self, request: Request) -> RouteResult:
        """Match *request*'s path and method against the registered routes.

        Path nodes are visited static first, then parameter, then
        catch-all. The first node serving the method wins; when none does,
        the failure lists every candidate method in declaration order.
        """
        self._compiled = True
        method, path = request.method, request.path

        parts = [p for p in path.strip("/").split("/") if p]
        candidates: list[Route] = []
        for node, params in self._match_nodes(self._root, parts, 0, {}):
            route = node.routes_by_method.get(method) or node.any_route
            if route is not None:
                return RouteResult.from_route(route, params)
            candidates.extend(node.routes_by_method.values())

        if not candidates:
            return RouteResult.from_route_failure(None)

        logger.debug("Method %s not allowed for %r", method, path)
        return RouteResult.from_route_failure(self._candidate_methods(candidates))

    def _candidate_methods(self, candidates: list[Route]) -> tuple[str, ...]:
        """Methods of *candidates*, ordered by route declaration."""
        order = {id(route): index for index, route in enumerate(self._routes)}
        methods: dict[str, None] = {}
        for route in sorted(set(candidates), key=lambda r: order[id(r)]):
            for m in route.methods or ():
                methods.setdefault(m)
        return tuple(methods)

    def _match_nodes(
        self,
        node: _TrieNode,
        parts: list[str],
        index: int,
        params: dict[str, str],
    ) -> Iterator[tuple[_TrieNode, dict[str, str]]]:
        """Yield every node matching the path, in priority order."""
        # All parts consumed: this node is a match if routes end here
        if index == len(parts):
            if node.has_routes:
                yield node, params
            return

        part = parts[index]

        # 1. Static child (exact match)
        if part in node.children:
            yield from self._match_nodes(node.children[part], parts, index + 1, params)

        # 2. Parameter child
        edge = node.param_child
        if edge is not None and edge.regex.match(part):
            new_params = {**params, edge.param_name: part}
            yield from self._match_nodes(edge.node, parts, index + 1, new_params)

        # 3. Catch-all
        if node.catch_all is not None and node.catch_all.node.has_routes:
            remaining = "/".join(parts[index:])
            yield node.catch_all.node, {**params, node.catch_all.param_name: remaining}

    def generate_uri(
        self,
        name: str,
        substitutions: Mapping[str, object] | None = None,
    ) -> str:
        """Build the path for the route called *name*.

        Each parameter segment is replaced by ``substitutions[param]``,
        which must satisfy the segment's converter.
        """
        route = self._named.get(name)
        if route is None:
            msg = f"No route named {name!r}."
            raise UriGenerationError(msg)

        substitutions = substitutions or {}
        parts: list[str] = []
        for seg in parse_path(route.path):
            if not seg.is_param:
                parts.append(seg.value)
                continue
            if seg.param_name not in substitutions:
                msg = f"Route {name!r} requires parameter {seg.param_name!r}."
                raise UriGenerationError(msg)
            value = str(substitutions[seg.param_name])
            if not converter_regex(seg.param_type).match(value):
                msg = (
                    f"Parameter {seg.param_name!r}={value!r} does not match "
                    f"converter {seg.param_type!r} for route {name!r}."
                )
                raise UriGenerationError(msg)
            parts.append(value)
        return "/" + "/".join(parts)
