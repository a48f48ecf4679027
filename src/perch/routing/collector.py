"""Route collection with duplicate detection.

``RouteCollector`` is the setup-time front door: it builds ``Route``
values, rejects duplicates, and registers them with a router.
"""

from collections.abc import Callable, Iterable
from typing import Any

from perch.errors import DuplicateRouteError
from perch.routing.protocol import Router
from perch.routing.route import Route


class RouteCollector:
    """Collect routes and register them with a router.

    Usage::

        routes = RouteCollector(TrieRouter())
        routes.get("/users", list_users)
        routes.route("/users/{id}", user, ["GET", "PUT"], name="user")

    With ``detect_duplicates`` enabled (the default) a route is rejected
    when it reuses an existing name, or when it shares a path with an
    existing route and any of their methods overlap. A route accepting
    any method overlaps every other route on the same path.
    """

    __slots__ = ("_by_path", "_detect_duplicates", "_names", "_router", "_routes")

    def __init__(self, router: Router, *, detect_duplicates: bool = True) -> None:
        self._router = router
        self._detect_duplicates = detect_duplicates
        self._routes: list[Route] = []
        self._names: set[str] = set()
        self._by_path: dict[str, list[Route]] = {}

    @property
    def router(self) -> Router:
        return self._router

    @property
    def routes(self) -> list[Route]:
        """Routes collected so far, in declaration order."""
        return list(self._routes)

    def route(
        self,
        path: str,
        handler: Callable[..., Any],
        methods: Iterable[str] | None = None,
        name: str | None = None,
    ) -> Route:
        """Register *handler* at *path* for *methods* (``None`` = any)."""
        route = Route(
            path=path,
            handler=handler,
            methods=None if methods is None else tuple(methods),
            name=name,
        )
        if self._detect_duplicates:
            self._check_duplicate(route)

        self._router.add_route(route)
        self._routes.append(route)
        if route.name is not None:
            self._names.add(route.name)
        self._by_path.setdefault(route.path, []).append(route)
        return route

    def get(self, path: str, handler: Callable[..., Any], name: str | None = None) -> Route:
        return self.route(path, handler, ["GET"], name)

    def post(self, path: str, handler: Callable[..., Any], name: str | None = None) -> Route:
        return self.route(path, handler, ["POST"], name)

    def put(self, path: str, handler: Callable[..., Any], name: str | None = None) -> Route:
        return self.route(path, handler, ["PUT"], name)

    def patch(self, path: str, handler: Callable[..., Any], name: str | None = None) -> Route:
        return self.route(path, handler, ["PATCH"], name)

    def delete(self, path: str, handler: Callable[..., Any], name: str | None = None) -> Route:
        return self.route(path, handler, ["DELETE"], name)

    def any(self, path: str, handler: Callable[..., Any], name: str | None = None) -> Route:
        return self.route(path, handler, None, name)

    def _check_duplicate(self, route: Route) -> None:
        if route.name in self._names:
            msg = f"Duplicate route detected; route name {route.name!r} is already in use."
            raise DuplicateRouteError(msg)

        for existing in self._by_path.get(route.path, ()):
            overlap = _overlapping_methods(existing, route)
            if overlap:
                msg = (
                    f"Duplicate route detected; path {route.path!r} already answers "
                    f"{', '.join(overlap)} (route {existing.name!r})."
                )
                raise DuplicateRouteError(msg)


def _overlapping_methods(first: Route, second: Route) -> tuple[str, ...]:
    """Methods both routes accept; ``("*",)`` if either accepts any method."""
    if first.methods is None or second.methods is None:
        return ("*",)
    return tuple(m for m in second.methods if m in first.methods)
