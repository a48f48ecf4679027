"""RouteResult — the outcome of a single router match.

A router produces a fresh ``RouteResult`` on every ``match()`` call.
Middleware attaches it to the request under ``ROUTE_RESULT_ATTRIBUTE``
and replaces it, never mutates it, when it re-matches.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from perch.http.request import Request
from perch.routing.route import Route

# Request attribute holding the most recent RouteResult for that request
ROUTE_RESULT_ATTRIBUTE = "perch.route_result"


@dataclass(frozen=True, slots=True)
class RouteResult:
    """Result of a router match: success or failure.

    Build one with :meth:`from_route` or :meth:`from_route_failure`.

    On failure, ``allowed_methods`` distinguishes two cases:

    - ``None``: the path matched no route at all.
    - a tuple: the path matched, but only under these methods (a
      *method failure*).
    """

    success: bool
    route: Route | None = None
    params: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    candidate_methods: tuple[str, ...] | None = None

    @classmethod
    def from_route(cls, route: Route, params: Mapping[str, str] | None = None) -> RouteResult:
        """A successful match of *route* with its captured path parameters."""
        return cls(
            success=True,
            route=route,
            params=MappingProxyType(dict(params or {})),
        )

    @classmethod
    def from_route_failure(cls, methods: Iterable[str] | None) -> RouteResult:
        """A failed match; *methods* are the methods the path does accept."""
        return cls(
            success=False,
            candidate_methods=None if methods is None else tuple(methods),
        )

    @property
    def is_success(self) -> bool:
        return self.success

    @property
    def is_failure(self) -> bool:
        return not self.success

    @property
    def is_method_failure(self) -> bool:
        """True if the path matched but the request method did not."""
        return not self.success and self.candidate_methods is not None

    @property
    def matched_route(self) -> Route | None:
        """The matched route, or ``None`` on failure."""
        return self.route if self.success else None

    @property
    def matched_route_name(self) -> str | None:
        route = self.matched_route
        return route.name if route is not None else None

    @property
    def matched_params(self) -> Mapping[str, str]:
        """Captured path parameters (empty on failure)."""
        return self.params

    @property
    def allowed_methods(self) -> tuple[str, ...] | None:
        """Methods accepted for the matched path.

        On success, the matched route's methods (``None`` when it accepts
        any method). On failure, the candidate methods reported by the
        router (``None`` when the path matched nothing).
        """
        if self.success:
            return self.route.allowed_methods if self.route is not None else ()
        return self.candidate_methods


def attach_route_result(request: Request, result: RouteResult) -> Request:
    """Return *request* carrying *result* and, on success, each matched parameter.

    Parameters are set as individual attributes keyed by name, so handlers
    can read ``request.get_attribute("id")`` directly.
    """
    request = request.with_attribute(ROUTE_RESULT_ATTRIBUTE, result)
    if result.is_success:
        request = request.with_attributes(result.matched_params)
    return request


def route_result_of(request: Request) -> RouteResult | None:
    """The RouteResult attached to *request*, if any."""
    return request.get_attribute(ROUTE_RESULT_ATTRIBUTE)
