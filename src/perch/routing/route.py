"""Route and PathSegment frozen dataclasses."""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from perch.errors import InvalidRouteError

# ``methods=None`` on a Route: every HTTP method is allowed
HTTP_METHOD_ANY = None

# RFC 7230 token
_METHOD_TOKEN = re.compile(r"^[!#$%&'*+.^_`|~0-9a-z-]+$", re.IGNORECASE)


@dataclass(frozen=True, slots=True)
class PathSegment:
    """A parsed segment of a route path.

    Static:  ``/users``  (is_param=False)
    Param:   ``/{id}``   (is_param=True, param_name="id")
    Typed:   ``/{id:int}`` (is_param=True, param_name="id", param_type="int")
    """

    value: str
    is_param: bool = False
    param_name: str | None = None
    param_type: str = "str"


def normalize_methods(methods: Iterable[str] | None) -> tuple[str, ...] | None:
    """Upper-case, validate, and de-duplicate *methods*, keeping their order.

    ``None`` passes through unchanged (any method). Raises
    ``InvalidRouteError`` for an empty list or a malformed method name.
    """
    if methods is HTTP_METHOD_ANY:
        return None
    if isinstance(methods, str):
        methods = [methods]

    normalized: list[str] = []
    for method in methods:
        if not isinstance(method, str) or not _METHOD_TOKEN.match(method):
            msg = f"Invalid HTTP method {method!r}; must be an RFC 7230 token."
            raise InvalidRouteError(msg)
        upper = method.upper()
        if upper not in normalized:
            normalized.append(upper)

    if not normalized:
        msg = "HTTP methods argument was empty; pass None to allow any method."
        raise InvalidRouteError(msg)
    return tuple(normalized)


@dataclass(frozen=True, slots=True, eq=False)
class Route:
    """A frozen route definition.

    ``handler`` is a middleware callable, ``handler(request, next)``.
    ``methods`` is an ordered tuple of upper-case method names, or
    ``None`` when the route accepts any method. Routes compare by
    identity: two routes with the same path are still distinct.
    """

    path: str
    handler: Callable[..., Any]
    methods: tuple[str, ...] | None = HTTP_METHOD_ANY
    name: str | None = None

    def __post_init__(self) -> None:
        methods = normalize_methods(self.methods)
        object.__setattr__(self, "methods", methods)
        if self.name is None:
            name = self.path if methods is None else f"{self.path}^{':'.join(methods)}"
            object.__setattr__(self, "name", name)

    @property
    def allowed_methods(self) -> tuple[str, ...] | None:
        """Methods this route accepts, or ``None`` for any method."""
        return self.methods

    @property
    def allows_any_method(self) -> bool:
        return self.methods is HTTP_METHOD_ANY

    def allows_method(self, method: str) -> bool:
        """True if the route accepts *method*, explicitly or via any-method."""
        if self.methods is HTTP_METHOD_ANY:
            return True
        return method.upper() in self.methods
