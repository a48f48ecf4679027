"""Immutable HTTP request.

Frozen metadata plus an attribute store. The request is honest about
what it is: received data that doesn't change. Middleware that needs to
"change" a request derives a new one with the ``.with_*()`` methods.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any

from perch.http.headers import Headers


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    ``attributes`` carries request-scoped context added by middleware
    (the routing result, matched path parameters, and so on). Every
    mutator returns a new ``Request``; the original is never touched.

    Usage::

        request = Request("HEAD", "/api/v1/me")
        derived = request.with_method("GET").with_attribute("user", "ada")
        assert request.method == "HEAD"
    """

    method: str
    path: str
    headers: Headers = field(default_factory=Headers)
    attributes: Mapping[str, Any] = field(default_factory=dict)
    body: bytes = b""

    def __post_init__(self) -> None:
        object.__setattr__(self, "method", self.method.upper())

    # -- Derivation --

    def with_method(self, method: str) -> Request:
        """Return a new Request with a different HTTP method."""
        return replace(self, method=method)

    def with_attribute(self, name: str, value: Any) -> Request:
        """Return a new Request carrying an additional attribute."""
        return replace(self, attributes={**self.attributes, name: value})

    def with_attributes(self, attributes: Mapping[str, Any]) -> Request:
        """Return a new Request carrying several additional attributes."""
        if not attributes:
            return self
        return replace(self, attributes={**self.attributes, **attributes})

    def without_attribute(self, name: str) -> Request:
        """Return a new Request without *name* (no-op if absent)."""
        if name not in self.attributes:
            return self
        return replace(
            self,
            attributes={k: v for k, v in self.attributes.items() if k != name},
        )

    # -- Access --

    def get_attribute(self, name: str, default: Any = None) -> Any:
        """Return the attribute *name*, or *default* if it is not set."""
        return self.attributes.get(name, default)
