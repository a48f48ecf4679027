"""HTTP response with chainable .with_*() transformation API.

Each transformation returns a new Response. Immutable by convention,
built incrementally by design.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace


@dataclass(frozen=True, slots=True)
class Response:
    """An HTTP response built through immutable transformations.

    Construct with a body, then chain ``.with_*()`` calls to set
    status and headers. Each call returns a new ``Response``.

    ``with_header`` replaces any existing values for the name (header
    names compare case-insensitively); ``with_added_header`` appends.
    """

    body: str | bytes = ""
    status: int = 200
    content_type: str = "text/html; charset=utf-8"
    headers: tuple[tuple[str, str], ...] = ()

    # -- Chainable transformations --

    def with_status(self, status: int) -> Response:
        """Return a new Response with a different status code."""
        return replace(self, status=status)

    def with_header(self, name: str, value: str) -> Response:
        """Return a new Response with *name* set to *value*, replacing old values."""
        kept = tuple((n, v) for n, v in self.headers if n.lower() != name.lower())
        return replace(self, headers=(*kept, (name, value)))

    def with_added_header(self, name: str, value: str) -> Response:
        """Return a new Response with an additional value for *name*."""
        return replace(self, headers=(*self.headers, (name, value)))

    def with_headers(self, headers: Mapping[str, str]) -> Response:
        """Return a new Response with each header in *headers* set."""
        response = self
        for name, value in headers.items():
            response = response.with_header(name, value)
        return response

    def without_header(self, name: str) -> Response:
        """Return a new Response with every value for *name* removed."""
        kept = tuple((n, v) for n, v in self.headers if n.lower() != name.lower())
        return replace(self, headers=kept)

    def with_content_type(self, content_type: str) -> Response:
        """Return a new Response with a different content type."""
        return replace(self, content_type=content_type)

    def with_body(self, body: str | bytes) -> Response:
        """Return a new Response with a different body, keeping status and headers."""
        return replace(self, body=body)

    # -- Header access --

    def has_header(self, name: str) -> bool:
        """True if at least one value is set for *name*."""
        return any(n.lower() == name.lower() for n, _ in self.headers)

    def get_header(self, name: str) -> list[str]:
        """All values for *name*, in the order they were added."""
        return [v for n, v in self.headers if n.lower() == name.lower()]

    def header_line(self, name: str) -> str:
        """All values for *name* joined by commas (``""`` if unset)."""
        return ",".join(self.get_header(name))

    # -- Body helpers --

    @property
    def body_bytes(self) -> bytes:
        """Body as bytes."""
        if isinstance(self.body, str):
            return self.body.encode("utf-8")
        return self.body

    @property
    def text(self) -> str:
        """Body as string."""
        if isinstance(self.body, bytes):
            return self.body.decode("utf-8")
        return self.body
