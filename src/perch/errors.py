"""Perch exception hierarchy.

Shared across routers, the route collector, middleware, and the pipeline
so every module raises and catches the same types.

A route that does not match is *not* an error: routers report it as a
failed ``RouteResult``. Only the pipeline's default final handler turns
an unhandled request into ``NotFound``.
"""

from dataclasses import dataclass


class PerchError(Exception):
    """Base for all perch-specific errors."""


class ConfigurationError(PerchError):
    """Raised when routing configuration is invalid.

    Typically raised while routes are being registered, before the
    router starts matching.
    """


class InvalidRouteError(ConfigurationError):
    """A route was declared with an empty or malformed method list."""


class DuplicateRouteError(ConfigurationError):
    """A route reuses a name, or a path and method already registered."""


class UriGenerationError(PerchError):
    """A URI could not be generated for a named route."""


@dataclass(frozen=True, slots=True)
class HTTPError(PerchError):
    """An error that maps directly to an HTTP status code.

    Raised by final handlers or route handlers. ``Pipeline`` catches these
    and converts them into a ``Response``.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818 (conventional name in web frameworks)
    """404 — no route matched the request path."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)
