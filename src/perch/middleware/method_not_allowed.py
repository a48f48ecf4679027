"""405 Method Not Allowed handling."""

import logging

from perch.http.request import Request
from perch.http.response import Response
from perch.middleware.protocol import Next, ResponseFactory
from perch.routing.result import route_result_of

logger = logging.getLogger("perch.middleware")


class MethodNotAllowedMiddleware:
    """Answer method failures with 405 and an ``Allow`` header.

    Runs after the implicit HEAD/OPTIONS middleware, so only requests
    neither of them could satisfy reach this branch.
    """

    __slots__ = ("response_factory", "separator")

    def __init__(
        self,
        response_factory: ResponseFactory = Response,
        *,
        separator: str = ",",
    ) -> None:
        self.response_factory = response_factory
        self.separator = separator

    async def __call__(self, request: Request, next: Next) -> Response:
        result = route_result_of(request)
        if result is None or not result.is_method_failure:
            return await next(request)

        allowed = result.allowed_methods or ()
        logger.debug("%s %r not allowed; Allow %s", request.method, request.path, allowed)
        return (
            self.response_factory()
            .with_status(405)
            .with_header("Allow", self.separator.join(allowed))
        )
