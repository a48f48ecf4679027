"""Tests for RouteMiddleware, DispatchMiddleware, and MethodNotAllowedMiddleware."""

import pytest

from perch.http.request import Request
from perch.http.response import Response
from perch.middleware.dispatch import DispatchMiddleware
from perch.middleware.method_not_allowed import MethodNotAllowedMiddleware
from perch.middleware.routing import RouteMiddleware
from perch.routing.result import ROUTE_RESULT_ATTRIBUTE, RouteResult, route_result_of
from perch.routing.route import Route
from perch.routing.router import TrieRouter
from perch.testing import RecordingHandler


def _handler(request, next):
    return Response("unused")


class TestRouteMiddleware:
    @pytest.mark.anyio
    async def test_attaches_result_and_params(self) -> None:
        router = TrieRouter()
        route = Route("/users/{id:int}", _handler, ("GET",))
        router.add_route(route)
        final = RecordingHandler()

        await RouteMiddleware(router)(Request("GET", "/users/42"), final)

        received = final.last_request
        assert route_result_of(received).matched_route is route
        assert received.get_attribute("id") == "42"

    @pytest.mark.anyio
    async def test_failure_still_forwarded(self) -> None:
        router = TrieRouter()
        router.add_route(Route("/users", _handler, ("GET",)))
        final = RecordingHandler(Response("downstream"))

        response = await RouteMiddleware(router)(Request("DELETE", "/users"), final)

        assert response.text == "downstream"
        result = route_result_of(final.last_request)
        assert result.is_method_failure
        assert result.allowed_methods == ("GET",)


class TestDispatchMiddleware:
    @pytest.mark.anyio
    async def test_invokes_async_handler(self) -> None:
        async def show(request: Request, next) -> Response:
            return Response(f"user {request.get_attribute('id')}")

        route = Route("/users/{id}", show, ("GET",))
        request = (
            Request("GET", "/users/7")
            .with_attribute(ROUTE_RESULT_ATTRIBUTE, RouteResult.from_route(route, {"id": "7"}))
            .with_attribute("id", "7")
        )
        final = RecordingHandler()

        response = await DispatchMiddleware()(request, final)

        assert response.text == "user 7"
        assert final.calls == 0

    @pytest.mark.anyio
    async def test_invokes_sync_handler(self) -> None:
        route = Route("/ping", lambda request, next: Response("pong"), ("GET",))
        request = Request("GET", "/ping").with_attribute(
            ROUTE_RESULT_ATTRIBUTE, RouteResult.from_route(route)
        )

        response = await DispatchMiddleware()(request, RecordingHandler())

        assert response.text == "pong"

    @pytest.mark.anyio
    async def test_handler_can_delegate_to_next(self) -> None:
        async def passthrough(request: Request, next) -> Response:
            response = await next(request)
            return response.with_header("X-Route", "seen")

        route = Route("/", passthrough, ("GET",))
        request = Request("GET", "/").with_attribute(
            ROUTE_RESULT_ATTRIBUTE, RouteResult.from_route(route)
        )
        final = RecordingHandler(Response("final"))

        response = await DispatchMiddleware()(request, final)

        assert response.text == "final"
        assert response.header_line("X-Route") == "seen"

    @pytest.mark.anyio
    @pytest.mark.parametrize("result", [None, RouteResult.from_route_failure(None)])
    async def test_without_success_goes_to_next(self, result: RouteResult | None) -> None:
        request = Request("GET", "/")
        if result is not None:
            request = request.with_attribute(ROUTE_RESULT_ATTRIBUTE, result)
        final = RecordingHandler(Response("fallback"))

        response = await DispatchMiddleware()(request, final)

        assert response.text == "fallback"
        assert final.last_request is request


class TestMethodNotAllowedMiddleware:
    @pytest.mark.anyio
    async def test_method_failure_returns_405(self) -> None:
        request = Request("DELETE", "/users").with_attribute(
            ROUTE_RESULT_ATTRIBUTE, RouteResult.from_route_failure(("GET", "POST"))
        )
        final = RecordingHandler()

        response = await MethodNotAllowedMiddleware()(request, final)

        assert response.status == 405
        assert response.header_line("Allow") == "GET,POST"
        assert final.calls == 0

    @pytest.mark.anyio
    async def test_uses_response_factory(self) -> None:
        request = Request("DELETE", "/users").with_attribute(
            ROUTE_RESULT_ATTRIBUTE, RouteResult.from_route_failure(("GET",))
        )
        factory_response = Response("nope", content_type="text/plain")

        response = await MethodNotAllowedMiddleware(lambda: factory_response)(
            request, RecordingHandler()
        )

        assert response.text == "nope"
        assert response.content_type == "text/plain"

    @pytest.mark.anyio
    @pytest.mark.parametrize(
        "result",
        [
            None,
            RouteResult.from_route_failure(None),
            RouteResult.from_route(Route("/", _handler, ("GET",))),
        ],
    )
    async def test_other_requests_pass_through(self, result: RouteResult | None) -> None:
        request = Request("GET", "/")
        if result is not None:
            request = request.with_attribute(ROUTE_RESULT_ATTRIBUTE, result)
        final = RecordingHandler(Response("downstream"))

        response = await MethodNotAllowedMiddleware()(request, final)

        assert response.text == "downstream"
