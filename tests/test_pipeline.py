"""Tests for perch.pipeline — chain composition and the standard routing pipeline."""

import pytest

from perch.config import RoutingConfig
from perch.errors import ConfigurationError, HTTPError
from perch.http.request import Request
from perch.http.response import Response
from perch.middleware.implicit_head import FORWARDED_HTTP_METHOD_ATTRIBUTE
from perch.pipeline import Pipeline, build_routing_pipeline, error_response
from perch.routing.collector import RouteCollector
from perch.routing.router import TrieRouter
from perch.testing import RecordingHandler


def _app(config: RoutingConfig | None = None) -> tuple[Pipeline, list[Request]]:
    """Helper: a pipeline with GET and POST routes on /api/v1/me."""
    seen: list[Request] = []
    router = TrieRouter()
    routes = RouteCollector(router)

    async def me(request: Request, next) -> Response:
        seen.append(request)
        return Response("FOO BAR BODY").with_header("foo-bar", "baz")

    async def update_me(request: Request, next) -> Response:
        return Response("updated", status=202)

    async def user(request: Request, next) -> Response:
        return Response(f"user {request.get_attribute('id')}")

    routes.get("/api/v1/me", me)
    routes.post("/api/v1/me", update_me)
    routes.get("/users/{id:int}", user)
    return build_routing_pipeline(router, config), seen


class TestPipeline:
    @pytest.mark.anyio
    async def test_middleware_runs_in_order(self) -> None:
        calls: list[str] = []

        def tagging(tag: str):
            async def mw(request: Request, next) -> Response:
                calls.append(f"{tag}:in")
                response = await next(request)
                calls.append(f"{tag}:out")
                return response

            return mw

        pipeline = Pipeline(RecordingHandler()).pipe(tagging("a")).pipe(tagging("b"))
        await pipeline.handle(Request("GET", "/"))

        assert calls == ["a:in", "b:in", "b:out", "a:out"]

    @pytest.mark.anyio
    async def test_default_final_handler_is_404(self) -> None:
        response = await Pipeline().handle(Request("GET", "/missing"))
        assert response.status == 404
        assert "/missing" in response.text

    @pytest.mark.anyio
    async def test_http_error_becomes_response(self) -> None:
        async def teapot(request: Request, next) -> Response:
            raise HTTPError(status=418, detail="short and stout", headers=(("X-Pot", "1"),))

        response = await Pipeline().pipe(teapot).handle(Request("GET", "/"))

        assert response.status == 418
        assert response.text == "short and stout"
        assert response.header_line("X-Pot") == "1"

    @pytest.mark.anyio
    async def test_other_errors_propagate(self) -> None:
        async def broken(request: Request, next) -> Response:
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            await Pipeline().pipe(broken).handle(Request("GET", "/"))

    @pytest.mark.anyio
    async def test_pipe_after_first_request_rejected(self) -> None:
        pipeline = Pipeline(RecordingHandler())
        await pipeline(Request("GET", "/"))

        with pytest.raises(ConfigurationError):
            pipeline.pipe(RecordingHandler())

    def test_handle_sync(self) -> None:
        pipeline = Pipeline(RecordingHandler(Response("sync")))
        assert pipeline.handle_sync(Request("GET", "/")).text == "sync"

    def test_error_response(self) -> None:
        response = error_response(HTTPError(status=404, detail="gone"))
        assert response.status == 404
        assert response.content_type.startswith("text/plain")


class TestRoutingPipeline:
    @pytest.mark.anyio
    async def test_get(self) -> None:
        pipeline, seen = _app()
        response = await pipeline.handle(Request("GET", "/api/v1/me"))

        assert response.text == "FOO BAR BODY"
        assert seen[0].get_attribute(FORWARDED_HTTP_METHOD_ATTRIBUTE) is None

    @pytest.mark.anyio
    async def test_implicit_head(self) -> None:
        pipeline, seen = _app()
        response = await pipeline.handle(Request("HEAD", "/api/v1/me"))

        assert response.status == 200
        assert response.body_bytes == b""
        assert response.header_line("foo-bar") == "baz"
        assert seen[0].method == "GET"
        assert seen[0].get_attribute(FORWARDED_HTTP_METHOD_ATTRIBUTE) == "HEAD"

    @pytest.mark.anyio
    async def test_implicit_head_keeps_params(self) -> None:
        pipeline, _ = _app()
        response = await pipeline.handle(Request("HEAD", "/users/42"))
        assert response.status == 200
        assert response.body_bytes == b""

    @pytest.mark.anyio
    async def test_implicit_options(self) -> None:
        pipeline, seen = _app()
        response = await pipeline.handle(Request("OPTIONS", "/api/v1/me"))

        assert response.status == 200
        assert response.header_line("Allow") == "GET,POST"
        assert seen == []

    @pytest.mark.anyio
    async def test_method_not_allowed(self) -> None:
        pipeline, _ = _app()
        response = await pipeline.handle(Request("DELETE", "/api/v1/me"))

        assert response.status == 405
        assert response.header_line("Allow") == "GET,POST"

    @pytest.mark.anyio
    async def test_head_on_post_only_path_is_405_without_body(self) -> None:
        router = TrieRouter()
        RouteCollector(router).post("/submit", lambda request, next: Response("ok"))
        pipeline = build_routing_pipeline(router)

        response = await pipeline.handle(Request("HEAD", "/submit"))

        assert response.status == 405
        assert response.header_line("Allow") == "POST"
        assert response.body_bytes == b""

    @pytest.mark.anyio
    @pytest.mark.parametrize("method", ["GET", "HEAD", "OPTIONS"])
    async def test_unknown_path_is_404(self, method: str) -> None:
        pipeline, _ = _app()
        response = await pipeline.handle(Request(method, "/nowhere"))
        assert response.status == 404

    @pytest.mark.anyio
    async def test_disabled_stages(self) -> None:
        pipeline, _ = _app(RoutingConfig(implicit_head=False, implicit_options=False))

        head = await pipeline.handle(Request("HEAD", "/api/v1/me"))
        options = await pipeline.handle(Request("OPTIONS", "/api/v1/me"))

        assert head.status == 405
        assert options.status == 405

    @pytest.mark.anyio
    async def test_custom_separator(self) -> None:
        pipeline, _ = _app(RoutingConfig(allow_separator=", "))
        response = await pipeline.handle(Request("OPTIONS", "/api/v1/me"))
        assert response.header_line("Allow") == "GET, POST"

    def test_stage_order(self) -> None:
        pipeline, _ = _app()
        names = [type(mw).__name__ for mw in pipeline.middleware]
        assert names == [
            "RouteMiddleware",
            "ImplicitHeadMiddleware",
            "ImplicitOptionsMiddleware",
            "MethodNotAllowedMiddleware",
            "DispatchMiddleware",
        ]
