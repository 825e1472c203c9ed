# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Tests for WebFilterChainMiddleware — ordering, short-circuit, conditional skip."""

from __future__ import annotations

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.requests import Request
from starlette.responses import JSONResponse, PlainTextResponse, Response
from starlette.routing import Route
from starlette.testclient import TestClient

from crossgate.container.ordering import HIGHEST_PRECEDENCE, get_order, order
from crossgate.cors.policy import CorsPolicy
from crossgate.web.adapters.starlette.app import build_filter_chain, create_app
from crossgate.web.adapters.starlette.cors_filter import CorsFilter
from crossgate.web.adapters.starlette.filter_chain import WebFilterChainMiddleware
from crossgate.web.filters import OncePerRequestFilter
from crossgate.web.ports.filter import WebFilter

# ---------------------------------------------------------------------------
# Test filters
# ---------------------------------------------------------------------------


@order(HIGHEST_PRECEDENCE + 10)
class HeaderFilter(OncePerRequestFilter):
    """Adds X-Filter-A header to every response."""

    async def do_filter(self, request, call_next):
        response = await call_next(request)
        response.headers["X-Filter-A"] = "applied"
        return response


@order(5)
class ApiOnlyFilter(OncePerRequestFilter):
    """Only applies to /api/* paths."""

    url_patterns = ["/api/*"]

    async def do_filter(self, request, call_next):
        response = await call_next(request)
        response.headers["X-Api-Filter"] = "applied"
        return response


@order(10)
class ShortCircuitFilter(OncePerRequestFilter):
    """Returns 429 without calling next."""

    async def do_filter(self, request, call_next):
        return JSONResponse({"error": "rate limited"}, status_code=429)


class ExcludeHealthFilter(OncePerRequestFilter):
    exclude_patterns = ["/health"]

    async def do_filter(self, request, call_next):
        response = await call_next(request)
        response.headers["X-Excluded-Check"] = "applied"
        return response


@order(HIGHEST_PRECEDENCE)
class RequireAuthFilter(OncePerRequestFilter):
    """Rejects requests without an Authorization header."""

    async def do_filter(self, request, call_next):
        if "authorization" not in request.headers:
            return Response(status_code=401)
        return await call_next(request)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


async def _ok_handler(request: Request) -> PlainTextResponse:
    return PlainTextResponse("OK")


def _make_app(*filters) -> Starlette:
    return Starlette(
        routes=[
            Route("/test", _ok_handler),
            Route("/api/data", _ok_handler),
            Route("/health", _ok_handler),
        ],
        middleware=[Middleware(WebFilterChainMiddleware, filters=list(filters))],
    )


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------


class TestFilterChainPassThrough:
    def test_no_filters_returns_downstream_response(self):
        client = TestClient(_make_app())
        resp = client.get("/test")
        assert resp.status_code == 200
        assert resp.text == "OK"


class TestFilterChainConditionalSkip:
    def test_url_pattern_filter_applies_to_matching_path(self):
        client = TestClient(_make_app(ApiOnlyFilter()))
        resp = client.get("/api/data")
        assert resp.headers.get("X-Api-Filter") == "applied"

    def test_url_pattern_filter_skips_other_paths(self):
        client = TestClient(_make_app(ApiOnlyFilter()))
        resp = client.get("/health")
        assert "X-Api-Filter" not in resp.headers

    def test_exclude_pattern_skips_path(self):
        client = TestClient(_make_app(ExcludeHealthFilter()))
        assert "X-Excluded-Check" not in client.get("/health").headers
        assert client.get("/test").headers["X-Excluded-Check"] == "applied"


class TestFilterChainShortCircuit:
    def test_short_circuit_skips_route(self):
        client = TestClient(_make_app(HeaderFilter(), ShortCircuitFilter()))
        resp = client.get("/test")
        assert resp.status_code == 429
        assert resp.json() == {"error": "rate limited"}
        assert resp.headers["X-Filter-A"] == "applied"


class TestBuildFilterChain:
    def test_cors_filter_always_first(self):
        chain = build_filter_chain(CorsPolicy.from_origins("http://a.example"), [ApiOnlyFilter(), HeaderFilter()])

        assert [type(f) for f in chain] == [CorsFilter, HeaderFilter, ApiOnlyFilter]
        assert get_order(HeaderFilter) < get_order(CorsFilter)

    def test_higher_precedence_filter_cannot_block_preflight(self):
        app = create_app(
            routes=[Route("/api/data", _ok_handler)],
            cors=CorsPolicy.from_origins("http://localhost:5173"),
            filters=[RequireAuthFilter()],
        )
        client = TestClient(app)

        preflight = client.options(
            "/api/data",
            headers={"Origin": "http://localhost:5173", "Access-Control-Request-Method": "GET"},
        )
        assert preflight.status_code == 204
        assert preflight.headers["access-control-allow-origin"] == "http://localhost:5173"

        actual = client.get("/api/data", headers={"Origin": "http://localhost:5173"})
        assert actual.status_code == 401
        assert actual.headers["access-control-allow-origin"] == "http://localhost:5173"

    def test_no_policy_means_no_cors_filter(self):
        chain = build_filter_chain(None, [ApiOnlyFilter()])
        assert not any(isinstance(f, CorsFilter) for f in chain)

    def test_filters_satisfy_protocol(self):
        assert isinstance(CorsFilter(CorsPolicy.from_origins("http://a.example")), WebFilter)
        assert isinstance(ApiOnlyFilter(), WebFilter)
