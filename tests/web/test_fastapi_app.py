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
"""Tests for the FastAPI app factory with the CORS filter."""

from __future__ import annotations

from fastapi import APIRouter, FastAPI
from fastapi.testclient import TestClient

from crossgate.cors.policy import CorsPolicy
from crossgate.web.adapters.fastapi.app import create_app

LOCAL = "http://localhost:5173"

calls: list[str] = []

router = APIRouter(prefix="/api")


@router.get("/items")
async def list_items() -> dict:
    calls.append("list")
    return {"items": []}


@router.post("/items")
async def create_item() -> dict:
    calls.append("create")
    return {"created": True}


def _client() -> TestClient:
    calls.clear()
    return TestClient(create_app(routers=[router], cors=CorsPolicy.from_origins(LOCAL)))


class TestFastAPIApp:
    def test_returns_fastapi_instance(self):
        app = create_app(cors=CorsPolicy.from_origins(LOCAL))
        assert isinstance(app, FastAPI)

    def test_docs_can_be_disabled(self):
        app = create_app(docs_enabled=False)
        assert app.docs_url is None
        assert app.openapi_url is None


class TestFastAPICors:
    def test_preflight_short_circuits(self):
        client = _client()
        resp = client.options("/api/items", headers={"Origin": LOCAL, "Access-Control-Request-Method": "POST"})

        assert resp.status_code == 204
        assert resp.headers["access-control-allow-methods"] == "GET, POST, PUT, DELETE, OPTIONS, PATCH"
        assert resp.headers["access-control-max-age"] == "3600"
        assert calls == []

    def test_allowed_origin_annotated(self):
        client = _client()
        resp = client.post("/api/items", headers={"Origin": LOCAL})

        assert resp.status_code == 200
        assert resp.json() == {"created": True}
        assert resp.headers["access-control-allow-origin"] == LOCAL
        assert resp.headers["access-control-allow-credentials"] == "true"

    def test_disallowed_origin_still_handled(self):
        client = _client()
        resp = client.get("/api/items", headers={"Origin": "http://evil.com"})

        assert resp.status_code == 200
        assert calls == ["list"]
        assert "access-control-allow-origin" not in resp.headers
