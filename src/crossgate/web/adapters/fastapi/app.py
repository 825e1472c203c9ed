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
"""Web application factory built on FastAPI."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from fastapi import APIRouter, FastAPI

from crossgate.web.adapters.starlette.app import build_middleware
from crossgate.web.ports.filter import WebFilter

if TYPE_CHECKING:
    from crossgate.cors.policy import CorsPolicy


def create_app(
    title: str = "crossgate",
    version: str = "0.1.0",
    routers: Sequence[APIRouter] = (),
    cors: CorsPolicy | None = None,
    filters: Sequence[WebFilter] = (),
    debug: bool = False,
    docs_enabled: bool = True,
    lifespan: object | None = None,
) -> FastAPI:
    """Create a FastAPI application with the CORS filter in front of every route.

    FastAPI is a Starlette subclass, so the same ``WebFilterChainMiddleware``
    and :class:`~crossgate.web.adapters.starlette.cors_filter.CorsFilter` are used.
    """
    app = FastAPI(
        title=title,
        version=version,
        debug=debug,
        middleware=build_middleware(cors, filters),
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        openapi_url="/openapi.json" if docs_enabled else None,
        lifespan=lifespan,  # type: ignore[arg-type]
    )
    for router in routers:
        app.include_router(router)
    return app
