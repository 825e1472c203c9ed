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
"""Web application factory built on Starlette."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.routing import BaseRoute

from crossgate.container.ordering import get_order
from crossgate.web.adapters.starlette.cors_filter import CorsFilter
from crossgate.web.adapters.starlette.filter_chain import WebFilterChainMiddleware
from crossgate.web.ports.filter import WebFilter

if TYPE_CHECKING:
    from crossgate.cors.policy import CorsPolicy


def build_filter_chain(
    cors: CorsPolicy | None = None,
    filters: Sequence[WebFilter] = (),
) -> list[WebFilter]:
    """Return the CORS filter (when a policy is given) followed by *filters* sorted by ``@order``.

    The CORS filter is always outermost so no user filter can short-circuit a preflight.
    """
    chain: list[WebFilter] = sorted(filters, key=lambda f: get_order(type(f)))
    if cors is not None:
        chain.insert(0, CorsFilter(cors))
    return chain


def build_middleware(
    cors: CorsPolicy | None = None,
    filters: Sequence[WebFilter] = (),
) -> list[Middleware]:
    """Wrap the filter chain in a single ``WebFilterChainMiddleware`` entry."""
    return [Middleware(WebFilterChainMiddleware, filters=build_filter_chain(cors, filters))]


def create_app(
    routes: Sequence[BaseRoute] | None = None,
    cors: CorsPolicy | None = None,
    filters: Sequence[WebFilter] = (),
    debug: bool = False,
    lifespan: object | None = None,
) -> Starlette:
    """Create a Starlette application with the CORS filter in front of every route.

    The policy is passed in explicitly; build it once at startup with
    :func:`crossgate.web.cors_configuration.cors_policy_from_config` or
    :meth:`CorsPolicy.from_origins`.
    """
    return Starlette(
        debug=debug,
        routes=list(routes or []),
        middleware=build_middleware(cors, filters),
        lifespan=lifespan,  # type: ignore[arg-type]
    )
