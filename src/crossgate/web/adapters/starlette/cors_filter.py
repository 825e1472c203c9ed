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
"""CORS filter — applies a CorsPolicy to every matching request."""

from __future__ import annotations

from typing import cast

import structlog
from starlette.requests import Request
from starlette.responses import Response

from crossgate.container.ordering import HIGHEST_PRECEDENCE, order
from crossgate.cors.policy import CorsPolicy
from crossgate.cors.processor import (
    ACCESS_CONTROL_REQUEST_HEADERS,
    ACCESS_CONTROL_REQUEST_METHOD,
    ORIGIN,
    VARY,
    DecisionKind,
    evaluate,
    merge_vary,
)
from crossgate.web.filters import OncePerRequestFilter
from crossgate.web.ports.filter import CallNext

logger = structlog.get_logger("crossgate.web.cors")


@order(HIGHEST_PRECEDENCE + 50)
class CorsFilter(OncePerRequestFilter):
    """Answers preflight requests and adds CORS headers to actual responses.

    Preflight (``OPTIONS`` from an allowed origin) is answered with ``204``
    and never reaches the route handler. Requests from origins outside the
    policy still run downstream but get no ``Access-Control-Allow-Origin``.
    """

    def __init__(self, policy: CorsPolicy) -> None:
        self._policy = policy
        self.url_patterns = list(policy.url_patterns)

    @property
    def policy(self) -> CorsPolicy:
        return self._policy

    async def do_filter(self, request: Request, call_next: CallNext) -> Response:
        origin = request.headers.get(ORIGIN)
        decision = evaluate(
            self._policy,
            request.method,
            origin,
            request_method=request.headers.get(ACCESS_CONTROL_REQUEST_METHOD),
            request_headers=request.headers.get(ACCESS_CONTROL_REQUEST_HEADERS),
            host_origin=f"{request.url.scheme}://{request.url.netloc}",
        )

        if decision.kind is DecisionKind.PASS_THROUGH:
            return cast(Response, await call_next(request))

        if decision.kind is DecisionKind.REJECTED:
            logger.debug("cors_origin_rejected", origin=origin, method=request.method, path=request.url.path)

        if decision.is_terminal:
            return Response(status_code=decision.status_code or 204, headers=decision.headers)

        response = cast(Response, await call_next(request))
        for name, value in decision.headers.items():
            if name == VARY:
                response.headers[VARY] = merge_vary(response.headers.get(VARY), value.split(", "))
            else:
                response.headers[name] = value
        return response
