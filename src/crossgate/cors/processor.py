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
"""Per-request CORS decisions.

:func:`evaluate` is a pure function of the immutable policy and the request
headers, so it can be called concurrently from any number of requests.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from crossgate.cors.policy import CorsPolicy

# Request headers
ORIGIN = "Origin"
ACCESS_CONTROL_REQUEST_METHOD = "Access-Control-Request-Method"
ACCESS_CONTROL_REQUEST_HEADERS = "Access-Control-Request-Headers"

# Response headers
ACCESS_CONTROL_ALLOW_ORIGIN = "Access-Control-Allow-Origin"
ACCESS_CONTROL_ALLOW_CREDENTIALS = "Access-Control-Allow-Credentials"
ACCESS_CONTROL_ALLOW_METHODS = "Access-Control-Allow-Methods"
ACCESS_CONTROL_ALLOW_HEADERS = "Access-Control-Allow-Headers"
ACCESS_CONTROL_MAX_AGE = "Access-Control-Max-Age"
VARY = "Vary"

PREFLIGHT_STATUS = 204

_VARY_ACTUAL = (ORIGIN,)
_VARY_PREFLIGHT = (ORIGIN, ACCESS_CONTROL_REQUEST_METHOD, ACCESS_CONTROL_REQUEST_HEADERS)


class DecisionKind(StrEnum):
    PASS_THROUGH = "pass_through"
    REJECTED = "rejected"
    ANNOTATE = "annotate"
    PREFLIGHT = "preflight"


@dataclass(frozen=True)
class CorsDecision:
    """Outcome of evaluating one request against a :class:`CorsPolicy`.

    Attributes:
        kind: Which branch of the policy applied.
        headers: Response headers to emit (empty for pass-through).
        status_code: Status of the terminal response; only set for preflight.
    """

    kind: DecisionKind
    headers: dict[str, str] = field(default_factory=dict)
    status_code: int | None = None

    @property
    def is_terminal(self) -> bool:
        """True when the response is produced here and downstream must not run."""
        return self.kind is DecisionKind.PREFLIGHT


PASS_THROUGH = CorsDecision(DecisionKind.PASS_THROUGH)


def merge_vary(existing: str | None, names: tuple[str, ...] | list[str]) -> str:
    """Append *names* to an existing ``Vary`` value without duplicating entries."""
    values = [v.strip() for v in (existing or "").split(",") if v.strip()]
    if "*" in values:
        return "*"
    seen = {v.lower() for v in values}
    for name in names:
        if name.lower() not in seen:
            values.append(name)
            seen.add(name.lower())
    return ", ".join(values)


def evaluate(
    policy: CorsPolicy,
    method: str,
    origin: str | None,
    request_method: str | None = None,
    request_headers: str | None = None,
    host_origin: str | None = None,
) -> CorsDecision:
    """Decide how to treat a request.

    Args:
        policy: The process-wide CORS policy.
        method: HTTP method of the request.
        origin: Value of the ``Origin`` header, if any.
        request_method: ``Access-Control-Request-Method`` of a preflight.
        request_headers: ``Access-Control-Request-Headers`` of a preflight.
        host_origin: ``scheme://host[:port]`` the request was addressed to;
            a non-preflight request with an equal ``Origin`` is same-origin.

    Returns:
        A :class:`CorsDecision`. Never raises for request data.
    """
    is_preflight = method.upper() == "OPTIONS"
    if not origin:
        return PASS_THROUGH
    # Preflights are always answered here, even when addressed to the same origin.
    if not is_preflight and host_origin is not None and origin == host_origin:
        return PASS_THROUGH

    if not policy.allows_origin(origin):
        return CorsDecision(DecisionKind.REJECTED, {VARY: merge_vary(None, _VARY_ACTUAL)})

    headers: dict[str, str] = {}
    if policy.allows_any_origin and not policy.allow_credentials:
        headers[ACCESS_CONTROL_ALLOW_ORIGIN] = "*"
    else:
        headers[ACCESS_CONTROL_ALLOW_ORIGIN] = origin
    if policy.allow_credentials:
        headers[ACCESS_CONTROL_ALLOW_CREDENTIALS] = "true"

    if not is_preflight:
        headers[VARY] = merge_vary(None, _VARY_ACTUAL)
        return CorsDecision(DecisionKind.ANNOTATE, headers)

    vary = merge_vary(None, _VARY_PREFLIGHT)
    if request_method and request_method.strip().upper() not in policy.allowed_methods:
        # Terminal but without allow headers: the browser fails the preflight.
        return CorsDecision(DecisionKind.PREFLIGHT, {VARY: vary}, PREFLIGHT_STATUS)

    headers[ACCESS_CONTROL_ALLOW_METHODS] = policy.methods_header
    allow_headers = policy.allowed_headers_for(request_headers)
    if allow_headers is not None:
        headers[ACCESS_CONTROL_ALLOW_HEADERS] = allow_headers
    headers[ACCESS_CONTROL_MAX_AGE] = str(policy.max_age)
    headers[VARY] = vary
    return CorsDecision(DecisionKind.PREFLIGHT, headers, PREFLIGHT_STATUS)
