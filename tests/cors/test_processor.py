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
"""Tests for the pure CORS evaluation function."""

from __future__ import annotations

import pytest

from crossgate.cors.policy import CorsPolicy
from crossgate.cors.processor import (
    ACCESS_CONTROL_ALLOW_CREDENTIALS,
    ACCESS_CONTROL_ALLOW_HEADERS,
    ACCESS_CONTROL_ALLOW_METHODS,
    ACCESS_CONTROL_ALLOW_ORIGIN,
    ACCESS_CONTROL_MAX_AGE,
    VARY,
    DecisionKind,
    evaluate,
    merge_vary,
)

LOCAL = "http://localhost:5173"


@pytest.fixture
def policy() -> CorsPolicy:
    return CorsPolicy.from_origins(f"{LOCAL},https://app.example.com")


class TestPassThrough:
    @pytest.mark.parametrize("method", ["GET", "POST", "OPTIONS", "DELETE"])
    def test_no_origin_passes_through(self, policy, method):
        decision = evaluate(policy, method, None)

        assert decision.kind is DecisionKind.PASS_THROUGH
        assert decision.headers == {}
        assert decision.status_code is None
        assert not decision.is_terminal

    def test_empty_origin_passes_through(self, policy):
        assert evaluate(policy, "GET", "").kind is DecisionKind.PASS_THROUGH

    def test_same_origin_passes_through(self, policy):
        decision = evaluate(policy, "GET", "http://api.internal:8000", host_origin="http://api.internal:8000")
        assert decision.kind is DecisionKind.PASS_THROUGH

    def test_same_origin_preflight_is_still_answered(self):
        policy = CorsPolicy.from_origins("http://api.internal:8000")
        decision = evaluate(
            policy, "OPTIONS", "http://api.internal:8000", request_method="POST", host_origin="http://api.internal:8000"
        )

        assert decision.kind is DecisionKind.PREFLIGHT
        assert decision.status_code == 204
        assert decision.headers[ACCESS_CONTROL_ALLOW_ORIGIN] == "http://api.internal:8000"


class TestRejectedOrigin:
    def test_unknown_origin_gets_no_allow_headers(self, policy):
        decision = evaluate(policy, "GET", "http://evil.com")

        assert decision.kind is DecisionKind.REJECTED
        assert ACCESS_CONTROL_ALLOW_ORIGIN not in decision.headers
        assert ACCESS_CONTROL_ALLOW_CREDENTIALS not in decision.headers
        assert decision.headers == {VARY: "Origin"}
        assert not decision.is_terminal

    def test_preflight_from_unknown_origin_is_not_terminal(self, policy):
        decision = evaluate(policy, "OPTIONS", "http://evil.com", request_method="POST")

        assert decision.kind is DecisionKind.REJECTED
        assert not decision.is_terminal
        assert ACCESS_CONTROL_ALLOW_METHODS not in decision.headers


class TestActualRequest:
    @pytest.mark.parametrize("method", ["GET", "POST", "PUT", "DELETE", "PATCH"])
    def test_allowed_origin_is_echoed(self, policy, method):
        decision = evaluate(policy, method, LOCAL)

        assert decision.kind is DecisionKind.ANNOTATE
        assert decision.headers[ACCESS_CONTROL_ALLOW_ORIGIN] == LOCAL
        assert decision.headers[ACCESS_CONTROL_ALLOW_CREDENTIALS] == "true"
        assert decision.headers[VARY] == "Origin"
        assert ACCESS_CONTROL_MAX_AGE not in decision.headers
        assert decision.status_code is None

    def test_wildcard_without_credentials_emits_star(self):
        open_policy = CorsPolicy(allowed_origins=("*",), allow_credentials=False)
        decision = evaluate(open_policy, "GET", "https://anyone.example")

        assert decision.headers[ACCESS_CONTROL_ALLOW_ORIGIN] == "*"
        assert ACCESS_CONTROL_ALLOW_CREDENTIALS not in decision.headers


class TestPreflight:
    def test_preflight_scenario(self):
        policy = CorsPolicy.from_origins(LOCAL)
        decision = evaluate(policy, "OPTIONS", LOCAL, request_method="POST")

        assert decision.kind is DecisionKind.PREFLIGHT
        assert decision.is_terminal
        assert decision.status_code == 204
        assert decision.headers[ACCESS_CONTROL_ALLOW_ORIGIN] == LOCAL
        assert decision.headers[ACCESS_CONTROL_ALLOW_CREDENTIALS] == "true"
        assert decision.headers[ACCESS_CONTROL_ALLOW_METHODS] == "GET, POST, PUT, DELETE, OPTIONS, PATCH"
        assert decision.headers[ACCESS_CONTROL_MAX_AGE] == "3600"
        assert ACCESS_CONTROL_ALLOW_HEADERS not in decision.headers

    def test_preflight_echoes_requested_headers(self, policy):
        decision = evaluate(
            policy, "OPTIONS", LOCAL, request_method="PUT", request_headers="Authorization, Content-Type"
        )
        assert decision.headers[ACCESS_CONTROL_ALLOW_HEADERS] == "Authorization, Content-Type"

    def test_preflight_varies_on_request_headers(self, policy):
        decision = evaluate(policy, "OPTIONS", LOCAL, request_method="GET")
        assert decision.headers[VARY] == "Origin, Access-Control-Request-Method, Access-Control-Request-Headers"

    def test_preflight_without_request_method_still_answered(self, policy):
        decision = evaluate(policy, "options", LOCAL)

        assert decision.kind is DecisionKind.PREFLIGHT
        assert decision.headers[ACCESS_CONTROL_MAX_AGE] == "3600"

    def test_preflight_for_unlisted_method_has_no_allow_headers(self, policy):
        decision = evaluate(policy, "OPTIONS", LOCAL, request_method="TRACE")

        assert decision.kind is DecisionKind.PREFLIGHT
        assert decision.status_code == 204
        assert ACCESS_CONTROL_ALLOW_ORIGIN not in decision.headers
        assert ACCESS_CONTROL_ALLOW_METHODS not in decision.headers

    def test_max_age_follows_policy(self):
        policy = CorsPolicy.from_origins(LOCAL, max_age=120)
        decision = evaluate(policy, "OPTIONS", LOCAL, request_method="GET")
        assert decision.headers[ACCESS_CONTROL_MAX_AGE] == "120"


class TestMergeVary:
    def test_adds_to_empty(self):
        assert merge_vary(None, ("Origin",)) == "Origin"

    def test_appends_to_existing(self):
        assert merge_vary("Accept-Encoding", ("Origin",)) == "Accept-Encoding, Origin"

    def test_no_duplicates_case_insensitive(self):
        assert merge_vary("origin, Accept", ("Origin",)) == "origin, Accept"

    def test_star_wins(self):
        assert merge_vary("*", ("Origin",)) == "*"
