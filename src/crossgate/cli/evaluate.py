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
"""'crossgate evaluate' — Show the CORS decision for a hypothetical request."""

from __future__ import annotations

import click
from rich.markup import escape
from rich.table import Table

from crossgate.cli.console import console
from crossgate.cors.policy import CorsPolicy
from crossgate.cors.processor import evaluate
from crossgate.kernel.exceptions import ConfigurationException


@click.command()
@click.option("--origins", required=True, help="Comma-separated allowed origins.")
@click.option("--origin", default=None, help="Origin header of the request.")
@click.option("--method", default="GET", show_default=True, help="HTTP method of the request.")
@click.option("--request-method", default=None, help="Access-Control-Request-Method (preflight).")
@click.option("--request-headers", default=None, help="Access-Control-Request-Headers (preflight).")
def evaluate_command(
    origins: str,
    origin: str | None,
    method: str,
    request_method: str | None,
    request_headers: str | None,
) -> None:
    """Evaluate one request against a policy built from --origins."""
    try:
        policy = CorsPolicy.from_origins(origins)
    except ConfigurationException as exc:
        console.print(f"[error]✗ Invalid CORS configuration:[/error] {escape(str(exc))}", soft_wrap=True)
        raise SystemExit(1) from None

    decision = evaluate(policy, method, origin, request_method, request_headers)

    console.print(f"Decision: [info]{decision.kind.value}[/info]")
    if decision.status_code is not None:
        console.print(f"Status: {decision.status_code}")

    if not decision.headers:
        console.print("[dim]No CORS headers emitted[/dim]")
        return

    table = Table(title="Response headers", border_style="dim")
    table.add_column("Header", style="info")
    table.add_column("Value")
    for name, value in decision.headers.items():
        table.add_row(name, escape(value))
    console.print(table)
