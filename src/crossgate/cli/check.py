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
"""'crossgate check' — Build the CORS policy from configuration and show it."""

from __future__ import annotations

from pathlib import Path

import click
from rich.markup import escape
from rich.table import Table

from crossgate.cli.console import console
from crossgate.core.config import Config
from crossgate.cors.policy import CorsPolicy
from crossgate.kernel.exceptions import ConfigurationException
from crossgate.web.cors_configuration import initialize_cors


def load_config(config_path: str | None, profiles: tuple[str, ...]) -> Config:
    """Load an explicit config file, or discover crossgate.yaml/.toml in the working directory."""
    if config_path is not None:
        return Config.from_file(config_path, active_profiles=list(profiles))
    return Config.from_sources(Path.cwd(), active_profiles=list(profiles))


def policy_table(policy: CorsPolicy) -> Table:
    table = Table(title="CORS Policy", show_header=False, border_style="dim")
    table.add_column("Setting", style="info")
    table.add_column("Value")
    table.add_row("Allowed origins", escape("\n".join(policy.allowed_origins)))
    table.add_row("Allowed methods", policy.methods_header)
    table.add_row("Allowed headers", escape(", ".join(policy.allowed_headers)))
    table.add_row("Allow credentials", str(policy.allow_credentials).lower())
    table.add_row("Max age", f"{policy.max_age}s")
    table.add_row("URL patterns", escape(", ".join(policy.url_patterns)))
    return table


@click.command()
@click.option("--config", "config_path", default=None, type=click.Path(dir_okay=False), help="Config file (YAML or TOML).")
@click.option("--profile", "profiles", multiple=True, help="Active profile; may be repeated.")
@click.option("--origins", default=None, help="Comma-separated origins, overriding configuration.")
def check_command(config_path: str | None, profiles: tuple[str, ...], origins: str | None) -> None:
    """Validate the CORS configuration and print the resulting policy."""
    try:
        if origins is not None:
            policy = CorsPolicy.from_origins(origins)
        else:
            config = load_config(config_path, profiles)
            for source in config.loaded_sources:
                console.print(f"[dim]loaded {escape(source)}[/dim]")
            policy = initialize_cors(config)
    except ConfigurationException as exc:
        console.print(f"[error]✗ Invalid CORS configuration:[/error] {escape(str(exc))}", soft_wrap=True)
        raise SystemExit(1) from None

    console.print(policy_table(policy))
    console.print("[success]✓[/success] CORS configuration is valid")
