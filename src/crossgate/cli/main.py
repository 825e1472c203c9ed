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
"""crossgate CLI — validate and try out CORS policies."""

from __future__ import annotations

import click

from crossgate.cli.console import print_banner


class CrossgateCLI(click.Group):
    """Click group that shows the banner on help."""

    def format_help(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        print_banner()
        super().format_help(ctx, formatter)


@click.group(cls=CrossgateCLI)
@click.version_option(package_name="crossgate")
def cli() -> None:
    """crossgate — CORS policy enforcement CLI."""


from crossgate.cli.check import check_command  # noqa: E402
from crossgate.cli.evaluate import evaluate_command  # noqa: E402

cli.add_command(check_command, name="check")
cli.add_command(evaluate_command, name="evaluate")
