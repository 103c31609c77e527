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
"""'cspkit render' — Show the headers a response would receive."""

from __future__ import annotations

from pathlib import Path

import click
from rich.markup import escape
from rich.table import Table

from cspkit.cli.console import console
from cspkit.core.config import Config
from cspkit.kernel.exceptions import CspKitException
from cspkit.logging.structlog_adapter import StructlogAdapter
from cspkit.policy.directives import CspDirective
from cspkit.web.properties import SecurityHeadersProperties, build_decision


@click.command()
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default="cspkit.yaml",
    show_default=True,
    help="YAML or TOML configuration file.",
)
@click.option("--profile", "profiles", multiple=True, help="Profile overlay to apply (repeatable).")
@click.option("--status", "status_code", type=int, default=200, show_default=True, help="Response status code.")
@click.option(
    "--content-type",
    default="text/html; charset=utf-8",
    show_default=True,
    help="Response Content-Type.",
)
@click.option(
    "--development/--no-development",
    default=None,
    help="Override cspkit.headers.development.",
)
def render_command(
    config_path: Path,
    profiles: tuple[str, ...],
    status_code: int,
    content_type: str,
    development: bool | None,
) -> None:
    """Print the security headers for one response."""
    try:
        config = Config.from_file(config_path, active_profiles=list(profiles))
        StructlogAdapter().configure(config)
        props = config.bind(SecurityHeadersProperties)
        decision = build_decision(props)
    except CspKitException as exc:
        console.print(f"[error]✗[/error] Invalid configuration: {escape(str(exc))}")
        raise SystemExit(1) from None

    dev_mode = props.development if development is None else development
    headers = decision.decide(content_type, status_code, dev_mode)

    if not headers:
        console.print(f"[warning]![/warning] No security headers for {escape(content_type)} responses")
        return

    for name, value in headers.items():
        console.print(f"[header]{name}[/header]: {escape(value)}", soft_wrap=True)


@click.command()
def directives_command() -> None:
    """List supported CSP directives in serialization order."""
    table = Table(title="CSP directives", border_style="dim")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Directive", style="info")

    for position, directive in enumerate(CspDirective, start=1):
        table.add_row(str(position), directive.value)

    console.print(table)
