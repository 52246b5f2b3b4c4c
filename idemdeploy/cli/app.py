"""Main Typer application: imports and registers all CLI commands.

Entry point: ``idemdeploy`` (configured via pyproject.toml project.scripts).

Commands: deploy, plan, address.
"""

from __future__ import annotations

import logging
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from idemdeploy.cli.commands.address import address_cmd
from idemdeploy.cli.commands.deploy import deploy_cmd, plan_cmd
from idemdeploy.config import DeployerConfig

app = typer.Typer(
    name="idemdeploy",
    help="idemdeploy: deterministic, idempotent deployment orchestrator.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

# Register subcommands
app.command(name="deploy", help="Deploy the artifacts of a manifest that are missing.")(deploy_cmd)
app.command(name="plan", help="Show which artifacts of a manifest exist or would be created.")(plan_cmd)
app.command(name="address", help="Compute an artifact's deterministic address offline.")(address_cmd)


def configure_logging(level: str) -> None:
    """Route package logs through a Rich handler on stderr."""
    root = logging.getLogger("idemdeploy")
    root.setLevel(level.upper())
    if not any(isinstance(h, RichHandler) for h in root.handlers):
        root.addHandler(
            RichHandler(console=Console(stderr=True), show_path=False, markup=False)
        )


@app.callback()
def main_callback(
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Logging level (default: IDEMDEPLOY_LOG_LEVEL).",
    ),
) -> None:
    """Deterministic, idempotent deployment of content-addressed artifacts."""
    configure_logging(log_level or DeployerConfig().log_level)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
