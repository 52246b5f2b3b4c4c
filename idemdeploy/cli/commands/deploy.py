"""``idemdeploy deploy`` / ``idemdeploy plan``: run a manifest.

Registers every artifact in the manifest, checks each deterministic
address against the oracle, and deploys the missing ones (``deploy
--broadcast``) or only reports what would be created (``plan``).
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console

from idemdeploy.config import DeployerConfig
from idemdeploy.contrib.hooks import ManifestHooks
from idemdeploy.core.orchestrator import Orchestrator
from idemdeploy.core.production_guard import (
    ProductionConfigError,
    enforce_production_constraints,
)
from idemdeploy.core.script import DeployScript
from idemdeploy.models.results import RunResult
from idemdeploy.oracle import build_oracle

console = Console()
err_console = Console(stderr=True)


def _settings(
    backend: Optional[str],
    oracle_db: Optional[Path],
    deployer: Optional[str],
) -> DeployerConfig:
    overrides: dict[str, object] = {}
    if backend is not None:
        overrides["oracle_backend"] = backend
    if oracle_db is not None:
        overrides["oracle_db_path"] = oracle_db
    if deployer is not None:
        overrides["deployer_address"] = deployer
    try:
        settings = DeployerConfig(**overrides)
    except ValidationError as exc:
        err_console.print(f"[bold red]Invalid configuration:[/bold red] {exc}", highlight=False)
        raise typer.Exit(code=2)

    try:
        enforce_production_constraints(settings)
    except ProductionConfigError as exc:
        err_console.print(f"[bold red]{exc}[/bold red]", highlight=False)
        raise typer.Exit(code=1)
    return settings


def run_manifest(manifest: Path, broadcast: bool, settings: DeployerConfig) -> RunResult:
    """Build the oracle and orchestrator from *settings* and run *manifest*."""
    orchestrator = Orchestrator(build_oracle(settings), console=console)
    script = DeployScript(orchestrator, ManifestHooks(manifest))
    return script.run(broadcast)


def _finish(result: RunResult) -> None:
    if not result.ok:
        err_console.print(
            f"[bold red]Run failed[/bold red] in [bold]{result.phase}[/bold] "
            f"([cyan]{result.error_code}[/cyan]): {result.error_message}",
            highlight=False,
        )
        raise typer.Exit(code=1)

    verb = "created" if result.broadcast else "to create"
    err_console.print(
        f"[green]{len(result.artifacts)} artifacts:[/green] "
        f"{result.found_count} found, {result.created_count} {verb}",
        highlight=False,
    )


def deploy_cmd(
    manifest: Path = typer.Argument(
        ...,
        exists=True,
        dir_okay=False,
        help="JSON manifest listing the artifacts to deploy.",
    ),
    broadcast: Optional[bool] = typer.Option(
        None,
        "--broadcast/--no-broadcast",
        help="Submit deployments (default: IDEMDEPLOY_BROADCAST).",
    ),
    backend: Optional[str] = typer.Option(
        None,
        "--backend",
        "-b",
        help="Oracle backend: memory or sqlite.",
    ),
    oracle_db: Optional[Path] = typer.Option(
        None,
        "--oracle-db",
        help="Path to the SQLite oracle database.",
    ),
    deployer: Optional[str] = typer.Option(
        None,
        "--deployer",
        help="Factory address bound into address derivation.",
    ),
) -> None:
    """Deploy every artifact of MANIFEST that is not already deployed."""
    settings = _settings(backend, oracle_db, deployer)
    do_broadcast = settings.broadcast if broadcast is None else broadcast
    _finish(run_manifest(manifest, do_broadcast, settings))


def plan_cmd(
    manifest: Path = typer.Argument(
        ...,
        exists=True,
        dir_okay=False,
        help="JSON manifest listing the artifacts to check.",
    ),
    backend: Optional[str] = typer.Option(
        None,
        "--backend",
        "-b",
        help="Oracle backend: memory or sqlite.",
    ),
    oracle_db: Optional[Path] = typer.Option(
        None,
        "--oracle-db",
        help="Path to the SQLite oracle database.",
    ),
    deployer: Optional[str] = typer.Option(
        None,
        "--deployer",
        help="Factory address bound into address derivation.",
    ),
) -> None:
    """Report which artifacts of MANIFEST exist and which would be created."""
    settings = _settings(backend, oracle_db, deployer)
    _finish(run_manifest(manifest, False, settings))
