"""``idemdeploy address``: compute a deterministic address offline.

Prints the address and the initcode hash an artifact would get, without
reading or writing any oracle state.
"""

from __future__ import annotations

from typing import Optional

import typer
from rich.console import Console

from idemdeploy.config import DeployerConfig
from idemdeploy.core.hasher import compute_fingerprint, from_hex, normalize_salt, to_hex
from idemdeploy.oracle.base import OracleError, compute_deterministic_address

console = Console()
err_console = Console(stderr=True)


def address_cmd(
    payload: str = typer.Option(
        ...,
        "--payload",
        "-p",
        help="Init payload as hex.",
    ),
    salt: str = typer.Option(
        "0x",
        "--salt",
        "-s",
        help="Salt as hex, left-padded to 32 bytes (default: zero salt).",
    ),
    args: str = typer.Option(
        "0x",
        "--args",
        help="Encoded constructor arguments as hex.",
    ),
    deployer: Optional[str] = typer.Option(
        None,
        "--deployer",
        help="Factory address (default: IDEMDEPLOY_DEPLOYER_ADDRESS).",
    ),
) -> None:
    """Print the deterministic address and initcode hash of an artifact."""
    try:
        init_payload = from_hex(payload)
        constructor_args = from_hex(args)
        salt_bytes = normalize_salt(salt)
        deployer_address = deployer or DeployerConfig().deployer_address
        address = compute_deterministic_address(
            deployer_address, salt_bytes, init_payload + constructor_args
        )
    except (ValueError, OracleError) as exc:
        err_console.print(f"[bold red]Error:[/bold red] {exc}", highlight=False)
        raise typer.Exit(code=2)

    console.print(address, markup=False, highlight=False)
    console.print(
        to_hex(compute_fingerprint(init_payload, constructor_args)),
        markup=False,
        highlight=False,
    )
