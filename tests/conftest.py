"""Shared test fixtures for idemdeploy."""

from __future__ import annotations

import io
import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
from rich.console import Console

from idemdeploy.core.orchestrator import Orchestrator
from idemdeploy.core.registry import Registry
from idemdeploy.core.resolver import AddressResolver
from idemdeploy.oracle.memory import InMemoryOracle
from idemdeploy.oracle.sqlite import SQLiteOracle

DEPLOYER = "0x4e59b44847b379578588920ca78fbf26c0b4956c"

TOKEN_CODE = bytes.fromhex("6080604052348015600f57600080fd5b50")
VAULT_CODE = bytes.fromhex("608060405260405161012338038061012383398101")


@pytest.fixture
def deployer() -> str:
    """The factory address bound into every test oracle."""
    return DEPLOYER


@pytest.fixture
def token_code() -> bytes:
    return TOKEN_CODE


@pytest.fixture
def vault_code() -> bytes:
    return VAULT_CODE


@pytest.fixture
def oracle(deployer: str) -> InMemoryOracle:
    """Provide a fresh in-memory oracle."""
    return InMemoryOracle(deployer)


@pytest.fixture
def sqlite_oracle(tmp_path: Path, deployer: str) -> SQLiteOracle:
    """Provide a SQLite oracle backed by a temp database."""
    return SQLiteOracle(tmp_path / "oracle.db", deployer)


@pytest.fixture
def resolver(oracle: InMemoryOracle) -> AddressResolver:
    return AddressResolver(oracle)


@pytest.fixture
def registry(resolver: AddressResolver) -> Registry:
    """Provide an empty registry wired to the in-memory oracle."""
    return Registry(resolver)


@pytest.fixture
def report_buffer() -> io.StringIO:
    """Captures everything the report writes."""
    return io.StringIO()


@pytest.fixture
def console(report_buffer: io.StringIO) -> Console:
    """A plain, non-terminal console writing into ``report_buffer``."""
    return Console(file=report_buffer, width=200, color_system=None)


@pytest.fixture
def orchestrator(oracle: InMemoryOracle, console: Console) -> Orchestrator:
    """Provide an orchestrator over the in-memory oracle."""
    return Orchestrator(oracle, console=console)


@pytest.fixture
def make_orchestrator(console: Console) -> Callable[..., Orchestrator]:
    """Factory fixture: a new orchestrator (and registry) over a given oracle."""

    def _factory(oracle: Any) -> Orchestrator:
        return Orchestrator(oracle, console=console)

    return _factory


@pytest.fixture
def write_manifest(tmp_path: Path) -> Callable[..., Path]:
    """Factory fixture: write a JSON manifest and return its path."""

    def _factory(artifacts: list[dict[str, Any]], name: str = "manifest.json") -> Path:
        path = tmp_path / name
        path.write_text(json.dumps({"artifacts": artifacts}), encoding="utf-8")
        return path

    return _factory


@pytest.fixture
def sample_artifacts() -> list[dict[str, Any]]:
    """Two artifacts in manifest form."""
    return [
        {"name": "Token", "init_payload": "0x" + TOKEN_CODE.hex()},
        {
            "name": "Vault",
            "salt": "0x01",
            "init_payload": "0x" + VAULT_CODE.hex(),
            "constructor_args": "0x" + "00" * 31 + "2a",
        },
    ]
