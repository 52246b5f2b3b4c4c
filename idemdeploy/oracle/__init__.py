"""Deployment oracle protocol and reference backends.

Backend selection:
1. **SQLiteOracle** (``oracle_backend="sqlite"``): persistent, survives
   process restarts. The default for CLI runs.
2. **InMemoryOracle** (``oracle_backend="memory"``): volatile, for tests
   and dry runs. Refused in production by the production guard.
"""

from __future__ import annotations

from idemdeploy.config import DeployerConfig
from idemdeploy.oracle.base import (
    AddressOccupiedError,
    DeploymentOracle,
    OracleError,
    compute_deterministic_address,
)
from idemdeploy.oracle.memory import DeployCall, InMemoryOracle
from idemdeploy.oracle.sqlite import SQLiteOracle


def build_oracle(config: DeployerConfig) -> DeploymentOracle:
    """Construct the oracle backend named by *config*."""
    if config.oracle_backend == "memory":
        return InMemoryOracle(config.deployer_address)
    return SQLiteOracle(config.oracle_db_path, config.deployer_address)


__all__ = [
    "AddressOccupiedError",
    "DeployCall",
    "DeploymentOracle",
    "InMemoryOracle",
    "OracleError",
    "SQLiteOracle",
    "build_oracle",
    "compute_deterministic_address",
]
