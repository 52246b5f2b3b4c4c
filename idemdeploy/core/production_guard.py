"""Production configuration guard: enforces hard constraints in production.

The guard runs once before a deployment run starts and fails hard
(raises ``ProductionConfigError``) if any constraint is violated. All
violations are collected and reported together.
"""

from __future__ import annotations

import logging

from idemdeploy.config import DeployerConfig
from idemdeploy.core.hasher import is_address

logger = logging.getLogger(__name__)


class ProductionConfigError(RuntimeError):
    """Raised when production configuration constraints are violated.

    The process should exit; this error must not be caught and ignored.
    """


def enforce_production_constraints(config: DeployerConfig) -> None:
    """Validate production-critical configuration.

    Constraints enforced
    --------------------
    1. Debug mode must be disabled.
    2. The volatile in-memory oracle is not allowed: deployments recorded
       there vanish with the process and break idempotent re-runs.
    3. The deployer address must be a well-formed 20-byte address.

    Raises
    ------
    ProductionConfigError
        If any production constraint is violated.
    """
    if not config.is_production:
        return

    violations: list[str] = []

    if config.debug:
        violations.append(
            "debug=True is not allowed in production. Set IDEMDEPLOY_DEBUG=false."
        )

    if config.oracle_backend == "memory":
        violations.append(
            "oracle_backend='memory' is not allowed in production. "
            "Set IDEMDEPLOY_ORACLE_BACKEND=sqlite."
        )

    if not is_address(config.deployer_address.lower()):
        violations.append(
            f"deployer_address {config.deployer_address!r} is not a 20-byte hex address."
        )

    if violations:
        msg = "Production configuration guard failed.\n" + "\n".join(
            f"  - {v}" for v in violations
        )
        logger.critical(msg)
        raise ProductionConfigError(msg)

    logger.info("Production configuration guard passed.")
