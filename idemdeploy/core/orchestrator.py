"""Deployment orchestrator: the central coordinator for idemdeploy runs.

The Orchestrator wires together the Registry, the AddressResolver, and the
DeployReport into a single idempotent deployment engine.

Per artifact, in registration order:
1. Look up the registered record.
2. Ask the oracle whether its pre-computed address is occupied.
3. Occupied: mark FOUND, deploy nothing.
   Free: deploy (when broadcasting), re-confirm the address, mark CREATED.
4. Emit one report row.

Oracle calls are blocking and strictly sequential; later artifacts may
depend on earlier ones, so nothing here runs in parallel.
"""

from __future__ import annotations

import logging

from rich.console import Console

from idemdeploy.core.errors import OracleFault
from idemdeploy.core.hasher import ZERO_SALT
from idemdeploy.core.registry import Registry
from idemdeploy.core.resolver import AddressResolver
from idemdeploy.models.deployment import Deployment, DeploymentStatus
from idemdeploy.oracle.base import DeploymentOracle
from idemdeploy.report.renderer import DeployReport, name_column_width

logger = logging.getLogger(__name__)


class Orchestrator:
    """Registers artifacts and deploys the missing ones.

    Parameters
    ----------
    oracle:
        The deployment backend. Wrapped in an ``AddressResolver``.
    console:
        Rich Console the report is written to. A new one is created if
        neither this nor *report* is given.
    report:
        A pre-built ``DeployReport``; takes precedence over *console*.
    """

    def __init__(
        self,
        oracle: DeploymentOracle,
        *,
        console: Console | None = None,
        report: DeployReport | None = None,
    ) -> None:
        self.resolver = AddressResolver(oracle)
        self.registry = Registry(self.resolver)
        self.report = report or DeployReport(console)

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(
        self,
        name: str,
        init_payload: bytes,
        *,
        salt: bytes = ZERO_SALT,
        constructor_args: bytes = b"",
        value: int = 0,
    ) -> str:
        """Register an artifact and return its deterministic address."""
        return self.registry.register(
            name,
            init_payload,
            salt=salt,
            constructor_args=constructor_args,
            value=value,
        )

    # ------------------------------------------------------------------
    # Deployment
    # ------------------------------------------------------------------

    def deploy(self, broadcast: bool) -> None:
        """Lifecycle entry point called by the driver; runs a full batch."""
        self.deploy_all(broadcast)

    def deploy_all(self, broadcast: bool) -> None:
        """Deploy every registered artifact in registration order.

        Emits the header, one row per artifact, and a trailing blank line.
        The first oracle error aborts the batch.
        """
        width = self._name_width()
        self.report.header(width)
        for name in self.registry.names():
            self.deploy_single(name, broadcast, name_width=width)
        self.report.separator()

        found = sum(1 for d in self.registry if d.status == DeploymentStatus.FOUND)
        created = sum(1 for d in self.registry if d.status == DeploymentStatus.CREATED)
        logger.info(
            "Deployment pass complete: %d artifacts, %d found, %d %s",
            len(self.registry),
            found,
            created,
            "created" if broadcast else "to create",
        )

    def deploy_by_name(self, name: str, broadcast: bool) -> Deployment:
        """Deploy one artifact outside a full batch pass."""
        self.registry.lookup(name)
        width = self._name_width()
        self.report.header(width)
        return self.deploy_single(name, broadcast, name_width=width)

    def deploy_single(
        self,
        name: str,
        broadcast: bool,
        *,
        name_width: int | None = None,
    ) -> Deployment:
        """Resolve one artifact to FOUND or CREATED and emit its row.

        An artifact already resolved earlier in this run is reported again
        with its recorded status; the oracle is not consulted.
        """
        deployment = self.registry.lookup(name)
        width = name_width if name_width is not None else self._name_width()

        if deployment.is_resolved:
            logger.debug("%r already %s in this run", name, deployment.status.value)
            self.report.row(deployment, width)
            return deployment

        if self.resolver.is_occupied(deployment.deployment_address):
            deployment = self.registry.mark(name, DeploymentStatus.FOUND)
        else:
            if broadcast:
                address = self.resolver.deploy(
                    deployment.salt, deployment.payload, deployment.value
                )
                if address != deployment.deployment_address:
                    raise OracleFault(
                        f"Oracle deployed {name!r} at {address}, "
                        f"expected {deployment.deployment_address}"
                    )
                logger.info("Deployed %r at %s", name, address)
            deployment = self.registry.mark(name, DeploymentStatus.CREATED)

        self.report.row(deployment, width)
        return deployment

    # ------------------------------------------------------------------
    # Query methods
    # ------------------------------------------------------------------

    def has_any_change(self) -> bool:
        """True if any registered artifact is CREATED."""
        return any(d.status == DeploymentStatus.CREATED for d in self.registry)

    def has_change(self, name: str) -> bool:
        """True if *name* is CREATED."""
        return self.registry.lookup(name).status == DeploymentStatus.CREATED

    def get_address(self, name: str) -> str:
        return self.registry.lookup(name).deployment_address

    def get_deployment(self, name: str) -> Deployment:
        return self.registry.lookup(name)

    def _name_width(self) -> int:
        return name_column_width(self.registry.names())
