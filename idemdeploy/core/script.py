"""Lifecycle driver: runs hooks and the orchestrator in a fixed order.

``DeployScript.run`` is the single entry point a CLI or test harness calls.
Inside the core every error is raised immediately; here the first failure
ends the run and comes back as an explicit ``RunResult`` carrying the
error's ``code``, so callers branch on error kind instead of catching.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, NoReturn

from idemdeploy.contrib.hooks import DeployLifecycle, LifecycleHooks
from idemdeploy.core.errors import AssertionFailure, DeployError
from idemdeploy.core.orchestrator import Orchestrator
from idemdeploy.models.results import ArtifactOutcome, RunResult

logger = logging.getLogger(__name__)

PHASES: tuple[str, ...] = (
    "load_parameters",
    "register",
    "before_deploy",
    "deploy",
    "after_deploy",
)


class DeployScript:
    """Drives one deployment run.

    Parameters
    ----------
    orchestrator:
        The orchestrator whose registry this run fills and deploys.
    hooks:
        Lifecycle hooks. Defaults to all no-ops.
    """

    def __init__(
        self,
        orchestrator: Orchestrator,
        hooks: DeployLifecycle | None = None,
    ) -> None:
        self.orchestrator = orchestrator
        self.hooks = hooks or LifecycleHooks()
        self.params: dict[str, Any] = {}
        self.failed = False

    def fail(self, message: str) -> NoReturn:
        """Mark the run failed and abort it with ``AssertionFailure``."""
        self.failed = True
        raise AssertionFailure(message)

    def run(self, broadcast: bool) -> RunResult:
        """Run every phase in order and report the outcome.

        Stops at the first ``DeployError`` or ``AssertionError``. Other
        exceptions are programming errors and propagate unchanged.
        """
        steps: dict[str, Callable[[], None]] = {
            "load_parameters": lambda: self.hooks.load_parameters(self),
            "register": lambda: self.hooks.register(self),
            "before_deploy": lambda: self.hooks.before_deploy(self),
            "deploy": lambda: self.orchestrator.deploy(broadcast),
            "after_deploy": lambda: self.hooks.after_deploy(self),
        }

        for phase in PHASES:
            logger.debug("Entering phase %s", phase)
            try:
                steps[phase]()
            except AssertionError as exc:
                self.failed = True
                error = AssertionFailure(str(exc) or f"Assertion failed in {phase}")
                return self._result(broadcast, phase=phase, error=error)
            except DeployError as exc:
                if isinstance(exc, AssertionFailure):
                    self.failed = True
                return self._result(broadcast, phase=phase, error=exc)

        return self._result(broadcast)

    def _result(
        self,
        broadcast: bool,
        *,
        phase: str | None = None,
        error: DeployError | None = None,
    ) -> RunResult:
        if error is not None:
            logger.error("Run aborted in %s: [%s] %s", phase, error.code, error)

        outcomes = [
            ArtifactOutcome(
                name=d.name,
                address=d.deployment_address,
                fingerprint=d.fingerprint_hex,
                status=d.status,
            )
            for d in self.orchestrator.registry
        ]
        return RunResult(
            ok=error is None,
            broadcast=broadcast,
            phase=phase,
            error_code=error.code if error is not None else None,
            error_message=str(error) if error is not None else None,
            failed=self.failed,
            artifacts=outcomes,
        )
