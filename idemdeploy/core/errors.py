"""Error taxonomy for registration and deployment.

Every error carries a stable ``code`` so the lifecycle driver can report
the failure kind in its ``RunResult`` without callers matching on
exception types.
"""

from __future__ import annotations


class DeployError(RuntimeError):
    """Base class for all fatal deployment errors."""

    code: str = "deploy_error"


class DuplicateNameError(DeployError):
    """Raised when a name is registered twice in the same registry."""

    code = "duplicate_name"

    def __init__(self, name: str) -> None:
        super().__init__(f"Artifact already registered: {name!r}")
        self.name = name


class NotFoundError(DeployError):
    """Raised when looking up a name that was never registered."""

    code = "not_found"

    def __init__(self, name: str) -> None:
        super().__init__(f"Artifact not registered: {name!r}")
        self.name = name


class OracleFault(DeployError):
    """Raised when the deployment oracle fails or answers inconsistently.

    Not retried inside the core. Re-running the whole orchestration is the
    recovery path: addresses are deterministic, so artifacts created before
    the fault are picked up as ``Found``.
    """

    code = "oracle_fault"


class InvalidTransitionError(DeployError):
    """Raised when a status transition is not in the transition table."""

    code = "invalid_transition"


class AssertionFailure(DeployError):
    """A lifecycle-hook assertion converted into a fatal error."""

    code = "assertion_failure"


class InvalidInputError(DeployError, ValueError):
    """Raised when registration or deployment arguments are malformed."""

    code = "invalid_input"
