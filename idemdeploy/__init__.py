"""idemdeploy: deterministic, idempotent deployment orchestrator.

Each artifact's target address is derived from its content (salt plus
initialization payload) before anything is deployed. A run registers the
artifacts, asks the oracle which addresses are already occupied, and
deploys only the missing ones. Re-running is always safe: artifacts
created by an earlier run come back as ``Found``.
"""

__version__ = "0.1.0"
__description__ = "Deterministic, idempotent deployment orchestrator"

from idemdeploy.core.orchestrator import Orchestrator
from idemdeploy.core.registry import Registry
from idemdeploy.core.resolver import AddressResolver
from idemdeploy.core.script import DeployScript
from idemdeploy.models.deployment import Deployment, DeploymentStatus

__all__ = [
    "AddressResolver",
    "DeployScript",
    "Deployment",
    "DeploymentStatus",
    "Orchestrator",
    "Registry",
    "__version__",
]
