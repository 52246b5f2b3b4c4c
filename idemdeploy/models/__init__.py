"""idemdeploy data models: all Pydantic v2, all frozen (immutable)."""

from idemdeploy.models.deployment import (
    VALID_TRANSITIONS,
    Deployment,
    DeploymentStatus,
)
from idemdeploy.models.manifest import ArtifactSpec, DeployManifest
from idemdeploy.models.results import ArtifactOutcome, RunResult

__all__ = [
    # deployment
    "Deployment",
    "DeploymentStatus",
    "VALID_TRANSITIONS",
    # manifest
    "ArtifactSpec",
    "DeployManifest",
    # results
    "ArtifactOutcome",
    "RunResult",
]
