"""Run result models: the explicit outcome the lifecycle driver returns."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from idemdeploy.models.deployment import DeploymentStatus


class ArtifactOutcome(BaseModel):
    """Status of one artifact at the end of a run."""

    model_config = ConfigDict(frozen=True)

    name: str
    address: str
    fingerprint: str  # 0x-prefixed hex
    status: DeploymentStatus


class RunResult(BaseModel):
    """Outcome of ``DeployScript.run``.

    ``ok`` is False whenever any phase raised; ``error_code`` then carries
    the failing error's ``code`` and ``phase`` the lifecycle phase it came
    from. ``failed`` mirrors the script's harness failure flag.
    """

    model_config = ConfigDict(frozen=True)

    ok: bool
    broadcast: bool
    phase: str | None = None
    error_code: str | None = None
    error_message: str | None = None
    failed: bool = False
    artifacts: list[ArtifactOutcome] = []

    @property
    def created_count(self) -> int:
        return sum(1 for a in self.artifacts if a.status == DeploymentStatus.CREATED)

    @property
    def found_count(self) -> int:
        return sum(1 for a in self.artifacts if a.status == DeploymentStatus.FOUND)
