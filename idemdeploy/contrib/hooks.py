"""Lifecycle hooks for ``DeployScript``.

A run calls four hooks around the orchestrator's deploy step, in this
fixed order::

    load_parameters -> register -> before_deploy -> deploy -> after_deploy

Hooks are an injected capability, not a base class to override. Any object
with the four methods satisfies ``DeployLifecycle``. ``LifecycleHooks``
wraps plain callables and treats missing ones as no-ops. ``ManifestHooks``
registers the artifacts listed in a JSON manifest.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from pydantic import ValidationError

from idemdeploy.core.errors import DeployError
from idemdeploy.models.manifest import DeployManifest

if TYPE_CHECKING:
    from idemdeploy.core.script import DeployScript

logger = logging.getLogger(__name__)

HookFn = Callable[["DeployScript"], None]


class ManifestError(DeployError):
    """Raised when a manifest cannot be read or does not validate."""

    code = "invalid_manifest"


@runtime_checkable
class DeployLifecycle(Protocol):
    """Protocol for lifecycle hook providers."""

    def load_parameters(self, script: DeployScript) -> None: ...

    def register(self, script: DeployScript) -> None: ...

    def before_deploy(self, script: DeployScript) -> None: ...

    def after_deploy(self, script: DeployScript) -> None: ...


class LifecycleHooks:
    """Callback-backed hooks; every hook defaults to a no-op.

    Parameters
    ----------
    load_parameters, register, before_deploy, after_deploy:
        Optional callables receiving the running ``DeployScript``.
    """

    def __init__(
        self,
        *,
        load_parameters: HookFn | None = None,
        register: HookFn | None = None,
        before_deploy: HookFn | None = None,
        after_deploy: HookFn | None = None,
    ) -> None:
        self._load_parameters = load_parameters
        self._register = register
        self._before_deploy = before_deploy
        self._after_deploy = after_deploy

    def load_parameters(self, script: DeployScript) -> None:
        if self._load_parameters is not None:
            self._load_parameters(script)

    def register(self, script: DeployScript) -> None:
        if self._register is not None:
            self._register(script)

    def before_deploy(self, script: DeployScript) -> None:
        if self._before_deploy is not None:
            self._before_deploy(script)

    def after_deploy(self, script: DeployScript) -> None:
        if self._after_deploy is not None:
            self._after_deploy(script)


class ManifestHooks:
    """Registers every artifact of a JSON manifest, in manifest order.

    Parameters
    ----------
    manifest_path:
        Path to the manifest file. Read during ``load_parameters`` and
        stored on the script as ``params["manifest"]``.
    """

    def __init__(self, manifest_path: Path) -> None:
        self.manifest_path = Path(manifest_path)

    def load_parameters(self, script: DeployScript) -> None:
        try:
            manifest = DeployManifest.from_file(self.manifest_path)
        except OSError as exc:
            raise ManifestError(f"Cannot read manifest {self.manifest_path}: {exc}") from exc
        except ValidationError as exc:
            raise ManifestError(f"Invalid manifest {self.manifest_path}: {exc}") from exc
        script.params["manifest"] = manifest
        logger.info(
            "Loaded %d artifacts from %s", len(manifest.artifacts), self.manifest_path
        )

    def register(self, script: DeployScript) -> None:
        manifest: DeployManifest = script.params["manifest"]
        for spec in manifest.artifacts:
            script.orchestrator.register(
                spec.name,
                spec.init_payload,
                salt=spec.salt,
                constructor_args=spec.constructor_args,
                value=spec.value,
            )

    def before_deploy(self, script: DeployScript) -> None:
        pass

    def after_deploy(self, script: DeployScript) -> None:
        pass
