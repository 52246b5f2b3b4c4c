"""Lifecycle hook providers for the deploy script driver."""

from idemdeploy.contrib.hooks import (
    DeployLifecycle,
    LifecycleHooks,
    ManifestError,
    ManifestHooks,
)

__all__ = ["DeployLifecycle", "LifecycleHooks", "ManifestError", "ManifestHooks"]
