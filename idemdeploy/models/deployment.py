"""Deployment record and status models: monotonic transitions."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, field_serializer, field_validator

from idemdeploy.core.hasher import SALT_SIZE, ZERO_SALT, full_payload, to_hex


class DeploymentStatus(str, Enum):
    """Resolution state of a registered artifact."""

    UNRESOLVED = "unresolved"
    FOUND = "found"
    CREATED = "created"


# Valid status transitions, enforced structurally by Registry.mark().
# FOUND and CREATED are terminal.
VALID_TRANSITIONS: dict[DeploymentStatus, set[DeploymentStatus]] = {
    DeploymentStatus.UNRESOLVED: {DeploymentStatus.FOUND, DeploymentStatus.CREATED},
    DeploymentStatus.FOUND: set(),  # terminal
    DeploymentStatus.CREATED: set(),  # terminal
}


class Deployment(BaseModel):
    """One registered artifact.

    Records are frozen; the registry replaces a record wholesale when its
    status changes, so every record handed out is already a copy.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    salt: bytes = ZERO_SALT
    init_payload: bytes
    constructor_args: bytes = b""
    value: int = 0
    fingerprint: bytes
    deployment_address: str
    status: DeploymentStatus = DeploymentStatus.UNRESOLVED

    @field_validator("salt")
    @classmethod
    def _salt_is_32_bytes(cls, v: bytes) -> bytes:
        if len(v) != SALT_SIZE:
            raise ValueError(f"salt must be {SALT_SIZE} bytes, got {len(v)}")
        return v

    @field_validator("value")
    @classmethod
    def _value_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("value must be non-negative")
        return v

    @field_serializer("salt", "init_payload", "constructor_args", "fingerprint", when_used="json")
    def _bytes_as_hex(self, v: bytes) -> str:
        return to_hex(v)

    @property
    def payload(self) -> bytes:
        """The fingerprinted payload: init code followed by constructor args."""
        return full_payload(self.init_payload, self.constructor_args)

    @property
    def fingerprint_hex(self) -> str:
        return to_hex(self.fingerprint)

    @property
    def is_resolved(self) -> bool:
        return self.status != DeploymentStatus.UNRESOLVED
