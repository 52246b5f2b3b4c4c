"""Deployment manifest models (the parameters a run registers).

Loaded from a JSON file of the form::

    {
      "artifacts": [
        {"name": "Token", "salt": "0x01", "init_payload": "0x6080...",
         "constructor_args": "0x", "value": 0}
      ]
    }
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, field_validator

from idemdeploy.core.hasher import ZERO_SALT, from_hex, normalize_salt


class ArtifactSpec(BaseModel):
    """A single artifact entry in a manifest."""

    model_config = ConfigDict(frozen=True)

    name: str
    salt: bytes = ZERO_SALT
    init_payload: bytes
    constructor_args: bytes = b""
    value: int = 0

    @field_validator("name")
    @classmethod
    def _name_not_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("name must not be empty")
        return v

    @field_validator("salt", mode="before")
    @classmethod
    def _parse_salt(cls, v: object) -> bytes:
        if v is None or isinstance(v, (bytes, int, str)):
            return normalize_salt(v)
        raise ValueError("salt must be hex text, bytes, or an integer")

    @field_validator("init_payload", "constructor_args", mode="before")
    @classmethod
    def _parse_hex(cls, v: object) -> object:
        if isinstance(v, str):
            return from_hex(v)
        return v

    @field_validator("value")
    @classmethod
    def _value_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("value must be non-negative")
        return v


class DeployManifest(BaseModel):
    """Ordered list of artifacts to register for one run."""

    model_config = ConfigDict(frozen=True)

    artifacts: list[ArtifactSpec] = []

    @classmethod
    def from_file(cls, path: Path) -> DeployManifest:
        """Read and validate a JSON manifest."""
        return cls.model_validate_json(Path(path).read_text(encoding="utf-8"))
