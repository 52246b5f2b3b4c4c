"""In-memory reference oracle.

Volatile and process-local: suitable for tests, dry runs, and
single-process experiments. Every ``deploy`` call is recorded so tests can
assert which artifacts were actually submitted.
"""

from __future__ import annotations

import logging

from pydantic import BaseModel, ConfigDict

from idemdeploy.core.hasher import normalize_address, sha256_digest, to_hex
from idemdeploy.oracle.base import AddressOccupiedError, compute_deterministic_address

logger = logging.getLogger(__name__)


class DeployCall(BaseModel):
    """One recorded ``deploy`` invocation."""

    model_config = ConfigDict(frozen=True)

    address: str
    salt: str  # 0x-prefixed hex
    fingerprint: str  # 0x-prefixed hex
    value: int = 0


class InMemoryOracle:
    """Dict-backed ``DeploymentOracle``.

    Parameters
    ----------
    deployer:
        Factory address bound into every derived address.
    """

    def __init__(self, deployer: str) -> None:
        self.deployer = deployer
        self._occupied: dict[str, bytes] = {}
        self.calls: list[DeployCall] = []

    def has_been_deployed(self, address: str) -> bool:
        return normalize_address(address) in self._occupied

    def compute_deterministic_address(self, salt: bytes, payload: bytes) -> str:
        return compute_deterministic_address(self.deployer, salt, payload)

    def deploy(self, salt: bytes, payload: bytes, value: int = 0) -> str:
        address = self.compute_deterministic_address(salt, payload)
        if address in self._occupied:
            raise AddressOccupiedError(f"Address already occupied: {address}")
        self._occupied[address] = bytes(payload)
        self.calls.append(
            DeployCall(
                address=address,
                salt=to_hex(salt),
                fingerprint=to_hex(sha256_digest(payload)),
                value=value,
            )
        )
        logger.debug("Deployed %d bytes at %s", len(payload), address)
        return address

    # ------------------------------------------------------------------
    # Test helpers
    # ------------------------------------------------------------------

    def seed(self, address: str, payload: bytes = b"") -> None:
        """Mark *address* as occupied without recording a deploy call."""
        self._occupied[normalize_address(address)] = bytes(payload)

    @property
    def deployed_addresses(self) -> list[str]:
        return list(self._occupied)
